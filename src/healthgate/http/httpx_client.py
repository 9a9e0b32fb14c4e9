# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging
import time

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper.

    ``request.timeout`` bounds the whole request, not just each httpx phase: a
    body that trickles in past the deadline ends the request with TIMEOUT.
    """

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)

        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        deadline = time.monotonic() + timeout
        follow_redirects = request.allow_redirects if request.allow_redirects is not None else self.settings.allow_redirects

        try:
            max_body_bytes = self.settings.max_body_bytes
            if max_body_bytes <= 0:
                max_body_bytes = HttpSettings.max_body_bytes

            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=httpx.Timeout(timeout),
                follow_redirects=follow_redirects,
            ) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if time.monotonic() >= deadline:
                        return self._timed_out(request, timeout, len(content))
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                if time.monotonic() >= deadline:
                    return self._timed_out(request, timeout, len(content))

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                text=text,
                content=bytes(content),
                url=str(resp.url),
                meta={"body_truncated": truncated},
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("request to %s failed (%s): %s", request.url, category.value, exc)
            return HttpResponse(
                ok=False,
                url=request.url,
                error_category=category.value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

    def _timed_out(self, request: HttpRequest, timeout: float, bytes_read: int) -> HttpResponse:
        logger.debug("request to %s exceeded %gs after %d body bytes", request.url, timeout, bytes_read)
        return HttpResponse(
            ok=False,
            url=request.url,
            error_category=ErrorCategory.TIMEOUT.value,
            error_message=f"no complete response within {timeout:g}s",
            error_type="DeadlineExceeded",
            meta={"body_bytes_read": bytes_read},
        )

    def close(self) -> None:
        self._client.close()
