# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport seam used by the gate engine."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """
    Sends one readiness request and never raises for transport failures.

    Implementations report connection problems as ``HttpResponse(ok=False)``
    with an ``error_category`` so the gate can decide whether to retry.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Build the httpx transport from env-backed settings unless given explicit ones."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())
