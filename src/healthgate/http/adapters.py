# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient implementations for tests and dry runs."""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import ErrorCategory
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests."""

    def __init__(self, responses: dict[str, HttpResponse] | None = None):
        self._responses = responses or {}
        self.requests: list[HttpRequest] = []

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(
            ok=False,
            url=request.url,
            error_category=ErrorCategory.CONNECTION_ERROR.value,
            error_message="No stubbed response configured",
        )

    def close(self) -> None:
        return None


class SequenceHttpClient(HttpClient):
    """
    Replays a fixed sequence of responses, one per request.

    The last response repeats once the sequence is used up.
    """

    def __init__(self, responses: Iterable[HttpResponse]):
        self._responses = list(responses)
        if not self._responses:
            raise ValueError("SequenceHttpClient needs at least one response")
        self.requests: list[HttpRequest] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:
        self.closed = True
