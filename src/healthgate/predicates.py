# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Success predicates deciding whether an HTTP response means "ready"."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .errors import ValidationError
from .http.models import HttpResponse

SuccessPredicate = Callable[[HttpResponse], bool]

SUCCESS_RANGE = range(200, 300)


def default_success_predicate(response: HttpResponse) -> bool:
    """Transport succeeded and the status is in the 2xx range."""
    return bool(response.ok) and response.status_code in SUCCESS_RANGE


def status_in(codes: Iterable[int]) -> SuccessPredicate:
    accepted = frozenset(int(code) for code in codes)
    if not accepted:
        raise ValidationError("at least one accepted status code is required", field="success_predicate")

    def predicate(response: HttpResponse) -> bool:
        return bool(response.ok) and response.status_code in accepted

    predicate.accepted = accepted  # type: ignore[attr-defined]
    return predicate


def parse_status_spec(spec: str) -> frozenset[int]:
    """
    Parse a status spec such as ``"200-299,304"`` into a set of codes.

    Ranges are inclusive. Codes outside 100-599 are rejected.
    """
    codes: set[int] = set()
    for part in str(spec or "").split(","):
        token = part.strip()
        if not token:
            continue
        try:
            if "-" in token:
                low_raw, high_raw = token.split("-", 1)
                low, high = int(low_raw), int(high_raw)
            else:
                low = high = int(token)
        except ValueError as exc:
            raise ValidationError(f"invalid status spec {token!r}", field="success_predicate") from exc
        if low > high or low < 100 or high > 599:
            raise ValidationError(f"status range {token!r} is outside 100-599", field="success_predicate")
        codes.update(range(low, high + 1))
    if not codes:
        raise ValidationError(f"status spec {spec!r} accepts nothing", field="success_predicate")
    return frozenset(codes)


def body_contains(text: str, base: SuccessPredicate = default_success_predicate) -> SuccessPredicate:
    """Require ``base`` to hold and ``text`` to appear in the response body."""
    if not text:
        raise ValidationError("expected body text must be non-empty", field="success_predicate")

    def predicate(response: HttpResponse) -> bool:
        return base(response) and text in (response.text or "")

    return predicate


def all_of(*predicates: SuccessPredicate) -> SuccessPredicate:
    if not predicates:
        return default_success_predicate

    def predicate(response: HttpResponse) -> bool:
        return all(check(response) for check in predicates)

    return predicate


__all__ = [
    "SUCCESS_RANGE",
    "SuccessPredicate",
    "all_of",
    "body_contains",
    "default_success_predicate",
    "parse_status_spec",
    "status_in",
]
