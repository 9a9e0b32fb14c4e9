# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Target address validation."""

from __future__ import annotations

from urllib.parse import urlsplit

from ..errors import ErrorCategory, ValidationError

SUPPORTED_SCHEMES = frozenset({"http", "https"})


def validate_target(target: str | None) -> str:
    """
    Return the stripped target URL or raise ValidationError.

    A bare ``host:port/path`` is rejected rather than guessed at; callers must
    name the scheme.
    """
    raw = str(target or "").strip()
    if not raw:
        raise ValidationError("target must be a non-empty URL", field="target", category=ErrorCategory.INVALID_TARGET)
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        raise ValidationError(f"malformed target {raw!r}: {exc}", field="target", category=ErrorCategory.INVALID_TARGET) from exc
    if parts.scheme.lower() not in SUPPORTED_SCHEMES:
        raise ValidationError(
            f"unsupported scheme in target {raw!r}; expected one of {sorted(SUPPORTED_SCHEMES)}",
            field="target",
            category=ErrorCategory.INVALID_TARGET,
        )
    if not parts.hostname:
        raise ValidationError(f"target {raw!r} has no host", field="target", category=ErrorCategory.INVALID_TARGET)
    if port == 0:
        raise ValidationError(f"target {raw!r} has an invalid port", field="target", category=ErrorCategory.INVALID_TARGET)
    return raw


__all__ = ["SUPPORTED_SCHEMES", "validate_target"]
