# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-run gate configuration."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..config import GateSettings
from ..errors import ErrorCategory, ValidationError
from ..predicates import SuccessPredicate, default_success_predicate, parse_status_spec, status_in

DEFAULT_RETRY_ON = frozenset(
    {
        ErrorCategory.TIMEOUT.value,
        ErrorCategory.CONNECTION_ERROR.value,
        ErrorCategory.DNS_ERROR.value,
    }
)


def _is_finite_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@runtime_checkable
class CancellationSignal(Protocol):
    """Anything shaped like ``threading.Event``."""

    def is_set(self) -> bool: ...

    def wait(self, timeout: float | None = None) -> bool: ...


@dataclass(frozen=True)
class GateConfig:
    """Immutable budget and policy for one gate run."""

    max_attempts: int = 30
    inter_attempt_delay: float = 2.0
    per_attempt_timeout: float = 10.0
    success_predicate: SuccessPredicate = default_success_predicate
    cancellation: CancellationSignal | None = None
    deadline: float | None = None
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    retry_on: frozenset[str] = DEFAULT_RETRY_ON

    def validate(self) -> None:
        """Raise ValidationError when the budget or policy cannot be honored."""
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValidationError(f"max_attempts must be an integer, got {self.max_attempts!r}", field="max_attempts")
        if self.max_attempts <= 0:
            raise ValidationError(f"max_attempts must be positive, got {self.max_attempts}", field="max_attempts")
        for name in ("inter_attempt_delay", "per_attempt_timeout"):
            if not _is_finite_number(getattr(self, name)):
                raise ValidationError(f"{name} must be a finite number, got {getattr(self, name)!r}", field=name)
        if self.deadline is not None and not _is_finite_number(self.deadline):
            raise ValidationError(f"deadline must be a finite number when set, got {self.deadline!r}", field="deadline")
        if self.inter_attempt_delay < 0:
            raise ValidationError(
                f"inter_attempt_delay must be non-negative, got {self.inter_attempt_delay}",
                field="inter_attempt_delay",
            )
        if self.per_attempt_timeout <= 0:
            raise ValidationError(
                f"per_attempt_timeout must be positive, got {self.per_attempt_timeout}",
                field="per_attempt_timeout",
            )
        if self.deadline is not None and self.deadline <= 0:
            raise ValidationError(f"deadline must be positive when set, got {self.deadline}", field="deadline")
        if not callable(self.success_predicate):
            raise ValidationError("success_predicate must be callable", field="success_predicate")
        if self.cancellation is not None and not isinstance(self.cancellation, CancellationSignal):
            raise ValidationError("cancellation must provide is_set() and wait()", field="cancellation")
        if not str(self.method or "").strip():
            raise ValidationError("method must be a non-empty HTTP method", field="method")

    @classmethod
    def from_settings(cls, settings: GateSettings, **overrides) -> GateConfig:  # noqa: ANN003
        """Build a config from env-backed GateSettings, applying explicit overrides."""
        values = {
            "max_attempts": settings.max_attempts,
            "inter_attempt_delay": settings.inter_attempt_delay,
            "per_attempt_timeout": settings.per_attempt_timeout,
            "deadline": settings.deadline,
        }
        if settings.accept_status and settings.accept_status != GateSettings.accept_status:
            values["success_predicate"] = status_in(parse_status_spec(settings.accept_status))
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


__all__ = ["CancellationSignal", "DEFAULT_RETRY_ON", "GateConfig"]
