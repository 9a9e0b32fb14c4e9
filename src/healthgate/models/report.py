# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal result of a gate run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .probe import ProbeAttempt


class RunOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    EXHAUSTED_RETRIES = "EXHAUSTED_RETRIES"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


# Exit statuses seen by the calling pipeline. 2 is reserved for configuration
# errors so it lines up with argparse usage errors.
EXIT_SUCCESS = 0
EXIT_EXHAUSTED = 1
EXIT_VALIDATION = 2
EXIT_ERROR = 3
EXIT_CANCELLED = 130


@dataclass
class RunResult:
    """Outcome plus the full attempt log of one gate run."""

    final_outcome: RunOutcome
    target: str
    attempts: tuple[ProbeAttempt, ...] = field(default_factory=tuple)
    total_elapsed: float = 0.0
    reason: str = ""
    error_category: str | None = None

    @property
    def ok(self) -> bool:
        return self.final_outcome == RunOutcome.SUCCESS

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def last_attempt(self) -> ProbeAttempt | None:
        return self.attempts[-1] if self.attempts else None

    @property
    def exit_code(self) -> int:
        if self.final_outcome == RunOutcome.SUCCESS:
            return EXIT_SUCCESS
        if self.final_outcome == RunOutcome.EXHAUSTED_RETRIES:
            return EXIT_EXHAUSTED
        if self.final_outcome == RunOutcome.CANCELLED:
            return EXIT_CANCELLED
        if self.error_category in {"VALIDATION", "INVALID_TARGET"}:
            return EXIT_VALIDATION
        return EXIT_ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "final_outcome": self.final_outcome.value,
            "target": self.target,
            "reason": self.reason,
            "error_category": self.error_category,
            "total_elapsed": round(self.total_elapsed, 6),
            "attempt_count": self.attempt_count,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
            "exit_code": self.exit_code,
        }


__all__ = [
    "EXIT_CANCELLED",
    "EXIT_ERROR",
    "EXIT_EXHAUSTED",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION",
    "RunOutcome",
    "RunResult",
]
