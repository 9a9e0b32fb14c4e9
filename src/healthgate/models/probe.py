# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe attempt models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class AttemptOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    TRANSIENT_FAILURE = "TRANSIENT_FAILURE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ProbeAttempt:
    """One bounded request against the target, as recorded by the gate."""

    sequence_number: int
    target: str
    outcome: AttemptOutcome
    observed_at: datetime
    latency: float
    status_code: int | None = None
    error_category: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == AttemptOutcome.SUCCESS

    def describe(self) -> str:
        """Short human-readable description of what was observed."""
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        if self.error_category:
            if self.error_message:
                return f"{self.error_category}: {self.error_message}"
            return self.error_category
        return self.outcome.value.lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence_number": self.sequence_number,
            "target": self.target,
            "outcome": self.outcome.value,
            "observed_at": self.observed_at.isoformat(),
            "latency": round(self.latency, 6),
            "status_code": self.status_code,
            "error_category": self.error_category,
            "error_message": self.error_message,
        }

    def to_log_line(self, max_attempts: int | None = None) -> str:
        budget = f"/{max_attempts}" if max_attempts else ""
        status = self.status_code if self.status_code is not None else "-"
        fields = [
            self.observed_at.isoformat(),
            f"attempt={self.sequence_number}{budget}",
            f"status={status}",
            f"outcome={self.outcome.value}",
            f"latency_ms={self.latency * 1000:.1f}",
        ]
        if self.error_category:
            fields.append(f"error={self.error_category}")
        return " ".join(fields)


__all__ = ["AttemptOutcome", "ProbeAttempt"]
