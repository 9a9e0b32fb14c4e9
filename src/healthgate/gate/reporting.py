# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-attempt progress reporting."""

from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO

from ..models import AttemptOutcome, GateConfig, ProbeAttempt

logger = logging.getLogger("healthgate.gate")


class ProgressReporter(Protocol):
    def __call__(self, attempt: ProbeAttempt, config: GateConfig) -> None: ...


def format_progress(attempt: ProbeAttempt, config: GateConfig) -> str:
    """Render one progress line: attempt number, budget, observed outcome."""
    position = f"({attempt.sequence_number}/{config.max_attempts})"
    if attempt.outcome == AttemptOutcome.SUCCESS:
        return f"ready {position}: {attempt.describe()}"
    if attempt.outcome == AttemptOutcome.ERROR:
        return f"error {position}: {attempt.describe()}"
    if attempt.sequence_number >= config.max_attempts:
        return f"not ready {position}: {attempt.describe()}"
    return f"not ready {position}: {attempt.describe()}, sleeping {config.inter_attempt_delay:g} sec..."


class LoggingReporter:
    """Default reporter: one INFO record per attempt."""

    def __init__(self, log: logging.Logger | None = None):
        self._logger = log or logger

    def __call__(self, attempt: ProbeAttempt, config: GateConfig) -> None:
        level = logging.WARNING if attempt.outcome == AttemptOutcome.ERROR else logging.INFO
        self._logger.log(level, "%s %s", attempt.target, format_progress(attempt, config))


class StreamReporter:
    """Writes shell-style progress lines to a stream (stderr by default)."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def __call__(self, attempt: ProbeAttempt, config: GateConfig) -> None:
        self.stream.write(format_progress(attempt, config) + "\n")
        self.stream.flush()


def fanout(*reporters: ProgressReporter | None) -> ProgressReporter:
    active = [reporter for reporter in reporters if reporter is not None]

    def _report(attempt: ProbeAttempt, config: GateConfig) -> None:
        for reporter in active:
            reporter(attempt, config)

    return _report


__all__ = ["LoggingReporter", "ProgressReporter", "StreamReporter", "fanout", "format_progress"]
