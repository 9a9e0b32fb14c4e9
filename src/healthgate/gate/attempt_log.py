# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Append-only attempt log: one line per attempt for later inspection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TextIO

from ..models import GateConfig, ProbeAttempt


class AttemptLog:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._handle: TextIO | None = None

    def open(self) -> AttemptLog:
        self._ensure_open()
        return self

    def _ensure_open(self) -> TextIO:
        if self._handle is None:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self.path.open("a", encoding="utf-8")
        return self._handle

    def write(self, attempt: ProbeAttempt, max_attempts: int | None = None) -> None:
        handle = self._ensure_open()
        handle.write(attempt.to_log_line(max_attempts) + "\n")
        handle.flush()

    def __call__(self, attempt: ProbeAttempt, config: GateConfig) -> None:
        self.write(attempt, config.max_attempts)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> AttemptLog:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["AttemptLog"]
