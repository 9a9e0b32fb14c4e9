# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Gate exports."""

from .attempt_log import AttemptLog
from .cancellation import CancellationToken, install_signal_handlers
from .engine import GateEngine
from .reporting import LoggingReporter, ProgressReporter, StreamReporter, fanout, format_progress

__all__ = [
    "AttemptLog",
    "CancellationToken",
    "GateEngine",
    "LoggingReporter",
    "ProgressReporter",
    "StreamReporter",
    "fanout",
    "format_progress",
    "install_signal_handlers",
]
