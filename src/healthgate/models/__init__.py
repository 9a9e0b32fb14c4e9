# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for HealthGate."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .gate import CancellationSignal, GateConfig
from .probe import AttemptOutcome, ProbeAttempt
from .report import RunOutcome, RunResult

__all__ = [
    "AttemptOutcome",
    "CancellationSignal",
    "GateConfig",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeAttempt",
    "RunOutcome",
    "RunResult",
]
