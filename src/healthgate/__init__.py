# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
HealthGate package entrypoint.

HealthGate decides whether a freshly deployed service is ready by polling an
HTTP readiness endpoint under a bounded attempt budget, and reports a
machine-checkable terminal outcome a deploy pipeline can act on. HTTP
behavior is abstracted behind an injectable client interface, and domain
objects are modeled with typed dataclasses.
"""

from .config import GateSettings, HttpSettings, load_gate_settings, load_http_settings
from .errors import ErrorCategory, HealthGateError, ValidationError
from .gate import AttemptLog, CancellationToken, GateEngine, LoggingReporter, StreamReporter
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, create_default_http_client
from .log import setup_logging
from .models import AttemptOutcome, GateConfig, ProbeAttempt, RunOutcome, RunResult
from .predicates import body_contains, default_success_predicate, parse_status_spec, status_in
from .runtime import HealthGate, probe
from .version import __version__

__all__ = [
    "AttemptLog",
    "AttemptOutcome",
    "CancellationToken",
    "ErrorCategory",
    "GateConfig",
    "GateEngine",
    "GateSettings",
    "HealthGate",
    "HealthGateError",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "LoggingReporter",
    "ProbeAttempt",
    "RunOutcome",
    "RunResult",
    "StreamReporter",
    "ValidationError",
    "body_contains",
    "create_default_http_client",
    "default_success_predicate",
    "load_gate_settings",
    "load_http_settings",
    "parse_status_spec",
    "probe",
    "setup_logging",
    "status_in",
    "__version__",
]
