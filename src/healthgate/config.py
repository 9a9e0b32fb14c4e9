# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for HealthGate."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"HealthGate/{__version__} (readiness probe)"
DEFAULT_TARGET = "http://localhost:3000/health"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None or not value.strip():
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("HEALTHGATE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("HEALTHGATE_TIMEOUT", cls.timeout),
            user_agent=os.getenv("HEALTHGATE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("HEALTHGATE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("HEALTHGATE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class GateSettings:
    """Default gate budget, matching the wait-for-health script (30 tries, 2s apart)."""

    max_attempts: int = 30
    inter_attempt_delay: float = 2.0
    per_attempt_timeout: float = 10.0
    deadline: float | None = None
    accept_status: str = "200-299"

    @classmethod
    def from_env(cls) -> "GateSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            max_attempts=_int_env("HEALTHGATE_MAX_ATTEMPTS", cls.max_attempts),
            inter_attempt_delay=_float_env("HEALTHGATE_DELAY", cls.inter_attempt_delay),
            per_attempt_timeout=_float_env("HEALTHGATE_TIMEOUT", cls.per_attempt_timeout),
            deadline=_optional_float_env("HEALTHGATE_DEADLINE", cls.deadline),
            accept_status=os.getenv("HEALTHGATE_ACCEPT_STATUS", cls.accept_status),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_gate_settings() -> GateSettings:
    """Load gate budget settings from environment with sensible defaults."""
    return GateSettings.from_env()
