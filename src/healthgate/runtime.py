# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level HealthGate facade."""

from contextlib import suppress

from .config import HttpSettings
from .gate.engine import GateEngine
from .gate.reporting import ProgressReporter
from .http.client import HttpClient, create_default_http_client
from .models import GateConfig, RunResult


class HealthGate:
    """
    Convenience wrapper that owns an HTTP client and runs gate probes with it.

    Independent instances share nothing, so gates against different targets
    may run concurrently in separate threads.
    """

    def __init__(self, http_client: HttpClient | None = None, settings: HttpSettings | None = None):
        self.http_client = http_client or create_default_http_client(settings)

    def probe(
        self,
        target: str,
        config: GateConfig | None = None,
        *,
        reporter: ProgressReporter | None = None,
    ) -> RunResult:
        engine = GateEngine(self.http_client, reporter=reporter)
        return engine.run(target, config)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> "HealthGate":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


def probe(
    target: str,
    config: GateConfig | None = None,
    *,
    http_client: HttpClient | None = None,
    reporter: ProgressReporter | None = None,
) -> RunResult:
    """One-shot gate run. A client passed in is left open for the caller."""
    if http_client is not None:
        return GateEngine(http_client, reporter=reporter).run(target, config)
    with HealthGate() as gate:
        return gate.probe(target, config, reporter=reporter)
