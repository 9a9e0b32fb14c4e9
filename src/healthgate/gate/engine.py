# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bounded-retry readiness gate.

The engine probes one target strictly sequentially: at most one request is in
flight, and a failed attempt is followed by the configured delay measured from
its completion. A run ends on the first success, on a non-retryable error, on
cancellation, or when the attempt budget (or optional deadline) is used up.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone

from ..errors import ErrorCategory, ValidationError, categorize_exception, error_category_to_reason
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..http.url import validate_target
from ..models import AttemptOutcome, GateConfig, ProbeAttempt, RunOutcome, RunResult
from .reporting import LoggingReporter, ProgressReporter

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GateEngine:
    """Runs gate probes against an injected HttpClient."""

    def __init__(
        self,
        http_client: HttpClient,
        *,
        reporter: ProgressReporter | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.http_client = http_client
        self.reporter = reporter if reporter is not None else LoggingReporter()
        self._clock = clock
        self._now = now

    def run(self, target: str, config: GateConfig | None = None) -> RunResult:
        cfg = config or GateConfig()
        started = self._clock()

        try:
            url = validate_target(target)
            cfg.validate()
        except ValidationError as exc:
            logger.debug("rejecting gate run for %r: %s", target, exc)
            return RunResult(
                final_outcome=RunOutcome.ERROR,
                target=str(target or ""),
                reason=str(exc),
                error_category=exc.category.value,
                total_elapsed=self._clock() - started,
            )

        cancellation = cfg.cancellation if cfg.cancellation is not None else threading.Event()
        deadline_at = started + cfg.deadline if cfg.deadline is not None else None
        attempts: list[ProbeAttempt] = []

        def finish(outcome: RunOutcome, reason: str, category: str | None = None) -> RunResult:
            result = RunResult(
                final_outcome=outcome,
                target=url,
                attempts=tuple(attempts),
                total_elapsed=self._clock() - started,
                reason=reason,
                error_category=category,
            )
            logger.debug("gate run for %s finished: %s after %d attempt(s)", url, outcome.value, len(attempts))
            return result

        def cancelled() -> RunResult:
            reason = getattr(cancellation, "reason", None) or "Cancelled"
            return finish(RunOutcome.CANCELLED, reason, ErrorCategory.CANCELLED.value)

        for sequence_number in range(1, cfg.max_attempts + 1):
            if cancellation.is_set():
                return cancelled()

            timeout = cfg.per_attempt_timeout
            if deadline_at is not None:
                remaining = deadline_at - self._clock()
                if remaining <= 0:
                    return finish(
                        RunOutcome.EXHAUSTED_RETRIES,
                        f"Deadline of {cfg.deadline:g}s reached after {len(attempts)} attempt(s)",
                    )
                timeout = min(timeout, remaining)

            attempt = self._attempt(url, sequence_number, cfg, timeout)

            # A cancellation raised while the request was in flight abandons the attempt.
            if cancellation.is_set():
                return cancelled()

            attempts.append(attempt)
            self.reporter(attempt, cfg)

            if attempt.outcome == AttemptOutcome.SUCCESS:
                return finish(RunOutcome.SUCCESS, f"Target healthy after {sequence_number} attempt(s)")

            if attempt.outcome == AttemptOutcome.ERROR:
                reason = error_category_to_reason(attempt.error_category) or "Non-retryable error"
                if attempt.error_message:
                    reason = f"{reason}: {attempt.error_message}"
                return finish(RunOutcome.ERROR, reason, attempt.error_category)

            if sequence_number >= cfg.max_attempts:
                break

            delay = cfg.inter_attempt_delay
            if deadline_at is not None:
                remaining = deadline_at - self._clock()
                if remaining <= 0:
                    return finish(
                        RunOutcome.EXHAUSTED_RETRIES,
                        f"Deadline of {cfg.deadline:g}s reached after {len(attempts)} attempt(s)",
                    )
                delay = min(delay, remaining)
            if cancellation.wait(delay):
                return cancelled()

        return finish(
            RunOutcome.EXHAUSTED_RETRIES,
            f"Target not healthy after {len(attempts)} attempt(s)",
        )

    def _attempt(self, url: str, sequence_number: int, cfg: GateConfig, timeout: float) -> ProbeAttempt:
        request = HttpRequest(
            url=url,
            method=cfg.method.upper(),
            headers=dict(cfg.headers or {}),
            timeout=timeout,
        )
        observed_at = self._now()
        began = self._clock()
        try:
            response = self.http_client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                url=url,
                error_category=categorize_exception(exc).value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )
        latency = self._clock() - began

        outcome, category, message = self._classify(response, cfg, latency, timeout)
        return ProbeAttempt(
            sequence_number=sequence_number,
            target=url,
            outcome=outcome,
            observed_at=observed_at,
            latency=latency,
            status_code=response.status_code,
            error_category=category,
            error_message=message,
        )

    def _classify(
        self,
        response: HttpResponse,
        cfg: GateConfig,
        latency: float,
        timeout: float,
    ) -> tuple[AttemptOutcome, str | None, str | None]:
        if not response.ok:
            category = response.error_category or ErrorCategory.UNKNOWN_ERROR.value
            if category in cfg.retry_on:
                return AttemptOutcome.TRANSIENT_FAILURE, category, response.error_message
            return AttemptOutcome.ERROR, category, response.error_message

        if latency > timeout:
            message = f"response took {latency:.3f}s, over the {timeout:g}s attempt timeout"
            return AttemptOutcome.TRANSIENT_FAILURE, ErrorCategory.TIMEOUT.value, message

        try:
            healthy = bool(cfg.success_predicate(response))
        except Exception as exc:  # noqa: BLE001
            logger.warning("success predicate raised for %s: %s", response.url, exc)
            return AttemptOutcome.ERROR, ErrorCategory.PREDICATE_ERROR.value, str(exc) or type(exc).__name__

        if healthy:
            return AttemptOutcome.SUCCESS, None, None
        return AttemptOutcome.TRANSIENT_FAILURE, None, None


__all__ = ["GateEngine"]
