# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cooperative cancellation for gate runs."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CancellationToken:
    """
    A ``threading.Event`` with a reason attached.

    The gate polls ``is_set()`` between attempts and sleeps through
    ``wait(delay)``, so cancelling wakes a pending inter-attempt wait at once.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "Cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            logger.info("cancellation requested: %s", reason)
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def install_signal_handlers(
    token: CancellationToken,
    signals: Iterable[signal.Signals] = DEFAULT_SIGNALS,
) -> Callable[[], None]:
    """
    Route termination signals into ``token.cancel()``.

    Returns a callable restoring the previous handlers. Only valid on the main thread.
    """
    previous: dict[signal.Signals, object] = {}

    def _handler(signum, frame):  # noqa: ANN001,ARG001
        token.cancel(f"Received {signal.Signals(signum).name}")

    for sig in signals:
        previous[sig] = signal.signal(sig, _handler)

    def restore() -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return restore


__all__ = ["CancellationToken", "DEFAULT_SIGNALS", "install_signal_handlers"]
