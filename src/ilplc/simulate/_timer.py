"""Periodic scheduler driving the scan cycle."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CycleTimer:
    """Calls *callback* every ``interval_ms()`` milliseconds on a daemon thread.

    The interval is re-read before each wait, so a new cycle time takes
    effect from the next tick on.  A timer runs once: after
    :meth:`cancel`, create a new one to resume.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: Callable[[], int],
        *,
        name: str = "ilplc-cycle",
    ) -> None:
        self._callback = callback
        self._interval_ms = interval_ms
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True, name=name)

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._cancelled.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self, timeout: float | None = 1.0) -> None:
        """Stop the timer; no callback starts after this returns.

        Joins the timer thread unless called from the callback itself.
        """
        self._cancelled.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval_ms() / 1000):
            try:
                self._callback()
            except Exception:
                logger.error("scan cycle failed; cycle timer stopped")
                self._cancelled.set()
                raise
