"""Debounced and periodic refresh scheduling."""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Optional

LOGGER = logging.getLogger("git_stages.scheduler")

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_FALLBACK_INTERVAL_SECONDS = 3.0

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


def _validate_delay(seconds: float, name: str) -> float:
    value = float(seconds)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value}")
    return value


class Debouncer:
    """Coalesce bursts of triggers into one delayed call.

    Every ``schedule`` call cancels the pending timer and arms a new one,
    so the callback runs once the triggers have been quiet for ``delay``.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        *,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._delay = _validate_delay(delay_seconds, "delay_seconds")
        self._timer_factory = timer_factory or threading.Timer
        self._lock = threading.Lock()
        self._pending: Optional[threading.Timer] = None

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Return whether a call is armed and has not fired yet."""
        with self._lock:
            return self._pending is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        """Replace any pending call with ``callback`` after the quiet window."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            timer: threading.Timer

            def fire() -> None:
                with self._lock:
                    if self._pending is not timer:
                        return
                    self._pending = None
                callback()

            timer = self._timer_factory(self._delay, fire)
            timer.daemon = True
            self._pending = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None


class PeriodicRefresher:
    """Invoke a callback on a fixed interval until stopped."""

    def __init__(
        self,
        callback: Callable[[], None],
        interval_seconds: float = DEFAULT_FALLBACK_INTERVAL_SECONDS,
    ) -> None:
        self._callback = callback
        self._interval = _validate_delay(interval_seconds, "interval_seconds")
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running and not self._stop.is_set():
            return
        # Each run owns its stop event; a loop still finishing a slow
        # refresh after stop() keeps seeing its own event set.
        stop = threading.Event()
        self._stop = stop
        self._thread = threading.Thread(
            target=self._run, args=(stop,), name="git-stages-periodic", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread and self._thread.is_alive():
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=0.5)
        self._thread = None

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                LOGGER.exception("Periodic refresh failed")
