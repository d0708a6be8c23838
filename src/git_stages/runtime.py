"""Runtime coordinator wiring change signals, scheduling and the indicator."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .indicator import Indicator, IndicatorView, apply_result
from .scheduler import Debouncer, PeriodicRefresher, TimerFactory
from .settings import IndicatorSettings
from .signals import ChangeSignalHub, ChangeSignalSource, SignalKind
from .status import StatusResult, compute_counts

LOGGER = logging.getLogger("git_stages")

StatusQuery = Callable[..., StatusResult]


class IndicatorRuntime:
    """Own the indicator, its timers and its signal subscriptions.

    ``start`` subscribes to change signals, starts the sources and the
    periodic fallback, and performs the first refresh. ``stop`` undoes all
    of it. Every refresh recomputes the counts from scratch, so concurrent
    refreshes are harmless: the last one to finish wins.
    """

    def __init__(
        self,
        settings: IndicatorSettings,
        workspace_root: Optional[Path],
        indicator: Indicator,
        *,
        hub: Optional[ChangeSignalHub] = None,
        change_sources: Sequence[ChangeSignalSource] = (),
        query: StatusQuery = compute_counts,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._settings = settings
        self._workspace_root = workspace_root
        self._indicator = indicator
        self._hub = hub or ChangeSignalHub()
        self._sources: List[ChangeSignalSource] = list(change_sources)
        self._query = query
        self._debouncer = Debouncer(
            settings.debounce_seconds, timer_factory=timer_factory
        )
        self._periodic = PeriodicRefresher(
            self.refresh, settings.fallback_interval_seconds
        )
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._stop_event = threading.Event()
        self._started = False

    @property
    def hub(self) -> ChangeSignalHub:
        return self._hub

    @property
    def workspace_root(self) -> Optional[Path]:
        return self._workspace_root

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def running(self) -> bool:
        return self._started and not self._stop_event.is_set()

    def add_source(self, source: ChangeSignalSource) -> None:
        """Register a change source; it is started along with the runtime."""
        self._sources.append(source)
        if self.running:
            source.start()

    def start(self) -> None:
        """Begin reacting to change signals and show the first counts."""
        if self._started:
            return
        LOGGER.info("Starting indicator for %s", self._workspace_root or "<none>")
        self._started = True
        self._stop_event.clear()
        self._unsubscribe = self._hub.on_change_signal(self.request_refresh)
        for source in self._sources:
            try:
                source.start()
            except Exception:
                LOGGER.exception("Failed to start change source %r", source)
        self._periodic.start()
        self.refresh()

    def stop(self) -> None:
        """Cancel pending and periodic refreshes and detach from sources."""
        if self._stop_event.is_set() or not self._started:
            return
        LOGGER.info("Stopping indicator")
        self._stop_event.set()
        self._debouncer.cancel()
        self._periodic.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for source in self._sources:
            try:
                source.stop()
            except Exception:
                LOGGER.exception("Failed to stop change source %r", source)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until ``stop`` is called; return whether it was."""
        return self._stop_event.wait(timeout)

    def request_refresh(self) -> None:
        """Schedule a debounced refresh."""
        if self._stop_event.is_set():
            return
        self._debouncer.schedule(self.refresh)

    def refresh_command(self) -> None:
        """Handle the user-invoked refresh action."""
        self._hub.emit(SignalKind.MANUAL)

    def refresh(self) -> Optional[IndicatorView]:
        """Query the repository now and update the indicator."""
        result = self._query(
            self._workspace_root,
            timeout_seconds=self._settings.query_timeout_seconds,
            git_executable=self._settings.git_executable,
        )
        view = apply_result(self._indicator, result)
        if view is None:
            LOGGER.debug("Indicator hidden: %s", result)
        else:
            LOGGER.debug("Indicator updated: %s", view.text)
        return view
