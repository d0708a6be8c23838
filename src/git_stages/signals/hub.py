"""Fan-out of zero-payload "something changed" signals."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, List, Protocol

LOGGER = logging.getLogger("git_stages.signals")

ChangeHandler = Callable[[], None]


class SignalKind(str, Enum):
    """Origins of a change signal, used for logging only."""

    FILE_CHANGED = "file_changed"
    FILE_CREATED = "file_created"
    FILE_DELETED = "file_deleted"
    FILE_MOVED = "file_moved"
    EDITOR_FOCUS = "editor_focus"
    WINDOW_FOCUS = "window_focus"
    MANUAL = "manual"


class ChangeSignalSource(Protocol):
    """A producer of change signals with an explicit lifecycle."""

    def start(self) -> None: ...

    def stop(self) -> None: ...


class ChangeSignalHub:
    """Deliver change signals to every subscribed handler."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: List[ChangeHandler] = []

    def on_change_signal(self, handler: ChangeHandler) -> Callable[[], None]:
        """Subscribe ``handler`` and return a callable that unsubscribes it."""
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def emit(self, kind: SignalKind = SignalKind.MANUAL) -> None:
        """Notify subscribers that something changed."""
        with self._lock:
            handlers = list(self._handlers)
        LOGGER.debug("Change signal: %s", kind.value)
        for handler in handlers:
            try:
                handler()
            except Exception:
                LOGGER.exception("Change handler failed for %s signal", kind.value)
