"""Change-signal subscription and filesystem watching."""

from .hub import ChangeHandler, ChangeSignalHub, ChangeSignalSource, SignalKind
from .watcher import WatchdogChangeSource

__all__ = [
    "ChangeHandler",
    "ChangeSignalHub",
    "ChangeSignalSource",
    "SignalKind",
    "WatchdogChangeSource",
]
