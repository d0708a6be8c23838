"""Filesystem watcher that turns work tree and ``.git`` events into signals."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from .hub import ChangeSignalHub, SignalKind

LOGGER = logging.getLogger("git_stages.signals.watcher")

GIT_DIR_NAME = ".git"


def _to_path(src_path: bytes | str) -> Path:
    if isinstance(src_path, bytes):
        return Path(src_path.decode())
    return Path(src_path)


def is_lock_churn(path: Path) -> bool:
    """Return whether ``path`` is a git lock file, which git creates and removes itself."""
    return path.suffix == ".lock" and GIT_DIR_NAME in path.parts


class _RepositoryEventHandler(FileSystemEventHandler):
    def __init__(self, hub: ChangeSignalHub) -> None:
        self._hub = hub

    def _forward(self, event: FileSystemEvent, kind: SignalKind) -> None:
        if is_lock_churn(_to_path(event.src_path)):
            return
        self._hub.emit(kind)

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._forward(event, SignalKind.FILE_CHANGED)

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event, SignalKind.FILE_CREATED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._forward(event, SignalKind.FILE_DELETED)

    def on_moved(self, event: FileSystemEvent) -> None:
        if is_lock_churn(_to_path(event.src_path)) and is_lock_churn(
            _to_path(event.dest_path)
        ):
            return
        self._hub.emit(SignalKind.FILE_MOVED)


class WatchdogChangeSource:
    """Watch a repository root recursively and emit change signals."""

    def __init__(
        self,
        root: Path,
        hub: ChangeSignalHub,
        *,
        observer_factory: Optional[Callable[[], BaseObserver]] = None,
    ) -> None:
        self._root = Path(root)
        self._hub = hub
        self._observer_factory = observer_factory or Observer
        self._observer: Optional[BaseObserver] = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        if not self._root.is_dir():
            LOGGER.info("Not watching %s: directory does not exist", self._root)
            return
        observer = self._observer_factory()
        observer.schedule(
            _RepositoryEventHandler(self._hub), str(self._root), recursive=True
        )
        observer.start()
        self._observer = observer
        LOGGER.debug("Watching %s for changes", self._root)

    def stop(self) -> None:
        if self._observer is None:
            return
        observer, self._observer = self._observer, None
        observer.stop()
        observer.join(timeout=1.0)
