"""Command-line entry point for the git change-count tray indicator."""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from git_stages.indicator.controller import (
    IndicatorController,
    IndicatorMenuActions,
    detect_indicator_theme,
)
from git_stages.runtime import IndicatorRuntime
from git_stages.settings import IndicatorSettings, default_log_path
from git_stages.signals import ChangeSignalSource, WatchdogChangeSource

LOGGER = logging.getLogger("git_stages")

APP_NAME = "Git Stages"
LOG_LEVEL_ENV_VAR = "GIT_STAGES_LOG_LEVEL"


def resolve_workspace_root(
    argv: Sequence[str], settings: IndicatorSettings
) -> Optional[Path]:
    """Pick the repository to watch: CLI argument, then settings, then cwd.

    Returns ``None`` when the chosen path is not an existing directory, which
    keeps the indicator hidden.
    """
    if argv:
        candidate = Path(argv[0])
    elif settings.repository_path:
        candidate = Path(settings.repository_path)
    else:
        candidate = Path.cwd()
    candidate = candidate.expanduser()
    if not candidate.is_dir():
        LOGGER.warning("Workspace %s is not a directory", candidate)
        return None
    return candidate.resolve()


def _install_global_exception_handlers() -> None:
    """Log uncaught exceptions from the main thread and background threads."""

    def _handle_uncaught(exc_type, exc_value, exc_traceback) -> None:
        LOGGER.critical(
            "Uncaught exception in main thread",
            exc_info=(exc_type, exc_value, exc_traceback),
        )

    sys.excepthook = _handle_uncaught

    original_excepthook = threading.excepthook

    def _thread_excepthook(args) -> None:  # type: ignore[no-redef]
        LOGGER.critical(
            "Uncaught exception in thread %s",
            getattr(args.thread, "name", None),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )
        if callable(original_excepthook):
            original_excepthook(args)

    threading.excepthook = _thread_excepthook  # type: ignore[assignment]


def configure_logging() -> None:
    """Set up logging for console and a rolling log file.

    - Console level can be overridden via GIT_STAGES_LOG_LEVEL (e.g., DEBUG/INFO).
    - Detailed DEBUG logs are always written next to the settings file.
    """
    level_name = os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper()
    console_level = getattr(logging, level_name, logging.INFO)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handlers: list[logging.Handler] = []

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    handlers.append(ch)

    try:
        from logging.handlers import RotatingFileHandler

        log_path = default_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            str(log_path), maxBytes=1_000_000, backupCount=2, encoding="utf-8"
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        handlers.append(fh)
    except OSError:
        # If file logging fails, continue with console-only
        pass

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)


def build_change_sources(
    runtime: IndicatorRuntime, settings: IndicatorSettings
) -> List[ChangeSignalSource]:
    """Create the filesystem watchers feeding ``runtime``'s signal hub."""
    root = runtime.workspace_root
    if not settings.watch_files or root is None:
        return []
    return [WatchdogChangeSource(root, runtime.hub)]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the git change-count tray indicator."""
    args = list(sys.argv[1:] if argv is None else argv)
    configure_logging()
    _install_global_exception_handlers()
    LOGGER.info(
        "Process starting (python=%s, platform=%s, argv=%s)",
        sys.version.split()[0],
        sys.platform,
        " ".join(args),
    )
    settings = IndicatorSettings.load()
    LOGGER.debug("Settings: %s", settings.to_dict())
    workspace_root = resolve_workspace_root(args, settings)

    runtime: Optional[IndicatorRuntime] = None

    def refresh_action() -> None:
        if runtime is not None:
            runtime.refresh_command()

    def quit_action() -> None:
        if runtime is not None:
            runtime.stop()

    controller = IndicatorController(
        APP_NAME,
        IndicatorMenuActions(refresh=refresh_action, quit_app=quit_action),
        theme=detect_indicator_theme(settings.theme),
    )
    runtime = IndicatorRuntime(settings, workspace_root, controller)
    for source in build_change_sources(runtime, settings):
        runtime.add_source(source)

    def handle_signal(signum: int, frame: object) -> None:
        LOGGER.info("Received signal %s, shutting down", signum)
        runtime.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            signal.signal(sig, handle_signal)
        except ValueError:
            pass

    controller.start()
    runtime.start()
    try:
        while not runtime.wait(timeout=0.5):
            pass
    finally:
        runtime.stop()
        controller.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
