"""User settings for the change-count indicator."""

from __future__ import annotations

import json
import logging
import math
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER = logging.getLogger("git_stages.settings")

SETTINGS_ENV_VAR = "GIT_STAGES_SETTINGS_PATH"
APP_DIR_NAME = "git-stages"

_TIMING_FIELDS = ("debounce_ms", "fallback_interval_ms", "query_timeout_ms")


@dataclass
class IndicatorSettings:
    """User-adjustable settings read from disk."""

    # Timing parameters (in milliseconds)
    debounce_ms: float = 500.0
    fallback_interval_ms: float = 3000.0
    query_timeout_ms: float = 2000.0
    git_executable: str = "git"
    repository_path: str = ""
    watch_files: bool = True
    # Empty means detect from the desktop theme
    theme: str = ""

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def fallback_interval_seconds(self) -> float:
        return self.fallback_interval_ms / 1000.0

    @property
    def query_timeout_seconds(self) -> float:
        return self.query_timeout_ms / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the settings to a dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "IndicatorSettings":
        """Create a settings instance from a dictionary payload.

        Unknown keys are ignored. Timings that are not positive numbers
        fall back to their defaults.
        """
        data = dict(payload)
        for name in _TIMING_FIELDS:
            if name in data:
                data[name] = _positive_ms(data[name], getattr(cls, name), name)
        if "watch_files" in data:
            data["watch_files"] = bool(data["watch_files"])
        for name in ("git_executable", "repository_path", "theme"):
            if name in data and not isinstance(data[name], str):
                data[name] = getattr(cls, name)
        if not data.get("git_executable"):
            data["git_executable"] = cls.git_executable
        return cls(
            **{
                field: data.get(field, getattr(cls, field))
                for field in cls.__annotations__
            }
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "IndicatorSettings":
        """Load settings from disk, falling back to defaults."""
        settings_path = path or default_settings_path()
        if settings_path.is_file():
            try:
                payload = json.loads(settings_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                LOGGER.warning("Ignoring unreadable settings file %s", settings_path)
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            return cls.from_dict(payload)
        return cls()


def _positive_ms(value: Any, default: float, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid %s %r, using %s", name, value, default)
        return default
    if not math.isfinite(number):
        LOGGER.warning("Non-finite %s %r, using %s", name, value, default)
        return default
    if number <= 0:
        LOGGER.warning("Non-positive %s %r, using %s", name, value, default)
        return default
    return number


def app_data_dir() -> Path:
    """Resolve the per-user directory holding settings and logs."""
    if sys.platform == "win32":
        local_app_data = os.getenv("LOCALAPPDATA")
        if local_app_data:
            base = Path(local_app_data)
        else:
            base = Path.home() / "AppData" / "Local"
        return base / APP_DIR_NAME
    config_home = os.getenv("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_DIR_NAME


def default_settings_path() -> Path:
    """Resolve the path settings are read from."""
    override = os.getenv(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return app_data_dir() / "settings.json"


def default_log_path() -> Path:
    """Resolve the path of the rolling log file."""
    return default_settings_path().with_name("git_stages.log")
