"""Enumeration of the indicator states shown in the tray."""

from __future__ import annotations

from enum import Enum


class IndicatorState(str, Enum):
    """Visible states of the change-count indicator."""

    CLEAN = "clean"
    DIRTY = "dirty"

    @property
    def has_changes(self) -> bool:
        return self is IndicatorState.DIRTY
