"""Indicator presentation and icon drawing.

The pystray-backed controller lives in :mod:`git_stages.indicator.controller`
and is imported only where a tray is needed.
"""

from .icons import IndicatorIconFactory, IndicatorTheme
from .presentation import Indicator, IndicatorView, apply_result, render_view
from .state import IndicatorState

__all__ = [
    "Indicator",
    "IndicatorIconFactory",
    "IndicatorState",
    "IndicatorTheme",
    "IndicatorView",
    "apply_result",
    "render_view",
]
