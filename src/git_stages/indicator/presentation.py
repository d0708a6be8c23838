"""Map status results to what the indicator displays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..status import ChangeCounts, StatusResult, Unavailable
from .state import IndicatorState

NO_CHANGES_TOOLTIP = "No changes"


@dataclass(frozen=True)
class IndicatorView:
    """Text, tooltip and state for one rendering of the indicator."""

    text: str
    tooltip: str
    state: IndicatorState
    counts: ChangeCounts


class Indicator(Protocol):
    """Single-slot display surface with show/hide semantics."""

    def show(self, view: IndicatorView) -> None: ...

    def hide(self) -> None: ...


def render_view(result: StatusResult) -> Optional[IndicatorView]:
    """Build the view for ``result``; ``None`` means the indicator is hidden."""
    if isinstance(result, Unavailable):
        return None
    if result.clean:
        return IndicatorView(
            text="0",
            tooltip=NO_CHANGES_TOOLTIP,
            state=IndicatorState.CLEAN,
            counts=result,
        )
    return IndicatorView(
        text=f"S:{result.staged} U:{result.unstaged}",
        tooltip=(
            f"Staged: {result.staged}\n"
            f"Unstaged: {result.unstaged}\n"
            f"Total: {result.total}"
        ),
        state=IndicatorState.DIRTY,
        counts=result,
    )


def apply_result(indicator: Indicator, result: StatusResult) -> Optional[IndicatorView]:
    """Show or hide ``indicator`` for ``result`` and return the view shown."""
    view = render_view(result)
    if view is None:
        indicator.hide()
    else:
        indicator.show(view)
    return view
