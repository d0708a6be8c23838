"""Top-level package for the git staged/unstaged change-count indicator."""

__all__ = [
    "indicator",
    "runtime",
    "scheduler",
    "settings",
    "signals",
    "status",
]
