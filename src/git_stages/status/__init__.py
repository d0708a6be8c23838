"""Repository status query and porcelain parsing."""

from .counts import ChangeCounts, count_lines, parse_porcelain
from .query import (
    GitStagesError,
    StatusQueryError,
    StatusResult,
    Unavailable,
    UnavailableReason,
    compute_counts,
    run_status,
)

__all__ = [
    "ChangeCounts",
    "GitStagesError",
    "StatusQueryError",
    "StatusResult",
    "Unavailable",
    "UnavailableReason",
    "compute_counts",
    "count_lines",
    "parse_porcelain",
    "run_status",
]
