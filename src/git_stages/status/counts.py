"""Porcelain status parsing into staged/unstaged counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

UNMODIFIED = " "
UNTRACKED = "?"


@dataclass(frozen=True)
class ChangeCounts:
    """Number of staged and unstaged entries in a working tree."""

    staged: int = 0
    unstaged: int = 0

    @property
    def total(self) -> int:
        return self.staged + self.unstaged

    @property
    def clean(self) -> bool:
        return self.total == 0


def parse_porcelain(output: str) -> ChangeCounts:
    """Aggregate ``git status --porcelain`` output into change counts."""
    return count_lines(output.split("\n"))


def count_lines(lines: Iterable[str]) -> ChangeCounts:
    """Count staged and unstaged entries from raw porcelain lines.

    Column 0 is the index status and column 1 the work tree status.
    Untracked entries (``??``) count as unstaged only. Blank lines and
    lines too short to hold both codes are skipped.
    """
    staged = 0
    unstaged = 0
    for line in lines:
        # Never strip: a leading space is the "unmodified in index" code.
        if not line.strip() or len(line) < 2:
            continue
        x, y = line[0], line[1]
        if x not in (UNMODIFIED, UNTRACKED):
            staged += 1
        if y != UNMODIFIED or x == UNTRACKED:
            unstaged += 1
    return ChangeCounts(staged=staged, unstaged=unstaged)
