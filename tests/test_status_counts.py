from __future__ import annotations

import pytest

from git_stages.status import ChangeCounts, count_lines, parse_porcelain


def test_mixed_lines_count_staged_and_unstaged() -> None:
    counts = count_lines(["M  file1", "?? file2", " M file3"])
    assert counts == ChangeCounts(staged=1, unstaged=2)


@pytest.mark.parametrize(
    ("line", "staged", "unstaged"),
    [
        ("M  a.py", 1, 0),
        (" M a.py", 0, 1),
        ("MM a.py", 1, 1),
        ("A  new.py", 1, 0),
        ("AM new.py", 1, 1),
        ("D  gone.py", 1, 0),
        (" D gone.py", 0, 1),
        ("R  old.py -> new.py", 1, 0),
        ("?? untracked.py", 0, 1),
        ("UU conflict.py", 1, 1),
        ("!! ignored.log", 1, 1),
    ],
)
def test_status_codes(line: str, staged: int, unstaged: int) -> None:
    assert count_lines([line]) == ChangeCounts(staged=staged, unstaged=unstaged)


def test_empty_output_is_clean() -> None:
    counts = parse_porcelain("")
    assert counts == ChangeCounts(0, 0)
    assert counts.clean
    assert counts.total == 0


def test_blank_and_whitespace_lines_are_ignored() -> None:
    counts = parse_porcelain("\n   \n\t\nM  a.py\n\n")
    assert counts == ChangeCounts(staged=1, unstaged=0)


def test_single_character_line_is_skipped() -> None:
    assert parse_porcelain("M\n") == ChangeCounts(0, 0)
    assert parse_porcelain("?\n M b.py\n") == ChangeCounts(staged=0, unstaged=1)


def test_leading_space_is_not_stripped() -> None:
    # " M" must stay an unstaged modification, not become "M " (staged).
    counts = parse_porcelain(" M src/app.py\n")
    assert counts == ChangeCounts(staged=0, unstaged=1)


def test_total_sums_both_counts() -> None:
    counts = parse_porcelain("M  a\nMM b\n?? c\n")
    assert counts.staged == 2
    assert counts.unstaged == 2
    assert counts.total == 4
    assert not counts.clean
