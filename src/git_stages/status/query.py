"""Run ``git status`` for a repository and turn the result into counts."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from .counts import ChangeCounts, parse_porcelain

LOGGER = logging.getLogger("git_stages.status")

DEFAULT_TIMEOUT_SECONDS = 2.0
STATUS_ARGS: Sequence[str] = ("--no-optional-locks", "status", "--porcelain")


class GitStagesError(Exception):
    """Base class for git-stages errors."""


class UnavailableReason(str, Enum):
    """Why a repository status could not be determined."""

    NO_WORKSPACE = "no_workspace"
    NOT_A_REPOSITORY = "not_a_repository"
    GIT_NOT_FOUND = "git_not_found"
    TIMEOUT = "timeout"
    COMMAND_FAILED = "command_failed"


class StatusQueryError(GitStagesError):
    """Raised when the status command cannot produce usable output."""

    def __init__(self, reason: UnavailableReason, detail: str = "") -> None:
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


@dataclass(frozen=True)
class Unavailable:
    """Outcome of a status query that produced no counts."""

    reason: UnavailableReason
    detail: str = ""


StatusResult = Union[ChangeCounts, Unavailable]


def run_status(
    repo_root: Path,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    git_executable: str = "git",
) -> str:
    """Return raw porcelain output for ``repo_root``.

    Raises:
        StatusQueryError: the command timed out, is missing, or failed.
    """
    command = [git_executable, *STATUS_ARGS]
    try:
        completed = subprocess.run(
            command,
            cwd=str(repo_root),
            capture_output=True,
            text=True,
            # Only the two ASCII status columns matter; paths may not be UTF-8.
            encoding="utf-8",
            errors="replace",
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise StatusQueryError(
            UnavailableReason.TIMEOUT, f"no answer within {timeout_seconds:.1f}s"
        ) from exc
    except FileNotFoundError as exc:
        raise StatusQueryError(UnavailableReason.GIT_NOT_FOUND, str(exc)) from exc
    except OSError as exc:
        raise StatusQueryError(UnavailableReason.COMMAND_FAILED, str(exc)) from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        if "not a git repository" in stderr.lower():
            raise StatusQueryError(UnavailableReason.NOT_A_REPOSITORY, stderr)
        raise StatusQueryError(
            UnavailableReason.COMMAND_FAILED,
            f"exit code {completed.returncode}: {stderr}",
        )
    return completed.stdout


def compute_counts(
    repo_root: Optional[Path],
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    git_executable: str = "git",
) -> StatusResult:
    """Query ``repo_root`` and return its change counts or why they are missing."""
    if repo_root is None or not Path(repo_root).is_dir():
        return Unavailable(UnavailableReason.NO_WORKSPACE)
    try:
        output = run_status(
            Path(repo_root),
            timeout_seconds=timeout_seconds,
            git_executable=git_executable,
        )
    except StatusQueryError as exc:
        LOGGER.debug("Status unavailable for %s: %s", repo_root, exc)
        return Unavailable(exc.reason, exc.detail)
    return parse_porcelain(output)
