"""
Progress estimation from a component's git repository.

The estimate is the share of tracked files that are implementation files,
i.e. whose path does not mention test, mock or README. It is a rough signal
meant to be recorded through the normal progress update, not a measurement.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from devtracker.git.runner import run_git
from devtracker.lib.errors import TrackerError
from devtracker.tracker.models import round_half_up

logger = logging.getLogger(__name__)

NON_IMPLEMENTATION = re.compile(r"test|mock|README")


class GitSyncError(TrackerError):
    """The repository could not be inspected."""

    def __init__(self, repo: Path, message: str):
        self.repo = repo
        super().__init__(f"git failed in {repo}: {message}")


@dataclass
class LastCommit:
    message: str
    author: str
    date: str
    files_changed: int

    def describe(self) -> str:
        return (
            f'Last commit: "{self.message}" by {self.author} on {self.date}. '
            f"Files changed: {self.files_changed}"
        )


@dataclass
class ProgressEstimate:
    total_files: int
    implemented_files: int
    percentage: int
    last_commit: LastCommit | None = None

    @property
    def details(self) -> str:
        if self.last_commit is None:
            return f"Estimated from {self.implemented_files}/{self.total_files} files"
        return self.last_commit.describe()


def tracked_files(repo: Path) -> list[str]:
    result = run_git(["ls-files"], repo)
    if not result.success:
        raise GitSyncError(repo, result.stderr.strip() or "ls-files failed")
    return result.lines


def last_commit(repo: Path) -> LastCommit | None:
    """Summary of HEAD, or None for a repository without commits."""
    result = run_git(["log", "-1", "--pretty=format:%s%x00%an%x00%ad"], repo)
    if not result.success or not result.stdout.strip():
        return None
    parts = result.stdout.split("\x00")
    if len(parts) != 3:
        logger.warning(f"[GIT] Unexpected log output in {repo}: {result.stdout!r}")
        return None
    message, author, date = (p.strip() for p in parts)

    files = run_git(["show", "--name-only", "--pretty=format:", "HEAD"], repo)
    return LastCommit(message=message, author=author, date=date, files_changed=len(files.lines))


def estimate_progress(repo: Path) -> ProgressEstimate:
    """Estimate completion percentage for the repository at repo.

    Raises:
        GitSyncError: repo is not a readable git repository
    """
    files = tracked_files(repo)
    total = len(files)
    implemented = sum(1 for f in files if not NON_IMPLEMENTATION.search(f))
    percentage = round_half_up(implemented / total * 100) if total else 0
    logger.info(f"[GIT] {repo}: {implemented}/{total} implementation files -> {percentage}%")
    return ProgressEstimate(
        total_files=total,
        implemented_files=implemented,
        percentage=percentage,
        last_commit=last_commit(repo),
    )
