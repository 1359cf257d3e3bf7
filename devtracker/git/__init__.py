"""Git inspection used to sync component progress from a repository.

Everything here is read-only. Functions report git failures through
GitResult, or raise GitSyncError where no sensible default exists.
"""

from devtracker.git.runner import GitResult, run_git
from devtracker.git.progress import (
    GitSyncError,
    LastCommit,
    ProgressEstimate,
    estimate_progress,
    last_commit,
    tracked_files,
)

__all__ = [
    "GitResult",
    "run_git",
    "GitSyncError",
    "LastCommit",
    "ProgressEstimate",
    "estimate_progress",
    "last_commit",
    "tracked_files",
]
