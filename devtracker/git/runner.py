"""Read-only git invocations with timeout handling."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass
class GitResult:
    """Outcome of one git invocation."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def lines(self) -> list[str]:
        return [line for line in self.stdout.splitlines() if line.strip()]


def run_git(args: list[str], repo: Path, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """
    Run git against repo and capture its output.

    A missing git binary and a timeout are both reported through the
    result instead of raising.

    Args:
        args: Git arguments (e.g., ["ls-files"])
        repo: Repository to run in (passed as -C)
        timeout: Timeout in seconds
    """
    cmd = ["git", "-C", str(repo)] + args
    logger.debug(f"[GIT] {' '.join(cmd)}")
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return GitResult(returncode=-1, stdout="", stderr=f"git timed out after {timeout}s", timed_out=True)
    except FileNotFoundError:
        return GitResult(returncode=127, stdout="", stderr="git executable not found")
    return GitResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
