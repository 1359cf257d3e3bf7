"""Tests for devtracker.git module."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devtracker.git.progress import GitSyncError, estimate_progress, last_commit
from devtracker.git.runner import GitResult, run_git


def fake_git(outputs: dict):
    """run_git replacement keyed by git subcommand."""
    def _run(args, repo, timeout=30):
        value = outputs.get(args[0])
        if isinstance(value, GitResult):
            return value
        return GitResult(returncode=0, stdout=value or "", stderr="")
    return _run


class TestGitResult:
    """Test GitResult dataclass."""

    def test_success_when_returncode_zero(self):
        assert GitResult(returncode=0, stdout="ok", stderr="").success is True

    def test_failure_when_timed_out(self):
        assert GitResult(returncode=0, stdout="", stderr="", timed_out=True).success is False

    def test_lines_skip_blanks(self):
        assert GitResult(returncode=0, stdout="a\n\nb\n", stderr="").lines == ["a", "b"]


class TestRunGit:
    """Test run_git function."""

    @patch("devtracker.git.runner.subprocess.run")
    def test_passes_repo_with_C_flag(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="x\n", stderr="")
        result = run_git(["ls-files"], Path("/my/repo"))
        assert result.success
        assert mock_run.call_args[0][0] == ["git", "-C", "/my/repo", "ls-files"]

    @patch("devtracker.git.runner.subprocess.run")
    def test_handles_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=30)
        result = run_git(["ls-files"], Path("/tmp"))
        assert result.timed_out
        assert "timed out" in result.stderr

    @patch("devtracker.git.runner.subprocess.run")
    def test_handles_missing_git(self, mock_run):
        mock_run.side_effect = FileNotFoundError()
        result = run_git(["ls-files"], Path("/tmp"))
        assert not result.success
        assert "not found" in result.stderr


class TestEstimateProgress:
    """Test estimate_progress."""

    def test_excludes_tests_mocks_and_readmes(self):
        outputs = {
            "ls-files": "src/api.py\nsrc/db.py\ntests/test_api.py\nsrc/mocks/db.py\nREADME.md\nsrc/app.py\n",
            "log": "Add routes\x00Dana\x00Mon Jan 15 10:30:00 2025 +0000",
            "show": "src/api.py\nsrc/app.py\n",
        }
        with patch("devtracker.git.progress.run_git", side_effect=fake_git(outputs)):
            estimate = estimate_progress(Path("/repo"))

        assert estimate.total_files == 6
        assert estimate.implemented_files == 3
        assert estimate.percentage == 50
        assert estimate.details == (
            'Last commit: "Add routes" by Dana on Mon Jan 15 10:30:00 2025 +0000. Files changed: 2'
        )

    def test_rounds_half_up(self):
        outputs = {"ls-files": "a.py\nb.py\ntest_c.py\n", "log": ""}
        with patch("devtracker.git.progress.run_git", side_effect=fake_git(outputs)):
            estimate = estimate_progress(Path("/repo"))
        assert estimate.percentage == 67
        assert estimate.last_commit is None
        assert estimate.details == "Estimated from 2/3 files"

    def test_empty_repository(self):
        with patch("devtracker.git.progress.run_git", side_effect=fake_git({"ls-files": "", "log": ""})):
            assert estimate_progress(Path("/repo")).percentage == 0

    def test_not_a_repository(self):
        failed = GitResult(returncode=128, stdout="", stderr="fatal: not a git repository")
        with patch("devtracker.git.progress.run_git", side_effect=fake_git({"ls-files": failed})):
            with pytest.raises(GitSyncError) as exc_info:
                estimate_progress(Path("/repo"))
        assert "not a git repository" in str(exc_info.value)

    def test_unexpected_log_format(self):
        with patch("devtracker.git.progress.run_git", side_effect=fake_git({"log": "garbage"})):
            assert last_commit(Path("/repo")) is None
