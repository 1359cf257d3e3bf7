"""End-to-end tests for the dt command line."""

import json
from unittest.mock import patch

import pytest

from devtracker.cli import main
from devtracker.git.progress import ProgressEstimate


@pytest.fixture
def dt(tmp_path):
    """Run dt against a fresh tracker root with prompts disabled."""
    def _run(*argv, answer="--no-input"):
        base = ["--root", str(tmp_path)]
        if answer:
            base.append(answer)
        return main(base + list(argv))
    return _run


def load_components(root):
    return json.loads((root / "components" / "status.json").read_text())


class TestStatus:
    """Tests for dt status."""

    def test_lists_default_components(self, dt, capsys):
        assert dt("status") == 0
        out = capsys.readouterr().out
        assert "BingoFlash" in out
        assert "SUPERLogs" in out
        assert "Overall progress: 0%" in out

    def test_lists_open_issues(self, dt, capsys):
        dt("log", "BingoCore", "--issue", "Login fails")
        capsys.readouterr()
        dt("status")
        assert "1. [BingoCore] Login fails" in capsys.readouterr().out

    def test_malformed_config_exits_2(self, dt, tmp_path, capsys):
        (tmp_path / "tracker.yaml").write_text("components: [A\n")
        assert dt("status") == 2
        assert "ERROR:" in capsys.readouterr().out


class TestLog:
    """Tests for dt log."""

    def test_progress_clamped(self, dt, tmp_path):
        assert dt("log", "BingoCore", "--progress", "150") == 0
        data = load_components(tmp_path)
        assert data["BingoCore"]["completionPercentage"] == 100
        assert data["BingoCore"]["status"] == "Not Started"

    def test_progress_with_yes_marks_completed(self, dt, tmp_path):
        assert dt("log", "BingoCore", "--progress", "100", answer="--yes") == 0
        assert load_components(tmp_path)["BingoCore"]["status"] == "Completed"

    def test_unknown_component(self, dt, capsys):
        assert dt("log", "Nope", "--note", "hi") == 1
        assert "ERROR: Component 'Nope' not found" in capsys.readouterr().out

    def test_unknown_status(self, dt, capsys):
        assert dt("log", "Appwrite", "--status", "Paused") == 1
        assert "Invalid status" in capsys.readouterr().out

    def test_blocked_dependency_declined(self, dt, tmp_path, capsys):
        assert dt("log", "BingoFlash", "--status", "In Progress") == 1
        assert "No changes made." in capsys.readouterr().out
        assert load_components(tmp_path)["BingoFlash"]["status"] == "Not Started"

    def test_blocked_dependency_confirmed(self, dt, tmp_path):
        assert dt("log", "BingoFlash", "--status", "In Progress", answer="--yes") == 0
        assert load_components(tmp_path)["BingoFlash"]["status"] == "In Progress"

    @pytest.mark.parametrize("answer,rc", [("--no-input", 1), ("--yes", 0)])
    def test_blocked_dependency_names_blockers(self, dt, capsys, answer, rc):
        assert dt("log", "BingoFlash", "--status", "In Progress", answer=answer) == rc
        out = capsys.readouterr().out
        assert "unfinished dependencies" in out
        assert "- BingoBackend: Not Started" in out

    def test_resolve_by_open_issue_number(self, dt, tmp_path):
        dt("log", "Appwrite", "--issue", "first")
        dt("log", "Appwrite", "--issue", "second")
        dt("log", "Appwrite", "--resolve", "1")
        assert dt("log", "Appwrite", "--resolve", "1", "--resolution", "patched") == 0

        issues = load_components(tmp_path)["Appwrite"]["issues"]
        assert [i["resolved"] for i in issues] == [True, True]

    def test_resolve_without_open_issue(self, dt, capsys):
        assert dt("log", "Appwrite", "--resolve", "1") == 1
        assert "out of range" in capsys.readouterr().out

    def test_no_action_without_input(self, dt):
        assert dt("log", "Appwrite") == 2

    def test_menu(self, dt, tmp_path):
        with patch("builtins.input", side_effect=["4", "kickoff meeting"]):
            assert dt("log", "Appwrite", answer=None) == 0
        notes = load_components(tmp_path)["Appwrite"]["notes"]
        assert notes[0]["content"] == "kickoff meeting"

    def test_menu_status_defaults_to_next_step(self, dt, tmp_path, capsys):
        with patch("builtins.input", side_effect=["1", "", ""]):
            assert dt("log", "Appwrite", answer=None) == 0
        assert "Usual next status: In Progress" in capsys.readouterr().out
        assert load_components(tmp_path)["Appwrite"]["status"] == "In Progress"

    def test_menu_resolves_chosen_duplicate_issue(self, dt, tmp_path):
        dt("log", "Appwrite", "--issue", "flaky deploy")
        dt("log", "Appwrite", "--issue", "flaky deploy")
        with patch("builtins.input", side_effect=["6", "2", "retried"]):
            assert dt("log", "Appwrite", answer=None) == 0

        issues = load_components(tmp_path)["Appwrite"]["issues"]
        assert [i["resolved"] for i in issues] == [False, True]


class TestReports:
    """Tests for diagnose, dependencies and plan."""

    def test_diagnose_writes_report_and_graph(self, dt, tmp_path, capsys):
        assert dt("diagnose") == 0
        reports = tmp_path / "reports"
        assert len(list(reports.glob("diagnostic-*.json"))) == 1
        assert (reports / "dependency-graph.dot").exists()
        assert "Overall Progress: 0%" in capsys.readouterr().out

    def test_diagnose_without_graph(self, dt, tmp_path):
        assert dt("diagnose", "--no-graph") == 0
        assert not (tmp_path / "reports" / "dependency-graph.dot").exists()

    def test_dependencies(self, dt, capsys):
        assert dt("dependencies") == 0
        out = capsys.readouterr().out
        assert "[BingoBlitz] - Not Started (0%)" in out
        assert "Dependency Graph:" in out
        assert "⏳ Appwrite (0%)" in out

    def test_plan(self, dt, capsys):
        assert dt("plan") == 0
        out = capsys.readouterr().out
        assert "=== CRITICAL PATH ===" in out
        assert "Appwrite (Not Started, 0%) ->" in out
        assert "2. Focus on these components next:" in out
        assert "- Appwrite (Not Started, 0%) [CRITICAL]" in out


class TestMilestone:
    """Tests for dt milestone."""

    def test_list_defaults(self, dt, capsys):
        assert dt("milestone") == 0
        assert "[Appwrite Migration] - Not Started (0%)" in capsys.readouterr().out

    def test_create_update_complete(self, dt, tmp_path, capsys):
        assert dt("milestone", "create", "Beta", "--components", "BingoCore,Appwrite", "--target", "2030-06-30") == 0
        assert dt("milestone", "update", "Beta", "--remove", "Appwrite", "--note", "trimmed") == 0
        assert dt("milestone", "complete", "Beta") == 1
        assert dt("milestone", "complete", "Beta", answer="--yes") == 0

        data = json.loads((tmp_path / "reports" / "milestones.json").read_text())
        assert data["Beta"]["components"] == ["BingoCore"]
        assert data["Beta"]["targetDate"] == "2030-06-30T00:00:00.000Z"
        assert data["Beta"]["status"] == "Completed"

    def test_rejected_update_changes_nothing(self, dt, tmp_path, capsys):
        dt("milestone", "create", "Beta", "--components", "BingoFlash")
        capsys.readouterr()

        assert dt("milestone", "update", "Beta", "--target", "2030-01-01", "--remove", "BingoCore", answer="--yes") == 1
        assert "ERROR: Member 'BingoCore' not found" in capsys.readouterr().out

        data = json.loads((tmp_path / "reports" / "milestones.json").read_text())
        assert data["Beta"].get("targetDate") is None
        assert data["Beta"]["components"] == ["BingoFlash"]

        dt("history", "Beta", "--no-color")
        out = capsys.readouterr().out
        assert "Milestone created" in out
        assert "target date" not in out

    def test_complete_below_100_warns(self, dt, capsys):
        dt("milestone", "create", "Beta", "--components", "BingoFlash")
        assert dt("milestone", "complete", "Beta", answer="--yes") == 0
        assert "Warning: Milestone is only 0% complete." in capsys.readouterr().out

    def test_duplicate_create(self, dt, capsys):
        assert dt("milestone", "create", "Backend API") == 1
        assert "already exists" in capsys.readouterr().out

    def test_update_invalid_date(self, dt):
        assert dt("milestone", "update", "Backend API", "--target", "soon") == 1


class TestHistory:
    """Tests for dt history."""

    def test_shows_newest_first(self, dt, capsys):
        dt("log", "Appwrite", "--note", "first")
        dt("log", "BingoCore", "--note", "second")
        capsys.readouterr()

        assert dt("history", "--no-color") == 0
        lines = capsys.readouterr().out.splitlines()
        assert "[BingoCore] Note added - second" in lines[0]
        assert "[Appwrite] Note added - first" in lines[1]

    def test_filter_by_component(self, dt, capsys):
        dt("log", "Appwrite", "--note", "first")
        dt("log", "BingoCore", "--note", "second")
        capsys.readouterr()

        dt("history", "Appwrite", "--no-color")
        out = capsys.readouterr().out
        assert "first" in out
        assert "second" not in out

    def test_invalid_since(self, dt):
        assert dt("history", "--since", "yesterday") == 2


class TestSync:
    """Tests for dt sync."""

    def test_records_estimate(self, dt, tmp_path, capsys):
        estimate = ProgressEstimate(total_files=4, implemented_files=3, percentage=75)
        with patch("devtracker.commands.sync.estimate_progress", return_value=estimate) as mock_estimate:
            assert dt("sync", "BingoCore", "--repo", str(tmp_path)) == 0
        mock_estimate.assert_called_once_with(tmp_path)
        assert load_components(tmp_path)["BingoCore"]["completionPercentage"] == 75
        assert "Updated BingoCore progress to 75%" in capsys.readouterr().out

    def test_dry_run(self, dt, tmp_path):
        estimate = ProgressEstimate(total_files=4, implemented_files=3, percentage=75)
        with patch("devtracker.commands.sync.estimate_progress", return_value=estimate):
            assert dt("sync", "BingoCore", "--dry-run") == 0
        assert load_components(tmp_path)["BingoCore"]["completionPercentage"] == 0
