"""Tests for tracker.yaml loading."""

from pathlib import Path

import pytest

from devtracker.lib import constants
from devtracker.lib.config import (
    DEFAULT_COMPONENTS,
    DEFAULT_DEPENDENCIES,
    ROOT_ENV_VAR,
    load_tracker_config,
    resolve_root,
)
from devtracker.lib.errors import ConfigError


def write_config(root: Path, text: str) -> None:
    (root / "tracker.yaml").write_text(text)


class TestLoadTrackerConfig:
    """Tests for load_tracker_config."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_tracker_config(tmp_path)
        assert config.components == DEFAULT_COMPONENTS
        assert config.dependencies == DEFAULT_DEPENDENCIES
        assert config.statuses == constants.STATUS_LEVELS
        assert config.components_file == tmp_path / "components" / "status.json"
        assert config.milestones_file == tmp_path / "reports" / "milestones.json"
        assert config.log_dir == tmp_path / "logs"

    def test_custom_project(self, tmp_path):
        write_config(tmp_path, """
project: Shop
components: [Web, Api, Db]
dependencies:
  Web: [Api]
  Api: [Db]
milestones:
  Launch: [Web, Api]
recent_activity_limit: 25
""")
        config = load_tracker_config(tmp_path)
        assert config.project == "Shop"
        assert config.components == ["Web", "Api", "Db"]
        assert config.dependencies == {"Web": ["Api"], "Api": ["Db"]}
        assert config.milestones == {"Launch": ["Web", "Api"]}
        assert config.recent_activity_limit == 25
        assert config.phases == constants.PHASES

    def test_empty_file_uses_defaults(self, tmp_path):
        write_config(tmp_path, "")
        assert load_tracker_config(tmp_path).components == DEFAULT_COMPONENTS

    def test_malformed_yaml(self, tmp_path):
        write_config(tmp_path, "components: [Web, Api\n")
        with pytest.raises(ConfigError) as exc_info:
            load_tracker_config(tmp_path)
        assert "Failed to parse" in str(exc_info.value)

    def test_unknown_key_rejected(self, tmp_path):
        write_config(tmp_path, "colour: blue\n")
        with pytest.raises(ConfigError):
            load_tracker_config(tmp_path)

    def test_dependency_on_unknown_component(self, tmp_path):
        write_config(tmp_path, "components: [Web]\ndependencies:\n  Web: [Api]\n")
        with pytest.raises(ConfigError) as exc_info:
            load_tracker_config(tmp_path)
        assert "unknown component 'Api'" in str(exc_info.value)

    def test_self_dependency(self, tmp_path):
        write_config(tmp_path, "components: [Web]\ndependencies:\n  Web: [Web]\nmilestones: {}\n")
        with pytest.raises(ConfigError) as exc_info:
            load_tracker_config(tmp_path)
        assert "depends on itself" in str(exc_info.value)

    def test_milestone_with_unknown_member(self, tmp_path):
        write_config(tmp_path, "components: [Web]\ndependencies: {}\nmilestones:\n  Launch: [Api]\n")
        with pytest.raises(ConfigError):
            load_tracker_config(tmp_path)

    def test_core_statuses_required(self, tmp_path):
        write_config(tmp_path, "statuses: [Not Started, Completed]\n")
        with pytest.raises(ConfigError) as exc_info:
            load_tracker_config(tmp_path)
        assert "In Progress" in str(exc_info.value)

    def test_extra_statuses_allowed(self, tmp_path):
        statuses = constants.STATUS_LEVELS + ["On Hold"]
        write_config(tmp_path, "statuses: [" + ", ".join(statuses) + "]\n")
        assert load_tracker_config(tmp_path).statuses == statuses


class TestResolveRoot:
    """Tests for resolve_root."""

    def test_explicit_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ROOT_ENV_VAR, "/elsewhere")
        assert resolve_root(str(tmp_path)) == tmp_path

    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path))
        assert resolve_root() == tmp_path

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.delenv(ROOT_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        assert resolve_root() == Path.cwd()
