"""
Configuration loader for the tracker.

Reads tracker.yaml from the tracker root. When no file exists the built-in
project definition below is used, so a fresh checkout works out of the box.
Configuration is fixed for the lifetime of a process and never mutated.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from devtracker.lib import constants
from devtracker.lib.errors import ConfigError
from devtracker.lib.validate import ValidationError, validate

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tracker.yaml"
ROOT_ENV_VAR = "DEVTRACKER_ROOT"

DEFAULT_PROJECT = "BingoBetFun"

DEFAULT_COMPONENTS = [
    "BingoFlash",    # Overlay
    "BingoBackend",  # Backend
    "BingoCore",     # Admin
    "BingoBlitz",    # Mobile App
    "Appwrite",      # Appwrite Integration
    "SUPERLogs",     # Logging System
]

DEFAULT_DEPENDENCIES = {
    "BingoFlash": ["BingoBackend"],
    "BingoBackend": ["Appwrite"],
    "BingoCore": ["Appwrite"],
    "BingoBlitz": ["BingoFlash", "BingoBackend"],
    "Appwrite": [],
    "SUPERLogs": ["Appwrite"],
}

# Milestone name -> member components, in creation order
DEFAULT_MILESTONES = {
    "Overlay Integration": ["BingoFlash"],
    "Backend API": ["BingoBackend"],
    "Admin Dashboard": ["BingoCore"],
    "Appwrite Migration": ["Appwrite", "BingoBackend", "BingoCore"],
    "Mobile WebView": ["BingoBlitz"],
    "Smart TV Support": ["BingoFlash"],
    "ML Integration": ["BingoCore", "BingoFlash", "BingoBackend"],
}


@dataclass
class TrackerConfig:
    """Tracker configuration from tracker.yaml (or built-in defaults)."""
    root: Path
    project: str = DEFAULT_PROJECT
    components: list[str] = field(default_factory=lambda: list(DEFAULT_COMPONENTS))
    phases: list[str] = field(default_factory=lambda: list(constants.PHASES))
    statuses: list[str] = field(default_factory=lambda: list(constants.STATUS_LEVELS))
    dependencies: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_DEPENDENCIES.items()}
    )
    milestones: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_MILESTONES.items()}
    )
    recent_activity_limit: int = constants.DEFAULT_RECENT_ACTIVITY

    @property
    def components_file(self) -> Path:
        return self.root / "components" / "status.json"

    @property
    def milestones_file(self) -> Path:
        return self.root / "reports" / "milestones.json"

    @property
    def log_dir(self) -> Path:
        return self.root / "logs"

    @property
    def reports_dir(self) -> Path:
        return self.root / "reports"


def resolve_root(explicit: str | None = None) -> Path:
    """Pick the tracker root: --root, then $DEVTRACKER_ROOT, then cwd."""
    if explicit:
        return Path(explicit).expanduser()
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


def load_tracker_config(root: Path) -> TrackerConfig:
    """Load tracker.yaml from root and return TrackerConfig.

    Missing file yields the built-in project. Malformed YAML, schema
    violations and dangling component references raise ConfigError.
    """
    config_path = root / CONFIG_FILENAME
    if not config_path.exists():
        logger.debug(f"[CONFIG] No {CONFIG_FILENAME} in {root}, using defaults")
        return TrackerConfig(root=root)

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {CONFIG_FILENAME}: {e}", config_path) from None

    try:
        validate(data, "tracker_config")
    except ValidationError as e:
        raise ConfigError(str(e), config_path) from None

    config = TrackerConfig(root=root)
    if "project" in data:
        config.project = data["project"]
    if "components" in data:
        config.components = list(data["components"])
    if "phases" in data:
        config.phases = list(data["phases"])
    if "statuses" in data:
        config.statuses = list(data["statuses"])
    if "dependencies" in data:
        config.dependencies = {k: list(v) for k, v in data["dependencies"].items()}
    if "milestones" in data:
        config.milestones = {k: list(v or []) for k, v in data["milestones"].items()}
    if "recent_activity_limit" in data:
        config.recent_activity_limit = data["recent_activity_limit"]

    _check_consistency(config, config_path)
    return config


def _check_consistency(config: TrackerConfig, config_path: Path) -> None:
    """Reject configs whose references point outside the component set."""
    missing_statuses = [s for s in constants.STATUS_LEVELS if s not in config.statuses]
    if missing_statuses:
        raise ConfigError(
            f"statuses must include the core levels, missing: {', '.join(missing_statuses)}",
            config_path,
        )

    known = set(config.components)
    for name, deps in config.dependencies.items():
        if name not in known:
            raise ConfigError(f"dependencies: unknown component '{name}'", config_path)
        for dep in deps:
            if dep not in known:
                raise ConfigError(f"dependencies.{name}: unknown component '{dep}'", config_path)
            if dep == name:
                raise ConfigError(f"dependencies.{name}: component depends on itself", config_path)

    for milestone, members in config.milestones.items():
        for member in members:
            if member not in known:
                raise ConfigError(f"milestones.{milestone}: unknown component '{member}'", config_path)
