"""
State file operations for component and milestone records.

Both documents are JSON objects keyed by name. They are validated on read
and before every write, and written in full after each mutation.
"""

import json
import logging
from pathlib import Path

from devtracker.lib.config import TrackerConfig
from devtracker.lib.timestamps import now_iso
from devtracker.lib.validate import validate_before_write, validate_file
from devtracker.tracker.models import Component, Milestone

logger = logging.getLogger(__name__)


class StateStore:
    """Loads and persists the component and milestone documents."""

    def __init__(self, config: TrackerConfig):
        self.config = config

    @property
    def components_file(self) -> Path:
        return self.config.components_file

    @property
    def milestones_file(self) -> Path:
        return self.config.milestones_file

    def load_components(self) -> dict[str, Component]:
        """Load component records, seeding defaults on first use.

        Configured components missing from the document are added with
        default values; the document is rewritten only when that happens.
        """
        path = self.components_file
        if path.exists():
            data = validate_file(path, "components")
            components = {name: Component.from_dict(record) for name, record in data.items()}
        else:
            logger.info(f"[STORE] Initialising component state at {path}")
            components = {}

        timestamp = now_iso()
        seeded = False
        for name in self.config.components:
            if name not in components:
                components[name] = Component.create(name, timestamp)
                seeded = True

        for name in components:
            if name not in self.config.components:
                logger.warning(f"[STORE] Component '{name}' is not in the configured component set")

        if seeded:
            self.save_components(components)
        return components

    def save_components(self, components: dict[str, Component]) -> None:
        data = {name: c.to_dict() for name, c in components.items()}
        self._write(self.components_file, data, "components")

    def load_milestones(self) -> dict[str, Milestone]:
        """Load milestone records, creating the configured defaults on first use."""
        path = self.milestones_file
        if path.exists():
            data = validate_file(path, "milestones")
            return {name: Milestone.from_dict(record) for name, record in data.items()}

        logger.info(f"[STORE] Initialising milestone state at {path}")
        timestamp = now_iso()
        milestones = {
            name: Milestone.create(name, members, timestamp=timestamp)
            for name, members in self.config.milestones.items()
        }
        self.save_milestones(milestones)
        return milestones

    def save_milestones(self, milestones: dict[str, Milestone]) -> None:
        data = {name: m.to_dict() for name, m in milestones.items()}
        self._write(self.milestones_file, data, "milestones")

    def _write(self, path: Path, data: dict, schema_name: str) -> None:
        validate_before_write(data, schema_name, path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n")
        logger.debug(f"[STORE] Wrote {len(data)} record(s) to {path}")
