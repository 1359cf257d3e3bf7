"""Shared fixtures for tracker tests."""

import pytest

from devtracker.context import TrackerContext
from devtracker.lib.config import TrackerConfig
from devtracker.lib.prompts import ScriptedPrompter


def make_config(root, components, dependencies=None, milestones=None) -> TrackerConfig:
    """TrackerConfig for a small custom project rooted at root."""
    return TrackerConfig(
        root=root,
        project="Test",
        components=list(components),
        dependencies={k: list(v) for k, v in (dependencies or {}).items()},
        milestones={k: list(v) for k, v in (milestones or {}).items()},
    )


def make_context(root, components, dependencies=None, milestones=None, answers=()) -> TrackerContext:
    config = make_config(root, components, dependencies, milestones)
    return TrackerContext.from_config(config, prompter=ScriptedPrompter(answers))


@pytest.fixture
def xy_ctx(tmp_path):
    """Two components where X depends on Y."""
    return make_context(tmp_path, ["X", "Y"], {"X": ["Y"]})
