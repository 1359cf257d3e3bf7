"""
Per-invocation tracker context.

Every command loads configuration, state and the dependency graph once,
works against the in-memory trackers, and exits. TrackerContext wires those
pieces together so commands do not repeat the bootstrap.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from devtracker.lib.activity import ActivityLog
from devtracker.lib.config import TrackerConfig, load_tracker_config
from devtracker.lib.prompts import Prompter
from devtracker.report.engine import DiagnosticEngine
from devtracker.tracker.components import ComponentTracker
from devtracker.tracker.graph import DependencyGraph
from devtracker.tracker.milestones import MilestoneTracker
from devtracker.tracker.store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class TrackerContext:
    """Everything a command needs, built from one tracker root."""
    config: TrackerConfig
    store: StateStore
    graph: DependencyGraph
    activity: ActivityLog
    components: ComponentTracker
    milestones: MilestoneTracker
    engine: DiagnosticEngine

    @classmethod
    def load(cls, root: Path, prompter: Prompter | None = None) -> "TrackerContext":
        """Load config and state from root.

        Seeds missing component records and default milestones on first use.
        """
        config = load_tracker_config(root)
        return cls.from_config(config, prompter)

    @classmethod
    def from_config(cls, config: TrackerConfig, prompter: Prompter | None = None) -> "TrackerContext":
        store = StateStore(config)
        graph = DependencyGraph.from_config(config)
        activity = ActivityLog(config.log_dir)
        components = ComponentTracker(store, graph, activity, config, prompter=prompter)
        milestones = MilestoneTracker(store, components, activity)
        engine = DiagnosticEngine(components, milestones, graph, activity, statuses=config.statuses)
        logger.debug(
            f"[CONTEXT] Loaded {len(components.all())} component(s), "
            f"{len(milestones.all())} milestone(s) from {config.root}"
        )
        return cls(
            config=config,
            store=store,
            graph=graph,
            activity=activity,
            components=components,
            milestones=milestones,
            engine=engine,
        )
