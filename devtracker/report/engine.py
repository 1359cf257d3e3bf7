"""
Diagnostic and plan engine.

Derives summaries, dependency analysis, the critical path and the
recommended work plan from tracker state. Read-only: nothing here mutates a
record or writes an activity entry.

Critical path rule: start from the sink (a component nothing depends on)
with the lowest progress, then repeatedly step to the lowest-progress direct
dependency until a component with no dependencies is reached. Ties go to the
first in declaration order.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from devtracker.lib import constants
from devtracker.lib.activity import ActivityLog
from devtracker.lib.errors import CyclicDependency
from devtracker.lib.timestamps import now_iso
from devtracker.tracker.components import ComponentTracker
from devtracker.tracker.graph import DependencyGraph
from devtracker.tracker.milestones import MilestoneTracker
from devtracker.tracker.models import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class MilestoneFocus:
    """The nearest upcoming milestone and the members still to finish."""
    milestone: Optional[str] = None
    progress: Optional[int] = None
    target_date: Optional[str] = None
    components: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "milestone": self.milestone,
            "progress": self.progress,
            "targetDate": self.target_date,
            "components": self.components,
        }


@dataclass
class Recommendations:
    """Three-part work plan. Parts are empty, never missing."""
    blocked: list[dict] = field(default_factory=list)
    ready: list[dict] = field(default_factory=list)
    milestone_focus: MilestoneFocus = field(default_factory=MilestoneFocus)

    def to_dict(self) -> dict:
        return {
            "resolveBlockers": self.blocked,
            "focusNext": self.ready,
            "upcomingMilestone": self.milestone_focus.to_dict(),
        }


class DiagnosticEngine:
    """Aggregates tracker and graph state into reports."""

    def __init__(
        self,
        components: ComponentTracker,
        milestones: MilestoneTracker,
        graph: DependencyGraph,
        activity: ActivityLog,
        statuses: list[str] | None = None,
    ):
        self.components = components
        self.milestones = milestones
        self.graph = graph
        self.activity = activity
        self.statuses = list(statuses or constants.STATUS_LEVELS)

    def _progress(self, name: str) -> int:
        component = self.components.find(name)
        return component.completion_percentage if component else 0

    def overall_progress(self) -> Optional[int]:
        """Rounded mean progress, or None when there are no components."""
        records = list(self.components.all().values())
        if not records:
            return None
        total = sum(c.completion_percentage for c in records)
        return round_half_up(total / len(records))

    def summary(self) -> dict:
        records = self.components.all()

        status_count = {status: 0 for status in self.statuses}
        for component in records.values():
            status_count[component.status] = status_count.get(component.status, 0) + 1

        overall = self.overall_progress()
        milestones = self.milestones.all()
        completed_milestones = sum(1 for m in milestones.values() if m.status == constants.COMPLETED)

        return {
            "componentCount": len(records),
            "statusBreakdown": status_count,
            "overallProgress": overall,
            "completedMilestones": completed_milestones,
            "totalMilestones": len(milestones),
            "blockers": self.find_blockers(),
            "readyForProduction": overall == 100,
        }

    def find_blockers(self) -> list[dict]:
        """Blocked components with the content of their open issues."""
        blockers = []
        for name, component in self.components.all().items():
            if component.status == constants.BLOCKED:
                blockers.append({
                    "component": name,
                    "issues": [i.content for i in component.open_issues],
                })
        return blockers

    def dependency_analysis(self) -> dict[str, dict]:
        """Per-component status, progress, edges and readiness."""
        results = {}
        records = self.components.all()
        for name, component in records.items():
            readiness = self.graph.readiness(name, records)
            results[name] = {
                "status": component.status,
                "progress": component.completion_percentage,
                "dependencies": list(self.graph.dependencies_of(name)),
                "dependents": list(self.graph.dependents_of(name)),
                "readyToProceed": readiness.ready,
                "blockers": [b.to_dict() for b in readiness.blockers],
            }
        return results

    def aggregate_issues(self) -> dict[str, list[dict]]:
        """All issues split into open and resolved, tagged with their component."""
        issues = {"open": [], "resolved": []}
        for name, component in self.components.all().items():
            for issue in component.issues:
                formatted = {
                    "component": name,
                    "timestamp": issue.timestamp,
                    "content": issue.content,
                }
                if issue.resolved:
                    formatted["resolvedAt"] = issue.resolved_at
                    issues["resolved"].append(formatted)
                else:
                    issues["open"].append(formatted)
        return issues

    def critical_path(self) -> list[str]:
        """Components on the critical path, root dependency first.

        Returns [] when the graph has no edges or no sinks.

        Raises:
            CyclicDependency: the backward walk revisits a component
        """
        if not self.graph.has_edges:
            return []

        sinks = self.graph.sinks()
        if not sinks:
            logger.warning("[PLAN] No sink components, critical path is empty")
            return []

        current = min(sinks, key=self._progress)
        path = [current]
        visited = {current}

        while True:
            dependencies = self.graph.dependencies_of(current)
            if not dependencies:
                break
            current = min(dependencies, key=self._progress)
            if current in visited:
                cycle = [current] + path[:path.index(current) + 1]
                raise CyclicDependency(cycle)
            visited.add(current)
            path.insert(0, current)

        return path

    def status_groups(self) -> dict[str, list[str]]:
        """Component names grouped by status, in configured status order."""
        groups = {status: [] for status in self.statuses}
        for name, component in self.components.all().items():
            groups.setdefault(component.status, []).append(name)
        return groups

    def upcoming_milestones(self, now: datetime | None = None) -> list[dict]:
        """Dated, non-completed milestones with their derived progress."""
        return [
            {
                "milestone": m.name,
                "status": m.status,
                "targetDate": m.target_date,
                "progress": self.milestones.calculate_progress(m.name),
            }
            for m in self.milestones.upcoming(now)
        ]

    def recommendations(self, now: datetime | None = None) -> Recommendations:
        """Prioritised plan: unblock, then ready work, then next milestone."""
        now = now or datetime.now(timezone.utc)
        critical = self.critical_path()
        analysis = self.dependency_analysis()
        records = self.components.all()

        ready_names = [
            name for name, component in records.items()
            if component.status not in (constants.COMPLETED, constants.BLOCKED)
            and analysis[name]["readyToProceed"]
        ]
        # Stable sort keeps declaration order among equals
        ready_names.sort(key=lambda n: (n not in critical, -records[n].completion_percentage))
        ready = [
            {
                "component": name,
                "status": records[name].status,
                "progress": records[name].completion_percentage,
                "critical": name in critical,
            }
            for name in ready_names
        ]

        focus = MilestoneFocus()
        upcoming = self.milestones.upcoming(now)
        if upcoming:
            nearest = upcoming[0]
            members = [
                records[m] for m in nearest.components
                if m in records and records[m].status != constants.COMPLETED
            ]
            members.sort(key=lambda c: -c.completion_percentage)
            focus = MilestoneFocus(
                milestone=nearest.name,
                progress=self.milestones.calculate_progress(nearest.name),
                target_date=nearest.target_date,
                components=[
                    {"component": c.name, "status": c.status, "progress": c.completion_percentage}
                    for c in members
                ],
            )

        return Recommendations(blocked=self.find_blockers(), ready=ready, milestone_focus=focus)

    def diagnostic_report(self, recent: int = constants.DEFAULT_RECENT_ACTIVITY) -> dict:
        """Timestamped bundle written out for external consumption."""
        return {
            "timestamp": now_iso(),
            "summary": self.summary(),
            "componentStatus": {n: c.to_dict() for n, c in self.components.all().items()},
            "dependencies": self.dependency_analysis(),
            "issues": self.aggregate_issues(),
            "milestones": {n: m.to_dict() for n, m in self.milestones.all().items()},
            "recentActivity": [e.to_dict() for e in self.activity.recent(limit=recent)],
        }
