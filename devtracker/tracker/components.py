"""
Component tracker.

Holds the authoritative in-memory copy of every Component record for the
session. Each operation validates first, applies one update command to a
copy, persists the full document, swaps the copy in and appends an activity
entry. A failed operation leaves memory, disk and the log untouched.

Decisions that belong to the operator (proceed despite blockers, mark
Completed at 100%, mark Blocked after an issue, unblock after the last issue)
are delegated to the injected Prompter.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional

from devtracker.lib import constants
from devtracker.lib.activity import ActivityLog
from devtracker.lib.config import TrackerConfig
from devtracker.lib.errors import InvalidInput, NotFound
from devtracker.lib.prompts import Prompter
from devtracker.lib.timestamps import now_iso
from devtracker.tracker.graph import Blocker, DependencyGraph, Readiness
from devtracker.tracker.lifecycle import StatusLifecycle
from devtracker.tracker.models import (
    AddIssue,
    AddNote,
    Component,
    ComponentUpdate,
    Issue,
    ResolveIssue,
    SetPhase,
    SetProgress,
    SetStatus,
    apply_component_update,
    check_component_update,
    parse_percentage,
)
from devtracker.tracker.store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class ChangeResult:
    """Outcome of a tracker operation."""
    component: Component
    applied: bool = True
    blockers: list[Blocker] = field(default_factory=list)
    off_path: bool = False  # Status move outside the designated lifecycle
    follow_up: Optional[str] = None  # Status set by a confirmed follow-up
    issue: Optional[Issue] = None


class ComponentTracker:
    """CRUD-style mutation of Component records."""

    def __init__(
        self,
        store: StateStore,
        graph: DependencyGraph,
        activity: ActivityLog,
        config: TrackerConfig,
        prompter: Prompter | None = None,
    ):
        self.store = store
        self.graph = graph
        self.activity = activity
        self.config = config
        self.prompter = prompter or Prompter()
        self.components: dict[str, Component] = store.load_components()

    def get(self, name: str) -> Component:
        """Return the component record or raise NotFound."""
        component = self.components.get(name)
        if component is None:
            raise NotFound("component", name)
        return component

    def find(self, name: str) -> Component | None:
        return self.components.get(name)

    def all(self) -> dict[str, Component]:
        return self.components

    def names(self) -> list[str]:
        return list(self.components)

    def readiness(self, name: str) -> Readiness:
        self.get(name)
        return self.graph.readiness(name, self.components)

    def next_statuses(self, name: str) -> list[str]:
        """Statuses one designated step away from the component's current one."""
        component = self.get(name)
        return StatusLifecycle(name, component.status, self.config.statuses).available_moves()

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def update_status(self, name: str, status: str, details: str = "") -> ChangeResult:
        """Set a component's status.

        Moving to In Progress checks readiness first; with unfinished
        dependencies the prompter decides whether to proceed. Declining
        returns applied=False and changes nothing.
        """
        component = self.get(name)
        self._check_status(status)

        blockers: list[Blocker] = []
        if status == constants.IN_PROGRESS:
            readiness = self.graph.readiness(name, self.components)
            blockers = readiness.blockers
            if not readiness.ready:
                lines = ["Warning: This component has unfinished dependencies:"]
                lines.extend(f"- {b.name}: {b.status}" for b in blockers)
                self.prompter.notify("\n".join(lines))
                if not self.prompter.confirm("Proceed anyway?"):
                    logger.info(f"[STATUS] {name}: move to {status} declined, blocked by {len(blockers)} dependency(s)")
                    return ChangeResult(component=component, applied=False, blockers=blockers)

        lifecycle = StatusLifecycle(name, component.status, self.config.statuses)
        designated = lifecycle.move_to(status)

        updated = self._commit(name, SetStatus(status), f"Status updated to {status}", details)
        return ChangeResult(component=updated, blockers=blockers, off_path=not designated)

    def update_phase(self, name: str, phase: str, details: str = "") -> ChangeResult:
        self.get(name)
        if phase not in self.config.phases:
            raise InvalidInput("phase", phase, self.config.phases)
        updated = self._commit(name, SetPhase(phase), f"Phase updated to {phase}", details)
        return ChangeResult(component=updated)

    def update_progress(self, name: str, value, details: str = "") -> ChangeResult:
        """Set completion percentage.

        value is parsed leniently and clamped to [0, 100]. Reaching exactly
        100 on a component that is not Completed asks the prompter whether
        to mark it Completed.
        """
        component = self.get(name)
        percentage = parse_percentage(value)

        updated = self._commit(name, SetProgress(percentage), f"Progress updated to {percentage}%", details)
        result = ChangeResult(component=updated)

        if percentage == 100 and component.status != constants.COMPLETED:
            if self.prompter.confirm("Mark component as Completed?"):
                result.follow_up = constants.COMPLETED
                result.component = self._follow_up(
                    name, constants.COMPLETED, "Automatically set based on 100% progress"
                )
        return result

    def add_note(self, name: str, text: str) -> ChangeResult:
        self.get(name)
        updated = self._commit(name, AddNote(text), "Note added", text)
        return ChangeResult(component=updated)

    def add_issue(self, name: str, text: str) -> ChangeResult:
        """Report an issue. The prompter may then mark the component Blocked."""
        component = self.get(name)
        updated = self._commit(name, AddIssue(text), "Issue reported", text)
        result = ChangeResult(component=updated, issue=updated.issues[-1])

        if component.status != constants.BLOCKED and self.prompter.confirm("Mark component as Blocked?"):
            result.follow_up = constants.BLOCKED
            result.component = self._follow_up(name, constants.BLOCKED, f"Due to issue: {text}")
        return result

    def resolve_issue(self, name: str, index: int, resolution: str = "") -> ChangeResult:
        """Resolve the issue at index (position in the full issue list).

        When no unresolved issue remains on a Blocked component, the
        prompter is offered a transition back to In Progress.

        Raises:
            NotFound: unknown component
            IndexOutOfRange: no open issue at index
        """
        component = self.get(name)
        check_component_update(component, ResolveIssue(index))
        content = component.issues[index].content

        details = f"Issue: {content}. Resolution: {resolution}" if resolution else f"Issue: {content}"
        updated = self._commit(name, ResolveIssue(index), "Issue resolved", details)
        result = ChangeResult(component=updated, issue=updated.issues[index])

        if updated.status == constants.BLOCKED and not updated.open_issues:
            if self.prompter.confirm("Component is blocked. Set status to In Progress?"):
                result.follow_up = constants.IN_PROGRESS
                result.component = self._follow_up(
                    name, constants.IN_PROGRESS, "All blocking issues resolved"
                )
        return result

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _check_status(self, status: str) -> None:
        if status not in self.config.statuses:
            raise InvalidInput("status", status, self.config.statuses)

    def _follow_up(self, name: str, status: str, details: str) -> Component:
        """Apply a prompter-confirmed status change."""
        lifecycle = StatusLifecycle(name, self.components[name].status, self.config.statuses)
        lifecycle.move_to(status)
        return self._commit(name, SetStatus(status), f"Status updated to {status}", details)

    def _commit(self, name: str, update: ComponentUpdate, action: str, details: str) -> Component:
        """Apply update to a copy, persist, swap in, then log."""
        candidate = copy.deepcopy(self.components[name])
        apply_component_update(candidate, update, now_iso())

        staged = dict(self.components)
        staged[name] = candidate
        self.store.save_components(staged)

        self.components[name] = candidate
        self.activity.log(name, action, details or "")
        return candidate
