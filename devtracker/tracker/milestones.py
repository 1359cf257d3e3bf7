"""
Milestone tracker.

Milestones group components into delivery goals. Progress is derived from
member components and never stored.
"""

import copy
import logging
from datetime import datetime, timezone

from devtracker.lib import constants
from devtracker.lib.activity import ActivityLog
from devtracker.lib.errors import AlreadyExists, InvalidInput, NotFound
from devtracker.lib.timestamps import now_iso, parse_timestamp
from devtracker.tracker.components import ComponentTracker
from devtracker.tracker.models import (
    AddMember,
    AddMilestoneNote,
    Milestone,
    MilestoneUpdate,
    RemoveMember,
    ReplaceMembers,
    SetMilestoneStatus,
    SetTargetDate,
    apply_milestone_update,
    check_milestone_update,
    round_half_up,
)
from devtracker.tracker.store import StateStore

logger = logging.getLogger(__name__)


def describe_update(update: MilestoneUpdate) -> tuple[str, str]:
    """Activity (action, details) for a milestone update."""
    if isinstance(update, SetMilestoneStatus):
        return f"Milestone status updated to {update.status}", ""
    if isinstance(update, SetTargetDate):
        return "Milestone target date updated", update.target_date or "none"
    if isinstance(update, AddMember):
        return "Milestone component added", update.component
    if isinstance(update, RemoveMember):
        return "Milestone component removed", update.component
    if isinstance(update, ReplaceMembers):
        return "Milestone components replaced", ", ".join(update.components)
    if isinstance(update, AddMilestoneNote):
        return "Milestone note added", update.content
    raise TypeError(f"Unsupported milestone update: {update!r}")


class MilestoneTracker:
    """CRUD-style mutation of Milestone records."""

    def __init__(self, store: StateStore, components: ComponentTracker, activity: ActivityLog):
        self.store = store
        self.component_tracker = components
        self.activity = activity
        self.milestones: dict[str, Milestone] = store.load_milestones()

    def get(self, name: str) -> Milestone:
        milestone = self.milestones.get(name)
        if milestone is None:
            raise NotFound("milestone", name)
        return milestone

    def all(self) -> dict[str, Milestone]:
        return self.milestones

    def active(self) -> list[Milestone]:
        """Milestones that are not Completed."""
        return [m for m in self.milestones.values() if m.status != constants.COMPLETED]

    def create(self, name: str, components=(), target_date: str | None = None) -> Milestone:
        """Create a milestone.

        Unknown component names are dropped with a warning; duplicates
        collapse. target_date must already be normalised (see
        models.parse_target_date).

        Raises:
            InvalidInput: empty name
            AlreadyExists: name taken
        """
        name = (name or "").strip()
        if not name:
            raise InvalidInput("milestone name", name)
        if name in self.milestones:
            raise AlreadyExists("milestone", name)

        members = self._known_members(components)
        milestone = Milestone.create(name, members, target_date=target_date, timestamp=now_iso())

        staged = dict(self.milestones)
        staged[name] = milestone
        self.store.save_milestones(staged)
        self.milestones[name] = milestone

        details = ", ".join(members) if members else "no components"
        self.activity.log(name, "Milestone created", details)
        return milestone

    def update(self, name: str, *updates: MilestoneUpdate) -> Milestone:
        """Apply one or more update commands as a single change.

        Updates apply in order to one copy of the milestone. If any of them
        is rejected nothing is persisted or logged.

        Raises:
            NotFound: unknown milestone, or removing a non-member
            AlreadyExists: adding an existing member
            InvalidInput: unknown status or component
        """
        candidate = copy.deepcopy(self.get(name))
        timestamp = now_iso()
        applied = []
        for update in updates:
            if isinstance(update, SetMilestoneStatus) and update.status not in constants.MILESTONE_STATUSES:
                raise InvalidInput("milestone status", update.status, constants.MILESTONE_STATUSES)
            if isinstance(update, AddMember) and self.component_tracker.find(update.component) is None:
                raise NotFound("component", update.component)
            if isinstance(update, ReplaceMembers):
                update = ReplaceMembers(tuple(self._known_members(update.components)))
            check_milestone_update(candidate, update)
            apply_milestone_update(candidate, update, timestamp)
            applied.append(update)

        if not applied:
            return candidate

        self._persist(name, candidate)
        for update in applied:
            action, details = describe_update(update)
            self.activity.log(name, action, details)
        return candidate

    def add_note(self, name: str, text: str) -> Milestone:
        return self.update(name, AddMilestoneNote(text))

    def complete(self, name: str) -> Milestone:
        """Mark completed regardless of progress. Warning on <100% is the caller's call."""
        self.get(name)
        return self._commit(name, SetMilestoneStatus(constants.COMPLETED), "Milestone completed", "")

    def calculate_progress(self, name: str) -> int:
        """Rounded mean of member progress. Missing members count as 0."""
        milestone = self.get(name)
        if not milestone.components:
            return 0
        total = 0
        for member in milestone.components:
            component = self.component_tracker.find(member)
            total += component.completion_percentage if component else 0
        return round_half_up(total / len(milestone.components))

    def upcoming(self, now: datetime | None = None) -> list[Milestone]:
        """Non-completed milestones with a future target date, soonest first."""
        now = now or datetime.now(timezone.utc)
        dated = []
        for milestone in self.active():
            target = parse_timestamp(milestone.target_date)
            if target is not None and target > now:
                dated.append((target, milestone))
        dated.sort(key=lambda pair: pair[0])
        return [m for _, m in dated]

    def _known_members(self, components) -> list[str]:
        members = []
        for c in components:
            if self.component_tracker.find(c) is None:
                logger.warning(f"[MILESTONE] Ignoring unknown component '{c}'")
                continue
            if c not in members:
                members.append(c)
        return members

    def _commit(self, name: str, update: MilestoneUpdate, action: str, details: str) -> Milestone:
        candidate = copy.deepcopy(self.milestones[name])
        apply_milestone_update(candidate, update, now_iso())
        self._persist(name, candidate)
        self.activity.log(name, action, details)
        return candidate

    def _persist(self, name: str, candidate: Milestone) -> None:
        """Write the document with candidate swapped in, then adopt it."""
        staged = dict(self.milestones)
        staged[name] = candidate
        self.store.save_milestones(staged)
        self.milestones[name] = candidate
