"""
Data models for tracked components and milestones.

Records serialise to the camelCase documents stored on disk. All field
changes go through the update commands at the bottom of this module so that
clamping and timestamp refresh live in exactly one place.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from devtracker.lib import constants
from devtracker.lib.errors import AlreadyExists, IndexOutOfRange, NotFound
from devtracker.lib.timestamps import now_iso, parse_timestamp, to_iso

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_target_date(value: str | None) -> tuple[str | None, bool]:
    """Normalise a user supplied target date.

    Returns (iso_value, ok). Empty input and "none" clear the date and are ok;
    anything unparseable yields (None, False) so the caller can report it.
    """
    if value is None:
        return None, True
    text = value.strip()
    if not text or text.lower() == "none":
        return None, True
    parsed = parse_timestamp(text)
    if parsed is None:
        return None, False
    return to_iso(parsed), True


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def clamp_percentage(value: int) -> int:
    return min(100, max(0, value))


def parse_percentage(value) -> int:
    """Leniently turn user input into a clamped percentage.

    Integers pass through, floats truncate, strings use their leading
    integer ("45%" -> 45). Anything else becomes 0 and is reported.
    """
    if isinstance(value, bool):
        number = int(value)
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else 0
    else:
        match = _LEADING_INT.match(str(value)) if value is not None else None
        if match:
            number = int(match.group(1))
        else:
            logger.warning(f"[PROGRESS] Could not parse {value!r} as a percentage, using 0")
            number = 0

    clamped = clamp_percentage(number)
    if clamped != number:
        logger.info(f"[PROGRESS] Clamped {number} to {clamped}")
    return clamped


@dataclass
class Note:
    """A timestamped free-text note."""
    timestamp: str
    content: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(timestamp=data["timestamp"], content=data["content"])


@dataclass
class Issue:
    """A reported problem. resolved_at is only set once resolved."""
    timestamp: str
    content: str
    resolved: bool = False
    resolved_at: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "timestamp": self.timestamp,
            "content": self.content,
            "resolved": self.resolved,
        }
        if self.resolved_at is not None:
            data["resolvedAt"] = self.resolved_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Issue":
        return cls(
            timestamp=data["timestamp"],
            content=data["content"],
            resolved=data.get("resolved", False),
            resolved_at=data.get("resolvedAt"),
        )


@dataclass
class Component:
    """A trackable unit of the project."""
    name: str
    status: str = constants.NOT_STARTED
    phase: str = constants.DEFAULT_PHASE
    last_updated: str = ""
    completion_percentage: int = 0
    issues: list[Issue] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, timestamp: str | None = None) -> "Component":
        """New component with default status, phase and progress."""
        return cls(name=name, last_updated=timestamp or now_iso())

    @property
    def open_issues(self) -> list[Issue]:
        return [i for i in self.issues if not i.resolved]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "phase": self.phase,
            "lastUpdated": self.last_updated,
            "completionPercentage": self.completion_percentage,
            "issues": [i.to_dict() for i in self.issues],
            "notes": [n.to_dict() for n in self.notes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Component":
        return cls(
            name=data["name"],
            status=data["status"],
            phase=data["phase"],
            last_updated=data["lastUpdated"],
            completion_percentage=data["completionPercentage"],
            issues=[Issue.from_dict(i) for i in data.get("issues", [])],
            notes=[Note.from_dict(n) for n in data.get("notes", [])],
        )


@dataclass
class Milestone:
    """A named grouping of components representing a delivery goal."""
    name: str
    status: str = constants.NOT_STARTED
    created_at: str = ""
    target_date: Optional[str] = None
    completed_at: Optional[str] = None
    components: list[str] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    last_updated: Optional[str] = None

    @classmethod
    def create(
        cls,
        name: str,
        components: list[str] | None = None,
        target_date: str | None = None,
        timestamp: str | None = None,
    ) -> "Milestone":
        members = []
        for c in components or []:
            if c not in members:
                members.append(c)
        return cls(
            name=name,
            created_at=timestamp or now_iso(),
            target_date=target_date,
            components=members,
        )

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "status": self.status,
            "createdAt": self.created_at,
            "targetDate": self.target_date,
            "completedAt": self.completed_at,
            "components": list(self.components),
            "notes": [n.to_dict() for n in self.notes],
        }
        if self.last_updated is not None:
            data["lastUpdated"] = self.last_updated
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Milestone":
        return cls(
            name=data["name"],
            status=data["status"],
            created_at=data["createdAt"],
            target_date=data.get("targetDate"),
            completed_at=data.get("completedAt"),
            components=list(data.get("components", [])),
            notes=[Note.from_dict(n) for n in data.get("notes", [])],
            last_updated=data.get("lastUpdated"),
        )


# ---------------------------------------------------------------------------
# Component update commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetStatus:
    status: str


@dataclass(frozen=True)
class SetPhase:
    phase: str


@dataclass(frozen=True)
class SetProgress:
    percentage: int


@dataclass(frozen=True)
class AddNote:
    content: str


@dataclass(frozen=True)
class AddIssue:
    content: str


@dataclass(frozen=True)
class ResolveIssue:
    index: int


ComponentUpdate = Union[SetStatus, SetPhase, SetProgress, AddNote, AddIssue, ResolveIssue]


def check_component_update(component: Component, update: ComponentUpdate) -> None:
    """Raise if update cannot be applied. Never mutates."""
    if isinstance(update, ResolveIssue):
        index = update.index
        if index < 0 or index >= len(component.issues) or component.issues[index].resolved:
            raise IndexOutOfRange(component.name, index, len(component.issues))


def apply_component_update(component: Component, update: ComponentUpdate, timestamp: str | None = None) -> None:
    """Apply one update command to component and refresh lastUpdated."""
    check_component_update(component, update)
    ts = timestamp or now_iso()

    if isinstance(update, SetStatus):
        component.status = update.status
    elif isinstance(update, SetPhase):
        component.phase = update.phase
    elif isinstance(update, SetProgress):
        component.completion_percentage = clamp_percentage(update.percentage)
    elif isinstance(update, AddNote):
        component.notes.append(Note(timestamp=ts, content=update.content))
    elif isinstance(update, AddIssue):
        component.issues.append(Issue(timestamp=ts, content=update.content))
    elif isinstance(update, ResolveIssue):
        issue = component.issues[update.index]
        issue.resolved = True
        issue.resolved_at = ts
    else:
        raise TypeError(f"Unsupported component update: {update!r}")

    component.last_updated = ts


# ---------------------------------------------------------------------------
# Milestone update commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetMilestoneStatus:
    status: str


@dataclass(frozen=True)
class SetTargetDate:
    target_date: Optional[str]


@dataclass(frozen=True)
class AddMember:
    component: str


@dataclass(frozen=True)
class RemoveMember:
    component: str


@dataclass(frozen=True)
class ReplaceMembers:
    components: tuple[str, ...]


@dataclass(frozen=True)
class AddMilestoneNote:
    content: str


MilestoneUpdate = Union[
    SetMilestoneStatus, SetTargetDate, AddMember, RemoveMember, ReplaceMembers, AddMilestoneNote
]


def check_milestone_update(milestone: Milestone, update: MilestoneUpdate) -> None:
    """Raise if update cannot be applied. Never mutates."""
    if isinstance(update, AddMember) and update.component in milestone.components:
        raise AlreadyExists("member", update.component)
    if isinstance(update, RemoveMember) and update.component not in milestone.components:
        raise NotFound("member", update.component)


def apply_milestone_update(milestone: Milestone, update: MilestoneUpdate, timestamp: str | None = None) -> None:
    """Apply one update command to milestone and refresh lastUpdated."""
    check_milestone_update(milestone, update)
    ts = timestamp or now_iso()

    if isinstance(update, SetMilestoneStatus):
        milestone.status = update.status
        milestone.completed_at = ts if update.status == constants.COMPLETED else None
    elif isinstance(update, SetTargetDate):
        milestone.target_date = update.target_date
    elif isinstance(update, AddMember):
        milestone.components.append(update.component)
    elif isinstance(update, RemoveMember):
        milestone.components = [c for c in milestone.components if c != update.component]
    elif isinstance(update, ReplaceMembers):
        members = []
        for c in update.components:
            if c not in members:
                members.append(c)
        milestone.components = members
    elif isinstance(update, AddMilestoneNote):
        milestone.notes.append(Note(timestamp=ts, content=update.content))
    else:
        raise TypeError(f"Unsupported milestone update: {update!r}")

    milestone.last_updated = ts
