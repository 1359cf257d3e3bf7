"""Component status lifecycle using the transitions library.

The designated path is:

    Not Started -> In Progress -> {Blocked, Review} -> Completed
    Blocked -> In Progress   (recovery)

Operators may set any status directly. Moves along the designated path fire
the matching trigger; anything else is applied as a forced state change and
logged as off-path. The lifecycle classifies, it never refuses.

Usage:
    lifecycle = StatusLifecycle("BingoCore", "Not Started")
    lifecycle.move_to("In Progress")  # True, fires "start"
"""

import logging
from typing import Sequence

from transitions import Machine, MachineError

from devtracker.lib import constants

logger = logging.getLogger(__name__)


# Transitions defined as (trigger, source, dest)
TRANSITIONS = [
    {"trigger": "start", "source": constants.NOT_STARTED, "dest": constants.IN_PROGRESS},
    {"trigger": "block", "source": constants.IN_PROGRESS, "dest": constants.BLOCKED},
    {"trigger": "submit_review", "source": constants.IN_PROGRESS, "dest": constants.REVIEW},
    {"trigger": "unblock", "source": constants.BLOCKED, "dest": constants.IN_PROGRESS},
    {"trigger": "complete", "source": constants.REVIEW, "dest": constants.COMPLETED},
    {"trigger": "complete", "source": constants.BLOCKED, "dest": constants.COMPLETED},
]


def _build_trigger_lookup() -> dict[tuple[str, str], str]:
    """Build lookup from (source, dest) -> trigger name."""
    lookup: dict[tuple[str, str], str] = {}
    for t in TRANSITIONS:
        key = (t["source"], t["dest"])
        if key not in lookup:
            lookup[key] = t["trigger"]
    return lookup


TRIGGER_FOR = _build_trigger_lookup()


def is_designated(from_status: str, to_status: str) -> bool:
    """True if from -> to is on the designated path (or a no-op)."""
    return from_status == to_status or (from_status, to_status) in TRIGGER_FOR


class StatusLifecycle:
    """State machine for one component's status."""

    def __init__(self, component: str, status: str, statuses: Sequence[str] = constants.STATUS_LEVELS):
        self.component = component
        self.statuses = list(statuses)

        initial = status
        if initial not in self.statuses:
            logger.warning(f"[STATUS] {component}: Unknown status '{status}', treating as '{constants.NOT_STARTED}'")
            initial = constants.NOT_STARTED

        transitions = [
            t for t in TRANSITIONS
            if t["source"] in self.statuses and t["dest"] in self.statuses
        ]
        self.machine = Machine(
            model=self,
            states=self.statuses,
            transitions=transitions,
            initial=initial,
            auto_transitions=False,
        )

    def move_to(self, status: str) -> bool:
        """Move to status. Returns True if the move was on the designated path."""
        current = self.state
        if current == status:
            logger.debug(f"[STATUS] {self.component}: already {status}, no-op")
            return True

        if is_designated(current, status):
            trigger = TRIGGER_FOR[(current, status)]
            try:
                getattr(self, trigger)()
                logger.info(f"[STATUS] {self.component}: {current} -> {status} ({trigger})")
                return True
            except MachineError:
                pass

        logger.warning(f"[STATUS] {self.component}: {current} -> {status} is off the designated path (applied)")
        self.machine.set_state(status)
        return False

    def available_moves(self) -> list[str]:
        """Statuses reachable from the current one along the designated path."""
        return [dest for (src, dest) in TRIGGER_FOR if src == self.state]
