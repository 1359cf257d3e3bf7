"""Shared constants for the tracker."""

# Component status levels
NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
BLOCKED = "Blocked"
REVIEW = "Review"
COMPLETED = "Completed"

STATUS_LEVELS = [NOT_STARTED, IN_PROGRESS, BLOCKED, REVIEW, COMPLETED]

# A dependency in one of these statuses no longer holds up its dependents
SATISFIED_STATUSES = frozenset({COMPLETED, REVIEW})

# Reported for a dependency the tracker has no record of
UNKNOWN_STATUS = "Unknown"

PHASES = ["Planning", "Development", "Testing", "Deployment", "Maintenance"]
DEFAULT_PHASE = "Planning"

# Milestone status levels
DELAYED = "Delayed"
CANCELLED = "Cancelled"
MILESTONE_STATUSES = [NOT_STARTED, IN_PROGRESS, DELAYED, COMPLETED, CANCELLED]

DEFAULT_RECENT_ACTIVITY = 10
