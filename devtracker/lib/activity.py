"""
Append-only activity log.

Every accepted mutation is recorded as one JSON line in a per-day file:

    logs/development-2025-01-15.log

Entries are never rewritten. Reading back is only used for "recent activity"
views and the diagnostic report.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from devtracker.lib.timestamps import now_iso, parse_timestamp
from devtracker.lib.validate import validate_before_write

logger = logging.getLogger(__name__)

LOG_PREFIX = "development-"
LOG_SUFFIX = ".log"


@dataclass
class ActivityEntry:
    """A single logged mutation."""
    timestamp: str
    component: str
    action: str
    details: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class ActivityLog:
    """Day-partitioned JSON-lines log."""

    def __init__(self, log_dir: Path):
        self.log_dir = log_dir

    def path_for(self, timestamp: str) -> Path:
        parsed = parse_timestamp(timestamp)
        day = parsed.date().isoformat() if parsed else timestamp[:10]
        return self.log_dir / f"{LOG_PREFIX}{day}{LOG_SUFFIX}"

    def log(self, component: str, action: str, details: str = "", timestamp: str | None = None) -> ActivityEntry:
        """Append an entry and return it."""
        entry = ActivityEntry(
            timestamp=timestamp or now_iso(),
            component=component,
            action=action,
            details=details or "",
        )
        path = self.path_for(entry.timestamp)
        data = entry.to_dict()
        validate_before_write(data, "activity_entry", path)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a") as f:
            f.write(json.dumps(data) + "\n")
            f.flush()
        logger.debug(f"[ACTIVITY] {component}: {action}")
        return entry

    def log_files(self) -> list[Path]:
        """All log files, newest day first."""
        if not self.log_dir.exists():
            return []
        files = [
            p for p in self.log_dir.iterdir()
            if p.name.startswith(LOG_PREFIX) and p.name.endswith(LOG_SUFFIX)
        ]
        return sorted(files, key=lambda p: p.name, reverse=True)

    def recent(self, component: Optional[str] = None, limit: int = 20) -> list[ActivityEntry]:
        """Most recent entries, newest first. Skips corrupted lines."""
        entries: list[ActivityEntry] = []
        for path in self.log_files():
            if len(entries) >= limit:
                break
            for line_num, line in reversed(list(enumerate(path.read_text().splitlines(), 1))):
                if not line.strip():
                    continue
                try:
                    entry = ActivityEntry(**json.loads(line))
                except (json.JSONDecodeError, TypeError) as e:
                    logger.warning(f"Skipping corrupted activity line {line_num} in {path}: {e}")
                    continue
                if component and entry.component != component:
                    continue
                entries.append(entry)
                if len(entries) >= limit:
                    break
        return entries


# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "bold": "\033[1m",
    "green": "\033[32m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}

# First matching keyword in the action label picks the color
ACTION_COLORS = [
    ("Completed", "green"),
    ("Blocked", "red"),
    ("Issue reported", "yellow"),
    ("Issue resolved", "green"),
    ("Milestone", "blue"),
    ("Progress", "cyan"),
]


def format_entry_oneline(entry: ActivityEntry, colorize: bool = True) -> str:
    """Format an entry as one line (like git log --oneline)."""
    parsed = parse_timestamp(entry.timestamp)
    ts_str = parsed.strftime("%Y-%m-%d %H:%M") if parsed else entry.timestamp
    details = f" - {entry.details}" if entry.details else ""

    if not colorize:
        return f"{ts_str} [{entry.component}] {entry.action}{details}"

    color_name = "reset"
    for keyword, name in ACTION_COLORS:
        if keyword in entry.action:
            color_name = name
            break
    color = COLORS[color_name]
    reset = COLORS["reset"]
    dim = COLORS["dim"]
    return f"{dim}{ts_str}{reset} [{entry.component}] {color}{entry.action}{reset}{dim}{details}{reset}"


def entries_since(entries: list[ActivityEntry], since: datetime) -> list[ActivityEntry]:
    """Filter entries to those at or after since."""
    result = []
    for entry in entries:
        parsed = parse_timestamp(entry.timestamp)
        if parsed is not None and parsed >= since:
            result.append(entry)
    return result
