"""
dt history - Recent activity, newest first.

Similar to `git log --oneline` but for tracker changes.
"""

from datetime import datetime, timedelta, timezone

from devtracker.context import TrackerContext
from devtracker.lib.activity import COLORS, entries_since, format_entry_oneline
from devtracker.lib.timestamps import parse_timestamp


def cmd_history(args, ctx: TrackerContext) -> int:
    """Show recent activity, optionally for one component or milestone."""
    since = None
    if args.since:
        since = parse_since(args.since)
        if since is None:
            print(f"ERROR: Invalid --since value: {args.since}")
            print("  Use: 1h, 1d, 1w, or ISO timestamp")
            return 2

    limit = args.limit if args.limit is not None else ctx.config.recent_activity_limit
    entries = ctx.activity.recent(component=args.component, limit=limit)
    if since is not None:
        entries = entries_since(entries, since)

    if not entries:
        print("No activity found.")
        return 0

    colorize = not args.no_color
    dim = COLORS["dim"] if colorize else ""
    reset = COLORS["reset"] if colorize else ""

    for entry in entries:
        print(format_entry_oneline(entry, colorize=colorize))

    print()
    print(f"{dim}{len(entries)} entry(s){reset}")
    return 0


def parse_since(value: str, now: datetime | None = None) -> datetime | None:
    """Parse --since: relative (2h, 3d, 1w) or an ISO timestamp."""
    now = now or datetime.now(timezone.utc)

    units = {"h": "hours", "d": "days", "w": "weeks"}
    unit = units.get(value[-1:])
    if unit:
        try:
            return now - timedelta(**{unit: int(value[:-1])})
        except ValueError:
            pass

    return parse_timestamp(value)
