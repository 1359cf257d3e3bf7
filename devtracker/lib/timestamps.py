"""Timestamp helpers. All stored timestamps are UTC ISO strings ending in Z."""

from datetime import datetime, timezone


def now_iso() -> str:
    """Current UTC time as an ISO timestamp with millisecond precision."""
    return to_iso(datetime.now(timezone.utc))


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp or date. Naive values are taken as UTC.

    Returns None for empty or unparseable input.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
