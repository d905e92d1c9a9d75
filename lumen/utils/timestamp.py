"""Timestamp formatting utilities."""

from datetime import datetime, timezone
from typing import Optional


def now() -> str:
    """Local timestamp for directory and file names (e.g. 20251114_123456)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """Local ISO 8601 timestamp with microseconds."""
    return datetime.now().isoformat()


def utc_iso(moment: datetime = None) -> str:
    """
    Format a moment as a UTC ISO 8601 string with millisecond precision and Z suffix.

    Matches the timestamp style used in backup documents (2025-11-14T18:45:40.572Z).

    Args:
        moment: Datetime to format (default: current time). Naive values are treated as UTC.

    Returns:
        ISO 8601 string ending in "Z"
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp, accepting a trailing Z.

    Returns None when the value cannot be parsed. Naive results are treated as UTC
    so values from different sources compare consistently.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
