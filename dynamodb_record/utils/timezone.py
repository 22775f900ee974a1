"""Timestamp utilities for record persistence.

Records always store timestamps in UTC as ISO 8601 strings. Naive datetimes
are assumed to already be in UTC.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC.

    Args:
        dt: Datetime to convert to UTC

    Returns:
        Datetime in UTC timezone, or None if input is None

    Examples:
        >>> dt = datetime(2024, 1, 1, 10, 0)
        >>> to_utc(dt)  # -> 2024-01-01 10:00:00+00:00
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """Format datetime as a UTC ISO string for storage."""
    if dt is None:
        return None
    return to_utc(dt).isoformat()


def parse_iso(iso_string: str) -> Optional[datetime]:
    """Parse an ISO datetime string into a UTC datetime.

    Accepts both ``Z`` and ``+00:00`` suffixes as well as the space separated
    ``YYYY-MM-DD HH:MM:SS`` form.

    Raises:
        ValueError: If the string is not a valid ISO datetime
    """
    if not iso_string:
        return None

    dt = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
    return to_utc(dt)
