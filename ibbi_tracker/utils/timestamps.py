"""Timestamp utilities for UTC handling and datetime parsing.

All timestamps written by the tracker use the same shape as a browser's
``Date.toISOString()``: UTC, millisecond precision, ``Z`` suffix.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2024-01-05T06:00:00.000Z
    - 2024-01-05T06:00:00+05:30
    - 2024-01-05T06:00:00
    - 2024-01-05

    Args:
        iso_string: ISO 8601 formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return ensure_utc(datetime.strptime(iso_string.strip(), fmt))
        except ValueError:
            continue
    return None


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with milliseconds and 'Z' suffix.

    Example:
        >>> format_timestamp(datetime(2024, 1, 5, 6, 0, tzinfo=timezone.utc))
        '2024-01-05T06:00:00.000Z'
    """
    dt_utc = ensure_utc(dt)
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"


def calendar_date(dt: datetime) -> date:
    """UTC calendar date of a datetime."""
    return ensure_utc(dt).date()


def epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    dt_utc = ensure_utc(dt)
    return int(dt_utc.timestamp()) * 1000 + dt_utc.microsecond // 1000
