"""
Centralized datetime and timezone utilities.

Timestamps are stored as naive UTC (PostgreSQL TIMESTAMP WITHOUT TIME
ZONE) and rendered as timezone-aware ISO-8601 strings at the edges.
"""

from datetime import datetime
from typing import Optional
import pytz

from config import settings


def get_local_tz() -> pytz.BaseTzInfo:
    """Get the configured local timezone."""
    return pytz.timezone(settings.timezone)


def get_utc_now() -> datetime:
    """Get current time in UTC (naive)."""
    return datetime.now(pytz.UTC).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert any datetime to naive UTC for database storage.

    Args:
        dt: Datetime to convert (can be aware or naive)

    Returns:
        Naive datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(pytz.UTC).replace(tzinfo=None)

    # Already naive, assume it's UTC
    return dt


def to_iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """
    Render a stored datetime as an aware ISO-8601 string.

    Args:
        dt: Naive datetime (assumed UTC) or aware datetime

    Returns:
        e.g. "2024-01-15T09:30:00+00:00", or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)

    return dt.astimezone(pytz.UTC).isoformat()
