"""
Datetime utilities for the Symptom Tracker service.

- Write timestamps (created_at) are UTC, ISO 8601 with millisecond precision and 'Z'
- Draft defaults (date, time) follow the local wall clock, as a person filling
  in the form would read it

Usage:
    from symptom_svc.core.datetime_utils import utc_now, format_iso_millis

    created_at = format_iso_millis(utc_now())  # "2024-01-15T05:00:00.123Z"
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current datetime in UTC with timezone info.

    Returns:
        datetime: Current time as timezone-aware datetime in UTC.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso_millis(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 with milliseconds and a 'Z' suffix.

    Example:
        >>> format_iso_millis(datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.123Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def local_today(now: Optional[datetime] = None) -> str:
    """Today's date as YYYY-MM-DD on the local clock."""
    return (now or datetime.now()).strftime("%Y-%m-%d")


def local_time_hhmm(now: Optional[datetime] = None) -> str:
    """Current time as HH:MM on the local clock."""
    return (now or datetime.now()).strftime("%H:%M")
