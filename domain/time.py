"""
Domain time utilities (pure).

Centralized timestamp validation and calendar-date helpers.

Behavior and error messages must remain consistent across the domain model.
Sales are dated at day granularity; every comparison between sale dates strips
the time-of-day first.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def to_calendar_date(value: Any) -> date:
    """
    Normalize a date-like value to a calendar date (time-of-day stripped).

    Accepts `date`, `datetime` and ISO-8601 strings ("2025-01-31" or a full
    timestamp, optionally with a trailing 'Z').
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    raise TypeError(f"Unsupported date type: {type(value)!r}")


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from `earlier` to `later` (negative if reversed)."""

    return (to_calendar_date(later) - to_calendar_date(earlier)).days
