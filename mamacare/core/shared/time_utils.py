"""
Time helpers shared by the reminder jobs and persistence adapters.

All instants handled by the engine are timezone-aware UTC datetimes.
"""

import calendar
from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as aware UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_date(value: date | datetime) -> date:
    """Calendar date in UTC (midnight-normalized) for a date or datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def subtract_months(value: datetime, months: int) -> datetime:
    """Same wall-clock instant ``months`` calendar months earlier.

    The day is clamped to the last day of the target month
    (2025-08-31 minus 6 months is 2025-02-28).
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
