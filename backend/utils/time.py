"""Time-related utility functions."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from dateutil import tz

from config import COMPLIANCE_TIMEZONE

COMPLIANCE_TZ = tz.gettz(COMPLIANCE_TIMEZONE)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def today_in_compliance_tz(now: Optional[datetime] = None) -> date:
    """
    Civil date in the compliance timezone (Eastern by default).

    Naive datetimes are treated as UTC.
    """
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(COMPLIANCE_TZ).date()


def week_start_date(day: date | str) -> date:
    """Return the Sunday on or before the given date."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    # weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_dates(week_start: date | str) -> list[str]:
    """ISO dates of the seven days starting at week_start."""
    if isinstance(week_start, str):
        week_start = date.fromisoformat(week_start)
    return [(week_start + timedelta(days=i)).isoformat() for i in range(7)]


def next_day(iso_date: str) -> str:
    return (date.fromisoformat(iso_date) + timedelta(days=1)).isoformat()


def time_to_minutes(value: str) -> int:
    """Parse an "HH:MM" (or "HH:MM:SS") string to minutes since midnight."""
    parts = value.strip().split(":")
    hours = int(parts[0]) if parts[0] else 0
    minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return hours * 60 + minutes
