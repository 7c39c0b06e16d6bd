"""
Age calculation utilities for compliance rule evaluation.

Age is always calculated as of the specific work date, never the current
date, so a birthday in the middle of a timesheet week moves the employee
into the new age band from that day onwards.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from dateutil.relativedelta import relativedelta

from .time import week_dates

if TYPE_CHECKING:
    from compliance.types import AgeBand

MINIMUM_EMPLOYMENT_AGE = 12


def _as_date(value: date | str) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def calculate_age(date_of_birth: date | str, as_of: date | str) -> int:
    """
    Age in whole years as of a specific date.

    >>> calculate_age("2010-06-15", "2024-06-14")
    13
    >>> calculate_age("2010-06-15", "2024-06-15")
    14
    """
    return relativedelta(_as_date(as_of), _as_date(date_of_birth)).years


def get_age_band(age: int) -> "AgeBand":
    """Age band for an age; ages below 12 are not employable."""
    from compliance.types import AgeBand

    if age < MINIMUM_EMPLOYMENT_AGE:
        raise ValueError(f"Age {age} is below minimum employment age of {MINIMUM_EMPLOYMENT_AGE}")
    if age <= 13:
        return AgeBand.AGES_12_13
    if age <= 15:
        return AgeBand.AGES_14_15
    if age <= 17:
        return AgeBand.AGES_16_17
    return AgeBand.ADULT


def get_weekly_ages(date_of_birth: date | str, week_start: date | str) -> dict[str, int]:
    """Map each ISO date of the week to the employee's age on that date."""
    return {day: calculate_age(date_of_birth, day) for day in week_dates(week_start)}


def check_birthday_in_week(
    date_of_birth: date | str,
    week_start: date | str,
) -> tuple[Optional[date], Optional[int]]:
    """
    Find a birthday inside the week.

    Returns:
        (birthday_date, new_age) if a birthday falls in the week, else (None, None)
    """
    dob = _as_date(date_of_birth)
    for day in week_dates(week_start):
        current = date.fromisoformat(day)
        if (current.month, current.day) == (dob.month, dob.day):
            return current, calculate_age(dob, current)
    return None, None
