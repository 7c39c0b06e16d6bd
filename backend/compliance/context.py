"""Builds the per-timesheet ComplianceContext that every rule evaluates against."""

import logging
from collections import defaultdict
from datetime import date
from types import MappingProxyType
from typing import Iterable, Optional

from utils.age import get_age_band, get_weekly_ages
from utils.time import today_in_compliance_tz, week_dates

from .errors import ComplianceError, NotFoundError
from .interfaces import TimesheetRepository
from .types import (
    AgeBand,
    ComplianceContext,
    Employee,
    EmployeeDocument,
    Timesheet,
    TimesheetEntry,
)

logger = logging.getLogger(__name__)


def _invariant_error(message: str) -> ComplianceError:
    logger.error(message)
    return ComplianceError(message)


async def build_context(
    timesheet_id: str,
    repository: TimesheetRepository,
    today: Optional[date] = None,
) -> ComplianceContext:
    """
    Load a timesheet, its entries, the owning employee and their documents,
    then derive the compliance context.

    Raises:
        NotFoundError: If the timesheet or its employee does not exist
        ComplianceError: If the loaded data breaks a context invariant
    """
    loaded = await repository.load_timesheet_with_entries(timesheet_id)
    if loaded is None:
        raise NotFoundError("Timesheet", timesheet_id)

    employee = await repository.load_employee(loaded.timesheet.employee_id)
    if employee is None:
        raise NotFoundError("Employee", loaded.timesheet.employee_id)

    documents = await repository.load_employee_documents(employee.id)

    return derive_context(
        timesheet=loaded.timesheet,
        entries=loaded.entries,
        employee=employee,
        documents=documents,
        check_date=today or today_in_compliance_tz(),
    )


def derive_context(
    timesheet: Timesheet,
    entries: Iterable[TimesheetEntry],
    employee: Employee,
    documents: Iterable[EmployeeDocument],
    check_date: date,
) -> ComplianceContext:
    """Derive all per-day values rules need. Pure; performs no I/O."""
    week_start = date.fromisoformat(timesheet.week_start_date)
    if week_start.weekday() != 6:
        raise _invariant_error(
            f"Timesheet {timesheet.id} week starts on {timesheet.week_start_date}, which is not a Sunday"
        )
    week = set(week_dates(week_start))

    # Age per day, not per submission: a birthday can change the band mid-week
    daily_ages = get_weekly_ages(employee.date_of_birth, week_start)
    daily_age_bands: dict[str, AgeBand] = {}
    for day, age in daily_ages.items():
        try:
            daily_age_bands[day] = get_age_band(age)
        except ValueError:
            logger.warning(
                f"Employee {employee.id} is {age} on {day}, below minimum employment age; "
                f"applying {AgeBand.AGES_12_13.value} limits"
            )
            daily_age_bands[day] = AgeBand.AGES_12_13

    grouped: dict[str, list[TimesheetEntry]] = defaultdict(list)
    for entry in entries:
        if entry.work_date not in week:
            raise _invariant_error(
                f"Entry {entry.id} on {entry.work_date} is outside the week of {timesheet.week_start_date}"
            )
        grouped[entry.work_date].append(entry)

    daily_entries: dict[str, tuple[TimesheetEntry, ...]] = {}
    daily_hours: dict[str, float] = {}
    for day in sorted(grouped):
        day_entries = tuple(sorted(grouped[day], key=lambda e: (e.start_time, e.id)))
        daily_entries[day] = day_entries
        daily_hours[day] = round(sum(e.hours for e in day_entries), 2)

    school_days = tuple(
        day for day, day_entries in daily_entries.items()
        if any(e.is_school_day for e in day_entries)
    )
    work_days = tuple(daily_entries)

    return ComplianceContext(
        employee=employee,
        timesheet=timesheet,
        documents=tuple(documents),
        daily_ages=MappingProxyType(daily_ages),
        daily_age_bands=MappingProxyType(daily_age_bands),
        daily_hours=MappingProxyType(daily_hours),
        daily_entries=MappingProxyType(daily_entries),
        school_days=school_days,
        work_days=work_days,
        week_total_hours=round(sum(daily_hours.values()), 2),
        is_school_week=bool(school_days),
        check_date=check_date,
    )


def check_context_invariants(context: ComplianceContext) -> None:
    """
    Verify the context shape rules rely on.

    Raises:
        ComplianceError: If a daily map is missing a date key
    """
    week = week_dates(context.timesheet.week_start_date)
    if list(context.daily_ages) != week or list(context.daily_age_bands) != week:
        raise _invariant_error(
            f"Context for timesheet {context.timesheet.id} does not cover the week of "
            f"{context.timesheet.week_start_date}"
        )
    if set(context.daily_hours) != set(context.daily_entries):
        raise _invariant_error(
            f"Context for timesheet {context.timesheet.id} has mismatched daily hours and entries"
        )
