"""
Time window rules: when in the day minors may work.

- RULE-004: Ages 12-13 school hours prohibition
- RULE-010: Ages 14-15 school hours prohibition
- RULE-011: Ages 14-15 work window (7 AM - 7 PM, 9 PM in summer)
- RULE-016: Ages 16-17 school night restriction (10 PM)
- RULE-017: Ages 16-17 work window (6 AM - 11:30 PM)
- RULE-034: Ages 16-17 school hours prohibition
"""

from abc import abstractmethod
from datetime import date

from dateutil.relativedelta import MO, relativedelta

from utils.time import next_day, time_to_minutes

from .. import messages
from ..messages import RuleMessage
from ..rule import BaseRule
from ..types import AgeBand, ComplianceContext, RuleCategory, RuleResult, TimesheetEntry

# Minutes since midnight
SCHOOL_START = 7 * 60
SCHOOL_END = 15 * 60

WINDOW_14_15_START = 7 * 60
WINDOW_14_15_END_REGULAR = 19 * 60
WINDOW_14_15_END_SUMMER = 21 * 60

WINDOW_16_17_START = 6 * 60
WINDOW_16_17_END_SCHOOL_NIGHT = 22 * 60
WINDOW_16_17_END_NON_SCHOOL_NIGHT = 23 * 60 + 30

# Sunday through Thursday, as date.weekday() values
SCHOOL_NIGHT_WEEKDAYS = frozenset({6, 0, 1, 2, 3})


def labor_day(year: int) -> date:
    """First Monday of September."""
    return date(year, 9, 1) + relativedelta(weekday=MO(+1))


def is_summer_period(iso_date: str) -> bool:
    """June 1 up to, but not including, Labor Day."""
    d = date.fromisoformat(iso_date)
    return date(d.year, 6, 1) <= d < labor_day(d.year)


def overlaps_school_hours(start_time: str, end_time: str) -> bool:
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    return not (end <= SCHOOL_START or start >= SCHOOL_END)


def is_school_night(iso_date: str, context: ComplianceContext) -> bool:
    """
    True if the night after ``iso_date`` precedes a school day.

    The following day counts as a school day when it has a school-day entry.
    Days without entries carry no school-day flag, so in a school week every
    Sunday through Thursday night is treated as a school night.
    """
    if context.is_school_day(next_day(iso_date)):
        return True
    weekday = date.fromisoformat(iso_date).weekday()
    return context.is_school_week and weekday in SCHOOL_NIGHT_WEEKDAYS


def _violation(day: str, entry: TimesheetEntry, **extra) -> dict:
    return {
        "date": day,
        "entry_id": entry.id,
        "start_time": entry.start_time,
        "end_time": entry.end_time,
        **extra,
    }


class TimeWindowRule(BaseRule):
    """
    Shared reporting for per-entry time checks.

    Subclasses yield violation dicts from ``find_violations``; the first one
    (calendar order, then start time) is quoted in the message.
    """

    category = RuleCategory.TIME_WINDOW
    band: AgeBand
    template: RuleMessage

    def band_entries(self, context: ComplianceContext):
        """(date, entries) for worked days spent in the rule's band."""
        for day, entries in context.daily_entries.items():
            if context.daily_age_bands[day] == self.band:
                yield day, entries

    @abstractmethod
    def find_violations(self, context: ComplianceContext) -> list[dict]:
        """Violations in calendar order, then by entry start time."""
        pass

    def message_params(self, first: dict) -> dict:
        return {
            "date": messages.format_date(first["date"]),
            "start_time": messages.format_time(first["start_time"]),
            "end_time": messages.format_time(first["end_time"]),
        }

    def remediation_params(self, first: dict) -> dict:
        return {}

    def check(self, context: ComplianceContext) -> RuleResult:
        violations = self.find_violations(context)
        if not violations:
            return self.passed(entries_checked=sum(
                len(entries) for _, entries in self.band_entries(context)
            ))

        first = violations[0]
        return self.failed(
            message=self.template.format_message(**self.message_params(first)),
            remediation=self.template.format_remediation(**self.remediation_params(first)),
            affected_dates=[v["date"] for v in violations],
            affected_entries=[v["entry_id"] for v in violations],
            violations=violations,
        )


class SchoolHoursRule(TimeWindowRule):
    """No work between 7 AM and 3 PM on a school day."""

    def find_violations(self, context: ComplianceContext) -> list[dict]:
        violations = []
        for day, entries in self.band_entries(context):
            if not context.is_school_day(day):
                continue
            for entry in entries:
                if overlaps_school_hours(entry.start_time, entry.end_time):
                    violations.append(_violation(day, entry))
        return violations


class SchoolHours12To13Rule(SchoolHoursRule):
    rule_id = "RULE-004"
    name = "Ages 12-13 School Hours Prohibition"
    description = "Ages 12-13 cannot work during school hours (7 AM - 3 PM) on school days"
    applies_to_age_bands = frozenset({AgeBand.AGES_12_13})
    band = AgeBand.AGES_12_13
    template = messages.SCHOOL_HOURS_12_13


class SchoolHours14To15Rule(SchoolHoursRule):
    rule_id = "RULE-010"
    name = "Ages 14-15 School Hours Prohibition"
    description = "Ages 14-15 cannot work during school hours (7 AM - 3 PM) on school days"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    template = messages.SCHOOL_HOURS_14_15


class WorkWindow14To15Rule(TimeWindowRule):
    rule_id = "RULE-011"
    name = "Ages 14-15 Work Window"
    description = "Ages 14-15 may only work 7 AM - 7 PM (9 PM June 1 through Labor Day)"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    template = messages.WORK_WINDOW_14_15

    def find_violations(self, context: ComplianceContext) -> list[dict]:
        violations = []
        for day, entries in self.band_entries(context):
            summer = is_summer_period(day)
            window_end = WINDOW_14_15_END_SUMMER if summer else WINDOW_14_15_END_REGULAR
            for entry in entries:
                start = time_to_minutes(entry.start_time)
                end = time_to_minutes(entry.end_time)
                if start < WINDOW_14_15_START or end > window_end:
                    violations.append(_violation(
                        day, entry,
                        window_end=f"{window_end // 60:02d}:{window_end % 60:02d}",
                        is_summer=summer,
                    ))
        return violations

    def message_params(self, first: dict) -> dict:
        params = super().message_params(first)
        params["window_end"] = messages.format_time(first["window_end"])
        params["summer_note"] = " (summer hours)" if first["is_summer"] else ""
        return params

    def remediation_params(self, first: dict) -> dict:
        return {"window_end": messages.format_time(first["window_end"])}


class SchoolNight16To17Rule(TimeWindowRule):
    rule_id = "RULE-016"
    name = "Ages 16-17 School Night Restriction"
    description = "Ages 16-17 cannot work past 10 PM on nights before school days"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})
    band = AgeBand.AGES_16_17
    template = messages.SCHOOL_NIGHT_16_17

    def find_violations(self, context: ComplianceContext) -> list[dict]:
        violations = []
        for day, entries in self.band_entries(context):
            if not is_school_night(day, context):
                continue
            for entry in entries:
                if time_to_minutes(entry.end_time) > WINDOW_16_17_END_SCHOOL_NIGHT:
                    violations.append(_violation(day, entry))
        return violations


class WorkWindow16To17Rule(TimeWindowRule):
    """Start time is always checked; late ends on school nights belong to RULE-016."""

    rule_id = "RULE-017"
    name = "Ages 16-17 Work Window"
    description = "Ages 16-17 may only work 6 AM - 11:30 PM (10 PM on school nights)"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})
    band = AgeBand.AGES_16_17
    template = messages.WORK_WINDOW_16_17

    def find_violations(self, context: ComplianceContext) -> list[dict]:
        violations = []
        for day, entries in self.band_entries(context):
            school_night = is_school_night(day, context)
            for entry in entries:
                if time_to_minutes(entry.start_time) < WINDOW_16_17_START:
                    violations.append(_violation(day, entry))
                    continue
                if not school_night and time_to_minutes(entry.end_time) > WINDOW_16_17_END_NON_SCHOOL_NIGHT:
                    violations.append(_violation(day, entry))
        return violations


class SchoolHours16To17Rule(SchoolHoursRule):
    rule_id = "RULE-034"
    name = "Ages 16-17 School Hours Prohibition"
    description = "Ages 16-17 cannot work during school hours (7 AM - 3 PM) on school days"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})
    band = AgeBand.AGES_16_17
    template = messages.SCHOOL_HOURS_16_17


TIME_WINDOW_RULES: list[BaseRule] = [
    SchoolHours12To13Rule(),
    SchoolHours14To15Rule(),
    WorkWindow14To15Rule(),
    SchoolNight16To17Rule(),
    WorkWindow16To17Rule(),
    SchoolHours16To17Rule(),
]
