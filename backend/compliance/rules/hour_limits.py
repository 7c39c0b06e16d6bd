"""
Hour limit rules: daily and weekly caps by age band.

- RULE-002: Ages 12-13 daily limit (4 hours)
- RULE-003: Ages 12-13 weekly limit (24 hours)
- RULE-008: Ages 14-15 school day limit (3 hours)
- RULE-009: Ages 14-15 school week limit (18 hours)
- RULE-032: Ages 14-15 non-school day limit (8 hours)
- RULE-033: Ages 14-15 non-school week limit (40 hours)
- RULE-014: Ages 16-17 daily limit (9 hours)
- RULE-015: Ages 16-17 weekly limit (48 hours)
- RULE-018: Ages 16-17 day count limit (6 days)

Each day is judged by the age band in effect on that day, and weekly
totals only count the days spent in the rule's band.
"""

from typing import Optional

from .. import messages
from ..messages import RuleMessage
from ..rule import BaseRule
from ..types import AgeBand, ComplianceContext, RuleCategory, RuleResult

LIMITS = {
    AgeBand.AGES_12_13: {
        "daily": 4.0,
        "weekly": 24.0,
    },
    AgeBand.AGES_14_15: {
        "daily_school": 3.0,
        "daily_non_school": 8.0,
        "weekly_school": 18.0,
        "weekly_non_school": 40.0,
    },
    AgeBand.AGES_16_17: {
        "daily": 9.0,
        "weekly": 48.0,
        "max_days": 6,
    },
}


def _band_days(context: ComplianceContext, band: AgeBand) -> list[tuple[str, float]]:
    """Worked days (with hours) on which the employee was in the band."""
    return [
        (day, hours) for day, hours in context.daily_hours.items()
        if context.daily_age_bands[day] == band
    ]


class DailyHourLimitRule(BaseRule):
    """Caps hours on each day spent in ``band``."""

    category = RuleCategory.HOUR_LIMIT
    band: AgeBand
    limit: float
    template: RuleMessage
    # True: school days only, False: non-school days only, None: every day
    school_days: Optional[bool] = None

    def check(self, context: ComplianceContext) -> RuleResult:
        violations = []
        for day, hours in _band_days(context, self.band):
            if self.school_days is not None and context.is_school_day(day) != self.school_days:
                continue
            if hours > self.limit:
                violations.append({"date": day, "hours": hours})

        if not violations:
            return self.passed(
                threshold=self.limit,
                limit=self.limit,
                days_checked=len(context.daily_hours),
                school_days_checked=len(context.school_days),
            )

        first = violations[0]
        return self.failed(
            message=self.template.format_message(
                date=messages.format_date(first["date"]),
                hours=first["hours"],
                limit=self.limit,
            ),
            remediation=self.template.format_remediation(limit=self.limit),
            affected_dates=[v["date"] for v in violations],
            threshold=self.limit,
            actual_value=first["hours"],
            violations=violations,
        )


class WeeklyHourLimitRule(BaseRule):
    """Caps the week's hours spent in ``band``."""

    category = RuleCategory.HOUR_LIMIT
    band: AgeBand
    limit: float
    template: RuleMessage
    # True: school weeks only, False: non-school weeks only, None: every week
    school_week: Optional[bool] = None

    def check(self, context: ComplianceContext) -> RuleResult:
        if self.school_week is not None and context.is_school_week != self.school_week:
            return self.not_applicable(is_school_week=context.is_school_week)

        band_days = _band_days(context, self.band)
        total = round(sum(hours for _, hours in band_days), 2)

        if total <= self.limit:
            return self.passed(
                threshold=self.limit,
                actual_value=total,
                total=total,
                is_school_week=context.is_school_week,
            )

        return self.failed(
            message=self.template.format_message(hours=total, limit=self.limit),
            remediation=self.template.format_remediation(limit=self.limit),
            affected_dates=[day for day, _ in band_days],
            threshold=self.limit,
            actual_value=total,
            total=total,
            is_school_week=context.is_school_week,
        )


class DailyLimit12To13Rule(DailyHourLimitRule):
    rule_id = "RULE-002"
    name = "Ages 12-13 Daily Hour Limit"
    description = "Daily limit of 4 hours for ages 12-13"
    applies_to_age_bands = frozenset({AgeBand.AGES_12_13})
    band = AgeBand.AGES_12_13
    limit = LIMITS[AgeBand.AGES_12_13]["daily"]
    template = messages.DAILY_LIMIT_12_13


class WeeklyLimit12To13Rule(WeeklyHourLimitRule):
    rule_id = "RULE-003"
    name = "Ages 12-13 Weekly Hour Limit"
    description = "Weekly limit of 24 hours for ages 12-13"
    applies_to_age_bands = frozenset({AgeBand.AGES_12_13})
    band = AgeBand.AGES_12_13
    limit = LIMITS[AgeBand.AGES_12_13]["weekly"]
    template = messages.WEEKLY_LIMIT_12_13


class SchoolDayLimit14To15Rule(DailyHourLimitRule):
    rule_id = "RULE-008"
    name = "Ages 14-15 School Day Limit"
    description = "School day limit of 3 hours for ages 14-15"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    limit = LIMITS[AgeBand.AGES_14_15]["daily_school"]
    template = messages.SCHOOL_DAY_LIMIT_14_15
    school_days = True


class SchoolWeekLimit14To15Rule(WeeklyHourLimitRule):
    rule_id = "RULE-009"
    name = "Ages 14-15 School Week Limit"
    description = "School week limit of 18 hours for ages 14-15"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    limit = LIMITS[AgeBand.AGES_14_15]["weekly_school"]
    template = messages.SCHOOL_WEEK_LIMIT_14_15
    school_week = True


class NonSchoolDayLimit14To15Rule(DailyHourLimitRule):
    rule_id = "RULE-032"
    name = "Ages 14-15 Non-School Day Limit"
    description = "Non-school day limit of 8 hours for ages 14-15"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    limit = LIMITS[AgeBand.AGES_14_15]["daily_non_school"]
    template = messages.NON_SCHOOL_DAY_LIMIT_14_15
    school_days = False


class NonSchoolWeekLimit14To15Rule(WeeklyHourLimitRule):
    rule_id = "RULE-033"
    name = "Ages 14-15 Non-School Week Limit"
    description = "Non-school week limit of 40 hours for ages 14-15"
    applies_to_age_bands = frozenset({AgeBand.AGES_14_15})
    band = AgeBand.AGES_14_15
    limit = LIMITS[AgeBand.AGES_14_15]["weekly_non_school"]
    template = messages.NON_SCHOOL_WEEK_LIMIT_14_15
    school_week = False


class DailyLimit16To17Rule(DailyHourLimitRule):
    rule_id = "RULE-014"
    name = "Ages 16-17 Daily Hour Limit"
    description = "Daily limit of 9 hours for ages 16-17"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})
    band = AgeBand.AGES_16_17
    limit = LIMITS[AgeBand.AGES_16_17]["daily"]
    template = messages.DAILY_LIMIT_16_17


class WeeklyLimit16To17Rule(WeeklyHourLimitRule):
    rule_id = "RULE-015"
    name = "Ages 16-17 Weekly Hour Limit"
    description = "Weekly limit of 48 hours for ages 16-17"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})
    band = AgeBand.AGES_16_17
    limit = LIMITS[AgeBand.AGES_16_17]["weekly"]
    template = messages.WEEKLY_LIMIT_16_17


class DayCountLimit16To17Rule(BaseRule):
    rule_id = "RULE-018"
    name = "Ages 16-17 Day Count Limit"
    category = RuleCategory.HOUR_LIMIT
    description = "Maximum 6 days per week for ages 16-17"
    applies_to_age_bands = frozenset({AgeBand.AGES_16_17})

    def check(self, context: ComplianceContext) -> RuleResult:
        limit = LIMITS[AgeBand.AGES_16_17]["max_days"]
        days = [day for day, _ in _band_days(context, AgeBand.AGES_16_17)]

        if len(days) <= limit:
            return self.passed(threshold=limit, actual_value=len(days), days_worked=len(days))

        template = messages.DAY_COUNT_LIMIT_16_17
        return self.failed(
            message=template.format_message(days_worked=len(days), limit=limit),
            remediation=template.format_remediation(limit=limit),
            affected_dates=days,
            threshold=limit,
            actual_value=len(days),
            days_worked=len(days),
            dates=days,
        )


HOUR_LIMIT_RULES: list[BaseRule] = [
    # 12-13
    DailyLimit12To13Rule(),
    WeeklyLimit12To13Rule(),
    # 14-15
    SchoolDayLimit14To15Rule(),
    SchoolWeekLimit14To15Rule(),
    NonSchoolDayLimit14To15Rule(),
    NonSchoolWeekLimit14To15Rule(),
    # 16-17
    DailyLimit16To17Rule(),
    WeeklyLimit16To17Rule(),
    DayCountLimit16To17Rule(),
]
