"""Tests for daily/weekly hour caps and the 16-17 day count limit."""

from datetime import date

from compliance.rules.hour_limits import (
    DailyLimit12To13Rule,
    DailyLimit16To17Rule,
    DayCountLimit16To17Rule,
    NonSchoolDayLimit14To15Rule,
    NonSchoolWeekLimit14To15Rule,
    SchoolDayLimit14To15Rule,
    SchoolWeekLimit14To15Rule,
    WeeklyLimit12To13Rule,
    WeeklyLimit16To17Rule,
)
from compliance.types import RuleOutcome

from conftest import day_of_week


class TestAges12To13:
    def test_daily_limit_passes_at_four_hours(self, make_context, make_entry):
        context = make_context(age=13, entries=[make_entry(day_of_week(6), "09:00", "13:00")])

        assert DailyLimit12To13Rule().evaluate(context).result == RuleOutcome.PASS

    def test_daily_limit_fails_over_four_hours(self, make_context, make_entry):
        entry = make_entry(day_of_week(1), "15:00", "19:30")
        context = make_context(age=13, entries=[entry])

        result = DailyLimit12To13Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.error_message == (
            "Daily hour limit exceeded: Ages 12-13 may work a maximum of 4 hours per day. "
            "You entered 4.5 hours on Monday, January 15."
        )
        assert result.affected_dates == (day_of_week(1),)
        assert result.details.threshold == 4.0
        assert result.details.actual_value == 4.5

    def test_daily_limit_reports_every_violating_day(self, make_context, make_entry):
        context = make_context(age=13, entries=[
            make_entry(day_of_week(5), "15:00", "20:00"),
            make_entry(day_of_week(2), "15:00", "20:00"),
            make_entry(day_of_week(3), "15:00", "17:00"),
        ])

        result = DailyLimit12To13Rule().evaluate(context)

        assert result.affected_dates == (day_of_week(2), day_of_week(5))
        assert "Tuesday, January 16" in result.error_message

    def test_weekly_limit(self, make_context, make_entry):
        """3.5 hours every day is within the daily cap but 24.5 for the week."""
        entries = [make_entry(day_of_week(i), "15:00", "18:30") for i in range(7)]
        context = make_context(age=12, entries=entries)

        assert DailyLimit12To13Rule().evaluate(context).result == RuleOutcome.PASS
        result = WeeklyLimit12To13Rule().evaluate(context)
        assert result.result == RuleOutcome.FAIL
        assert "Your total is 24.5 hours" in result.error_message

    def test_not_applicable_for_other_bands(self, make_context, make_entry):
        context = make_context(age=15, entries=[make_entry(day_of_week(6), "09:00", "17:00")])

        assert DailyLimit12To13Rule().evaluate(context).result == RuleOutcome.NOT_APPLICABLE
        assert WeeklyLimit12To13Rule().evaluate(context).result == RuleOutcome.NOT_APPLICABLE

    def test_band_applied_per_day(self, make_context, make_entry, make_employee):
        """Turning 14 on Wednesday: only Sunday-Tuesday count toward the 12-13 caps."""
        employee = make_employee(date_of_birth=date(2010, 1, 17))
        context = make_context(employee=employee, entries=[
            make_entry(day_of_week(1), "15:00", "18:00"),
            make_entry(day_of_week(4), "09:00", "16:00", hours=7.0),
        ])

        daily = DailyLimit12To13Rule().evaluate(context)
        weekly = WeeklyLimit12To13Rule().evaluate(context)

        assert daily.result == RuleOutcome.PASS
        assert weekly.result == RuleOutcome.PASS
        assert weekly.details.actual_value == 3.0


class TestAges14To15:
    def test_school_day_limit(self, make_context, make_entry):
        context = make_context(age=14, entries=[
            make_entry(day_of_week(1), "15:00", "18:30", is_school_day=True),
        ])

        result = SchoolDayLimit14To15Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert "3 hours on school days" in result.error_message
        assert NonSchoolDayLimit14To15Rule().evaluate(context).result == RuleOutcome.PASS

    def test_non_school_day_allows_eight_hours(self, make_context, make_entry):
        context = make_context(age=15, entries=[make_entry(day_of_week(6), "09:00", "17:00")])

        assert SchoolDayLimit14To15Rule().evaluate(context).result == RuleOutcome.PASS
        assert NonSchoolDayLimit14To15Rule().evaluate(context).result == RuleOutcome.PASS

    def test_non_school_day_limit(self, make_context, make_entry):
        context = make_context(age=15, entries=[make_entry(day_of_week(6), "08:00", "16:30")])

        result = NonSchoolDayLimit14To15Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.affected_dates == (day_of_week(6),)

    def test_school_week_limit(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i), "15:00", "18:00", is_school_day=True) for i in range(1, 6)]
        entries.append(make_entry(day_of_week(6), "10:00", "13:30"))
        context = make_context(age=14, entries=entries)

        result = SchoolWeekLimit14To15Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert "Your total is 18.5 hours" in result.error_message
        assert NonSchoolWeekLimit14To15Rule().evaluate(context).result == RuleOutcome.NOT_APPLICABLE

    def test_school_week_limit_not_applicable_outside_school_weeks(self, make_context, make_entry):
        context = make_context(age=14, entries=[make_entry(day_of_week(1), "09:00", "17:00")])

        result = SchoolWeekLimit14To15Rule().evaluate(context)

        assert result.result == RuleOutcome.NOT_APPLICABLE
        assert result.details.checked_values["is_school_week"] is False

    def test_non_school_week_limit(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i), "09:00", "17:00") for i in range(1, 6)]
        entries.append(make_entry(day_of_week(6), "09:00", "10:00"))
        context = make_context(age=15, entries=entries)

        result = NonSchoolWeekLimit14To15Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.details.actual_value == 41.0


class TestAges16To17:
    def test_daily_limit(self, make_context, make_entry):
        context = make_context(age=16, entries=[make_entry(day_of_week(6), "08:00", "17:30")])

        result = DailyLimit16To17Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert "9 hours per day" in result.error_message
        assert "9.5 hours" in result.error_message

    def test_weekly_limit(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i), "08:00", "16:00") for i in range(1, 6)]
        entries.append(make_entry(day_of_week(6), "08:00", "16:30"))
        context = make_context(age=17, entries=entries)

        assert DailyLimit16To17Rule().evaluate(context).result == RuleOutcome.PASS
        result = WeeklyLimit16To17Rule().evaluate(context)
        assert result.result == RuleOutcome.FAIL
        assert result.details.actual_value == 48.5

    def test_six_days_allowed(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i)) for i in range(6)]
        context = make_context(age=16, entries=entries)

        assert DayCountLimit16To17Rule().evaluate(context).result == RuleOutcome.PASS

    def test_seven_days_fails(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i)) for i in range(7)]
        context = make_context(age=16, entries=entries)

        result = DayCountLimit16To17Rule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert "You have entries on 7 days" in result.error_message
        assert len(result.affected_dates) == 7

    def test_adult_not_applicable(self, make_context, make_entry):
        entries = [make_entry(day_of_week(i), "06:00", "18:00") for i in range(7)]
        context = make_context(age=19, entries=entries)

        for rule in (DailyLimit16To17Rule(), WeeklyLimit16To17Rule(), DayCountLimit16To17Rule()):
            assert rule.evaluate(context).result == RuleOutcome.NOT_APPLICABLE
