"""
Break rules.

- RULE-025: Meal break required for minors working more than 6 hours
  (also covers RULE-026, break confirmation)
"""

from .. import messages
from ..rule import BaseRule
from ..types import ComplianceContext, RuleCategory, RuleResult

MEAL_BREAK_THRESHOLD_HOURS = 6.0
MEAL_BREAK_MINUTES = 30


class MealBreakRule(BaseRule):
    rule_id = "RULE-025"
    name = "Meal Break Required"
    category = RuleCategory.BREAK
    description = "30-minute meal break required for minors working more than 6 hours"

    def check(self, context: ComplianceContext) -> RuleResult:
        violations = []
        for day, hours in context.daily_hours.items():
            age = context.daily_ages[day]
            if age >= 18 or hours <= MEAL_BREAK_THRESHOLD_HOURS:
                continue

            entries = context.daily_entries[day]
            if not any(e.meal_break_confirmed is True for e in entries):
                violations.append({
                    "date": day,
                    "hours": hours,
                    "entry_ids": [e.id for e in entries],
                })

        if not violations:
            return self.passed(
                threshold=MEAL_BREAK_THRESHOLD_HOURS,
                days_checked=len(context.daily_hours),
            )

        first = violations[0]
        template = messages.MEAL_BREAK_REQUIRED
        return self.failed(
            message=template.format_message(
                hours=first["hours"],
                date=messages.format_date(first["date"]),
                break_minutes=MEAL_BREAK_MINUTES,
                threshold=MEAL_BREAK_THRESHOLD_HOURS,
            ),
            remediation=template.format_remediation(break_minutes=MEAL_BREAK_MINUTES),
            affected_dates=[v["date"] for v in violations],
            affected_entries=[entry_id for v in violations for entry_id in v["entry_ids"]],
            threshold=MEAL_BREAK_THRESHOLD_HOURS,
            actual_value=first["hours"],
            violations=violations,
        )


BREAK_RULES: list[BaseRule] = [MealBreakRule()]
