"""
Task restriction rules: which task codes a minor may be assigned.

- RULE-005: Task age restriction (also covers RULE-012 and RULE-019)
- RULE-020: Power machinery prohibition
- RULE-021: Driving prohibition
- RULE-022: Solo cash handling prohibition (under 14)
- RULE-024: Hazardous task prohibition
- RULE-029: Supervisor attestation required
"""

from abc import abstractmethod

from .. import messages
from ..messages import RuleMessage
from ..rule import BaseRule
from ..types import (
    AgeBand,
    ComplianceContext,
    RuleCategory,
    RuleResult,
    SupervisorRequirement,
    TimesheetEntry,
)

ADULT_AGE = 18
SOLO_CASH_HANDLING_MIN_AGE = 14


class TaskRestrictionRule(BaseRule):
    """
    Flags every entry on a day younger than ``age_limit`` whose task
    matches ``violates``. The first flagged entry is quoted in the message.
    """

    category = RuleCategory.TASK_RESTRICTION
    template: RuleMessage
    age_limit = ADULT_AGE

    @abstractmethod
    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        pass

    def check(self, context: ComplianceContext) -> RuleResult:
        violations = []
        for day, entries in context.daily_entries.items():
            age = context.daily_ages[day]
            if age >= self.age_limit:
                continue
            for entry in entries:
                if self.violates(entry, age):
                    violations.append({
                        "date": day,
                        "entry_id": entry.id,
                        "task_code": entry.task_code.code,
                        "task_name": entry.task_code.name,
                        "min_age": entry.task_code.min_age_allowed,
                        "employee_age": age,
                    })

        if not violations:
            return self.passed(entries_checked=sum(len(e) for e in context.daily_entries.values()))

        first = violations[0]
        return self.failed(
            message=self.template.format_message(
                task_code=first["task_code"],
                task_name=first["task_name"],
                min_age=first["min_age"],
                age=first["employee_age"],
                date=messages.format_date(first["date"]),
            ),
            remediation=self.template.format_remediation(),
            affected_dates=[v["date"] for v in violations],
            affected_entries=[v["entry_id"] for v in violations],
            violations=violations,
        )


class TaskAgeRestrictionRule(TaskRestrictionRule):
    rule_id = "RULE-005"
    name = "Task Age Restriction"
    description = "Task codes have minimum age requirements"
    template = messages.TASK_AGE_RESTRICTION

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        return age < entry.task_code.min_age_allowed


class PowerMachineryRule(TaskRestrictionRule):
    rule_id = "RULE-020"
    name = "Power Machinery Prohibition"
    description = "Power machinery prohibited for workers under 18"
    template = messages.POWER_MACHINERY

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        return entry.task_code.power_machinery


class DrivingRule(TaskRestrictionRule):
    rule_id = "RULE-021"
    name = "Driving Prohibition"
    description = "Driving prohibited for workers under 18"
    template = messages.DRIVING

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        return entry.task_code.driving_required


class SoloCashHandlingRule(TaskRestrictionRule):
    rule_id = "RULE-022"
    name = "Solo Cash Handling Prohibition"
    description = "Solo cash handling prohibited for workers under 14"
    applies_to_age_bands = frozenset({AgeBand.AGES_12_13})
    template = messages.SOLO_CASH_HANDLING
    age_limit = SOLO_CASH_HANDLING_MIN_AGE

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        return entry.task_code.solo_cash_handling


class HazardousTaskRule(TaskRestrictionRule):
    rule_id = "RULE-024"
    name = "Hazardous Task Prohibition"
    description = "Hazardous tasks prohibited for workers under 18"
    template = messages.HAZARDOUS_TASK

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        return entry.task_code.is_hazardous


class SupervisorAttestationRule(TaskRestrictionRule):
    rule_id = "RULE-029"
    name = "Supervisor Attestation Required"
    description = "Certain tasks require supervisor presence attestation for minors"
    template = messages.SUPERVISOR_ATTESTATION

    def violates(self, entry: TimesheetEntry, age: int) -> bool:
        # Only minor days reach here, so for_minors and always behave the same
        if entry.task_code.supervisor_required == SupervisorRequirement.NONE:
            return False
        return not (entry.supervisor_present_name or "").strip()


TASK_RESTRICTION_RULES: list[BaseRule] = [
    TaskAgeRestrictionRule(),
    PowerMachineryRule(),
    DrivingRule(),
    SoloCashHandlingRule(),
    HazardousTaskRule(),
    SupervisorAttestationRule(),
]
