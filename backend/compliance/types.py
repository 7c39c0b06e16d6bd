"""Type definitions for the compliance module."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional


class AgeBand(str, Enum):
    """Age classifications that determine which statutory limits apply."""
    AGES_12_13 = "12-13"
    AGES_14_15 = "14-15"
    AGES_16_17 = "16-17"
    ADULT = "18+"


MINOR_AGE_BANDS = frozenset({AgeBand.AGES_12_13, AgeBand.AGES_14_15, AgeBand.AGES_16_17})


class RuleCategory(str, Enum):
    """Families of compliance rules."""
    DOCUMENTATION = "documentation"
    HOUR_LIMIT = "hour_limit"
    TIME_WINDOW = "time_window"
    TASK_RESTRICTION = "task_restriction"
    BREAK = "break"


class RuleOutcome(str, Enum):
    """Outcome of evaluating a single rule."""
    PASS = "pass"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


class DocumentType(str, Enum):
    PARENTAL_CONSENT = "parental_consent"
    WORK_PERMIT = "work_permit"
    SAFETY_TRAINING = "safety_training"


class SupervisorRequirement(str, Enum):
    NONE = "none"
    FOR_MINORS = "for_minors"
    ALWAYS = "always"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


# ============================================================================
# Loaded entities
# ============================================================================


@dataclass(frozen=True)
class Employee:
    """Employee data needed for compliance checks."""
    id: str
    name: str
    date_of_birth: date
    email: str = ""
    is_supervisor: bool = False
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class EmployeeDocument:
    """A compliance document on file for an employee."""
    id: str
    employee_id: str
    type: DocumentType
    uploaded_at: Optional[datetime] = None
    uploaded_by: Optional[str] = None
    expires_at: Optional[date] = None
    invalidated_at: Optional[datetime] = None

    @property
    def is_valid(self) -> bool:
        """Not revoked or otherwise invalidated."""
        return self.invalidated_at is None


@dataclass(frozen=True)
class TaskCode:
    """Task classification used by task restriction rules."""
    id: str
    code: str
    name: str
    min_age_allowed: int = 12
    is_hazardous: bool = False
    supervisor_required: SupervisorRequirement = SupervisorRequirement.NONE
    solo_cash_handling: bool = False
    driving_required: bool = False
    power_machinery: bool = False


@dataclass(frozen=True)
class Timesheet:
    id: str
    employee_id: str
    week_start_date: str  # ISO date string, always a Sunday
    status: str = "open"


@dataclass(frozen=True)
class TimesheetEntry:
    """One block of work on one day."""
    id: str
    work_date: str  # ISO date string
    task_code: TaskCode
    start_time: str  # HH:MM format
    end_time: str  # HH:MM format
    hours: float
    is_school_day: bool = False
    school_day_override_note: Optional[str] = None
    supervisor_present_name: Optional[str] = None
    meal_break_confirmed: Optional[bool] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class TimesheetWithEntries:
    timesheet: Timesheet
    entries: tuple[TimesheetEntry, ...] = ()


# ============================================================================
# Evaluation context
# ============================================================================


@dataclass(frozen=True)
class ComplianceContext:
    """
    Everything rules evaluate against, derived once per check.

    Daily maps are read-only views keyed by ISO date in calendar order.
    ``daily_ages`` and ``daily_age_bands`` cover all seven days of the week;
    ``daily_hours`` and ``daily_entries`` cover the days with entries.
    """
    employee: Employee
    timesheet: Timesheet
    documents: tuple[EmployeeDocument, ...]
    daily_ages: Mapping[str, int]
    daily_age_bands: Mapping[str, AgeBand]
    daily_hours: Mapping[str, float]
    daily_entries: Mapping[str, tuple[TimesheetEntry, ...]]
    school_days: tuple[str, ...]
    work_days: tuple[str, ...]
    week_total_hours: float
    is_school_week: bool
    check_date: date  # civil date the check was performed, in the compliance timezone

    @property
    def days_worked(self) -> int:
        return len(self.work_days)

    @property
    def age_bands(self) -> frozenset[AgeBand]:
        """Every age band the employee is in at some point during the week."""
        return frozenset(self.daily_age_bands.values())

    @property
    def has_minor_age_band(self) -> bool:
        return bool(self.age_bands & MINOR_AGE_BANDS)

    def is_school_day(self, work_date: str) -> bool:
        return any(e.is_school_day for e in self.daily_entries.get(work_date, ()))


# ============================================================================
# Rule results
# ============================================================================


def freeze(value: Any) -> Any:
    """Read-only copy: mappings become MappingProxyType, lists and tuples become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Plain dicts and lists again, for serialization."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class RuleDetails:
    """Structured evidence attached to every rule result. Nested values are frozen on construction."""
    rule_description: str
    checked_values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    threshold: Optional[float | str] = None
    actual_value: Optional[float | str] = None

    def __post_init__(self):
        object.__setattr__(self, "checked_values", freeze(self.checked_values))

    def to_dict(self) -> dict:
        data = {
            "rule_description": self.rule_description,
            "checked_values": thaw(self.checked_values),
        }
        if self.threshold is not None:
            data["threshold"] = self.threshold
        if self.actual_value is not None:
            data["actual_value"] = self.actual_value
        return data


@dataclass(frozen=True)
class RuleResult:
    """Base of the result variants; ``result`` is fixed per variant."""
    rule_id: str
    rule_name: str
    details: RuleDetails

    result: ClassVar[RuleOutcome]

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "result": self.result.value,
            "details": self.details.to_dict(),
        }


@dataclass(frozen=True)
class RulePassed(RuleResult):
    result: ClassVar[RuleOutcome] = RuleOutcome.PASS


@dataclass(frozen=True)
class RuleNotApplicable(RuleResult):
    result: ClassVar[RuleOutcome] = RuleOutcome.NOT_APPLICABLE


@dataclass(frozen=True)
class RuleFailed(RuleResult):
    """A violation; message and remediation are always present."""
    error_message: str
    remediation_guidance: str
    affected_dates: tuple[str, ...] = ()
    affected_entries: tuple[str, ...] = ()

    result: ClassVar[RuleOutcome] = RuleOutcome.FAIL

    def to_violation(self) -> "ComplianceViolation":
        return ComplianceViolation(
            rule_id=self.rule_id,
            rule_name=self.rule_name,
            message=self.error_message,
            remediation=self.remediation_guidance,
            affected_dates=self.affected_dates,
            affected_entries=self.affected_entries,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["details"].update({
            "message": self.error_message,
            "affected_dates": list(self.affected_dates),
            "affected_entries": list(self.affected_entries),
        })
        data["error_message"] = self.error_message
        data["remediation_guidance"] = self.remediation_guidance
        return data


@dataclass(frozen=True)
class ComplianceViolation:
    """User-facing violation information."""
    rule_id: str
    rule_name: str
    message: str
    remediation: str
    affected_dates: tuple[str, ...] = ()
    affected_entries: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "message": self.message,
            "remediation": self.remediation,
            "affected_dates": list(self.affected_dates),
            "affected_entries": list(self.affected_entries),
        }


@dataclass(frozen=True)
class ComplianceCheckOptions:
    """Options for running compliance checks."""
    stop_on_first_failure: bool = False
    raise_on_audit_failure: bool = False


@dataclass(frozen=True)
class ComplianceCheckResult:
    """Aggregate of every rule result for one timesheet."""
    timesheet_id: str
    employee_id: str
    checked_at: datetime
    results: tuple[RuleResult, ...]
    employee_age_at_week_start: int

    @property
    def passed(self) -> bool:
        return not any(r.result == RuleOutcome.FAIL for r in self.results)

    @property
    def failed_rules(self) -> list[RuleFailed]:
        return [r for r in self.results if isinstance(r, RuleFailed)]

    @property
    def passed_rules(self) -> list[RuleResult]:
        return [r for r in self.results if r.result == RuleOutcome.PASS]

    @property
    def not_applicable_rules(self) -> list[RuleResult]:
        return [r for r in self.results if r.result == RuleOutcome.NOT_APPLICABLE]

    @property
    def violations(self) -> list[ComplianceViolation]:
        return [r.to_violation() for r in self.failed_rules]

    @property
    def rule_count(self) -> int:
        """Number of rules evaluated."""
        return len(self.results)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "passed": self.passed,
            "timesheet_id": self.timesheet_id,
            "employee_id": self.employee_id,
            "checked_at": self.checked_at.isoformat(),
            "rule_count": self.rule_count,
            "results": [r.to_dict() for r in self.results],
            "violations": [v.to_dict() for v in self.violations],
        }
