from datetime import datetime, date
from typing import Literal, Optional
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel

from utils import utc_now


# Valid values stored as plain strings
DocumentTypeValue = Literal["parental_consent", "work_permit", "safety_training"]
SupervisorRequiredValue = Literal["none", "for_minors", "always"]
ResultValue = Literal["pass", "fail", "not_applicable"]


class EmployeeDoc(Document):
    name: str
    email: Indexed(str, unique=True)
    date_of_birth: date
    is_supervisor: bool = False
    status: str = "active"  # "active", "archived"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "employees"


class EmployeeDocumentDoc(Document):
    """
    Compliance document on file for an employee.
    Revoked or superseded documents keep their row with invalidated_at set.
    """
    employee_id: Indexed(str)
    type: DocumentTypeValue
    file_url: Optional[str] = None
    uploaded_at: datetime = Field(default_factory=utc_now)
    uploaded_by: Optional[str] = None
    expires_at: Optional[date] = None  # Work permits only
    invalidated_at: Optional[datetime] = None

    class Settings:
        name = "employee_documents"
        indexes = [
            IndexModel([("employee_id", 1), ("type", 1)]),
        ]


class TaskCodeDoc(Document):
    """Task classification with the restrictions minors are checked against."""
    code: Indexed(str, unique=True)  # "F1", "R2", etc.
    name: str
    description: Optional[str] = None
    min_age_allowed: int = 12
    is_hazardous: bool = False
    supervisor_required: SupervisorRequiredValue = "none"
    solo_cash_handling: bool = False
    driving_required: bool = False
    power_machinery: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "task_codes"


class TimesheetDoc(Document):
    """One employee's timesheet for one Sunday-to-Saturday week."""
    employee_id: Indexed(str)
    week_start_date: str  # ISO: "2024-06-09", always a Sunday
    status: str = "open"  # "open", "submitted", "approved", "rejected"
    submitted_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "timesheets"
        indexes = [
            IndexModel(
                [("employee_id", 1), ("week_start_date", 1)],
                unique=True,
                name="unique_employee_week",
            ),
        ]


class TimesheetEntryDoc(Document):
    timesheet_id: Indexed(str)
    work_date: str  # ISO: "2024-06-10"
    task_code_id: str  # Reference to TaskCodeDoc
    start_time: str  # "15:30"
    end_time: str  # "19:00"
    hours: float
    is_school_day: bool = False
    school_day_override_note: Optional[str] = None
    supervisor_present_name: Optional[str] = None
    meal_break_confirmed: Optional[bool] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "timesheet_entries"
        indexes = [
            IndexModel([("timesheet_id", 1), ("work_date", 1)]),
        ]


class ComplianceCheckLogDoc(Document):
    """
    One row per rule result of an audited compliance check.
    Append-only history for regulators and supervisor review.
    """
    timesheet_id: str
    rule_id: str
    result: ResultValue
    details: dict = {}
    checked_at: datetime = Field(default_factory=utc_now)
    employee_age: int

    class Settings:
        name = "compliance_check_logs"
        indexes = [
            IndexModel([("timesheet_id", 1), ("checked_at", -1)]),
            IndexModel([("result", 1)]),
            IndexModel([("checked_at", -1)]),
        ]
