import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from compliance.context import derive_context
from compliance.types import (
    DocumentType,
    Employee,
    EmployeeDocument,
    SupervisorRequirement,
    TaskCode,
    Timesheet,
    TimesheetEntry,
    TimesheetWithEntries,
)
from utils.time import time_to_minutes

# A school-season week, Sunday through Saturday
WEEK_START = "2024-01-14"
CHECK_DATE = date(2024, 1, 20)
FIXED_NOW = datetime(2024, 1, 20, 17, 0, tzinfo=timezone.utc)


def day_of_week(offset: int, week_start: str = WEEK_START) -> str:
    """ISO date `offset` days after the week start (0 = Sunday)."""
    return (date.fromisoformat(week_start) + timedelta(days=offset)).isoformat()


def dob_for_age(age: int, on: str = WEEK_START) -> date:
    """A birth date making the employee `age` on the given day, birthday well outside the week."""
    d = date.fromisoformat(on)
    return date(d.year - age - 1, d.month, d.day) + timedelta(days=60)


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_task_code():
    """Factory to create TaskCode objects."""
    def _make_task_code(
        code: str = "F1",
        name: str = "Field Work",
        min_age_allowed: int = 12,
        supervisor_required: SupervisorRequirement = SupervisorRequirement.NONE,
        **kwargs,
    ) -> TaskCode:
        return TaskCode(
            id=f"task-{code}",
            code=code,
            name=name,
            min_age_allowed=min_age_allowed,
            supervisor_required=supervisor_required,
            **kwargs,
        )
    return _make_task_code


@pytest.fixture
def make_entry(make_task_code):
    """Factory to create TimesheetEntry objects; hours default to the time span."""
    counter = itertools.count(1)

    def _make_entry(
        work_date: str,
        start_time: str = "15:30",
        end_time: str = "18:30",
        hours: Optional[float] = None,
        task_code: Optional[TaskCode] = None,
        entry_id: Optional[str] = None,
        **kwargs,
    ) -> TimesheetEntry:
        if hours is None:
            hours = (time_to_minutes(end_time) - time_to_minutes(start_time)) / 60
        return TimesheetEntry(
            id=entry_id or f"entry-{next(counter):02d}",
            work_date=work_date,
            task_code=task_code or make_task_code(),
            start_time=start_time,
            end_time=end_time,
            hours=hours,
            **kwargs,
        )
    return _make_entry


@pytest.fixture
def make_employee():
    """Factory to create Employee objects."""
    def _make_employee(
        age: Optional[int] = None,
        date_of_birth: Optional[date] = None,
        name: str = "Sam Rivera",
        employee_id: str = "emp-1",
        **kwargs,
    ) -> Employee:
        if date_of_birth is None:
            date_of_birth = dob_for_age(15 if age is None else age)
        return Employee(id=employee_id, name=name, date_of_birth=date_of_birth, **kwargs)
    return _make_employee


@pytest.fixture
def make_document():
    """Factory to create EmployeeDocument objects."""
    counter = itertools.count(1)

    def _make_document(
        doc_type: DocumentType,
        employee_id: str = "emp-1",
        expires_at: Optional[date] = None,
        invalidated_at: Optional[datetime] = None,
    ) -> EmployeeDocument:
        return EmployeeDocument(
            id=f"doc-{next(counter)}",
            employee_id=employee_id,
            type=doc_type,
            uploaded_at=datetime(2023, 9, 1, tzinfo=timezone.utc),
            uploaded_by="supervisor-1",
            expires_at=expires_at,
            invalidated_at=invalidated_at,
        )
    return _make_document


@pytest.fixture
def complete_documents(make_document):
    """Consent, unexpired work permit and safety training."""
    return [
        make_document(DocumentType.PARENTAL_CONSENT),
        make_document(DocumentType.WORK_PERMIT, expires_at=date(2025, 6, 30)),
        make_document(DocumentType.SAFETY_TRAINING),
    ]


@pytest.fixture
def make_context(make_employee, complete_documents):
    """Factory to create ComplianceContext objects through the context builder."""
    def _make_context(
        entries=(),
        employee: Optional[Employee] = None,
        documents=None,
        week_start: str = WEEK_START,
        check_date: date = CHECK_DATE,
        age: Optional[int] = None,
    ):
        employee = employee or make_employee(age=age)
        timesheet = Timesheet(id="ts-1", employee_id=employee.id, week_start_date=week_start)
        return derive_context(
            timesheet=timesheet,
            entries=entries,
            employee=employee,
            documents=complete_documents if documents is None else documents,
            check_date=check_date,
        )
    return _make_context


# ============================================================================
# In-memory collaborators
# ============================================================================


class InMemoryTimesheetRepository:
    def __init__(self):
        self.timesheets: dict[str, TimesheetWithEntries] = {}
        self.employees: dict[str, Employee] = {}
        self.documents: dict[str, list[EmployeeDocument]] = {}

    def add(self, timesheet: Timesheet, entries, employee: Employee, documents=()):
        self.timesheets[timesheet.id] = TimesheetWithEntries(timesheet=timesheet, entries=tuple(entries))
        self.employees[employee.id] = employee
        self.documents[employee.id] = list(documents)

    async def load_timesheet_with_entries(self, timesheet_id: str):
        return self.timesheets.get(timesheet_id)

    async def load_employee(self, employee_id: str):
        return self.employees.get(employee_id)

    async def load_employee_documents(self, employee_id: str):
        return list(self.documents.get(employee_id, []))


class RecordingAuditSink:
    def __init__(self, error: Optional[Exception] = None):
        self.calls = []
        self.error = error

    async def record_compliance_check(self, timesheet_id, result):
        self.calls.append((timesheet_id, result))
        if self.error is not None:
            raise self.error


@pytest.fixture
def repository():
    return InMemoryTimesheetRepository()


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()
