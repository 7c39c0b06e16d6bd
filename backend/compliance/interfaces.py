"""Protocols for the collaborators the engine consumes."""

from typing import Optional, Protocol, Sequence

from .types import (
    ComplianceCheckResult,
    Employee,
    EmployeeDocument,
    TimesheetWithEntries,
)


class TimesheetRepository(Protocol):
    """Read access to timesheets, employees and their documents."""

    async def load_timesheet_with_entries(self, timesheet_id: str) -> Optional[TimesheetWithEntries]:
        """Return the timesheet and its entries, or None if it does not exist."""
        ...

    async def load_employee(self, employee_id: str) -> Optional[Employee]:
        """Return the employee, or None if it does not exist."""
        ...

    async def load_employee_documents(self, employee_id: str) -> Sequence[EmployeeDocument]:
        """Return every document on file for the employee, including invalidated ones."""
        ...


class AuditSink(Protocol):
    """Durable compliance history."""

    async def record_compliance_check(self, timesheet_id: str, result: ComplianceCheckResult) -> None:
        ...
