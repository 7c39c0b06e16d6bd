"""
MongoDB-backed collaborators for the compliance engine.

Documents are mapped to the frozen compliance types at this boundary so
rules never see Beanie models.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from beanie import PydanticObjectId
from bson import ObjectId

from compliance.errors import NotFoundError
from compliance.export import ComplianceAuditRecord
from compliance.types import (
    AgeBand,
    ComplianceCheckResult,
    DocumentType,
    Employee,
    EmployeeDocument,
    EmployeeStatus,
    SupervisorRequirement,
    TaskCode,
    Timesheet,
    TimesheetEntry,
    TimesheetWithEntries,
)
from utils.age import get_age_band

from .models import (
    ComplianceCheckLogDoc,
    EmployeeDoc,
    EmployeeDocumentDoc,
    TaskCodeDoc,
    TimesheetDoc,
    TimesheetEntryDoc,
)

logger = logging.getLogger(__name__)


def _object_id(value: str) -> Optional[PydanticObjectId]:
    """Parse an id; malformed ids resolve to None (not found)."""
    if not value or not ObjectId.is_valid(value):
        return None
    return PydanticObjectId(value)


def _as_date(value: date | datetime | None) -> Optional[date]:
    # Mongo has no date type; dates come back as midnight datetimes
    if isinstance(value, datetime):
        return value.date()
    return value


def employee_from_doc(doc) -> Employee:
    return Employee(
        id=str(doc.id),
        name=doc.name,
        date_of_birth=_as_date(doc.date_of_birth),
        email=doc.email,
        is_supervisor=doc.is_supervisor,
        status=EmployeeStatus(doc.status),
    )


def document_from_doc(doc) -> EmployeeDocument:
    return EmployeeDocument(
        id=str(doc.id),
        employee_id=doc.employee_id,
        type=DocumentType(doc.type),
        uploaded_at=doc.uploaded_at,
        uploaded_by=doc.uploaded_by,
        expires_at=_as_date(doc.expires_at),
        invalidated_at=doc.invalidated_at,
    )


def task_code_from_doc(doc) -> TaskCode:
    return TaskCode(
        id=str(doc.id),
        code=doc.code,
        name=doc.name,
        min_age_allowed=doc.min_age_allowed,
        is_hazardous=doc.is_hazardous,
        supervisor_required=SupervisorRequirement(doc.supervisor_required),
        solo_cash_handling=doc.solo_cash_handling,
        driving_required=doc.driving_required,
        power_machinery=doc.power_machinery,
    )


def entry_from_doc(doc, task_code: TaskCode) -> TimesheetEntry:
    return TimesheetEntry(
        id=str(doc.id),
        work_date=doc.work_date,
        task_code=task_code,
        start_time=doc.start_time,
        end_time=doc.end_time,
        hours=float(doc.hours),
        is_school_day=doc.is_school_day,
        school_day_override_note=doc.school_day_override_note,
        supervisor_present_name=doc.supervisor_present_name,
        meal_break_confirmed=doc.meal_break_confirmed,
        notes=doc.notes,
    )


class BeanieTimesheetRepository:
    """Loads timesheets, employees and documents from MongoDB."""

    async def load_timesheet_with_entries(self, timesheet_id: str) -> Optional[TimesheetWithEntries]:
        oid = _object_id(timesheet_id)
        if oid is None:
            return None

        timesheet_doc = await TimesheetDoc.get(oid)
        if not timesheet_doc:
            return None

        entry_docs = await TimesheetEntryDoc.find({"timesheet_id": timesheet_id}).to_list()

        task_code_ids = {doc.task_code_id for doc in entry_docs}
        task_code_oids = [oid for oid in map(_object_id, task_code_ids) if oid is not None]
        task_code_docs = await TaskCodeDoc.find({"_id": {"$in": task_code_oids}}).to_list()
        task_codes = {str(doc.id): task_code_from_doc(doc) for doc in task_code_docs}

        entries = []
        for doc in entry_docs:
            task_code = task_codes.get(doc.task_code_id)
            if task_code is None:
                raise NotFoundError("TaskCode", doc.task_code_id)
            entries.append(entry_from_doc(doc, task_code))

        timesheet = Timesheet(
            id=str(timesheet_doc.id),
            employee_id=timesheet_doc.employee_id,
            week_start_date=timesheet_doc.week_start_date,
            status=timesheet_doc.status,
        )
        return TimesheetWithEntries(timesheet=timesheet, entries=tuple(entries))

    async def load_employee(self, employee_id: str) -> Optional[Employee]:
        oid = _object_id(employee_id)
        if oid is None:
            return None

        doc = await EmployeeDoc.get(oid)
        if not doc:
            return None
        return employee_from_doc(doc)

    async def load_employee_documents(self, employee_id: str) -> list[EmployeeDocument]:
        docs = await EmployeeDocumentDoc.find({"employee_id": employee_id}).to_list()
        return [document_from_doc(doc) for doc in docs]

    async def load_compliance_history(self, timesheet_id: str) -> list[ComplianceCheckLogDoc]:
        """Logged rule results for a timesheet, newest check first."""
        return await ComplianceCheckLogDoc.find({"timesheet_id": timesheet_id}).sort(
            [("checked_at", -1)]
        ).to_list()

    async def load_compliance_audit_records(
        self,
        start_date: date,
        end_date: date,
    ) -> list[ComplianceAuditRecord]:
        """
        Logged rule results checked between start_date and end_date (inclusive,
        UTC days), joined with their timesheet and employee for export.
        """
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)

        logs = await ComplianceCheckLogDoc.find(
            {"checked_at": {"$gte": start, "$lt": end}}
        ).sort([("checked_at", 1)]).to_list()

        timesheets: dict[str, Optional[TimesheetDoc]] = {}
        employees: dict[str, Optional[EmployeeDoc]] = {}
        records = []
        for log in logs:
            if log.timesheet_id not in timesheets:
                oid = _object_id(log.timesheet_id)
                timesheets[log.timesheet_id] = await TimesheetDoc.get(oid) if oid else None
            timesheet = timesheets[log.timesheet_id]
            if timesheet is None:
                logger.warning(f"Skipping audit log {log.id}: timesheet {log.timesheet_id} not found")
                continue

            if timesheet.employee_id not in employees:
                oid = _object_id(timesheet.employee_id)
                employees[timesheet.employee_id] = await EmployeeDoc.get(oid) if oid else None
            employee = employees[timesheet.employee_id]
            if employee is None:
                logger.warning(f"Skipping audit log {log.id}: employee {timesheet.employee_id} not found")
                continue

            try:
                age_band = get_age_band(log.employee_age)
            except ValueError:
                age_band = AgeBand.AGES_12_13

            records.append(ComplianceAuditRecord(
                checked_at=log.checked_at,
                employee_name=employee.name,
                employee_id=str(employee.id),
                employee_age_on_date=log.employee_age,
                age_band=age_band.value,
                rule_id=log.rule_id,
                result=log.result,
                week_start_date=timesheet.week_start_date,
                details=dict(log.details),
            ))

        return records


class BeanieComplianceAuditSink:
    """Writes one ComplianceCheckLogDoc per rule result."""

    async def record_compliance_check(self, timesheet_id: str, result: ComplianceCheckResult) -> None:
        logs = [
            ComplianceCheckLogDoc(
                timesheet_id=timesheet_id,
                rule_id=rule_result.rule_id,
                result=rule_result.result.value,
                details=rule_result.to_dict()["details"],
                checked_at=result.checked_at,
                employee_age=result.employee_age_at_week_start,
            )
            for rule_result in result.results
        ]
        if logs:
            await ComplianceCheckLogDoc.insert_many(logs)
        logger.debug(f"Recorded {len(logs)} compliance results for timesheet {timesheet_id}")
