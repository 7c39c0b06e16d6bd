from .database import init_db, get_database, close_db
from .models import (
    EmployeeDoc,
    EmployeeDocumentDoc,
    TaskCodeDoc,
    TimesheetDoc,
    TimesheetEntryDoc,
    ComplianceCheckLogDoc,
)
from .repository import BeanieTimesheetRepository, BeanieComplianceAuditSink

__all__ = [
    "init_db",
    "get_database",
    "close_db",
    "EmployeeDoc",
    "EmployeeDocumentDoc",
    "TaskCodeDoc",
    "TimesheetDoc",
    "TimesheetEntryDoc",
    "ComplianceCheckLogDoc",
    "BeanieTimesheetRepository",
    "BeanieComplianceAuditSink",
]
