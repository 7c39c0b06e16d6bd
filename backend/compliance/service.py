"""
Public entry points for compliance checks.

The default engine is wired to MongoDB on first use; callers that manage
their own collaborators (tests, batch jobs) pass an engine explicitly.
"""

import threading
from typing import Optional

from .engine import ComplianceEngine
from .registry import initialize_compliance_rules
from .types import ComplianceCheckOptions, ComplianceCheckResult

_default_engine: Optional[ComplianceEngine] = None
# Separate from the registry lock, which create_default_engine acquires
_engine_lock = threading.Lock()


def create_default_engine() -> ComplianceEngine:
    """Engine over the Beanie repository and audit sink. Requires init_db()."""
    from db.repository import BeanieComplianceAuditSink, BeanieTimesheetRepository
    from utils.log import setup_logging

    setup_logging()
    return ComplianceEngine(
        rule_set=initialize_compliance_rules(),
        repository=BeanieTimesheetRepository(),
        audit_sink=BeanieComplianceAuditSink(),
    )


def get_default_engine() -> ComplianceEngine:
    global _default_engine
    if _default_engine is not None:
        return _default_engine

    with _engine_lock:
        if _default_engine is None:
            _default_engine = create_default_engine()
    return _default_engine


def reset_default_engine() -> None:
    """Drop the process-wide engine. Intended for tests."""
    global _default_engine
    with _engine_lock:
        _default_engine = None


async def check_compliance(
    timesheet_id: str,
    options: Optional[ComplianceCheckOptions] = None,
    engine: Optional[ComplianceEngine] = None,
) -> ComplianceCheckResult:
    """Run every rule against a timesheet and record the result for audit."""
    engine = engine or get_default_engine()
    return await engine.run_compliance_check(timesheet_id, options)


async def preview_compliance(
    timesheet_id: str,
    engine: Optional[ComplianceEngine] = None,
) -> ComplianceCheckResult:
    """Same checks as check_compliance, without the audit write."""
    engine = engine or get_default_engine()
    return await engine.validate_compliance(timesheet_id)


def get_rule_count() -> int:
    """Number of rules registered in the process-wide rule set."""
    return len(initialize_compliance_rules())
