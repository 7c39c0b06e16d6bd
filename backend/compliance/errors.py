"""Exceptions raised by the compliance engine."""


class NotFoundError(Exception):
    """A timesheet or employee id did not resolve."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ComplianceError(Exception):
    """
    An engine invariant was violated (malformed context, a rule that raised).

    Indicates a bug rather than something the employee can fix. The whole
    check fails instead of silently skipping a rule.
    """

    def __init__(self, message: str, rule_id: str | None = None):
        super().__init__(message)
        self.rule_id = rule_id


class AuditWriteFailure(Exception):
    """The audit sink could not persist a completed check."""

    def __init__(self, timesheet_id: str, cause: Exception):
        super().__init__(f"Failed to record compliance check for timesheet {timesheet_id}: {cause}")
        self.timesheet_id = timesheet_id
        self.cause = cause
