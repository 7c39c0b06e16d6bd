"""Compliance evaluation engine that runs every registered rule against a timesheet."""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from utils.time import today_in_compliance_tz, utc_now

from .context import build_context, check_context_invariants
from .errors import AuditWriteFailure, ComplianceError
from .interfaces import AuditSink, TimesheetRepository
from .registry import RuleSet
from .types import (
    ComplianceCheckOptions,
    ComplianceCheckResult,
    ComplianceContext,
    RuleOutcome,
    RuleResult,
)

logger = logging.getLogger(__name__)


class ComplianceEngine:
    """
    Main engine for running compliance checks.

    Builds the context for a timesheet, evaluates the rule set in
    registration order and aggregates the results. Only
    ``run_compliance_check`` writes to the audit sink.
    """

    def __init__(
        self,
        rule_set: RuleSet,
        repository: TimesheetRepository,
        audit_sink: Optional[AuditSink] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rule_set = rule_set
        self.repository = repository
        self.audit_sink = audit_sink
        self.clock = clock

    @property
    def rule_count(self) -> int:
        return len(self.rule_set)

    async def build_context(self, timesheet_id: str, today: Optional[date] = None) -> ComplianceContext:
        """Load and derive the context for a timesheet (NotFoundError if missing)."""
        if today is None:
            today = today_in_compliance_tz(self.clock())
        return await build_context(timesheet_id, self.repository, today=today)

    def evaluate(self, context: ComplianceContext, stop_on_first_failure: bool = False) -> tuple[RuleResult, ...]:
        """
        Evaluate rules in registration order.

        With ``stop_on_first_failure`` the results end at, and include, the
        first failing rule.

        Raises:
            ComplianceError: If the context is malformed or a rule raises
        """
        check_context_invariants(context)

        results: list[RuleResult] = []
        for rule in self.rule_set:
            try:
                result = rule.evaluate(context)
            except Exception as exc:
                logger.error(
                    f"Rule {rule.rule_id} raised while checking timesheet {context.timesheet.id}",
                    exc_info=True,
                )
                raise ComplianceError(
                    f"Rule {rule.rule_id} failed to evaluate: {exc}", rule_id=rule.rule_id
                ) from exc

            logger.debug(f"{rule.rule_id} {result.result.value} for timesheet {context.timesheet.id}")
            results.append(result)

            if stop_on_first_failure and result.result == RuleOutcome.FAIL:
                break

        return tuple(results)

    def check_context(
        self,
        context: ComplianceContext,
        options: Optional[ComplianceCheckOptions] = None,
    ) -> ComplianceCheckResult:
        """Evaluate an already-built context into an aggregate result."""
        options = options or ComplianceCheckOptions()
        results = self.evaluate(context, stop_on_first_failure=options.stop_on_first_failure)
        return ComplianceCheckResult(
            timesheet_id=context.timesheet.id,
            employee_id=context.employee.id,
            checked_at=self.clock(),
            results=results,
            employee_age_at_week_start=context.daily_ages[context.timesheet.week_start_date],
        )

    async def run_compliance_check(
        self,
        timesheet_id: str,
        options: Optional[ComplianceCheckOptions] = None,
    ) -> ComplianceCheckResult:
        """
        Check a timesheet and record the result in the audit sink.

        Raises:
            NotFoundError: If the timesheet or its employee does not exist
            ComplianceError: If the context is malformed or a rule raises
            AuditWriteFailure: Only when ``options.raise_on_audit_failure`` is set
        """
        options = options or ComplianceCheckOptions()
        context = await self.build_context(timesheet_id)
        result = self.check_context(context, options)
        self._log_result(result)

        if self.audit_sink is not None:
            await self._record(timesheet_id, result, options)
        else:
            logger.warning(f"No audit sink configured; check of timesheet {timesheet_id} not recorded")

        return result

    async def validate_compliance(self, timesheet_id: str) -> ComplianceCheckResult:
        """Check a timesheet without writing to the audit sink."""
        context = await self.build_context(timesheet_id)
        result = self.check_context(context)
        self._log_result(result, preview=True)
        return result

    async def _record(
        self,
        timesheet_id: str,
        result: ComplianceCheckResult,
        options: ComplianceCheckOptions,
    ) -> None:
        try:
            await self.audit_sink.record_compliance_check(timesheet_id, result)
        except Exception as exc:
            failure = AuditWriteFailure(timesheet_id, exc)
            logger.error(str(failure), exc_info=True)
            if options.raise_on_audit_failure:
                raise failure from exc

    @staticmethod
    def _log_result(result: ComplianceCheckResult, preview: bool = False) -> None:
        logger.info(
            f"Compliance {'preview' if preview else 'check'} for timesheet {result.timesheet_id}: "
            f"{'passed' if result.passed else 'failed'} "
            f"({len(result.failed_rules)} of {result.rule_count} rules failed)"
        )
