"""Base class for compliance rules."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from .types import (
    MINOR_AGE_BANDS,
    AgeBand,
    ComplianceContext,
    RuleCategory,
    RuleDetails,
    RuleFailed,
    RuleNotApplicable,
    RulePassed,
    RuleResult,
)


class BaseRule(ABC):
    """
    One independently testable compliance constraint.

    Subclasses declare identity as class attributes and implement ``check``.
    Rules hold no state: ``evaluate`` must not mutate the context, read the
    clock or perform I/O, so results are reproducible for a given context.
    """

    rule_id: str
    name: str
    category: RuleCategory
    description: str
    # Empty means the rule applies to every age band
    applies_to_age_bands: frozenset[AgeBand] = MINOR_AGE_BANDS

    def applies_to(self, context: ComplianceContext) -> bool:
        """True if any day of the week falls in one of the rule's age bands."""
        if not self.applies_to_age_bands:
            return True
        return bool(self.applies_to_age_bands & context.age_bands)

    def evaluate(self, context: ComplianceContext) -> RuleResult:
        """Evaluate the rule; bands outside the rule's scope yield not_applicable."""
        if not self.applies_to(context):
            return self.not_applicable(
                age_bands=sorted(band.value for band in context.age_bands),
            )
        return self.check(context)

    @abstractmethod
    def check(self, context: ComplianceContext) -> RuleResult:
        """Evaluate the rule for a context already known to be in scope."""
        pass

    # Result builders

    def _details(
        self,
        checked_values: dict[str, Any],
        threshold: Optional[float | str] = None,
        actual_value: Optional[float | str] = None,
    ) -> RuleDetails:
        return RuleDetails(
            rule_description=self.description,
            checked_values=checked_values,
            threshold=threshold,
            actual_value=actual_value,
        )

    def passed(
        self,
        threshold: Optional[float | str] = None,
        actual_value: Optional[float | str] = None,
        **checked_values: Any,
    ) -> RulePassed:
        return RulePassed(
            rule_id=self.rule_id,
            rule_name=self.name,
            details=self._details(checked_values, threshold, actual_value),
        )

    def not_applicable(self, **checked_values: Any) -> RuleNotApplicable:
        return RuleNotApplicable(
            rule_id=self.rule_id,
            rule_name=self.name,
            details=self._details(checked_values),
        )

    def failed(
        self,
        message: str,
        remediation: str,
        affected_dates: Iterable[str] = (),
        affected_entries: Iterable[str] = (),
        threshold: Optional[float | str] = None,
        actual_value: Optional[float | str] = None,
        **checked_values: Any,
    ) -> RuleFailed:
        # dict.fromkeys keeps first-seen order while dropping repeats
        return RuleFailed(
            rule_id=self.rule_id,
            rule_name=self.name,
            details=self._details(checked_values, threshold, actual_value),
            error_message=message,
            remediation_guidance=remediation,
            affected_dates=tuple(dict.fromkeys(affected_dates)),
            affected_entries=tuple(dict.fromkeys(affected_entries)),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"
