"""Youth labor compliance rule engine for timesheets."""

from .types import (
    AgeBand,
    ComplianceCheckOptions,
    ComplianceCheckResult,
    ComplianceContext,
    ComplianceViolation,
    RuleCategory,
    RuleFailed,
    RuleNotApplicable,
    RuleOutcome,
    RulePassed,
    RuleResult,
)
from .errors import AuditWriteFailure, ComplianceError, NotFoundError
from .rule import BaseRule
from .registry import RuleSet, initialize_compliance_rules, reset_compliance_rules
from .engine import ComplianceEngine
from .service import check_compliance, preview_compliance, get_rule_count

__all__ = [
    "AgeBand",
    "ComplianceCheckOptions",
    "ComplianceCheckResult",
    "ComplianceContext",
    "ComplianceViolation",
    "RuleCategory",
    "RuleFailed",
    "RuleNotApplicable",
    "RuleOutcome",
    "RulePassed",
    "RuleResult",
    "AuditWriteFailure",
    "ComplianceError",
    "NotFoundError",
    "BaseRule",
    "RuleSet",
    "initialize_compliance_rules",
    "reset_compliance_rules",
    "ComplianceEngine",
    "check_compliance",
    "preview_compliance",
    "get_rule_count",
]
