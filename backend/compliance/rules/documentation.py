"""
Documentation rules: required documents must be on file for minors.

- RULE-001: Parental consent required (includes the COPPA disclosure, RULE-006)
- RULE-007: Parental consent not revoked
- RULE-027: Work permit required for ages 14-17
- RULE-028: Work permit not expired
- RULE-030: Safety training required
"""

from typing import Optional

from .. import messages
from ..rule import BaseRule
from ..types import (
    AgeBand,
    ComplianceContext,
    DocumentType,
    EmployeeDocument,
    RuleCategory,
    RuleResult,
)

WORK_PERMIT_BANDS = frozenset({AgeBand.AGES_14_15, AgeBand.AGES_16_17})


def _find_document(
    context: ComplianceContext,
    doc_type: DocumentType,
    valid: Optional[bool] = True,
) -> Optional[EmployeeDocument]:
    """First document of a type; ``valid=None`` matches regardless of invalidation."""
    for doc in context.documents:
        if doc.type != doc_type:
            continue
        if valid is None or doc.is_valid == valid:
            return doc
    return None


def _permit_age(context: ComplianceContext) -> Optional[int]:
    """Highest age in the week that falls in the 14-17 permit range."""
    permit_ages = [age for age in context.daily_ages.values() if 14 <= age < 18]
    return max(permit_ages) if permit_ages else None


class ParentalConsentRule(BaseRule):
    rule_id = "RULE-001"
    name = "Parental Consent Required"
    category = RuleCategory.DOCUMENTATION
    description = "Parental consent required for workers under 18"

    def check(self, context: ComplianceContext) -> RuleResult:
        consent = _find_document(context, DocumentType.PARENTAL_CONSENT)
        if consent is None:
            template = messages.PARENTAL_CONSENT_REQUIRED
            return self.failed(
                message=template.format_message(employee_name=context.employee.name),
                remediation=template.format_remediation(),
                has_consent=False,
                employee_name=context.employee.name,
            )

        return self.passed(
            has_consent=True,
            document_id=consent.id,
            uploaded_at=consent.uploaded_at.isoformat() if consent.uploaded_at else None,
        )


class ParentalConsentNotRevokedRule(BaseRule):
    rule_id = "RULE-007"
    name = "Parental Consent Not Revoked"
    category = RuleCategory.DOCUMENTATION
    description = "Parental consent must not be revoked"

    def check(self, context: ComplianceContext) -> RuleResult:
        revoked = _find_document(context, DocumentType.PARENTAL_CONSENT, valid=False)
        valid = _find_document(context, DocumentType.PARENTAL_CONSENT)

        # A revocation only matters when nothing has replaced it
        if revoked is not None and valid is None:
            template = messages.PARENTAL_CONSENT_REVOKED
            return self.failed(
                message=template.format_message(),
                remediation=template.format_remediation(),
                revoked_at=revoked.invalidated_at.isoformat(),
                has_valid_replacement=False,
            )

        return self.passed(has_valid_consent=valid is not None)


class WorkPermitRequiredRule(BaseRule):
    rule_id = "RULE-027"
    name = "Work Permit Required"
    category = RuleCategory.DOCUMENTATION
    description = "Work permit required for workers ages 14-17"
    applies_to_age_bands = WORK_PERMIT_BANDS

    def check(self, context: ComplianceContext) -> RuleResult:
        age = _permit_age(context)
        if age is None:
            return self.not_applicable(requires_permit=False)

        # Expiration is RULE-028's concern
        permit = _find_document(context, DocumentType.WORK_PERMIT)
        if permit is None:
            template = messages.WORK_PERMIT_REQUIRED
            return self.failed(
                message=template.format_message(age=age),
                remediation=template.format_remediation(),
                has_permit=False,
                age=age,
            )

        return self.passed(has_permit=True, document_id=permit.id)


class WorkPermitNotExpiredRule(BaseRule):
    rule_id = "RULE-028"
    name = "Work Permit Not Expired"
    category = RuleCategory.DOCUMENTATION
    description = "Work permit must not be expired"
    applies_to_age_bands = WORK_PERMIT_BANDS

    def check(self, context: ComplianceContext) -> RuleResult:
        if _permit_age(context) is None:
            return self.not_applicable(requires_permit=False)

        permit = _find_document(context, DocumentType.WORK_PERMIT)
        if permit is None:
            # Missing permit is reported by RULE-027
            return self.not_applicable(has_permit=False)

        if permit.expires_at is not None and permit.expires_at < context.check_date:
            template = messages.WORK_PERMIT_EXPIRED
            expires_at = permit.expires_at.isoformat()
            return self.failed(
                message=template.format_message(expires_at=messages.format_date(expires_at)),
                remediation=template.format_remediation(),
                expires_at=expires_at,
                check_date=context.check_date.isoformat(),
            )

        return self.passed(
            expires_at=permit.expires_at.isoformat() if permit.expires_at else None,
            is_valid=True,
        )


class SafetyTrainingRule(BaseRule):
    rule_id = "RULE-030"
    name = "Safety Training Required"
    category = RuleCategory.DOCUMENTATION
    description = "Safety training required for workers under 18"

    def check(self, context: ComplianceContext) -> RuleResult:
        training = _find_document(context, DocumentType.SAFETY_TRAINING)
        if training is None:
            template = messages.SAFETY_TRAINING_REQUIRED
            return self.failed(
                message=template.format_message(),
                remediation=template.format_remediation(),
                has_training=False,
            )

        return self.passed(has_training=True, document_id=training.id)


DOCUMENTATION_RULES: list[BaseRule] = [
    ParentalConsentRule(),
    ParentalConsentNotRevokedRule(),
    WorkPermitRequiredRule(),
    WorkPermitNotExpiredRule(),
    SafetyTrainingRule(),
]
