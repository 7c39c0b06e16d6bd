"""CSV export of compliance audit history."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pandas as pd

AUDIT_CSV_COLUMNS = [
    "Timestamp",
    "Employee Name",
    "Employee ID",
    "Age On Date",
    "Age Band",
    "Rule ID",
    "Rule Description",
    "Result",
    "Details",
    "Timesheet Week Start",
]


@dataclass(frozen=True)
class ComplianceAuditRecord:
    """One logged rule result joined with its employee and timesheet."""
    checked_at: datetime
    employee_name: str
    employee_id: str
    employee_age_on_date: int
    age_band: str
    rule_id: str
    result: str
    week_start_date: str
    details: dict = field(default_factory=dict)


def _format_timestamp(value: datetime) -> str:
    """UTC timestamp as "YYYY-MM-DD HH:MM:SS.mmm"."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%d %H:%M:%S}.{value.microsecond // 1000:03d}"


def generate_compliance_audit_csv(records: list[ComplianceAuditRecord]) -> str:
    """
    Render audit records as CSV text with a header row.

    Fields containing commas, quotes or newlines are quoted.
    """
    rows = [
        {
            "Timestamp": _format_timestamp(record.checked_at),
            "Employee Name": record.employee_name,
            "Employee ID": record.employee_id,
            "Age On Date": record.employee_age_on_date,
            "Age Band": record.age_band,
            "Rule ID": record.rule_id,
            "Rule Description": record.details.get("rule_description", ""),
            "Result": record.result,
            "Details": json.dumps(record.details, default=str),
            "Timesheet Week Start": record.week_start_date,
        }
        for record in records
    ]
    df = pd.DataFrame(rows, columns=AUDIT_CSV_COLUMNS)
    return df.to_csv(index=False, lineterminator="\n")


def generate_compliance_audit_filename(start_date: str, end_date: str) -> str:
    return f"compliance-audit-{start_date}-to-{end_date}.csv"
