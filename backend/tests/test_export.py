"""Tests for the compliance audit CSV export."""

import csv
import io
from datetime import datetime, timedelta, timezone

from compliance.export import (
    AUDIT_CSV_COLUMNS,
    ComplianceAuditRecord,
    generate_compliance_audit_csv,
    generate_compliance_audit_filename,
)


def make_record(**overrides):
    values = dict(
        checked_at=datetime(2024, 1, 20, 17, 5, 9, 123456, tzinfo=timezone.utc),
        employee_name="Rivera, Sam",
        employee_id="emp-1",
        employee_age_on_date=15,
        age_band="14-15",
        rule_id="RULE-025",
        result="fail",
        week_start_date="2024-01-14",
        details={"rule_description": "Meal break after 6 hours", "message": 'Said "no break"'},
    )
    values.update(overrides)
    return ComplianceAuditRecord(**values)


def parse(text):
    return list(csv.reader(io.StringIO(text)))


class TestAuditCsv:
    def test_header_only_when_empty(self):
        text = generate_compliance_audit_csv([])

        assert text == ",".join(AUDIT_CSV_COLUMNS) + "\n"

    def test_row_values(self):
        rows = parse(generate_compliance_audit_csv([make_record()]))

        assert rows[0] == AUDIT_CSV_COLUMNS
        row = dict(zip(rows[0], rows[1]))
        assert row["Timestamp"] == "2024-01-20 17:05:09.123"
        assert row["Employee Name"] == "Rivera, Sam"
        assert row["Age On Date"] == "15"
        assert row["Age Band"] == "14-15"
        assert row["Rule Description"] == "Meal break after 6 hours"
        assert row["Result"] == "fail"
        assert row["Timesheet Week Start"] == "2024-01-14"

    def test_commas_and_quotes_are_escaped(self):
        text = generate_compliance_audit_csv([make_record()])

        assert '"Rivera, Sam"' in text
        assert '\\""no break\\""' in text
        details = dict(zip(*parse(text)))["Details"]
        assert details == (
            '{"rule_description": "Meal break after 6 hours", "message": "Said \\"no break\\""}'
        )

    def test_timestamp_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        record = make_record(checked_at=datetime(2024, 1, 20, 12, 0, 0, 5000, tzinfo=eastern))

        row = parse(generate_compliance_audit_csv([record]))[1]

        assert row[0] == "2024-01-20 17:00:00.005"

    def test_missing_description_left_blank(self):
        row = parse(generate_compliance_audit_csv([make_record(details={})]))[1]

        assert row[AUDIT_CSV_COLUMNS.index("Rule Description")] == ""
        assert row[AUDIT_CSV_COLUMNS.index("Details")] == "{}"

    def test_one_row_per_record(self):
        records = [make_record(rule_id=f"RULE-00{i}") for i in range(1, 4)]

        rows = parse(generate_compliance_audit_csv(records))

        assert [r[AUDIT_CSV_COLUMNS.index("Rule ID")] for r in rows[1:]] == [
            "RULE-001", "RULE-002", "RULE-003",
        ]


def test_audit_filename():
    assert generate_compliance_audit_filename("2024-01-01", "2024-01-31") == (
        "compliance-audit-2024-01-01-to-2024-01-31.csv"
    )
