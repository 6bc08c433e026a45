"""
Tests for report rendering and output formatting.
"""

import json

import pytest

from clinic_audit import (
    ERROR_MARKER,
    AuditReportFormatter,
    BillItem,
    ContractRule,
    FragmentationAuditEngine,
    ReportBuilder,
    SkillOutput,
)
from clinic_audit.reporting.report import NO_CLAIM_TEXT, format_money

from conftest import make_input, make_line


@pytest.fixture
def opaque_output(
    surgery_bill: list[BillItem], partial_contract: list[ContractRule]
) -> SkillOutput:
    """Audit with one M1 line and one opacity-flagged M3 line."""
    lines = [
        make_line(
            id="L1",
            code="1100099",
            description="Recovery suite right",
            total_value=120000,
            covered_amount=0,
            patient_copay=120000,
        ),
        make_line(
            id="L2",
            code="3201001",
            description="Miscellaneous supplies",
            total_value=25000,
            covered_amount=0,
            patient_copay=25000,
        ),
    ]
    return FragmentationAuditEngine().audit(
        make_input(surgery_bill, lines, partial_contract)
    )


@pytest.fixture
def clean_output(
    surgery_bill: list[BillItem], partial_contract: list[ContractRule]
) -> SkillOutput:
    """Audit whose only line is covered and traceable."""
    line = make_line(
        description="Day bed, private room",
        total_value=300000,
        covered_amount=300000,
        patient_copay=0,
    )
    return FragmentationAuditEngine().audit(
        make_input(surgery_bill, [line], partial_contract)
    )


class TestReportBuilder:
    """Tests for ReportBuilder."""

    def test_format_money(self) -> None:
        """Test thousands grouping."""
        assert format_money(1234567) == "$1,234,567"
        assert format_money(0) == "$0"

    def test_report_sections(self, opaque_output: SkillOutput) -> None:
        """Test that the report carries summary and findings."""
        report = opaque_output.report_text

        assert "FRAGMENTATION & OPACITY AUDIT REPORT" in report
        assert "Detected event: SURGERY" in report
        assert "Total copay analyzed: $145,000" in report
        assert "Fragmentation impact: $145,000" in report
        assert "CRITICAL (max IOP 75)" in report
        assert "[M1] 1100099 - Recovery suite right" in report
        assert "OPACITY DETECTED (IOP 75)" in report
        assert "contra proferentem" in report

    def test_clean_report(self, clean_output: SkillOutput) -> None:
        """Test the report of an audit without findings."""
        report = clean_output.report_text

        assert "No findings." in report
        assert "Opacity status: Traceable" in report
        assert "Auditable account" in report

    def test_complaint_lists_only_flagged_rows(self, opaque_output: SkillOutput) -> None:
        """Test that M1 without opacity stays out of the complaint."""
        complaint = opaque_output.complaint_text

        assert "Miscellaneous supplies" in complaint
        assert "Recovery suite right" not in complaint
        assert "total $25,000" in complaint
        assert "REQUEST:" in complaint

    def test_no_claim_text(self, clean_output: SkillOutput) -> None:
        """Test the fixed text when nothing is opacity-flagged."""
        assert clean_output.complaint_text == NO_CLAIM_TEXT

    def test_build_error(self) -> None:
        """Test the error marker prefix."""
        text = ReportBuilder.build_error("missing input")
        assert text == f"{ERROR_MARKER}: missing input"
        assert text.startswith("CRITICAL ERROR")


class TestAuditReportFormatter:
    """Tests for AuditReportFormatter."""

    def test_to_text(self, opaque_output: SkillOutput) -> None:
        """Test report with and without the complaint letter."""
        formatter = AuditReportFormatter(opaque_output)

        assert formatter.to_text(include_complaint=False) == opaque_output.report_text
        full = formatter.to_text()
        assert full.startswith(opaque_output.report_text)
        assert full.endswith(opaque_output.complaint_text)

    def test_to_dict_uses_camel_case(self, opaque_output: SkillOutput) -> None:
        """Test wire keys of the dictionary form."""
        data = AuditReportFormatter(opaque_output).to_dict()

        assert "auditRows" in data
        assert "totalCopayAnalyzed" in data["summary"]
        assert data["auditRows"][0]["fragmentation"]["motor"] == "M1"
        assert data["matrix"][1]["score"] == 75

    def test_to_dict_snake_case(self, opaque_output: SkillOutput) -> None:
        """Test attribute names when aliases are disabled."""
        data = AuditReportFormatter(opaque_output).to_dict(by_alias=False)
        assert "audit_rows" in data

    def test_to_json_round_trips_through_model(self, opaque_output: SkillOutput) -> None:
        """Test that the JSON document validates back into the output."""
        document = AuditReportFormatter(opaque_output).to_json()
        restored = SkillOutput.model_validate(json.loads(document))

        assert restored == opaque_output

    def test_to_dataframe(self, opaque_output: SkillOutput) -> None:
        """Test the flattened table."""
        df = AuditReportFormatter(opaque_output).to_dataframe()

        assert list(df.columns) == AuditReportFormatter.ROW_COLUMNS
        assert len(df) == 2
        assert df["motor"].tolist() == ["M1", "M3"]
        assert df["iop"].tolist() == [30, 75]
        assert df["economic_impact"].sum() == 145000

    def test_to_dataframe_error_output(self) -> None:
        """Test an empty table for a stopped audit."""
        output = FragmentationAuditEngine().audit({})
        df = AuditReportFormatter(output).to_dataframe()

        assert df.empty
        assert list(df.columns) == AuditReportFormatter.ROW_COLUMNS

    def test_print_summary(
        self, clean_output: SkillOutput, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test printing the report only."""
        AuditReportFormatter(clean_output).print_summary()
        captured = capsys.readouterr().out

        assert "AUDIT REPORT" in captured
        assert NO_CLAIM_TEXT not in captured
