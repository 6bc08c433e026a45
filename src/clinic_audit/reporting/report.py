"""
Audit Report Module.
Renders the technical report and the complaint letter, and formats a
finished audit output for display or export.
"""

import json
from typing import Any

import pandas as pd

from ..core.models import (
    AuditMetadata,
    AuditRow,
    AuditSummary,
    EventModel,
    FindingLevel,
    SkillOutput,
)

ERROR_MARKER = "CRITICAL ERROR"

NO_CLAIM_TEXT = "No critical opacity findings: no claim is generated."


def format_money(amount: int) -> str:
    return f"${amount:,}"


class ReportBuilder:
    """
    Deterministic templating of the audit results.
    """

    RULE = "-" * 70
    HEAVY_RULE = "=" * 70

    COMPLAINT_GROUNDS = [
        (
            '1. "Blind grouping": the items listed consolidate amounts with no '
            "verifiable sub-item breakdown, preventing the member from exercising "
            "the right of defense."
        ),
        (
            '2. "Copay without cause": significant amounts (total {total}) are '
            'charged under generic descriptions ("not covered", "supplies") '
            "without proof of the underlying service."
        ),
        (
            "3. Literalness and integrity: the health contract is an adhesion "
            "contract; any obscurity must be construed in favour of the member "
            "(contra proferentem)."
        ),
    ]

    COMPLAINT_REQUEST = (
        "REQUEST:\n"
        "Annul the charge for the opaque items, or re-invoice them with the full "
        "unit breakdown that allows tracing them to the clinical record."
    )

    def __init__(self, opacity_threshold: int) -> None:
        self.opacity_threshold = opacity_threshold

    def _header(self, metadata: AuditMetadata | None) -> list[str]:
        if metadata is None:
            return []
        return [
            f"Patient: {metadata.patient_name or 'N/A'}",
            f"Provider: {metadata.clinic_name or 'N/A'}",
            f"Insurer: {metadata.insurer or 'N/A'} | Plan: {metadata.plan or 'N/A'}",
            f"Date: {metadata.financial_date or 'N/A'}",
            "",
        ]

    def _finding_block(self, row: AuditRow) -> list[str]:
        lines = [
            f"> [{row.fragmentation.motor.value}] {row.code} - {row.description}",
            f"  Patient copay: {format_money(row.patient_copay)}",
        ]
        if row.fragmentation.level != FindingLevel.CORRECT:
            lines.append(f"  Classification: {row.fragmentation.level.value}")
            lines.append(f"  Rationale: {row.fragmentation.rationale}")
            lines.append(
                f"  Economic impact: {format_money(row.fragmentation.economic_impact)}"
            )
        if row.opacity.applies:
            lines.append(f"  OPACITY DETECTED (IOP {row.opacity.score}):")
            for criterion in row.opacity.breakdown:
                lines.append(f"    - {criterion.label} (+{criterion.points})")
        lines.append(f"  Trace: {row.trace.status.value} | Contract: {row.contract_check.state.value}")
        return lines

    def build_report(
        self,
        event_model: EventModel,
        rows: list[AuditRow],
        summary: AuditSummary,
        metadata: AuditMetadata | None = None,
    ) -> str:
        """
        Render the technical report.

        Args:
            event_model: Inferred clinical context
            rows: All audit rows
            summary: Aggregated summary
            metadata: Optional caller-supplied header data

        Returns:
            Report text
        """
        findings = [row for row in rows if row.is_finding]
        unbalanced = [row for row in rows if not row.integrity.balanced]
        packages = ", ".join(p.value for p in event_model.detected_packages) or "None"
        opacity = summary.global_opacity
        systemic = summary.systemic_pattern

        lines: list[str] = [
            self.HEAVY_RULE,
            "FRAGMENTATION & OPACITY AUDIT REPORT",
            self.HEAVY_RULE,
            *self._header(metadata),
            f"Detected event: {event_model.principal_act.value}",
            f"Clinical packages: {packages}",
            "",
            self.RULE,
            "SUMMARY",
            self.RULE,
            f"Total copay analyzed: {format_money(summary.total_copay_analyzed)}",
            f"Fragmentation impact: {format_money(summary.total_fragmentation_impact)}",
            "Opacity status: "
            + (f"CRITICAL (max IOP {opacity.max_score})" if opacity.applies else "Traceable"),
            "Systemic pattern: "
            + (
                f"YES (M1={systemic.m1_count}, M2={systemic.m2_count}, "
                f"M3 copay share={systemic.m3_copay_fraction:.1%})"
                if systemic.is_systemic
                else "Not detected"
            ),
            "",
            self.RULE,
            "RELEVANT FINDINGS",
            self.RULE,
        ]

        if findings:
            for row in findings:
                lines.extend(self._finding_block(row))
                lines.append("")
        else:
            lines.append("No findings.")
            lines.append("")

        if unbalanced:
            lines.append(self.RULE)
            lines.append("UNBALANCED AUTHORIZATION LINES")
            lines.append(self.RULE)
            for row in unbalanced:
                lines.append(
                    f"- {row.code} - {row.description}: total {format_money(row.total_value)} "
                    f"differs from coverage + copay by {format_money(row.integrity.difference)}"
                )
            lines.append("")

        lines.append(self.RULE)
        lines.append("CONCLUSION")
        lines.append(self.RULE)
        if opacity.applies:
            lines.append(
                f"The account shows major settlement opacity (IOP >= {self.opacity_threshold}). "
                "A detailed breakdown is required; obscure clauses are construed "
                "against the drafter (contra proferentem)."
            )
        else:
            lines.append("Auditable account with specific fragmentation findings.")
        lines.append(self.HEAVY_RULE)

        return "\n".join(lines)

    def build_complaint(self, rows: list[AuditRow]) -> str:
        """Render the complaint letter for opacity-flagged rows only."""
        flagged = [row for row in rows if row.opacity.applies]
        if not flagged:
            return NO_CLAIM_TEXT

        total = format_money(sum(row.patient_copay for row in flagged))
        items = [
            f'- Item {row.code} "{row.description}" | Copay: {format_money(row.patient_copay)} '
            f"| IOP: {row.opacity.score}"
            for row in flagged
        ]
        grounds = [ground.format(total=total) for ground in self.COMPLAINT_GROUNDS]

        return "\n".join(
            [
                "TO THE INSURER / PROVIDER:",
                "",
                "Regarding the settlement analyzed, the following charges are "
                "disputed for breaching the duty of information (settlement "
                f"opacity detected, IOP >= {self.opacity_threshold}):",
                "",
                *items,
                "",
                "GROUNDS:",
                *grounds,
                "",
                self.COMPLAINT_REQUEST,
            ]
        )

    @staticmethod
    def build_error(message: str) -> str:
        """Render the report text of a stopped audit."""
        return f"{ERROR_MARKER}: {message}"


class AuditReportFormatter:
    """
    Formats a finished audit output for various output formats.
    """

    ROW_COLUMNS = [
        "line_id",
        "folio_id",
        "code",
        "description",
        "total_value",
        "covered_amount",
        "patient_copay",
        "trace_status",
        "contract_state",
        "domain",
        "level",
        "motor",
        "economic_impact",
        "iop",
        "opacity_applies",
        "balanced",
    ]

    def __init__(self, output: SkillOutput) -> None:
        self.output = output

    def to_text(self, include_complaint: bool = True) -> str:
        """Technical report, optionally followed by the complaint letter."""
        if not include_complaint or not self.output.complaint_text:
            return self.output.report_text
        return f"{self.output.report_text}\n\n{self.output.complaint_text}"

    def to_dict(self, by_alias: bool = True) -> dict[str, Any]:
        """JSON-compatible dictionary; camelCase keys by default."""
        return self.output.model_dump(mode="json", by_alias=by_alias)

    def to_json(self, indent: int = 2, by_alias: bool = True) -> str:
        return json.dumps(self.to_dict(by_alias=by_alias), indent=indent)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per audit row, flattened for tabular analysis."""
        records = [
            {
                "line_id": row.line_id,
                "folio_id": row.folio_id,
                "code": row.code,
                "description": row.description,
                "total_value": row.total_value,
                "covered_amount": row.covered_amount,
                "patient_copay": row.patient_copay,
                "trace_status": row.trace.status.value,
                "contract_state": row.contract_check.state.value,
                "domain": row.contract_check.domain.value,
                "level": row.fragmentation.level.value,
                "motor": row.fragmentation.motor.value,
                "economic_impact": row.fragmentation.economic_impact,
                "iop": row.opacity.score,
                "opacity_applies": row.opacity.applies,
                "balanced": row.integrity.balanced,
            }
            for row in self.output.audit_rows
        ]
        return pd.DataFrame(records, columns=self.ROW_COLUMNS)

    def print_summary(self) -> None:
        """Print the technical report to stdout."""
        print(self.to_text(include_complaint=False))

    def print_full(self) -> None:
        """Print the report and the complaint letter to stdout."""
        print(self.to_text(include_complaint=True))
