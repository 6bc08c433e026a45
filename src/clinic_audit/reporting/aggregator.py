"""
Audit Aggregation.
Pure folds over the audit rows: money totals, global opacity, systemic
pattern detection and the findings matrix.
"""

from ..core.models import (
    AuditRow,
    AuditSummary,
    FindingLevel,
    FindingRow,
    GlobalOpacity,
    Money,
    Motor,
    SystemicPattern,
)
from ..settings import EngineSettings


class AuditAggregator:
    """
    Rolls per-line results into a summary. Runs only once every row exists;
    the systemic verdict is a function of the whole set.
    """

    SYSTEMIC_M1_COUNT = 3
    SYSTEMIC_M2_COUNT = 5

    def __init__(self, settings: EngineSettings) -> None:
        self.settings = settings

    def systemic_pattern(self, rows: list[AuditRow], total_copay: Money) -> SystemicPattern:
        """Detect fragmentation that repeats often enough to be a practice."""
        m1_count = sum(1 for r in rows if r.fragmentation.motor == Motor.M1)
        m2_count = sum(1 for r in rows if r.fragmentation.motor == Motor.M2)
        m3_copay = sum(r.patient_copay for r in rows if r.fragmentation.motor == Motor.M3)
        m3_fraction = m3_copay / total_copay if total_copay > 0 else 0.0

        is_systemic = (
            m1_count >= self.SYSTEMIC_M1_COUNT
            or m2_count >= self.SYSTEMIC_M2_COUNT
            or (m3_copay > 0 and m3_fraction >= self.settings.systemic_m3_fraction)
        )
        return SystemicPattern(
            m1_count=m1_count,
            m2_count=m2_count,
            m3_copay_fraction=m3_fraction,
            is_systemic=is_systemic,
        )

    def summarize(
        self,
        rows: list[AuditRow],
        declared_total_copay: Money | None = None,
    ) -> AuditSummary:
        """
        Build the audit summary.

        Args:
            rows: Every audit row of the run
            declared_total_copay: Copay total stated by the authorization, if any

        Returns:
            Summary derived purely from the rows
        """
        total_copay = sum(r.patient_copay for r in rows)
        impact = sum(
            r.fragmentation.economic_impact
            for r in rows
            if r.fragmentation.level != FindingLevel.CORRECT
        )
        max_score = max((r.opacity.score for r in rows), default=0)

        return AuditSummary(
            total_copay_analyzed=total_copay,
            total_fragmentation_impact=impact,
            global_opacity=GlobalOpacity(
                applies=max_score >= self.settings.opacity_threshold,
                max_score=max_score,
            ),
            systemic_pattern=self.systemic_pattern(rows, total_copay),
            unbalanced_lines=sum(1 for r in rows if not r.integrity.balanced),
            declared_copay_difference=(
                declared_total_copay - total_copay
                if declared_total_copay is not None
                else None
            ),
        )

    @staticmethod
    def build_matrix(rows: list[AuditRow]) -> list[FindingRow]:
        """One matrix entry per fragmented or opacity-flagged row."""
        matrix: list[FindingRow] = []
        for row in rows:
            if not row.is_finding:
                continue
            rationale = row.fragmentation.rationale
            if row.opacity.applies:
                rationale = f"{rationale} [OPACITY IOP {row.opacity.score}]".strip()
            matrix.append(
                FindingRow(
                    item_label=f"{row.code} - {row.description}",
                    classification=row.fragmentation.level,
                    motor=row.fragmentation.motor,
                    rationale=rationale,
                    impact=row.patient_copay,
                    score=row.opacity.score,
                )
            )
        return matrix
