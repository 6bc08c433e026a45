"""
Clinic Audit Engine - Main Orchestrator.
Reconciles an insurer authorization against the clinic bill and the
coverage contract, and reports fragmentation and opacity findings.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .core.bill_index import BillIndex
from .core.models import (
    AuditConfig,
    AuditRow,
    AuthorizationLine,
    EventModel,
    SkillInput,
    SkillOutput,
)
from .exceptions import InvalidAuditInputError
from .modules.contract import ContractEvaluator
from .modules.event_model import EventModelInferrer
from .modules.fragmentation import FragmentationClassifier, LineContext
from .modules.integrity import LineIntegrityChecker
from .modules.matching import MatchCascade
from .modules.opacity import OpacityScorer
from .reporting.aggregator import AuditAggregator
from .reporting.report import AuditReportFormatter, ReportBuilder
from .settings import EngineSettings

logger = logging.getLogger(__name__)


class FragmentationAuditEngine:
    """
    Main orchestrator for the Reconciliation & Fragmentation Engine.

    Holds configuration only; every index and result is built inside a
    single :meth:`audit` call, so repeated calls on identical input yield
    identical output.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        opacity_threshold: int | None = None,
        systemic_m3_fraction: float | None = None,
        generic_bucket_codes: list[str] | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            settings: Base settings (read from the environment when omitted)
            opacity_threshold: IOP score from which a line's opacity applies
            systemic_m3_fraction: Share of copay in M3 lines that makes the
                pattern systemic
            generic_bucket_codes: Settlement codes treated as generic buckets
        """
        self.settings = (settings or EngineSettings()).merged_with(
            AuditConfig(
                opacity_threshold=opacity_threshold,
                systemic_m3_fraction=systemic_m3_fraction,
                generic_bucket_codes=generic_bucket_codes,
            )
        )
        self.event_model_inferrer = EventModelInferrer()
        self.fragmentation_classifier = FragmentationClassifier()
        self.opacity_scorer = OpacityScorer()
        self.integrity_checker = LineIntegrityChecker()

    def configure(
        self,
        opacity_threshold: int | None = None,
        systemic_m3_fraction: float | None = None,
        generic_bucket_codes: list[str] | None = None,
    ) -> "FragmentationAuditEngine":
        """
        Configure the engine settings.

        Returns:
            Self for method chaining
        """
        self.settings = self.settings.merged_with(
            AuditConfig(
                opacity_threshold=opacity_threshold,
                systemic_m3_fraction=systemic_m3_fraction,
                generic_bucket_codes=generic_bucket_codes,
            )
        )
        return self

    @staticmethod
    def _coerce_input(audit_input: SkillInput | Mapping[str, Any]) -> SkillInput:
        if isinstance(audit_input, SkillInput):
            return audit_input
        if isinstance(audit_input, Mapping):
            return SkillInput.model_validate(audit_input)
        raise InvalidAuditInputError(
            f"Expected SkillInput or mapping, got {type(audit_input).__name__}"
        )

    @staticmethod
    def missing_inputs(audit_input: SkillInput) -> list[str]:
        """Name every input category that is empty."""
        missing = []
        if not audit_input.bill.items:
            missing.append("bill.items")
        if not audit_input.authorization.lines():
            missing.append("authorization.folios")
        if not audit_input.contract.rules:
            missing.append("contract.rules")
        return missing

    def _error_output(self, message: str, audit_input: SkillInput) -> SkillOutput:
        return SkillOutput(
            event_model=EventModel(notes=message),
            report_text=ReportBuilder.build_error(message),
            metadata=audit_input.metadata,
            error=message,
        )

    def audit_line(
        self,
        line: AuthorizationLine,
        matcher: MatchCascade,
        contract_evaluator: ContractEvaluator,
        event_model: EventModel,
        settings: EngineSettings,
    ) -> AuditRow:
        """
        Audit one authorization line.

        Depends only on read-only shared state, never on sibling lines.
        """
        trace = matcher.trace(line)
        contract_check = contract_evaluator.evaluate(line)
        ctx = LineContext.build(line, trace, event_model, settings)
        fragmentation = self.fragmentation_classifier.classify(ctx)
        opacity = self.opacity_scorer.score(ctx, contract_check)

        logger.debug(
            "Line %s: trace=%s contract=%s level=%s motor=%s iop=%d",
            line.id,
            trace.status.value,
            contract_check.state.value,
            fragmentation.level.value,
            fragmentation.motor.value,
            opacity.score,
        )

        return AuditRow(
            line_id=line.id,
            folio_id=line.folio_id,
            code=line.code,
            description=line.description,
            total_value=line.total_value,
            covered_amount=line.covered_amount,
            patient_copay=line.patient_copay,
            trace=trace,
            contract_check=contract_check,
            fragmentation=fragmentation,
            opacity=opacity,
            integrity=self.integrity_checker.check(line),
        )

    def audit(self, audit_input: SkillInput | Mapping[str, Any]) -> SkillOutput:
        """
        Perform one audit.

        Args:
            audit_input: The three canonical inputs (SkillInput or dict)

        Returns:
            Summary, event model, findings matrix, one row per analysed
            line, report text and complaint text. When an input category
            is empty, an error-shaped output whose report starts with the
            CRITICAL ERROR marker.

        Raises:
            InvalidAuditInputError: If the input is neither a SkillInput nor a mapping
            pydantic.ValidationError: If a mapping does not validate
        """
        audit_input = self._coerce_input(audit_input)

        missing = self.missing_inputs(audit_input)
        if missing:
            message = f"Stop condition - missing input: {', '.join(missing)}"
            logger.warning(message)
            return self._error_output(message, audit_input)

        settings = self.settings.merged_with(audit_input.config)
        if settings.opacity_threshold > self.opacity_scorer.max_score:
            logger.warning(
                "Opacity threshold %d exceeds the maximum achievable score %d; "
                "opacity can never apply",
                settings.opacity_threshold,
                self.opacity_scorer.max_score,
            )

        lines = audit_input.authorization.lines()
        logger.info(
            "Starting audit: %d bill items, %d authorization lines, %d contract rules",
            len(audit_input.bill.items),
            len(lines),
            len(audit_input.contract.rules),
        )

        index = BillIndex.build(audit_input.bill.items)
        event_model = self.event_model_inferrer.infer(index)
        matcher = MatchCascade(index)
        contract_evaluator = ContractEvaluator(audit_input.contract)

        rows: list[AuditRow] = []
        for line in lines:
            if line.total_value == 0:
                logger.debug("Skipping line %s with zero total value", line.id)
                continue
            rows.append(
                self.audit_line(line, matcher, contract_evaluator, event_model, settings)
            )

        aggregator = AuditAggregator(settings)
        summary = aggregator.summarize(rows, audit_input.authorization.declared_total_copay)
        report_builder = ReportBuilder(settings.opacity_threshold)

        logger.info(
            "Audit complete: %d rows, impact %d, max IOP %d, systemic=%s",
            len(rows),
            summary.total_fragmentation_impact,
            summary.global_opacity.max_score,
            summary.systemic_pattern.is_systemic,
        )

        return SkillOutput(
            summary=summary,
            event_model=event_model,
            matrix=aggregator.build_matrix(rows),
            audit_rows=rows,
            report_text=report_builder.build_report(
                event_model, rows, summary, audit_input.metadata
            ),
            complaint_text=report_builder.build_complaint(rows),
            metadata=audit_input.metadata,
        )

    def audit_with_formatter(
        self, audit_input: SkillInput | Mapping[str, Any]
    ) -> AuditReportFormatter:
        """
        Perform audit and return a formatter for output.
        """
        return AuditReportFormatter(self.audit(audit_input))


# Convenience function for quick audits
def run_audit(
    audit_input: SkillInput | Mapping[str, Any],
    **overrides: Any,
) -> SkillOutput:
    """
    Convenience function for one-off audits.

    Args:
        audit_input: The canonical inputs
        **overrides: Engine settings overrides (opacity_threshold, ...)

    Returns:
        Complete audit output
    """
    engine = FragmentationAuditEngine(**overrides)
    return engine.audit(audit_input)
