"""
Fragmentation Classification.
Decides whether a line splits a bundled act, unbundles standard supplies
or dumps cost into an opaque generic bucket. Motors run in fixed order
M1 -> M2 -> M3 and the first trigger wins.
"""

import re
from dataclasses import dataclass

from ..core.cascade import CascadeOutcome, Detector, list_detectors, run_cascade
from ..core.models import (
    AuthorizationLine,
    EventModel,
    FindingLevel,
    FragmentationResult,
    MatchOutcome,
    MatchTrace,
    Motor,
)
from ..settings import EngineSettings
from ..utils.normalization import normalize_text


@dataclass(frozen=True)
class LineContext:
    """Read-only view of everything the motors may look at for one line."""

    line: AuthorizationLine
    description: str  # normalized
    trace: MatchTrace
    event_model: EventModel
    settings: EngineSettings

    @classmethod
    def build(
        cls,
        line: AuthorizationLine,
        trace: MatchTrace,
        event_model: EventModel,
        settings: EngineSettings,
    ) -> "LineContext":
        return cls(
            line=line,
            description=normalize_text(line.description),
            trace=trace,
            event_model=event_model,
            settings=settings,
        )

    @property
    def is_generic_bucket(self) -> bool:
        return self.settings.is_generic_bucket(self.line.code)

    @property
    def uncovered_with_copay(self) -> bool:
        return self.line.covered_amount == 0 and self.line.patient_copay > 0


class FragmentationClassifier:
    """
    Ordered cascade of the three fragmentation motors.
    """

    # Acts that cannot exist apart from the principal procedure
    ACCESSORY_ACT_PATTERN = re.compile(
        r"\b(preparation|monitoring|equipment use|use of equipment|right to|"
        r"(room|suite|theat(er|re)|ward) right|recovery (room|suite)|preparacion|"
        r"monitorizacion|uso de equipo|derecho de)\b"
    )

    # Commodity supplies a bundled package price already covers
    STANDARD_SUPPLY_PATTERN = re.compile(
        r"\b(syringes?|hypodermic needles?|gauze( swabs?)?|swabs?|gloves?|electrodes?|"
        r"iv (line )?sets?|iv catheters?|jeringas?|agujas?|torulas?|guantes?|"
        r"electrodos?|bajadas?|branulas?)\b"
    )

    def __init__(self) -> None:
        self.detectors: list[Detector[LineContext, FragmentationResult]] = [
            Detector(
                detector_id=Motor.M1.value,
                name="Artificial Act Splitting",
                description=(
                    "Uncovered accessory act billed as autonomous outside a generic bucket"
                ),
                predicate=self._is_artificial_split,
                build_result=self._artificial_split_result,
            ),
            Detector(
                detector_id=Motor.M2.value,
                name="Package Unbundling",
                description="Standard supply charged apart from a detected bundled package",
                predicate=self._is_package_unbundling,
                build_result=self._package_unbundling_result,
            ),
            Detector(
                detector_id=Motor.M3.value,
                name="Untraceable Generic Dumping",
                description="Uncovered cost routed to a generic bucket with no bill anchor",
                predicate=self._is_generic_dumping,
                build_result=self._generic_dumping_result,
            ),
        ]

    # M1
    def _is_artificial_split(self, ctx: LineContext) -> bool:
        return (
            ctx.uncovered_with_copay
            and not ctx.is_generic_bucket
            and bool(self.ACCESSORY_ACT_PATTERN.search(ctx.description))
        )

    def _artificial_split_result(self, ctx: LineContext) -> FragmentationResult:
        return FragmentationResult(
            level=FindingLevel.STRUCTURAL_FRAGMENTATION,
            motor=Motor.M1,
            rationale=(
                "Accessory act inseparable from the principal procedure billed as "
                "autonomous (coverage 0, copay 100%)"
            ),
            economic_impact=ctx.line.patient_copay,
        )

    # M2
    def _is_package_unbundling(self, ctx: LineContext) -> bool:
        return (
            bool(ctx.event_model.detected_packages)
            and ctx.line.patient_copay > 0
            and bool(self.STANDARD_SUPPLY_PATTERN.search(ctx.description))
        )

    def _package_unbundling_result(self, ctx: LineContext) -> FragmentationResult:
        package = ctx.event_model.detected_packages[0].value
        return FragmentationResult(
            level=FindingLevel.STRUCTURAL_FRAGMENTATION,
            motor=Motor.M2,
            rationale=(
                f"Standard supply ({ctx.description}) unbundled from the "
                f"mandatory clinical package ({package})"
            ),
            economic_impact=ctx.line.patient_copay,
        )

    # M3
    def _is_generic_dumping(self, ctx: LineContext) -> bool:
        return (
            ctx.is_generic_bucket
            and ctx.uncovered_with_copay
            and ctx.trace.status == MatchOutcome.FAIL
        )

    def _generic_dumping_result(self, ctx: LineContext) -> FragmentationResult:
        return FragmentationResult(
            level=FindingLevel.STRUCTURAL_FRAGMENTATION,
            motor=Motor.M3,
            rationale=(
                "Cost routed to a generic bucket with no clinical traceability "
                "or itemized breakdown"
            ),
            economic_impact=ctx.line.patient_copay,
        )

    @staticmethod
    def _correct(ctx: LineContext) -> FragmentationResult:
        return FragmentationResult()

    def run(self, ctx: LineContext) -> CascadeOutcome[FragmentationResult]:
        """Run the cascade and keep the id of the motor that triggered."""
        return run_cascade(self.detectors, ctx, default=self._correct)

    def classify(self, ctx: LineContext) -> FragmentationResult:
        """
        Classify one line.

        Args:
            ctx: Line context

        Returns:
            The first triggered motor's result, or CORRECT with zero impact
        """
        return self.run(ctx).result

    def list_motors(self) -> list[dict[str, str]]:
        """List the motors in evaluation order."""
        return list_detectors(self.detectors)
