"""
Opacity Scoring (Item Opacity Points, IOP).
Additive score of independent criteria telling how far a line's basis
cannot be verified from the available records.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from ..core.models import (
    ContractCheck,
    ContractState,
    MatchOutcome,
    OpacityCriterion,
    OpacityResult,
)
from .fragmentation import LineContext


@dataclass(frozen=True)
class OpacityRule:
    """A weighted opacity criterion."""

    label: str
    points: int
    applies: Callable[[LineContext, ContractCheck], bool]


class OpacityScorer:
    """
    Scores every line that carries copay or lacks coverage. Lines with
    zero copay and positive coverage are exempt and score 0.
    """

    GENERIC_VOCABULARY_PATTERN = re.compile(
        r"\b(not covered|suppl(y|ies)|no cubierto|insumos?)\b"
    )

    def __init__(self) -> None:
        self.rules: list[OpacityRule] = [
            OpacityRule(
                label="Generic bucket with no itemized breakdown",
                points=25,
                applies=lambda ctx, _: (
                    ctx.is_generic_bucket and not ctx.trace.matched_bill_item_ids
                ),
            ),
            OpacityRule(
                label="Zero coverage (copay 100%)",
                points=15,
                applies=lambda ctx, _: ctx.uncovered_with_copay,
            ),
            OpacityRule(
                label="Generic, uninformative description",
                points=10,
                applies=lambda ctx, _: bool(
                    self.GENERIC_VOCABULARY_PATTERN.search(ctx.description)
                ),
            ),
            OpacityRule(
                label="Traceability failure against the bill",
                points=15,
                applies=lambda ctx, _: ctx.trace.status == MatchOutcome.FAIL,
            ),
            OpacityRule(
                label="Generic bucket not verifiable against the contract",
                points=10,
                applies=lambda ctx, check: (
                    check.state != ContractState.VERIFIABLE and ctx.is_generic_bucket
                ),
            ),
        ]

    @property
    def max_score(self) -> int:
        """Highest score any line can reach with the current weights."""
        return sum(rule.points for rule in self.rules)

    @staticmethod
    def is_exempt(ctx: LineContext) -> bool:
        return ctx.line.patient_copay == 0 and ctx.line.covered_amount > 0

    def score(self, ctx: LineContext, contract_check: ContractCheck) -> OpacityResult:
        """
        Score one line.

        Args:
            ctx: Line context
            contract_check: The line's contract evaluation

        Returns:
            Score, full breakdown and whether it reaches the threshold
        """
        if self.is_exempt(ctx):
            return OpacityResult()

        breakdown = [
            OpacityCriterion(label=rule.label, points=rule.points)
            for rule in self.rules
            if rule.applies(ctx, contract_check)
        ]
        total = sum(criterion.points for criterion in breakdown)

        return OpacityResult(
            applies=total >= ctx.settings.opacity_threshold,
            score=total,
            breakdown=breakdown,
            evaluated=True,
        )
