"""
Match Cascade.
Anchors each authorization line to bill items by description family and
by exact amount. Ambiguity is recorded as PARTIAL, never resolved.
"""

from ..core.bill_index import BillIndex
from ..core.models import (
    AuthorizationLine,
    MatchAttempt,
    MatchOutcome,
    MatchStrategy,
    MatchTrace,
)
from ..utils.normalization import normalize_text


class MatchCascade:
    """
    Runs both match strategies for a line and keeps every attempt.

    The trace status is the best outcome (OK > PARTIAL > FAIL). Bill items
    are bound to the line only through a unique amount anchor.
    """

    def __init__(self, index: BillIndex) -> None:
        self.index = index

    def match_description(self, line: AuthorizationLine) -> MatchAttempt:
        """Look the normalized description up in the description index."""
        normalized = normalize_text(line.description)
        strategy = MatchStrategy.DESCRIPTION_FAMILY

        if not normalized:
            return MatchAttempt(
                strategy=strategy,
                outcome=MatchOutcome.FAIL,
                details="Empty description",
            )

        exact = self.index.items_with_description(normalized)
        if exact:
            return MatchAttempt(
                strategy=strategy,
                outcome=MatchOutcome.OK,
                details=f"Exact description match '{normalized}'",
                bill_item_ids=[item.id for item in exact],
            )

        overlapping = self.index.description_keys_overlapping(normalized)
        if overlapping:
            item_ids = [
                item.id
                for key in overlapping
                for item in self.index.items_with_description(key)
            ]
            return MatchAttempt(
                strategy=strategy,
                outcome=MatchOutcome.PARTIAL,
                details=(
                    f"Description '{normalized}' overlaps "
                    f"{len(overlapping)} bill description(s)"
                ),
                bill_item_ids=item_ids,
            )

        return MatchAttempt(
            strategy=strategy,
            outcome=MatchOutcome.FAIL,
            details=f"No bill description matches '{normalized}'",
        )

    def match_amount(self, line: AuthorizationLine) -> MatchAttempt:
        """Look the line's total value up in the amount index."""
        strategy = MatchStrategy.AMOUNT_EXACT
        candidates = self.index.items_with_total(line.total_value)
        item_ids = [item.id for item in candidates]

        if len(candidates) == 1:
            return MatchAttempt(
                strategy=strategy,
                outcome=MatchOutcome.OK,
                details=f"Unique bill item at amount {line.total_value}",
                bill_item_ids=item_ids,
            )
        if len(candidates) > 1:
            return MatchAttempt(
                strategy=strategy,
                outcome=MatchOutcome.PARTIAL,
                details=(
                    f"{len(candidates)} bill items share amount "
                    f"{line.total_value}; binding is ambiguous"
                ),
                bill_item_ids=item_ids,
            )
        return MatchAttempt(
            strategy=strategy,
            outcome=MatchOutcome.FAIL,
            details=f"No bill item at amount {line.total_value}",
        )

    def trace(self, line: AuthorizationLine) -> MatchTrace:
        """
        Run the description and amount attempts for one line.

        Args:
            line: Authorization line with a non-zero total value

        Returns:
            Ordered attempts, best outcome and bound bill item ids
        """
        attempts = [self.match_description(line), self.match_amount(line)]
        status = max((a.outcome for a in attempts), key=lambda o: o.rank)

        amount_attempt = attempts[1]
        matched = (
            list(amount_attempt.bill_item_ids)
            if amount_attempt.outcome == MatchOutcome.OK
            else []
        )

        return MatchTrace(
            status=status,
            attempts=attempts,
            matched_bill_item_ids=matched,
        )
