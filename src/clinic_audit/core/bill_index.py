"""
Lookup structures over the clinic bill.
Built once per audit and read-only afterwards.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from ..utils.normalization import normalize_text
from .models import BillItem, Money

MIN_OVERLAP_LENGTH = 6


def _contains_phrase(outer: str, inner: str) -> bool:
    return len(inner) >= MIN_OVERLAP_LENGTH and f" {inner} " in f" {outer} "


@dataclass(frozen=True)
class BillIndex:
    """
    Multi-maps from exact total and from normalized description to the
    bill items sharing that key. Every item lands in exactly one bucket
    of each map; duplicates share a bucket.
    """

    items: tuple[BillItem, ...]
    by_total: dict[Money, list[BillItem]] = field(default_factory=dict)
    by_description: dict[str, list[BillItem]] = field(default_factory=dict)

    @classmethod
    def build(cls, items: list[BillItem]) -> "BillIndex":
        """Index the given bill items."""
        by_total: defaultdict[Money, list[BillItem]] = defaultdict(list)
        by_description: defaultdict[str, list[BillItem]] = defaultdict(list)

        for item in items:
            by_total[item.total].append(item)
            by_description[normalize_text(item.description)].append(item)

        return cls(
            items=tuple(items),
            by_total=dict(by_total),
            by_description=dict(by_description),
        )

    def items_with_total(self, amount: Money) -> list[BillItem]:
        """Return the items whose total equals ``amount`` exactly."""
        return list(self.by_total.get(amount, []))

    def items_with_description(self, normalized: str) -> list[BillItem]:
        """Return the items whose normalized description equals ``normalized``."""
        return list(self.by_description.get(normalized, []))

    def description_keys_overlapping(self, normalized: str) -> list[str]:
        """
        Return indexed descriptions that contain ``normalized`` as whole
        words or are contained in it as whole words. The contained side
        must be at least MIN_OVERLAP_LENGTH characters long, so short keys
        such as "iva" never overlap.
        """
        if not normalized:
            return []
        return [
            key
            for key in self.by_description
            if key
            and (
                _contains_phrase(key, normalized) or _contains_phrase(normalized, key)
            )
        ]

    def concatenated_descriptions(self) -> str:
        """All normalized descriptions joined by single spaces, in bill order."""
        return " ".join(normalize_text(item.description) for item in self.items)
