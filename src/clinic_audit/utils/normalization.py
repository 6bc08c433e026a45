"""
Text and amount normalization shared by every audit stage.
Descriptions are compared in a folded form: lowercase, no accents,
no punctuation, single spaces.
"""

import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_PUNCTUATION_PATTERN = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_AMOUNT_NOISE_PATTERN = re.compile(r"[^\d,.\-]")


def strip_accents(text: str) -> str:
    """Remove combining diacritical marks (é -> e, ñ -> n)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str | None) -> str:
    """
    Fold a description into its comparison form.

    Args:
        text: Raw description, may be None

    Returns:
        Lowercase ASCII text with punctuation replaced by spaces and
        whitespace collapsed. Empty string for None.
    """
    if not text:
        return ""
    folded = strip_accents(text.lower())
    folded = _PUNCTUATION_PATTERN.sub(" ", folded)
    return _WHITESPACE_PATTERN.sub(" ", folded).strip()


def normalize_amount(value: Any) -> int:
    """
    Canonicalize a money value to an integer.

    Accepts ints, floats, Decimals and numeric strings such as
    "$300.000", "300,000" or "1.234,50". A separator followed by exactly
    three digits is read as a thousands separator; otherwise the last
    separator is the decimal mark. Fractions are rounded half-up.

    Raises:
        ValueError: If the value cannot be read as a number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a money amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float | Decimal):
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if not isinstance(value, str):
        raise ValueError(f"Not a money amount: {value!r}")

    cleaned = _AMOUNT_NOISE_PATTERN.sub("", value.strip())
    if not cleaned or cleaned == "-":
        raise ValueError(f"Not a money amount: {value!r}")

    separators = [i for i, ch in enumerate(cleaned) if ch in ",."]
    if separators:
        last = separators[-1]
        fraction = cleaned[last + 1 :]
        digits_only = re.sub(r"[,.]", "", cleaned)
        if len(fraction) == 3 or (len(separators) > 1 and cleaned[last] == cleaned[separators[0]]):
            # Every separator groups thousands
            cleaned = digits_only
        else:
            cleaned = re.sub(r"[,.]", "", cleaned[:last]) + "." + fraction

    try:
        number = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {value!r}") from e
    return int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
