"""
Tests for text and amount normalization.
"""

from decimal import Decimal

import pytest

from clinic_audit.utils.normalization import normalize_amount, normalize_text


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_folds_case_accents_and_punctuation(self) -> None:
        """Test lowercase, accent stripping and punctuation removal."""
        assert normalize_text("Día Cama, Habitación  Individual!") == (
            "dia cama habitacion individual"
        )

    def test_collapses_whitespace(self) -> None:
        """Test that runs of whitespace become single spaces."""
        assert normalize_text("  Gauze \t swab\n ") == "gauze swab"

    def test_none_and_empty(self) -> None:
        """Test that missing text normalizes to an empty string."""
        assert normalize_text(None) == ""
        assert normalize_text("") == ""
        assert normalize_text("---") == ""


class TestNormalizeAmount:
    """Tests for normalize_amount."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (300000, 300000),
            (300000.0, 300000),
            (Decimal("1250.5"), 1251),
            ("$300.000", 300000),
            ("300,000", 300000),
            ("1.234.567", 1234567),
            ("1.234,50", 1235),
            ("1,234.49", 1234),
            ("CLP 45 000", 45000),
        ],
    )
    def test_canonicalizes(self, raw: object, expected: int) -> None:
        """Test numeric canonicalization of common money formats."""
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "n/a", True, None, [1]])
    def test_rejects_non_numbers(self, raw: object) -> None:
        """Test that non-numeric values raise ValueError."""
        with pytest.raises(ValueError):
            normalize_amount(raw)
