"""
Line Integrity Check.
Compares a line's total value against coverage plus copay. An unbalanced
line is recorded as evidence; it never stops the audit.
"""

from ..core.models import AuthorizationLine, LineIntegrity


class LineIntegrityChecker:
    """Arithmetic balance check with a relative plus absolute tolerance."""

    RELATIVE_TOLERANCE = 0.02  # 2% of total value
    ABSOLUTE_TOLERANCE = 50

    def check(self, line: AuthorizationLine) -> LineIntegrity:
        """Return the balance of ``total_value - (covered + copay)``."""
        difference = line.total_value - (line.covered_amount + line.patient_copay)
        tolerance = line.total_value * self.RELATIVE_TOLERANCE + self.ABSOLUTE_TOLERANCE
        return LineIntegrity(
            balanced=abs(difference) <= tolerance,
            difference=difference,
        )
