"""
Tests for core data models.
"""

import pytest
from pydantic import ValidationError

from clinic_audit.core.models import (
    AuditRow,
    Authorization,
    AuthorizationLine,
    BillItem,
    ContractCheck,
    ContractRule,
    ContractState,
    CoverageDomain,
    FindingLevel,
    Folio,
    FragmentationResult,
    MatchOutcome,
    MatchTrace,
    Motor,
    OpacityResult,
    SkillInput,
)


class TestBillItem:
    """Tests for BillItem model."""

    def test_amount_strings_are_canonicalized(self) -> None:
        """Test that money given as text is stored as an integer."""
        item = BillItem(id="B1", description="Gauze", total="$12.500", unit_price="2.500")
        assert item.total == 12500
        assert item.unit_price == 2500

    def test_negative_total_rejected(self) -> None:
        """Test that negative money fails validation."""
        with pytest.raises(ValidationError):
            BillItem(id="B1", description="Gauze", total=-1)

    def test_frozen(self) -> None:
        """Test that bill items are immutable once created."""
        item = BillItem(id="B1", description="Gauze", total=100)
        with pytest.raises(ValidationError):
            item.total = 200


class TestAuthorization:
    """Tests for authorization parsing and flattening."""

    def test_camel_case_aliases(self) -> None:
        """Test validation from canonical camelCase JSON."""
        line = AuthorizationLine.model_validate(
            {
                "id": "L1",
                "folioId": "F1",
                "code": "3101002",
                "description": "Materials",
                "totalValue": 1000,
                "coveredAmount": 0,
                "patientCopay": 1000,
            }
        )
        assert line.folio_id == "F1"
        assert line.patient_copay == 1000

    def test_unbalanced_line_is_accepted(self) -> None:
        """Test that total != covered + copay does not fail validation."""
        line = AuthorizationLine(
            id="L1", total_value=1000, covered_amount=900, patient_copay=500
        )
        assert line.total_value == 1000

    def test_lines_are_stamped_with_folio(self) -> None:
        """Test that flattened lines carry their folio id and provider."""
        authorization = Authorization(
            folios=[
                Folio(
                    folio_id="F1",
                    provider="Clinic A",
                    items=[
                        AuthorizationLine(
                            id="L1", total_value=1, covered_amount=1, patient_copay=0
                        )
                    ],
                ),
                Folio(
                    folio_id="F2",
                    items=[
                        AuthorizationLine(
                            id="L2", total_value=1, covered_amount=1, patient_copay=0
                        )
                    ],
                ),
            ]
        )
        lines = authorization.lines()
        assert [line.folio_id for line in lines] == ["F1", "F2"]
        assert lines[0].provider == "Clinic A"
        assert lines[1].provider == "F2"


class TestContractRule:
    """Tests for ContractRule model."""

    def test_domain_from_value(self) -> None:
        """Test that domains validate from their canonical string values."""
        rule = ContractRule.model_validate(
            {"id": "R1", "domain": "IN-HOSPITAL_MEDICATIONS", "literalText": "Drugs 70%"}
        )
        assert rule.domain == CoverageDomain.IN_HOSPITAL_MEDICATIONS
        assert rule.literal_text == "Drugs 70%"

    def test_unknown_domain_rejected(self) -> None:
        """Test that the coverage domain enumeration is closed."""
        with pytest.raises(ValidationError):
            ContractRule(id="R1", domain="DENTAL")


class TestAuditRow:
    """Tests for AuditRow model."""

    def _row(self, level: FindingLevel, applies: bool) -> AuditRow:
        return AuditRow(
            line_id="L1",
            code="X",
            description="x",
            total_value=10,
            covered_amount=0,
            patient_copay=10,
            trace=MatchTrace(status=MatchOutcome.FAIL),
            contract_check=ContractCheck(
                domain=CoverageDomain.OTHER,
                state=ContractState.NOT_VERIFIABLE_DUE_TO_CONTRACT,
            ),
            fragmentation=FragmentationResult(
                level=level,
                motor=Motor.M3 if level != FindingLevel.CORRECT else Motor.NONE,
            ),
            opacity=OpacityResult(applies=applies),
        )

    def test_is_finding(self) -> None:
        """Test that fragmented or opacity-flagged rows are findings."""
        assert self._row(FindingLevel.STRUCTURAL_FRAGMENTATION, False).is_finding
        assert self._row(FindingLevel.CORRECT, True).is_finding
        assert not self._row(FindingLevel.CORRECT, False).is_finding


class TestSkillInput:
    """Tests for SkillInput model."""

    def test_empty_defaults(self) -> None:
        """Test that missing categories default to empty records."""
        skill_input = SkillInput()
        assert skill_input.bill.items == []
        assert skill_input.authorization.folios == []
        assert skill_input.contract.rules == []
