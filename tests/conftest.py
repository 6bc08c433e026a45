"""
Shared fixtures for the Clinic Audit Engine tests.
"""

from typing import Any

import pytest

from clinic_audit import (
    Authorization,
    AuthorizationLine,
    Bill,
    BillItem,
    Contract,
    ContractRule,
    CoverageDomain,
    Folio,
    SkillInput,
)


def make_line(**overrides: Any) -> AuthorizationLine:
    """Build an authorization line with sensible defaults."""
    values: dict[str, Any] = {
        "id": "L1",
        "code": "9999999",
        "description": "Unlisted service",
        "total_value": 10000,
        "covered_amount": 10000,
        "patient_copay": 0,
    }
    values.update(overrides)
    return AuthorizationLine(**values)


def make_input(
    bill_items: list[BillItem],
    lines: list[AuthorizationLine],
    rules: list[ContractRule],
    **extra: Any,
) -> SkillInput:
    """Wrap canonical records into a SkillInput with a single folio."""
    return SkillInput(
        bill=Bill(items=bill_items),
        authorization=Authorization(
            folios=[Folio(folio_id="F-001", provider="Clinic", items=lines)]
        ),
        contract=Contract(rules=rules),
        **extra,
    )


@pytest.fixture
def surgery_bill() -> list[BillItem]:
    """Bill of a surgical admission (operating room and day bed packages)."""
    return [
        BillItem(id="B1", description="Operating room right", total=450000),
        BillItem(id="B2", description="Day bed, private room", total=300000),
        BillItem(id="B3", description="Surgeon fee", total=800000),
        BillItem(id="B4", description="Cefazolin 1 g vial", total=12000),
        BillItem(id="B5", description="Cefazolin 1 g vial", total=12000),
    ]


@pytest.fixture
def full_contract() -> list[ContractRule]:
    """Contract with a rule for every coverage domain."""
    return [
        ContractRule(
            id=f"R-{domain.name}",
            domain=domain,
            coverage_percent=80,
            literal_text=f"{domain.value} covered at 80%",
        )
        for domain in CoverageDomain
    ]


@pytest.fixture
def partial_contract() -> list[ContractRule]:
    """Contract without a rule for the OTHER domain."""
    return [
        ContractRule(
            id="R-HOSP",
            domain=CoverageDomain.HOSPITALIZATION,
            coverage_percent=100,
            literal_text="Day bed 100%",
        ),
        ContractRule(
            id="R-OR",
            domain=CoverageDomain.OPERATING_ROOM,
            coverage_percent=90,
            literal_text="Operating room 90%",
        ),
    ]
