#!/usr/bin/env python3
"""
Sample Audit Script.
Demonstrates usage of the Clinic Audit Engine.
"""

import logging

from clinic_audit import (
    AuditMetadata,
    Authorization,
    AuthorizationLine,
    Bill,
    BillItem,
    Contract,
    ContractRule,
    CoverageDomain,
    Folio,
    FragmentationAuditEngine,
    SkillInput,
)


def create_sample_input() -> SkillInput:
    """Create a surgical admission for demonstration."""
    return SkillInput(
        bill=Bill(
            items=[
                BillItem(id="B1", description="Operating room right", total=450000),
                BillItem(id="B2", description="Day bed, private room", total=300000),
                BillItem(id="B3", description="Surgeon fee", total=800000),
                BillItem(id="B4", description="Cefazolin 1 g vial", total=12000),
                BillItem(id="B5", description="Syringe 10 ml", quantity=4, unit_price=500, total=2000),
            ]
        ),
        authorization=Authorization(
            declared_total_copay=500000,
            folios=[
                Folio(
                    folio_id="PAM-0001",
                    provider="Clinica Central",
                    items=[
                        AuthorizationLine(
                            id="L1",
                            code="3000000",
                            description="Day bed, private room",
                            total_value=300000,
                            covered_amount=300000,
                            patient_copay=0,
                        ),
                        AuthorizationLine(
                            id="L2",
                            code="1100099",
                            description="Recovery suite right",  # Accessory act split from the OR
                            total_value=120000,
                            covered_amount=0,
                            patient_copay=120000,
                        ),
                        AuthorizationLine(
                            id="L3",
                            code="3101002",
                            description="Syringe 10 ml",  # Included in the OR package
                            total_value=2000,
                            covered_amount=1000,
                            patient_copay=1000,
                        ),
                        AuthorizationLine(
                            id="L4",
                            code="3201001",
                            description="Miscellaneous supplies",  # No bill counterpart
                            total_value=250000,
                            covered_amount=0,
                            patient_copay=250000,
                        ),
                    ],
                )
            ],
        ),
        contract=Contract(
            rules=[
                ContractRule(
                    id="R-HOSP",
                    domain=CoverageDomain.HOSPITALIZATION,
                    coverage_percent=100,
                    literal_text="Day bed covered at 100%",
                ),
                ContractRule(
                    id="R-MAT",
                    domain=CoverageDomain.CLINICAL_MATERIALS,
                    coverage_percent=50,
                    literal_text="Clinical materials covered at 50%",
                ),
            ]
        ),
        metadata=AuditMetadata(
            patient_name="Sample Patient",
            clinic_name="Clinica Central",
            insurer="Sample Insurer",
            plan="Plan 100",
            financial_date="2024-05-02",
        ),
    )


def main() -> None:
    """Run sample audit demonstration."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("CLINIC AUDIT ENGINE - SAMPLE AUDIT")
    print("=" * 70)
    print()

    audit_input = create_sample_input()
    print(f"Bill items: {len(audit_input.bill.items)}")
    print(f"Authorization lines: {len(audit_input.authorization.lines())}")
    print()

    engine = FragmentationAuditEngine()
    motors = engine.fragmentation_classifier.list_motors()
    print(f"Fragmentation motors: {', '.join(m['detector_id'] for m in motors)}")
    print()

    # Run audit
    print("Running audit...")
    formatter = engine.audit_with_formatter(audit_input)

    # Print report and complaint letter
    print()
    formatter.print_full()

    print()
    print("-" * 70)
    print("Audit rows")
    print("-" * 70)
    print(formatter.to_dataframe()[["line_id", "motor", "iop", "patient_copay"]].to_string(index=False))

    print()
    print("-" * 70)
    print("JSON Output (first 500 chars):")
    print("-" * 70)
    json_output = formatter.to_json()
    print(json_output[:500] + "..." if len(json_output) > 500 else json_output)


if __name__ == "__main__":
    main()
