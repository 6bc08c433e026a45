"""
Contract Evaluation.
Maps an authorization line to a coverage domain and looks up the
applicable contract rule.
"""

import re
from decimal import Decimal

from ..core.models import (
    AuthorizationLine,
    Contract,
    ContractCheck,
    ContractRule,
    ContractState,
    CoverageDomain,
)
from ..utils.normalization import normalize_amount, normalize_text

# Known settlement group codes
GROUP_CODE_DOMAINS: dict[str, CoverageDomain] = {
    "3101001": CoverageDomain.IN_HOSPITAL_MEDICATIONS,
    "3101002": CoverageDomain.CLINICAL_MATERIALS,
    "3000000": CoverageDomain.HOSPITALIZATION,
    "3201001": CoverageDomain.OTHER,
    "3201002": CoverageDomain.OTHER,
    "0101001": CoverageDomain.CONSULTATION,
    "0300000": CoverageDomain.LAB_IMAGING,
    "0400000": CoverageDomain.LAB_IMAGING,
    "0500000": CoverageDomain.PHYSICAL_THERAPY,
    "0600000": CoverageDomain.PROSTHESES_ORTHOSES,
    "1100000": CoverageDomain.OPERATING_ROOM,
    "1200000": CoverageDomain.OPERATING_ROOM,
    "1300000": CoverageDomain.PROFESSIONAL_FEES,
}

# Description heuristics, evaluated in order; more specific phrases first
DOMAIN_KEYWORDS: list[tuple[CoverageDomain, re.Pattern[str]]] = [
    (
        CoverageDomain.OPERATING_ROOM,
        re.compile(r"\b(operating|surgical suite|pabellon|quirofano)\b"),
    ),
    (
        CoverageDomain.PHYSICAL_THERAPY,
        re.compile(r"\b(physical therapy|physiotherapy|kinesi\w*)\b"),
    ),
    (
        CoverageDomain.HOSPITALIZATION,
        re.compile(r"\b(room|bed|dia cama|habitacion)\b"),
    ),
    (
        CoverageDomain.PROFESSIONAL_FEES,
        re.compile(r"\b(fees?|physician|surgeon|anesthesi\w*|honorarios?|medico)\b"),
    ),
    (
        CoverageDomain.IN_HOSPITAL_MEDICATIONS,
        re.compile(r"\b(medications?|drugs?|medicamentos?|farmacos?)\b"),
    ),
    (
        CoverageDomain.CLINICAL_MATERIALS,
        re.compile(r"\b(materials?|suppl(y|ies)|devices?|insumos?)\b"),
    ),
    (
        CoverageDomain.LAB_IMAGING,
        re.compile(
            r"\b(lab|laboratory|panel|culture|imaging|scan|x ray|examen(es)?)\b"
        ),
    ),
    (
        CoverageDomain.PROSTHESES_ORTHOSES,
        re.compile(r"\b(prosthe\w*|orthotics?|orthos[ie]s|protesis|ortesis)\b"),
    ),
    (
        CoverageDomain.TRANSPORT,
        re.compile(r"\b(transport\w*|ambulance|traslados?)\b"),
    ),
]


def resolve_domain(code: str | None, description: str | None) -> CoverageDomain:
    """
    Resolve the coverage domain of a line.

    The exact group-code table wins; unknown codes fall back to keyword
    heuristics over the normalized description, then to OTHER.
    """
    if code and code.strip() in GROUP_CODE_DOMAINS:
        return GROUP_CODE_DOMAINS[code.strip()]

    text = normalize_text(description)
    for domain, pattern in DOMAIN_KEYWORDS:
        if pattern.search(text):
            return domain
    return CoverageDomain.OTHER


class ContractEvaluator:
    """
    Single deterministic lookup of the first rule covering a line's domain.
    """

    def __init__(self, contract: Contract) -> None:
        self.contract = contract

    def find_rule(self, domain: CoverageDomain) -> ContractRule | None:
        """Return the first contract rule for ``domain``, if any."""
        return next(
            (rule for rule in self.contract.rules if rule.domain == domain), None
        )

    def evaluate(self, line: AuthorizationLine) -> ContractCheck:
        """
        Evaluate one authorization line against the contract.

        Args:
            line: Authorization line

        Returns:
            VERIFIABLE with the rule used, or NOT_VERIFIABLE_DUE_TO_CONTRACT
            with a note naming the unmatched domain
        """
        domain = resolve_domain(line.code, line.description)
        rule = self.find_rule(domain)

        if rule is None:
            return ContractCheck(
                domain=domain,
                state=ContractState.NOT_VERIFIABLE_DUE_TO_CONTRACT,
                notes=f"Domain '{domain.value}' not found in contract",
            )

        expected_copay = None
        if rule.coverage_percent is not None:
            uncovered_share = (100 - Decimal(str(rule.coverage_percent))) / 100
            expected_copay = normalize_amount(line.total_value * uncovered_share)

        return ContractCheck(
            domain=domain,
            state=ContractState.VERIFIABLE,
            rules_used=[rule.id],
            notes=f"Rule applied: {rule.literal_text or rule.id}",
            expected_copay=expected_copay,
        )
