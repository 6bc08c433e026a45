"""
Core data models for the Clinic Audit Engine.
Uses Pydantic for validation and serialization.

Input and output records accept camelCase aliases (``totalValue``,
``auditRows``) so canonical JSON from the extraction pipeline validates
directly, while Python code uses snake_case attribute names.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.normalization import normalize_amount

Money = int


class CanonicalModel(BaseModel):
    """Base for every record exchanged with collaborators."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _money(value: Any) -> Any:
    if value is None:
        return None
    return normalize_amount(value)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CoverageDomain(str, Enum):
    """Closed set of clinical service categories used to find contract rules."""

    HOSPITALIZATION = "HOSPITALIZATION"
    OPERATING_ROOM = "OPERATING_ROOM"
    PROFESSIONAL_FEES = "PROFESSIONAL_FEES"
    CLINICAL_MATERIALS = "CLINICAL_MATERIALS"
    IN_HOSPITAL_MEDICATIONS = "IN-HOSPITAL_MEDICATIONS"
    LAB_IMAGING = "LAB/IMAGING"
    PHYSICAL_THERAPY = "PHYSICAL_THERAPY"
    PROSTHESES_ORTHOSES = "PROSTHESES/ORTHOSES"
    CONSULTATION = "CONSULTATION"
    TRANSPORT = "TRANSPORT"
    OTHER = "OTHER"


class CapKind(str, Enum):
    """Unit in which a contract rule expresses its cap."""

    UF = "UF"
    UTM = "UTM"
    CLP = "CLP"
    VAM = "VAM"
    AC2 = "AC2"
    NO_EXPLICIT_CAP = "NO_EXPLICIT_CAP"
    VARIABLE = "VARIABLE"


class MatchStrategy(str, Enum):
    """Strategies tried when anchoring an authorization line to the bill."""

    DESCRIPTION_FAMILY = "DESCRIPTION_FAMILY"
    AMOUNT_EXACT = "AMOUNT_EXACT"


class MatchOutcome(str, Enum):
    """Result of a single match attempt. Ordered OK > PARTIAL > FAIL."""

    OK = "OK"
    PARTIAL = "PARTIAL"
    FAIL = "FAIL"

    @property
    def rank(self) -> int:
        return _OUTCOME_RANK[self]


_OUTCOME_RANK = {MatchOutcome.FAIL: 0, MatchOutcome.PARTIAL: 1, MatchOutcome.OK: 2}


class ContractState(str, Enum):
    """Whether a line can be checked against a contract rule."""

    VERIFIABLE = "VERIFIABLE"
    NOT_VERIFIABLE_DUE_TO_CONTRACT = "NOT_VERIFIABLE_DUE_TO_CONTRACT"


class FindingLevel(str, Enum):
    """Classification level of an authorization line."""

    CORRECT = "CORRECT"
    STRUCTURAL_FRAGMENTATION = "STRUCTURAL_FRAGMENTATION"


class Motor(str, Enum):
    """Fragmentation pattern detectors."""

    M1 = "M1"  # Artificial act splitting
    M2 = "M2"  # Package unbundling
    M3 = "M3"  # Untraceable generic dumping
    NONE = "NONE"


class PrincipalAct(str, Enum):
    """Principal clinical act inferred from the bill."""

    SURGERY = "SURGERY"
    GENERAL_HOSPITALIZATION = "GENERAL_HOSPITALIZATION"


class ClinicalPackage(str, Enum):
    """Bundled packages whose price already covers accessory costs."""

    OPERATING_ROOM_RIGHT = "OPERATING_ROOM_RIGHT"
    INTEGRAL_DAY_BED = "INTEGRAL_DAY_BED"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class BillItem(CanonicalModel):
    """Individual item from the clinic's itemized bill."""

    id: str
    description: str
    quantity: float | None = Field(default=None, ge=0)
    unit_price: Money | None = Field(default=None, ge=0)
    total: Money = Field(ge=0)
    code: str | None = None
    section: str | None = None

    @field_validator("unit_price", "total", mode="before")
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)


class Bill(CanonicalModel):
    """The clinic's itemized bill."""

    items: list[BillItem] = Field(default_factory=list)


class AuthorizationLine(CanonicalModel):
    """
    One line of the insurer's settlement (PAM).

    ``total_value == covered_amount + patient_copay`` is not enforced:
    an unbalanced line is evidence, not invalid input.
    """

    id: str
    folio_id: str | None = None
    code: str = ""
    description: str = ""
    quantity: float | None = Field(default=None, ge=0)
    total_value: Money = Field(ge=0)
    covered_amount: Money = Field(ge=0)
    patient_copay: Money = Field(ge=0)
    provider: str | None = None

    @field_validator("total_value", "covered_amount", "patient_copay", mode="before")
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)


class Folio(CanonicalModel):
    """Settlement batch within an authorization, usually one per provider."""

    folio_id: str
    provider: str | None = None
    items: list[AuthorizationLine] = Field(default_factory=list)

    def lines(self) -> list[AuthorizationLine]:
        """Return the folio's lines stamped with the folio id and provider."""
        return [
            line.model_copy(
                update={
                    "folio_id": self.folio_id,
                    "provider": line.provider or self.provider or self.folio_id,
                }
            )
            for line in self.items
        ]


class Authorization(CanonicalModel):
    """The insurer's payment authorization."""

    folios: list[Folio] = Field(default_factory=list)
    declared_total_copay: Money | None = Field(default=None, ge=0)

    @field_validator("declared_total_copay", mode="before")
    @classmethod
    def coerce_money(cls, value: Any) -> Any:
        return _money(value)

    def lines(self) -> list[AuthorizationLine]:
        """Flatten all folios into a single ordered list of lines."""
        return [line for folio in self.folios for line in folio.lines()]


class ContractCap(CanonicalModel):
    """Cap attached to a contract rule."""

    kind: CapKind
    value: float | None = None
    currency: str | None = None


class ContractRule(CanonicalModel):
    """Coverage rule from the health contract, already assigned a domain."""

    id: str
    domain: CoverageDomain
    coverage_percent: float | None = Field(default=None, ge=0, le=100)
    cap: ContractCap | None = None
    literal_text: str = ""


class Contract(CanonicalModel):
    """Canonical coverage contract."""

    rules: list[ContractRule] = Field(default_factory=list)


class AuditConfig(CanonicalModel):
    """Per-audit overrides. Unset fields fall back to the engine settings."""

    opacity_threshold: int | None = Field(default=None, ge=0)
    systemic_m3_fraction: float | None = Field(default=None, ge=0, le=1)
    generic_bucket_codes: list[str] | None = None


class AuditMetadata(CanonicalModel):
    """Caller-supplied context echoed into the report header."""

    patient_name: str | None = None
    clinic_name: str | None = None
    insurer: str | None = None
    plan: str | None = None
    financial_date: str | None = None
    execution_timestamp: str | None = None


class SkillInput(CanonicalModel):
    """Complete input for one audit run."""

    bill: Bill = Field(default_factory=Bill)
    authorization: Authorization = Field(default_factory=Authorization)
    contract: Contract = Field(default_factory=Contract)
    config: AuditConfig | None = None
    metadata: AuditMetadata | None = None


# ---------------------------------------------------------------------------
# Per-line results
# ---------------------------------------------------------------------------


class MatchAttempt(CanonicalModel):
    """One strategy's attempt at anchoring a line to bill items."""

    strategy: MatchStrategy
    outcome: MatchOutcome
    details: str
    bill_item_ids: list[str] = Field(default_factory=list)


class MatchTrace(CanonicalModel):
    """Ordered match attempts and the overall trace status."""

    status: MatchOutcome
    attempts: list[MatchAttempt] = Field(default_factory=list)
    matched_bill_item_ids: list[str] = Field(default_factory=list)


class ContractCheck(CanonicalModel):
    """Outcome of looking up the applicable contract rule."""

    domain: CoverageDomain
    state: ContractState
    rules_used: list[str] = Field(default_factory=list)
    notes: str = ""
    expected_copay: Money | None = None


class FragmentationResult(CanonicalModel):
    """Fragmentation classification of a line."""

    level: FindingLevel = FindingLevel.CORRECT
    motor: Motor = Motor.NONE
    rationale: str = ""
    economic_impact: Money = 0


class OpacityCriterion(CanonicalModel):
    """A scored opacity criterion, kept for auditability."""

    label: str
    points: int


class OpacityResult(CanonicalModel):
    """Item Opacity Points (IOP) for a line."""

    applies: bool = False
    score: int = 0
    breakdown: list[OpacityCriterion] = Field(default_factory=list)
    evaluated: bool = False


class LineIntegrity(CanonicalModel):
    """Arithmetic balance of total value against coverage plus copay."""

    balanced: bool = True
    difference: Money = 0


class AuditRow(CanonicalModel):
    """Audit result for a single authorization line."""

    line_id: str
    folio_id: str | None = None
    code: str
    description: str
    total_value: Money
    covered_amount: Money
    patient_copay: Money
    trace: MatchTrace
    contract_check: ContractCheck
    fragmentation: FragmentationResult
    opacity: OpacityResult
    integrity: LineIntegrity = Field(default_factory=LineIntegrity)

    @property
    def is_finding(self) -> bool:
        """True when the row is fragmented or opacity-flagged."""
        return (
            self.fragmentation.level != FindingLevel.CORRECT or self.opacity.applies
        )


# ---------------------------------------------------------------------------
# Aggregate output
# ---------------------------------------------------------------------------


class EventModel(CanonicalModel):
    """Clinical context inferred from the bill descriptions."""

    principal_act: PrincipalAct = PrincipalAct.GENERAL_HOSPITALIZATION
    detected_packages: list[ClinicalPackage] = Field(default_factory=list)
    notes: str = ""


class GlobalOpacity(CanonicalModel):
    """Worst opacity score across the audit."""

    applies: bool = False
    max_score: int = 0


class SystemicPattern(CanonicalModel):
    """Whether fragmentation repeats often enough to be a billing practice."""

    m1_count: int = 0
    m2_count: int = 0
    m3_copay_fraction: float = 0.0
    is_systemic: bool = False


class AuditSummary(CanonicalModel):
    """Summary statistics derived from the audit rows."""

    total_copay_analyzed: Money = 0
    total_fragmentation_impact: Money = 0
    global_opacity: GlobalOpacity = Field(default_factory=GlobalOpacity)
    systemic_pattern: SystemicPattern = Field(default_factory=SystemicPattern)
    unbalanced_lines: int = 0
    declared_copay_difference: Money | None = None


class FindingRow(CanonicalModel):
    """One entry of the findings matrix shown to the presentation layer."""

    item_label: str
    classification: FindingLevel
    motor: Motor
    rationale: str
    impact: Money
    score: int = 0


class SkillOutput(CanonicalModel):
    """Complete audit output."""

    summary: AuditSummary = Field(default_factory=AuditSummary)
    event_model: EventModel = Field(default_factory=EventModel)
    matrix: list[FindingRow] = Field(default_factory=list)
    audit_rows: list[AuditRow] = Field(default_factory=list)
    report_text: str = ""
    complaint_text: str = ""
    metadata: AuditMetadata | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
