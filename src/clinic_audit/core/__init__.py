"""
Core components for the Clinic Audit Engine.
"""

from .bill_index import BillIndex
from .cascade import CascadeOutcome, Detector, list_detectors, run_cascade
from .models import (
    AuditConfig,
    AuditMetadata,
    AuditRow,
    AuditSummary,
    Authorization,
    AuthorizationLine,
    Bill,
    BillItem,
    CapKind,
    ClinicalPackage,
    Contract,
    ContractCap,
    ContractCheck,
    ContractRule,
    ContractState,
    CoverageDomain,
    EventModel,
    FindingLevel,
    FindingRow,
    Folio,
    FragmentationResult,
    GlobalOpacity,
    LineIntegrity,
    MatchAttempt,
    MatchOutcome,
    MatchStrategy,
    MatchTrace,
    Money,
    Motor,
    OpacityCriterion,
    OpacityResult,
    PrincipalAct,
    SkillInput,
    SkillOutput,
    SystemicPattern,
)

__all__ = [
    # Models
    "AuditConfig",
    "AuditMetadata",
    "AuditRow",
    "AuditSummary",
    "Authorization",
    "AuthorizationLine",
    "Bill",
    "BillItem",
    "CapKind",
    "ClinicalPackage",
    "Contract",
    "ContractCap",
    "ContractCheck",
    "ContractRule",
    "ContractState",
    "CoverageDomain",
    "EventModel",
    "FindingLevel",
    "FindingRow",
    "Folio",
    "FragmentationResult",
    "GlobalOpacity",
    "LineIntegrity",
    "MatchAttempt",
    "MatchOutcome",
    "MatchStrategy",
    "MatchTrace",
    "Money",
    "Motor",
    "OpacityCriterion",
    "OpacityResult",
    "PrincipalAct",
    "SkillInput",
    "SkillOutput",
    "SystemicPattern",
    # Indexing
    "BillIndex",
    # Cascade
    "CascadeOutcome",
    "Detector",
    "list_detectors",
    "run_cascade",
]
