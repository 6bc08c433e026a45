"""
Clinic Billing Fragmentation Audit Engine.

Reconciles clinic bills against an insurer's payment authorization and a
coverage contract to detect billing fragmentation and settlement opacity.
"""

from .core.models import (
    AuditConfig,
    AuditMetadata,
    AuditRow,
    AuditSummary,
    Authorization,
    AuthorizationLine,
    Bill,
    BillItem,
    Contract,
    ContractRule,
    CoverageDomain,
    FindingLevel,
    Folio,
    MatchOutcome,
    Motor,
    SkillInput,
    SkillOutput,
)
from .engine import FragmentationAuditEngine, run_audit
from .exceptions import ClinicAuditError, InvalidAuditInputError
from .reporting.report import ERROR_MARKER, AuditReportFormatter, ReportBuilder
from .settings import EngineSettings

__version__ = "0.1.0"

__all__ = [
    # Main Engine
    "FragmentationAuditEngine",
    "run_audit",
    "EngineSettings",
    # Models
    "AuditConfig",
    "AuditMetadata",
    "AuditRow",
    "AuditSummary",
    "Authorization",
    "AuthorizationLine",
    "Bill",
    "BillItem",
    "Contract",
    "ContractRule",
    "CoverageDomain",
    "FindingLevel",
    "Folio",
    "MatchOutcome",
    "Motor",
    "SkillInput",
    "SkillOutput",
    # Reporting
    "AuditReportFormatter",
    "ReportBuilder",
    "ERROR_MARKER",
    # Errors
    "ClinicAuditError",
    "InvalidAuditInputError",
]
