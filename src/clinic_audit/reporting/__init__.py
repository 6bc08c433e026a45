"""
Reporting modules for the Clinic Audit Engine.
"""

from .aggregator import AuditAggregator
from .report import AuditReportFormatter, ReportBuilder

__all__ = [
    "AuditAggregator",
    "AuditReportFormatter",
    "ReportBuilder",
]
