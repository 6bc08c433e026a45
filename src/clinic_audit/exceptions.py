"""
Exceptions raised by the Clinic Audit Engine.
"""


class ClinicAuditError(Exception):
    """Base class for errors raised by this package."""


class InvalidAuditInputError(ClinicAuditError, TypeError):
    """The value passed to the engine is neither a SkillInput nor a mapping."""
