"""
Utility modules for the Clinic Audit Engine.
"""

from .normalization import normalize_amount, normalize_text, strip_accents

__all__ = [
    "normalize_amount",
    "normalize_text",
    "strip_accents",
]
