"""
Audit stages for the Clinic Audit Engine.
"""

from .contract import ContractEvaluator, resolve_domain
from .event_model import EventModelInferrer
from .fragmentation import FragmentationClassifier, LineContext
from .integrity import LineIntegrityChecker
from .matching import MatchCascade
from .opacity import OpacityScorer

__all__ = [
    "ContractEvaluator",
    "EventModelInferrer",
    "FragmentationClassifier",
    "LineContext",
    "LineIntegrityChecker",
    "MatchCascade",
    "OpacityScorer",
    "resolve_domain",
]
