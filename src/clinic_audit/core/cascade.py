"""
First-match-wins detector cascade.
Detectors are plain records evaluated left to right; the first whose
predicate holds produces the result.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

ContextT = TypeVar("ContextT")
ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class Detector(Generic[ContextT, ResultT]):
    """Definition of one detector in a cascade."""

    detector_id: str
    name: str
    description: str
    predicate: Callable[[ContextT], bool]
    build_result: Callable[[ContextT], ResultT]


@dataclass(frozen=True)
class CascadeOutcome(Generic[ResultT]):
    """Result of running a cascade, with the detector that produced it."""

    result: ResultT
    detector_id: str | None

    @property
    def triggered(self) -> bool:
        return self.detector_id is not None


def run_cascade(
    detectors: Sequence[Detector[ContextT, ResultT]],
    context: ContextT,
    default: Callable[[ContextT], ResultT],
) -> CascadeOutcome[ResultT]:
    """
    Evaluate detectors in order and stop at the first trigger.

    Args:
        detectors: Ordered detectors
        context: Read-only input shared by every predicate
        default: Builds the result when no detector triggers

    Returns:
        The triggered detector's result, or the default result
    """
    for detector in detectors:
        if detector.predicate(context):
            return CascadeOutcome(
                result=detector.build_result(context),
                detector_id=detector.detector_id,
            )
    return CascadeOutcome(result=default(context), detector_id=None)


def list_detectors(detectors: Sequence[Detector[ContextT, ResultT]]) -> list[dict[str, str]]:
    """Describe the detectors of a cascade in evaluation order."""
    return [
        {
            "detector_id": detector.detector_id,
            "name": detector.name,
            "description": detector.description,
        }
        for detector in detectors
    ]
