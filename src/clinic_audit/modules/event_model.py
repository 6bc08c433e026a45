"""
Event Model Inference.
Infers the principal clinical act and the bundled packages from the
bill's own vocabulary. Coarse context for the package-unbundling motor.
"""

import re

from ..core.bill_index import BillIndex
from ..core.models import ClinicalPackage, EventModel, PrincipalAct


class EventModelInferrer:
    """
    Keyword-presence inference over the concatenated normalized bill
    descriptions. Never fails: no evidence yields general hospitalization
    with no packages.
    """

    # Operating room / surgical suite vocabulary (English and Spanish bills)
    OPERATING_ROOM_PATTERN = re.compile(
        r"\b(operating room|operating theat(er|re)|surgical suite|surgery|"
        r"pabellon|quirofano)\b"
    )

    # Day bed / room vocabulary
    DAY_BED_PATTERN = re.compile(
        r"\b(day bed|bed day|room and board|room charge|hospital room|private room|"
        r"ward|dia cama|habitacion)\b"
    )

    NOTES = "Inferred deterministically from bill item descriptions"

    def infer(self, index: BillIndex) -> EventModel:
        """
        Infer the event model for one bill.

        Args:
            index: Bill index of the audit

        Returns:
            Principal act and detected packages
        """
        text = index.concatenated_descriptions()
        packages: list[ClinicalPackage] = []
        principal = PrincipalAct.GENERAL_HOSPITALIZATION

        if self.OPERATING_ROOM_PATTERN.search(text):
            principal = PrincipalAct.SURGERY
            packages.append(ClinicalPackage.OPERATING_ROOM_RIGHT)

        if self.DAY_BED_PATTERN.search(text):
            packages.append(ClinicalPackage.INTEGRAL_DAY_BED)

        return EventModel(
            principal_act=principal,
            detected_packages=packages,
            notes=self.NOTES,
        )
