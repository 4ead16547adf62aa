"""
Medicine Info Port

Abstract interface for general, non-prescriptive medicine information lookups.
"""

from abc import ABC, abstractmethod
from typing import List

from ..entities.label_record import SafetyNotes


class MedicineInfoPort(ABC):
    """
    Port (interface) for medicine information sources.

    Used only to enrich a finished record; lookups must never block the scan.
    """

    @abstractmethod
    def lookup_uses(self, name: str) -> List[str]:
        """
        Get common uses for a medicine.

        Args:
            name: Product or ingredient name

        Returns:
            Up to 6 short use phrases (empty on failure)
        """
        pass

    @abstractmethod
    def lookup_safety_notes(self, name: str) -> SafetyNotes:
        """
        Get general safety notes for a medicine.

        Args:
            name: Product or ingredient name

        Returns:
            SafetyNotes (empty on failure)
        """
        pass
