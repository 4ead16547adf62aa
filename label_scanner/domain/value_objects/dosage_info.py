"""
Dosage Information Value Objects

Represents pharmaceutical dosage forms and the bottle metadata of liquid forms.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any


class DosageForm(Enum):
    """Enumeration of dosage forms the scanner can decide on."""

    # Solid forms
    TABLET = "tablet"
    CAPSULE = "capsule"

    # Liquid forms
    SYRUP = "syrup"
    SUSPENSION = "suspension"
    SOLUTION = "solution"
    DROPS = "drops"

    # Other
    INJECTION = "injection"
    OINTMENT = "ointment"
    CREAM = "cream"
    GEL = "gel"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "DosageForm":
        """
        Parse dosage form from label text, handling common variations.

        Args:
            value: Dosage form as printed (e.g., "Film coated tablets", "सिरप")

        Returns:
            Matching DosageForm enum value
        """
        if not value:
            return cls.UNKNOWN
        value_lower = value.lower().strip()

        # Direct match
        for form in cls:
            if form.value == value_lower:
                return form

        # Common variations (English and Nepali)
        variations = {
            "tablets": cls.TABLET,
            "tab": cls.TABLET,
            "tabs": cls.TABLET,
            "film coated tablet": cls.TABLET,
            "चक्की": cls.TABLET,
            "capsules": cls.CAPSULE,
            "cap": cls.CAPSULE,
            "caps": cls.CAPSULE,
            "क्याप्सुल": cls.CAPSULE,
            "सिरप": cls.SYRUP,
            "oral suspension": cls.SUSPENSION,
            "dry syrup": cls.SUSPENSION,
            "oral solution": cls.SOLUTION,
            "drop": cls.DROPS,
            "eye drops": cls.DROPS,
            "injectable": cls.INJECTION,
            "inj": cls.INJECTION,
            "मलम": cls.OINTMENT,
        }

        if value_lower in variations:
            return variations[value_lower]

        # Partial match, longest key first so "dry syrup" beats "syrup"
        keys = sorted(
            [f.value for f in cls if f is not cls.UNKNOWN] + list(variations),
            key=len,
            reverse=True,
        )
        for key in keys:
            if key in value_lower:
                return variations.get(key) or cls(key)

        return cls.UNKNOWN

    @property
    def is_liquid(self) -> bool:
        """Check if this form is sold by volume (bottle handling applies)."""
        return self in {
            DosageForm.SYRUP,
            DosageForm.SUSPENSION,
            DosageForm.SOLUTION,
            DosageForm.DROPS,
        }

    @property
    def label(self) -> str:
        """Upper-case label used in the output record."""
        return self.name


@dataclass(frozen=True)
class LiquidInfo:
    """
    Immutable value object for liquid dosage forms.

    Attributes:
        bottle_volume_ml: Volume of one bottle (30-500 ml band)
        bottles_per_pack: Number of bottles in an "N x M ml" pack
        dose_ml: Volume the strength refers to ("per 5 ml")
        concentration_mg_per_5ml: Strength normalized to mg per 5 ml
        concentration_label: Printed line the concentration was read from
    """

    bottle_volume_ml: Optional[int] = None
    bottles_per_pack: Optional[int] = None
    dose_ml: Optional[int] = None
    concentration_mg_per_5ml: Optional[float] = None
    concentration_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def empty(cls) -> "LiquidInfo":
        return cls()
