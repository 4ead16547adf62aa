"""
Label Record Entities

The schema-shaped partial record every extractor produces, and the merged
record the pipeline returns.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import List, Optional, Dict, Any
from enum import Enum


class ExtractionSource(Enum):
    """Extraction tier that ultimately produced a record."""

    VISION = "vision"
    OCR_LLM = "ocr_llm"
    REGEX_ONLY = "regex-only"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


@dataclass
class CandidateRecord:
    """
    Partial output of one extractor (vision, text model or regex).

    Every field is optional. Absence is always None; an empty string means the
    source found the field but it was empty.
    """

    name: Optional[str] = None
    manufacturing_date: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[str] = None
    slips_count: Optional[int] = None
    tablets_per_slip: Optional[int] = None
    mrp_amount: Optional[float] = None
    mrp_currency: Optional[str] = None
    mrp_text: Optional[str] = None
    uses_on_label: Optional[List[str]] = None
    active_ingredient_on_label: Optional[str] = None
    strength_on_label: Optional[str] = None
    dosage_form_on_label: Optional[str] = None

    @property
    def is_populated(self) -> bool:
        """At least one field holds a non-empty value."""
        return any(not _is_blank(getattr(self, f.name)) for f in fields(self))

    @property
    def populated_fields(self) -> List[str]:
        return [f.name for f in fields(self) if not _is_blank(getattr(self, f.name))]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass
class SafetyNotes:
    """General, non-prescriptive safety notes for a medicine."""

    care_notes: Optional[List[str]] = None
    side_effects_common: Optional[List[str]] = None
    avoid_if: Optional[List[str]] = None
    precautions: Optional[List[str]] = None
    interactions_key: Optional[List[str]] = None

    @property
    def is_empty(self) -> bool:
        return all(_is_blank(getattr(self, f.name)) for f in fields(self))


@dataclass
class MergedRecord:
    """
    Final structured record for one scan.

    Candidate fields after reconciliation, plus the computed pack total,
    the dosage-form decision, liquid metadata, enrichment and provenance.
    """

    name: Optional[str] = None
    manufacturing_date: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[str] = None
    slips_count: Optional[int] = None
    tablets_per_slip: Optional[int] = None
    total_tablets: Optional[int] = None
    mrp_amount: Optional[float] = None
    mrp_currency: Optional[str] = None
    mrp_text: Optional[str] = None

    uses_on_label: Optional[List[str]] = None
    active_ingredient_on_label: Optional[str] = None
    strength_on_label: Optional[str] = None
    dosage_form_on_label: Optional[str] = None

    # Dosage form decision and liquid metadata
    dosage_form: Optional[str] = None
    bottle_volume_ml: Optional[int] = None
    bottles_per_pack: Optional[int] = None
    dose_ml: Optional[int] = None
    concentration_mg_per_5ml: Optional[float] = None
    concentration_label: Optional[str] = None

    # Enrichment
    inferred_uses: Optional[List[str]] = None
    care_notes: Optional[List[str]] = None
    side_effects_common: Optional[List[str]] = None
    avoid_if: Optional[List[str]] = None
    precautions: Optional[List[str]] = None
    interactions_key: Optional[List[str]] = None

    source: ExtractionSource = ExtractionSource.REGEX_ONLY

    def apply_safety_notes(self, notes: SafetyNotes) -> None:
        for f in fields(notes):
            setattr(self, f.name, getattr(notes, f.name))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view; provenance is reported as `_source`."""
        data = asdict(self)
        data.pop("source")
        data["_source"] = self.source.value
        return data

    @classmethod
    def empty(cls) -> "MergedRecord":
        return cls(source=ExtractionSource.REGEX_ONLY)
