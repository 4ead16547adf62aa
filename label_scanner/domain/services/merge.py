"""
Merge & Voting Engine

Reconciles the model, regex and label-line candidates field by field.
Each field has its own merge rule so precedence can be tested in isolation.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..entities.label_record import CandidateRecord, MergedRecord, ExtractionSource
from .batch import pick_best_batch, finalize_batch
from .dates import finalize_date


MIN_NAME_LENGTH = 6


@dataclass
class LabelHits:
    """Values pulled from the line after a printed label ("Batch No:", "Exp:")."""

    batch_number: Optional[str] = None
    manufacturing_date: Optional[str] = None
    expiry_date: Optional[str] = None


@dataclass
class MergeInputs:
    """
    Everything the merge needs.

    Attributes:
        model: Vision or text-model candidate (None when both failed)
        regex: Regex fallback candidate
        label_hits: Labelled value pulls from the OCR lines
        ocr_texts: Raw OCR text per image, for the batch sweep
        lines: Cleaned OCR lines, for the batch keyword neighborhoods
    """

    model: Optional[CandidateRecord] = None
    regex: Optional[CandidateRecord] = None
    label_hits: LabelHits = field(default_factory=LabelHits)
    ocr_texts: List[str] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)


def prefer_name(model_name: Optional[str], regex_name: Optional[str]) -> Optional[str]:
    """Model name if long enough, else regex name if long enough, else whichever exists."""
    if model_name and len(model_name.strip()) >= MIN_NAME_LENGTH:
        return model_name.strip()
    if regex_name and len(regex_name.strip()) >= MIN_NAME_LENGTH:
        return regex_name.strip()
    return model_name or regex_name or None


def first_present(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def merge_batch(inputs: MergeInputs) -> Optional[str]:
    """Batch by weighted vote; the labelled pull is used only if nothing votes."""
    voted = pick_best_batch(
        ocr_texts=inputs.ocr_texts,
        hint_lines=inputs.lines,
        model_batch=inputs.model.batch_number if inputs.model else None,
        regex_batch=inputs.regex.batch_number if inputs.regex else None,
    )
    return finalize_batch(voted or inputs.label_hits.batch_number)


def merge_date(
    label_value: Optional[str],
    model_value: Optional[str],
    regex_value: Optional[str],
    context_text: str = ""
) -> Optional[str]:
    """
    Label line beats model, model beats regex.

    Candidates are finalized in that order; the first canonical date wins.
    """
    for value in (label_value, model_value, regex_value):
        date = finalize_date(value, context_text)
        if date:
            return date
    return None


def merge_label_uses(model: Optional[CandidateRecord]) -> Optional[List[str]]:
    if model is None or not isinstance(model.uses_on_label, list):
        return None
    uses = [u for u in model.uses_on_label if u]
    return uses or None


def compute_total(slips: Optional[int], per_slip: Optional[int]) -> Optional[int]:
    """Pack total, only when both counts are known."""
    if slips is None or per_slip is None:
        return None
    return slips * per_slip


def merge_candidates(
    inputs: MergeInputs,
    source: ExtractionSource = ExtractionSource.REGEX_ONLY
) -> MergedRecord:
    """
    Merge candidates into one record.

    Args:
        inputs: Candidates and OCR evidence
        source: Provenance tag for the result

    Returns:
        MergedRecord with canonical dates or None
    """
    model = inputs.model or CandidateRecord()
    regex = inputs.regex or CandidateRecord()
    hits = inputs.label_hits
    context_text = "\n".join(inputs.lines)

    slips = first_present(model.slips_count, regex.slips_count)
    per_slip = first_present(model.tablets_per_slip, regex.tablets_per_slip)

    return MergedRecord(
        name=prefer_name(model.name, regex.name),
        manufacturing_date=merge_date(hits.manufacturing_date, model.manufacturing_date, regex.manufacturing_date, context_text),
        batch_number=merge_batch(inputs),
        expiry_date=merge_date(hits.expiry_date, model.expiry_date, regex.expiry_date, context_text),
        slips_count=slips,
        tablets_per_slip=per_slip,
        total_tablets=compute_total(slips, per_slip),
        mrp_amount=first_present(model.mrp_amount, regex.mrp_amount),
        mrp_currency=first_present(model.mrp_currency, regex.mrp_currency),
        mrp_text=first_present(model.mrp_text, regex.mrp_text),
        uses_on_label=merge_label_uses(inputs.model),
        active_ingredient_on_label=model.active_ingredient_on_label or None,
        strength_on_label=model.strength_on_label or None,
        dosage_form_on_label=model.dosage_form_on_label or None,
        source=source,
    )
