"""
Domain Services

Pure label-reading rules: text cleanup, hints, dates, batch voting, merging,
dosage/liquid parsing and uses lookup.
"""

from .text_cleanup import cleanup_ocr, normalize_units_and_noise, devanagari_to_ascii
from .hints import build_hints, split_lines
from .dates import to_iso_date, normalize_date, finalize_date, find_first_date_token
from .batch import normalize_batch_token, finalize_batch, pick_best_batch
from .merge import merge_candidates, prefer_name, MergeInputs, LabelHits
from .dosage import decide_dosage_form, parse_liquid_meta
from .uses import extract_uses_from_text, infer_active_from_name, COMMON_USES_BY_INGREDIENT

__all__ = [
    "cleanup_ocr",
    "normalize_units_and_noise",
    "devanagari_to_ascii",
    "build_hints",
    "split_lines",
    "to_iso_date",
    "normalize_date",
    "finalize_date",
    "find_first_date_token",
    "normalize_batch_token",
    "finalize_batch",
    "pick_best_batch",
    "merge_candidates",
    "prefer_name",
    "MergeInputs",
    "LabelHits",
    "decide_dosage_form",
    "parse_liquid_meta",
    "extract_uses_from_text",
    "infer_active_from_name",
    "COMMON_USES_BY_INGREDIENT",
]
