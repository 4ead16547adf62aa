"""
Uses on Label & Ingredient Lookup

Reads printed indications from OCR text and maps common ingredients to
general uses.
"""

import re
from typing import Dict, List, Optional

from .hints import split_lines


MAX_LABEL_USES = 10
MIN_USE_LENGTH = 3

COMMON_USES_BY_INGREDIENT: Dict[str, List[str]] = {
    "paracetamol": ["pain", "fever"],
    "acetaminophen": ["pain", "fever"],
    "ibuprofen": ["pain", "inflammation", "fever"],
    "loperamide": ["acute diarrhea"],
    "oral rehydration salts": ["dehydration due to diarrhea"],
    "cetirizine": ["allergic rhinitis", "itching"],
    "amoxicillin": ["bacterial infections (as prescribed)"],
    "flucloxacillin": ["susceptible staphylococcal infections (as prescribed)"],
}

_LISTED = re.compile(r"\b(Indications?|Uses?)\b\s*[:\-]\s*(.+)$", re.IGNORECASE)
_INLINE = re.compile(
    r"\bfor (?:the )?(?:relief|treatment|management|control) of ([a-z ,&\-/]+?)(?:\.|,|;|$)",
    re.IGNORECASE | re.MULTILINE,
)
_NEPALI = re.compile(r"(?:का लागि|उपचार|राहत)\s*([^.,;]+)")
_SEVERITY = re.compile(r"^(?:mild|moderate|severe)\b\s+", re.IGNORECASE)


def _squash(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def extract_uses_from_text(text: str) -> List[str]:
    """
    Scan OCR text for printed uses.

    Covers "Indications:"/"Uses:" lists, inline "for the relief of ..."
    phrases and Nepali equivalents.

    Returns:
        Up to 10 distinct phrases, each at least 3 characters
    """
    text = str(text or "")
    found: Dict[str, None] = {}

    for line in split_lines(text):
        m = _LISTED.search(line)
        if m:
            for part in re.split(r"[;,•·]", m.group(2)):
                if _squash(part):
                    found.setdefault(_squash(part), None)

    for m in _INLINE.finditer(text):
        for part in re.split(r"[,&/]", m.group(1)):
            if _squash(part):
                found.setdefault(_squash(part), None)

    for m in _NEPALI.finditer(text):
        if _squash(m.group(1)):
            found.setdefault(_squash(m.group(1)), None)

    uses = [_SEVERITY.sub("", u).strip() for u in found]
    return [u for u in uses if len(u) >= MIN_USE_LENGTH][:MAX_LABEL_USES]


def infer_active_from_name(name: Optional[str]) -> Optional[str]:
    """Known ingredient contained in a product name, if any."""
    if not name:
        return None
    lowered = name.lower()
    for ingredient in COMMON_USES_BY_INGREDIENT:
        if ingredient in lowered:
            return ingredient
    return None


def common_uses_for(ingredient: Optional[str]) -> Optional[List[str]]:
    """General uses for an ingredient (substring match), or None."""
    key = infer_active_from_name(ingredient)
    if key is None:
        return None
    return list(COMMON_USES_BY_INGREDIENT[key][:6])


def merge_uses(existing: Optional[List[str]], extra: List[str]) -> Optional[List[str]]:
    """Append new uses, skipping case-insensitive duplicates."""
    merged = list(existing or [])
    have = {u.lower() for u in merged}
    for use in extra:
        if use.lower() not in have:
            merged.append(use)
            have.add(use.lower())
    return merged or None
