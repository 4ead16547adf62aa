"""
Dosage/Liquid Parser

Decides the dosage form from label text and, for liquid forms, reads the
bottle volume, the dose volume and the concentration.
"""

import re
from typing import List, Optional, Tuple, Pattern

from ..value_objects.dosage_info import DosageForm, LiquidInfo
from .text_cleanup import normalize_units_and_noise


# Keyword inference order; first hit wins
DOSAGE_KEYWORDS: List[Tuple[Pattern, DosageForm]] = [
    (re.compile(r"\btablets?\b"), DosageForm.TABLET),
    (re.compile(r"\bcapsules?\b|\bcaps?\b"), DosageForm.CAPSULE),
    (re.compile(r"\bsyrup\b"), DosageForm.SYRUP),
    (re.compile(r"\bsuspension\b"), DosageForm.SUSPENSION),
    (re.compile(r"\bsolution\b"), DosageForm.SOLUTION),
    (re.compile(r"\bdrops?\b"), DosageForm.DROPS),
    (re.compile(r"\binjection\b"), DosageForm.INJECTION),
    (re.compile(r"\bointment\b"), DosageForm.OINTMENT),
    (re.compile(r"\bcream\b"), DosageForm.CREAM),
    (re.compile(r"\bgel\b"), DosageForm.GEL),
]

DOSE_PATTERNS = [
    re.compile(r"\bper\s*(\d{1,3})\s*ml\b", re.IGNORECASE),
    re.compile(r"\beach\s*(\d{1,3})\s*ml\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,3})\s*ml\s*contains\b", re.IGNORECASE),
    re.compile(r"प्रति\s*(\d{1,3})\s*ml", re.IGNORECASE),
    re.compile(r"प्रत्येक\s*(\d{1,3})\s*ml", re.IGNORECASE),
    re.compile(r"(\d{1,3})\s*ml\s*दिनको", re.IGNORECASE),
]

QUANTITY_HINTS = re.compile(
    r"(net|qty|quantity|volume|content|contains|मात्रा|परिमाण|निवल|शुद्ध|सामग्री)",
    re.IGNORECASE,
)
VOLUME_PATTERN = re.compile(r"(\d{2,4})\s*ml\b", re.IGNORECASE)
PACK_PATTERN = re.compile(r"(\d{1,2})\s*x\s*\d{2,4}\s*ml", re.IGNORECASE)

CONCENTRATION_5ML = re.compile(r"(\d+(?:[.,]\d+)?)\s*mg\s*(?:/|per|प्रति)\s*5\s*ml", re.IGNORECASE)
CONCENTRATION_10ML = re.compile(r"(\d+(?:[.,]\d+)?)\s*mg\s*(?:/|per|प्रति)\s*10\s*ml", re.IGNORECASE)

CONCENTRATION_LINES = [
    re.compile(r"([^\n]*?(?:\bper|प्रति)\s*5\s*ml[^\n]*)", re.IGNORECASE),
    re.compile(r"([^\n]*?(?:\bper|प्रति)\s*10\s*ml[^\n]*)", re.IGNORECASE),
    re.compile(r"([^\n]*?\beach\s*\d{1,3}\s*ml[^\n]*)", re.IGNORECASE),
]

# Plausible single-bottle volume band, in ml
MIN_BOTTLE_ML = 30
MAX_BOTTLE_ML = 500


def decide_dosage_form(label_hint: Optional[str], text: Optional[str]) -> Optional[DosageForm]:
    """
    Decide the dosage form.

    Args:
        label_hint: Dosage form as read from the label by a model
        text: Combined label text for keyword inference

    Returns:
        DosageForm, or None when nothing matches
    """
    hinted = DosageForm.from_string(label_hint)
    if hinted is not DosageForm.UNKNOWN:
        return hinted

    blob = f"{label_hint or ''} {text or ''}".lower()
    for pattern, form in DOSAGE_KEYWORDS:
        if pattern.search(blob):
            return form
    return None


def _first_int(patterns: List[Pattern], text: str) -> Optional[int]:
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return None


def _plausible_volumes(text: str) -> List[int]:
    values = [int(v) for v in VOLUME_PATTERN.findall(text)]
    return [v for v in values if MIN_BOTTLE_ML <= v <= MAX_BOTTLE_ML]


def find_bottle_volume(text: str) -> Optional[int]:
    """
    Bottle volume in ml.

    Lines with quantity words ("Net", "Qty", "मात्रा", ...) are searched first,
    then the whole text. Dose-sized numbers fall outside the 30-500 ml band.
    """
    for line in text.split("\n"):
        if not QUANTITY_HINTS.search(line):
            continue
        candidates = _plausible_volumes(line)
        if candidates:
            return candidates[0]

    candidates = _plausible_volumes(text)
    return candidates[0] if candidates else None


def find_concentration(text: str) -> Optional[float]:
    """Concentration in mg per 5 ml; a mg/10 ml reading is halved."""
    m = CONCENTRATION_5ML.search(text)
    if m:
        return float(m.group(1).replace(",", "."))
    m = CONCENTRATION_10ML.search(text)
    if m:
        return round(float(m.group(1).replace(",", ".")) / 2, 3)
    return None


def parse_liquid_meta(raw: str) -> LiquidInfo:
    """
    Parse liquid metadata from label text.

    Unit and digit noise is normalized before any pattern runs.

    Args:
        raw: Combined label text

    Returns:
        LiquidInfo with the dose kept separate from the bottle volume
    """
    text = normalize_units_and_noise(raw)

    pack = PACK_PATTERN.search(text)
    label = None
    for pattern in CONCENTRATION_LINES:
        m = pattern.search(text)
        if m:
            label = m.group(1).strip()
            break

    return LiquidInfo(
        bottle_volume_ml=find_bottle_volume(text),
        bottles_per_pack=int(pack.group(1)) if pack else None,
        dose_ml=_first_int(DOSE_PATTERNS, text),
        concentration_mg_per_5ml=find_concentration(text),
        concentration_label=label,
    )
