"""
OCR Text Cleanup

Repairs the recurring OCR misreads on pharmacy labels before any pattern
matching runs. Pure functions, no I/O.
"""

import re


DEVANAGARI_DIGITS = str.maketrans("०१२३४५६७८९", "0123456789")

# (pattern, replacement) applied in order by cleanup_ocr
_LABEL_REPAIRS = [
    (re.compile(r"Capsu[\s\\]?es", re.IGNORECASE), "Capsules"),
    (re.compile(r"\bMig\b\.?", re.IGNORECASE), "Mfg."),
    (re.compile(r"\bExpir[yil]+\b", re.IGNORECASE), "Expiry"),
    (re.compile(r"\b0CT\b"), "OCT"),
    (re.compile(r"\bSE[FN]\b"), "SEP"),
]

# Horizontal whitespace only; line breaks carry structure
_HORIZONTAL_SPACE = re.compile(r"[^\S\r\n]+")

_DEVANAGARI_ML = [
    re.compile(r"मि\.?\s*ली"),
    re.compile(r"मिलि"),
    re.compile(r"मिली"),
]

_UNIT_REPAIRS = [
    (re.compile(r"(\d)\s*my\b", re.IGNORECASE), r"\1 mg"),
    (re.compile(r"(\d)\s*mq\b", re.IGNORECASE), r"\1 mg"),
    (re.compile(r"\b1O0\b"), "100"),
    (re.compile(r"\bO(\d)\b"), r"0\1"),
]


def devanagari_to_ascii(text: str) -> str:
    """Map Devanagari digits (०-९) to ASCII digits."""
    return str(text or "").translate(DEVANAGARI_DIGITS)


def cleanup_ocr(text: str) -> str:
    """
    Clean raw OCR text for hint building and regex extraction.

    Args:
        text: Combined OCR text

    Returns:
        Text with ASCII digits, repaired label words and single spaces
    """
    s = devanagari_to_ascii(text)
    for pattern, replacement in _LABEL_REPAIRS:
        s = pattern.sub(replacement, s)
    return _HORIZONTAL_SPACE.sub(" ", s)


def normalize_units_and_noise(text: str) -> str:
    """
    Normalize units and numeric OCR noise before liquid parsing.

    Handles Devanagari digits and "ml" spellings, "5my"/"5mq" -> "5 mg",
    "1O0" -> "100", "O5" -> "05" and the "×" multiply sign.
    """
    s = devanagari_to_ascii(text)
    for pattern in _DEVANAGARI_ML:
        s = pattern.sub(" ml", s)
    for pattern, replacement in _UNIT_REPAIRS:
        s = pattern.sub(replacement, s)
    return s.replace("×", "x")
