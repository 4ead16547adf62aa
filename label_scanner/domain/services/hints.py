"""
Hint Builder

Finds the OCR lines around label keywords so the text model and the label
pulls can focus on them.
"""

import re
from typing import Dict, List, Pattern

from ..entities.extraction_result import HintBundle


MAX_HINT_LINES = 10
HINT_SEPARATOR = " | "

# Keyword families, English and Nepali
HINT_PATTERNS: Dict[str, Pattern] = {
    "mfg": re.compile(r"(?:\b(?:Mfg|DOM)(?![A-Za-z])|उत्पादन\s*मिति)", re.IGNORECASE),
    "exp": re.compile(
        r"(?:\b(?:Expiry|Exp|Use by|Best before)(?![A-Za-z])|स्याढ\s*सकिने|म्याद\s*सकिने)",
        re.IGNORECASE,
    ),
    "batch": re.compile(r"\b(?:(?:Batch(?:\s*No\.?)?|Lot|LOT|BNo|BN|BATCH)\b|B\.?\s*No\b)", re.IGNORECASE),
    "price": re.compile(r"\bM\.?R\.?P\.?\b|मूल्य", re.IGNORECASE),
    "license": re.compile(r"Mfg\.?\s*Lic\.?\s*No\.?", re.IGNORECASE),
}


def split_lines(text: str) -> List[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in re.split(r"\r?\n", str(text or "")) if line.strip()]


def _window(lines: List[str], pattern: Pattern) -> List[str]:
    picked: List[str] = []
    for i, line in enumerate(lines):
        if pattern.search(line):
            picked.extend(lines[max(0, i - 1):i + 2])
    return picked


def _compact(lines: List[str]) -> str:
    unique = list(dict.fromkeys(lines))
    return HINT_SEPARATOR.join(unique[:MAX_HINT_LINES])


def build_hints(text: str) -> HintBundle:
    """
    Build keyword hint windows from cleaned OCR text.

    Each matching line is captured together with its previous and next line,
    deduplicated in order and capped at 10 lines per family.

    Args:
        text: Cleaned, combined OCR text

    Returns:
        HintBundle with one joined window per family and the full line list
    """
    lines = split_lines(text)
    windows = {
        family: _compact(_window(lines, pattern))
        for family, pattern in HINT_PATTERNS.items()
    }
    return HintBundle(lines=lines, **windows)
