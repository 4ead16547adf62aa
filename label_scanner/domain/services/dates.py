"""
Date Normalizer

Converts the date tokens printed on labels ("OCT 24", "02/09/2025",
"Sep 2, 2025", "2025.9.2") into canonical YYYY-MM-DD dates.
"""

import re
from datetime import date, datetime
from typing import Optional, Union


MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

MONTH_NAME = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)"

CANONICAL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")

_MONTH_YEAR = re.compile(rf"^({MONTH_NAME})[a-z]*[.\-/\s]+(\d{{2,4}})$", re.IGNORECASE)
_YEAR_FIRST = re.compile(r"^(\d{4})[/.\-](\d{1,2})[/.\-](\d{1,2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{2,4})$")
_MONTH_DAY_YEAR = re.compile(rf"^({MONTH_NAME})[a-z]*\s+(\d{{1,2}}),?\s*(\d{{4}})$", re.IGNORECASE)
_NUMERIC_MONTH_YEAR = re.compile(r"^(\d{1,2})[/.\-](\d{4})$")
_PARTIAL = re.compile(r"^([A-Za-z]{3,5})[.\-/\s]?(\d{1,2})?$")

_YEAR_IN_TEXT = re.compile(r"(20\d{2})")

# Date tokens inside free text, most specific first
DATE_TOKEN_PATTERNS = [
    re.compile(r"(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})"),
    re.compile(r"(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})"),
    re.compile(rf"({MONTH_NAME}[a-z]*\s+\d{{1,2}}(?:,\s*|\s+)\d{{2,4}})", re.IGNORECASE),
    re.compile(rf"({MONTH_NAME}[a-z]*[.\-/\s]+\d{{2,4}})", re.IGNORECASE),
    re.compile(rf"({MONTH_NAME}[a-z]*[.\-/\s]?\d{{1,2}})\b", re.IGNORECASE),
]


def expand_year(year: str) -> str:
    """Two-digit years: 70-99 -> 19xx, 00-69 -> 20xx."""
    if len(year) == 2:
        return ("19" if int(year) >= 70 else "20") + year
    return year


def _month_number(name: str) -> Optional[int]:
    name = name.lower()
    return MONTHS.get(name) or MONTHS.get(name[:3])


def to_iso_date(value: Optional[str]) -> Optional[str]:
    """
    Convert a full or month-year date token to YYYY-MM-DD.

    Args:
        value: Raw date token

    Returns:
        Canonical date, or the trimmed input when the shape is not recognized
    """
    if not value:
        return None
    s = str(value).strip()

    m = _MONTH_YEAR.match(s)
    if m:
        return f"{expand_year(m.group(2))}-{_month_number(m.group(1)):02d}-01"

    m = _YEAR_FIRST.match(s)
    if m:
        y, mo, d = m.groups()
        return f"{y}-{int(mo):02d}-{int(d):02d}"

    m = _DAY_FIRST.match(s)
    if m:
        d, mo, y = m.groups()
        return f"{expand_year(y)}-{int(mo):02d}-{int(d):02d}"

    m = _MONTH_DAY_YEAR.match(s)
    if m:
        mon, d, y = m.groups()
        return f"{y}-{_month_number(mon):02d}-{int(d):02d}"

    m = _NUMERIC_MONTH_YEAR.match(s)
    if m:
        mo, y = m.groups()
        return f"{y}-{int(mo):02d}-01"

    m = YEAR_MONTH.match(s)
    if m:
        y, mo = m.groups()
        return f"{y}-{int(mo):02d}-01"

    return s


def complete_partial_date(partial: str, year: Union[int, str]) -> Optional[str]:
    """
    Complete a month-only token ("OCT", "OCT5") with the given year.

    The day defaults to 01. Unknown month names yield None.
    """
    m = _PARTIAL.match(str(partial).strip())
    if not m:
        return None
    month = _month_number(m.group(1))
    if not month:
        return None
    day = int(m.group(2) or 1)
    return f"{year}-{month:02d}-{day:02d}"


def sniff_year(text: Optional[str]) -> int:
    """First 20xx year found in the text, else the current year."""
    m = _YEAR_IN_TEXT.search(str(text or ""))
    return int(m.group(1)) if m else date.today().year


def normalize_date(value: Optional[str], context_text: str = "") -> Optional[str]:
    """
    Normalize a date token, completing short partial tokens.

    Args:
        value: Raw date token
        context_text: OCR text used to sniff the year of partial tokens

    Returns:
        Canonical date, or the best-effort string when it cannot be resolved
    """
    iso = to_iso_date(value)
    if iso and len(iso) <= 6:
        return complete_partial_date(iso, sniff_year(context_text))
    return iso


def is_valid_date(value: str) -> bool:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def finalize_date(value: Optional[str], context_text: str = "") -> Optional[str]:
    """
    Final date for the output record: canonical YYYY-MM-DD or None.

    Normalizing an already canonical date returns it unchanged.
    """
    iso = normalize_date(value, context_text)
    if not iso:
        return None
    if CANONICAL_DATE.match(iso) and is_valid_date(iso):
        return iso
    return None


def find_first_date_token(text: Optional[str]) -> Optional[str]:
    """Find the first date-like token in a line of text."""
    if not text:
        return None
    for pattern in DATE_TOKEN_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(1)
    return None
