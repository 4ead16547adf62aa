"""
Regex Label Extractor

Deterministic pattern library for name, dates, batch, pack size and MRP.
Always cheap to run; used as the last resort and as a corroborating vote.
"""

from typing import Callable, List, Optional, Pattern, Tuple, Union
import logging
import re

from ...domain.ports.label_extractor import LabelExtractorPort
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.extraction_result import HintBundle
from ...domain.entities.label_record import CandidateRecord
from ...domain.services.dates import MONTH_NAME, expand_year, find_first_date_token, to_iso_date, MONTHS
from ...domain.services.hints import split_lines
from ...domain.services.merge import LabelHits


logger = logging.getLogger(__name__)


ValueRule = Union[Pattern, Callable[[str], Optional[str]]]

BATCH_LABEL = re.compile(r"\b(?:(?:Batch(?:\s*No\.?)?|Lot|LOT|BNo|BN|BATCH)\b|B\.?\s*No\b\.?)[:\-\s]*", re.IGNORECASE)
BATCH_VALUE = re.compile(r"([A-Za-z0-9\-]{1,20})")
MFG_LABEL = re.compile(
    r"(?:\b(?:Mfg\.?\s*Date|MFG\s*Date|MFG|DOM)(?![A-Za-z])\.?|उत्पादन\s*मिति)\s*[:\-]*",
    re.IGNORECASE,
)
EXP_LABEL = re.compile(
    r"(?:\b(?:Expiry\s*Date|Exp\.?\s*Date|Expiry|Exp|Use\s*by|Best\s*before)(?![A-Za-z])\.?|स्याढ\s*सकिने|म्याद\s*सकिने)\s*[:\-]*",
    re.IGNORECASE,
)


def pull_labeled_value(lines: List[str], label: Pattern, value: ValueRule) -> Optional[str]:
    """
    Value printed after a label.

    The text after the label on the same line is tried first, then the next line.

    Args:
        lines: OCR lines
        label: Label pattern
        value: Capturing pattern or function returning the value

    Returns:
        First value found, or None
    """
    def read(text: str) -> Optional[str]:
        if callable(value) and not isinstance(value, re.Pattern):
            return value(text)
        m = value.search(text)
        return m.group(1) if m else None

    for i, line in enumerate(lines):
        m = label.search(line)
        if not m:
            continue
        found = read(line[m.end():].strip())
        if found:
            return found
        if i + 1 < len(lines):
            found = read(lines[i + 1])
            if found:
                return found
    return None


def extract_labeled_values(lines: List[str]) -> LabelHits:
    """Batch, manufacture and expiry values pulled from labelled lines."""
    return LabelHits(
        batch_number=pull_labeled_value(lines, BATCH_LABEL, BATCH_VALUE),
        manufacturing_date=pull_labeled_value(lines, MFG_LABEL, find_first_date_token),
        expiry_date=pull_labeled_value(lines, EXP_LABEL, find_first_date_token),
    )


class RegexLabelExtractor(LabelExtractorPort):
    """
    Rule-based label extractor.

    Strategy:
    1. Product name from a fixed allow-list of known products
    2. Month-year dates on Mfg/Exp lines, then full dates anywhere
    3. Batch value after a Batch/Lot keyword
    4. Pack size in three shapes ("N x M TAB", "N TAB x M", "N TAB")
    5. MRP amount and currency on price lines
    """

    # Known product names (extend as new products are stocked)
    NAME_PATTERN = re.compile(
        r"(Flucloxacillin(?:\s+Capsules?\s*BP)?|FLUCLASS\s*500|BUSTOP|VITAMIN\s*B-?COMPLEX\s*SYRUP)",
        re.IGNORECASE,
    )

    FULL_DATE_PATTERN = re.compile(
        r"\b(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}"
        r"|\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"
        rf"|{MONTH_NAME}[a-z]*\s+\d{{1,2}}(?:,\s*|\s+)\d{{2,4}})\b",
        re.IGNORECASE,
    )
    MONTH_YEAR_PATTERN = re.compile(rf"\b({MONTH_NAME})[a-z]*[.\-/\s]+(\d{{2,4}})\b", re.IGNORECASE)

    MFG_HINT = re.compile(r"(?:\b(?:Mfg|DOM)(?![A-Za-z])|उत्पादन)", re.IGNORECASE)
    EXP_HINT = re.compile(
        r"(?:\b(?:Expiry|Exp|Use by|Best before)(?![A-Za-z])|स्याढ\s*सकिने|म्याद\s*सकिने)",
        re.IGNORECASE,
    )

    BATCH_PATTERN = re.compile(
        r"\b(?:Batch(?:\s*No\.?)?|Lot|LOT|BNo|BN|BATCH|B\.?\s*No\b\.?)\s*[:\-]?\s*([A-Z0-9\-]{3,})\b",
        re.IGNORECASE,
    )

    _UNITS = r"(?:TABLETS|TABLET|TABS|TAB|CAPSULES|CAPSULE|CAPS|CAP)"
    PACK_PATTERNS = [
        # 10 x 10 TAB: slips x per-slip
        (re.compile(rf"\b(\d{{1,3}})\s*[xX×]\s*(\d{{1,3}})\s*{_UNITS}\b", re.IGNORECASE), "slips_first"),
        # 10 CAPS x 10: per-slip x slips
        (re.compile(rf"\b(\d{{1,3}})\s*{_UNITS}\s*[xX×]\s*(\d{{1,3}})\b", re.IGNORECASE), "tabs_first"),
        # 10 CAPS: per-slip only
        (re.compile(rf"\b(\d{{1,3}})\s*{_UNITS}\b", re.IGNORECASE), "tabs_only"),
    ]

    MRP_LINE = re.compile(r"(M\.?\s*R\.?\s*P\.?|मूल्य)", re.IGNORECASE)
    MRP_AMOUNT = re.compile(
        r"(?:MRP|M\.?\s*R\.?\s*P\.?|मूल्य)[^0-9]*(?:Rs\.?|INR|NPR|NRs|रु\.?|रु)?[^0-9]*([0-9]+(?:\.[0-9]{1,2})?)",
        re.IGNORECASE,
    )

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def extract(
        self,
        images: List[ImageData],
        ocr_text: str = "",
        hints: Optional[HintBundle] = None
    ) -> Optional[CandidateRecord]:
        """Run the pattern library over the cleaned OCR text."""
        return self.extract_from_text(ocr_text)

    def extract_from_text(self, text: str) -> CandidateRecord:
        """
        Extract a candidate record from text.

        Args:
            text: Cleaned, combined OCR text

        Returns:
            CandidateRecord (fields not found are None)
        """
        src = str(text or "")
        name_match = self.NAME_PATTERN.search(src)
        batch_match = self.BATCH_PATTERN.search(src)
        mfg, exp = self._extract_dates(src)
        slips, per_slip = self.extract_pack_info(src)
        amount, currency, mrp_text = self.extract_mrp(src)

        record = CandidateRecord(
            name=re.sub(r"\s+", " ", name_match.group(0)).strip() if name_match else None,
            manufacturing_date=mfg,
            batch_number=batch_match.group(1) if batch_match else None,
            expiry_date=exp,
            slips_count=slips,
            tablets_per_slip=per_slip,
            mrp_amount=amount,
            mrp_currency=currency,
            mrp_text=mrp_text,
        )
        self.logger.debug(f"Regex fields: {record.populated_fields}")
        return record

    def _month_year_iso(self, line: str) -> Optional[str]:
        m = self.MONTH_YEAR_PATTERN.search(line)
        if not m:
            return None
        month = MONTHS[m.group(1).lower()]
        return f"{expand_year(m.group(2))}-{month:02d}-01"

    def _extract_dates(self, src: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Manufacture and expiry dates.

        Month-year values on Mfg/Exp lines come first. Otherwise two or more
        full dates are read as (manufacture, expiry) in order of appearance, and
        a single full date is read as expiry.
        """
        lines = src.split("\n")
        mfg_line = next((line for line in lines if self.MFG_HINT.search(line)), "")
        exp_line = next((line for line in lines if self.EXP_HINT.search(line)), "")

        mfg = self._month_year_iso(mfg_line)
        exp = self._month_year_iso(exp_line)

        if not mfg or not exp:
            full_dates = [m.group(1) for m in self.FULL_DATE_PATTERN.finditer(src)]
            if len(full_dates) >= 2:
                mfg = mfg or full_dates[0]
                exp = exp or full_dates[1]
            elif len(full_dates) == 1:
                exp = exp or full_dates[0]

        return to_iso_date(mfg), to_iso_date(exp)

    def extract_pack_info(self, text: str) -> Tuple[Optional[int], Optional[int]]:
        """
        Pack size as (slips_count, tablets_per_slip).

        Patterns are tried in priority order; the lone "N TAB" shape only
        gives the per-slip count.
        """
        for pattern, shape in self.PACK_PATTERNS:
            m = pattern.search(text)
            if not m:
                continue
            if shape == "slips_first":
                return int(m.group(1)), int(m.group(2))
            if shape == "tabs_first":
                return int(m.group(2)), int(m.group(1))
            return None, int(m.group(1))
        return None, None

    def extract_mrp(self, text: str) -> Tuple[Optional[float], Optional[str], Optional[str]]:
        """
        MRP as (amount, currency, printed line).

        Currency comes from markers on the same line: NPR/NRs/रु -> NPR,
        INR -> INR, Rs -> Rs.
        """
        for line in split_lines(text):
            if not self.MRP_LINE.search(line):
                continue
            m = self.MRP_AMOUNT.search(line)
            if not m:
                continue

            if re.search(r"NPR|NRs|रु", line):
                currency = "NPR"
            elif "INR" in line:
                currency = "INR"
            elif re.search(r"Rs", line, re.IGNORECASE):
                currency = "Rs"
            else:
                currency = None
            return float(m.group(1)), currency, line
        return None, None, None

    @property
    def extractor_name(self) -> str:
        return "regex"
