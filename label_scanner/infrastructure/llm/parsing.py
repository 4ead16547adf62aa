"""
Model Response Parsing

Tolerant JSON parsing of chat model output and lenient coercion into a
CandidateRecord.
"""

from typing import Any, Dict, List, Optional
import json
import logging
import math
import re

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ...domain.entities.label_record import CandidateRecord


logger = logging.getLogger(__name__)


_FENCE_OPEN = re.compile(r"^```(?:json)?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```$")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_NULL_WORDS = {"null", "none", "n/a", "na"}


def safe_parse_json(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a model response into a JSON object.

    Strips Markdown code fences, then tries the whole text, then the outermost
    {...} span.

    Returns:
        Parsed dict, or None when no JSON object can be recovered
    """
    s = str(raw or "").strip()
    if s.startswith("```"):
        s = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", s)).strip()

    try:
        parsed = json.loads(s)
    except ValueError:
        parsed = None
        start, end = s.find("{"), s.rfind("}")
        if start != -1 and end > start:
            try:
                parsed = json.loads(s[start:end + 1])
            except ValueError:
                parsed = None

    return parsed if isinstance(parsed, dict) else None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if stripped.lower() in _NULL_WORDS:
        return None
    return stripped


def _coerce_number(value: Any) -> Optional[float]:
    """Finite number from a JSON value or numeric text; NaN and infinities become None."""
    if value is None or isinstance(value, bool):
        return None
    number = None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        m = _NUMBER.search(value.replace(",", ""))
        if m:
            number = float(m.group(0))
    if number is None or not math.isfinite(number):
        return None
    return number


class LabelPayload(BaseModel):
    """
    Candidate record as returned by a chat model.

    Validation is lenient: values of the wrong type become None instead of
    failing the whole payload.
    """

    model_config = ConfigDict(extra="ignore")

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

    @field_validator(
        "name", "manufacturing_date", "batch_number", "expiry_date",
        "mrp_currency", "mrp_text", "active_ingredient_on_label",
        "strength_on_label", "dosage_form_on_label",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)

    @field_validator("slips_count", "tablets_per_slip", mode="before")
    @classmethod
    def coerce_count(cls, v):
        number = _coerce_number(v)
        if number is None or number != int(number) or number < 0:
            return None
        return int(number)

    @field_validator("mrp_amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return _coerce_number(v)

    @field_validator("uses_on_label", mode="before")
    @classmethod
    def coerce_uses(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return None
        return [s.strip() for s in v if isinstance(s, str) and s.strip()]

    def to_candidate(self) -> CandidateRecord:
        return CandidateRecord(**self.model_dump())


def parse_candidate(raw: Optional[str]) -> Optional[CandidateRecord]:
    """
    Parse a model response into a CandidateRecord.

    Returns:
        CandidateRecord, or None when the response is not a JSON object
    """
    data = safe_parse_json(raw)
    if data is None:
        return None
    try:
        return LabelPayload.model_validate(data).to_candidate()
    except ValidationError as e:
        logger.warning(f"Model JSON did not match the record schema: {e}")
        return None


def coerce_string_list(value: Any, max_items: int = 6) -> Optional[List[str]]:
    """Non-empty strings from a JSON list, capped; None when nothing is left."""
    if not isinstance(value, list):
        return None
    items = [s.strip() for s in value if isinstance(s, str) and s.strip()]
    return items[:max_items] or None
