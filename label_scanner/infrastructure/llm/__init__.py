"""Chat model adapters."""

from .label_extractors import (
    ChatModelLabelExtractor,
    VisionLabelExtractor,
    TextLabelExtractor,
    DummyLabelExtractor,
)
from .medicine_info import ChatMedicineInfoLookup, StaticMedicineInfoLookup
from .parsing import safe_parse_json, parse_candidate, LabelPayload
from .factory import LLMFactory, LLMType

__all__ = [
    "ChatModelLabelExtractor",
    "VisionLabelExtractor",
    "TextLabelExtractor",
    "DummyLabelExtractor",
    "ChatMedicineInfoLookup",
    "StaticMedicineInfoLookup",
    "safe_parse_json",
    "parse_candidate",
    "LabelPayload",
    "LLMFactory",
    "LLMType",
]
