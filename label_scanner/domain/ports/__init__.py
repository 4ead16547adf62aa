"""
Ports (Interfaces)

Abstract interfaces defining the contracts for infrastructure adapters.
Following Hexagonal Architecture / Ports & Adapters pattern.
"""

from .text_extractor import TextExtractorPort
from .label_extractor import LabelExtractorPort
from .medicine_info import MedicineInfoPort

__all__ = [
    "TextExtractorPort",
    "LabelExtractorPort",
    "MedicineInfoPort",
]
