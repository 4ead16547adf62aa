"""
Label Extractor Port

Abstract interface for sources that turn label images or OCR text into a
schema-shaped candidate record.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..value_objects.image_data import ImageData
from ..entities.extraction_result import HintBundle
from ..entities.label_record import CandidateRecord


class LabelExtractorPort(ABC):
    """
    Port (interface) for candidate record extraction.

    Implementations:
    - Vision model reading the photographs directly
    - Text model reading the combined OCR text
    - Deterministic regex rules over the OCR text
    """

    @abstractmethod
    def extract(
        self,
        images: List[ImageData],
        ocr_text: str = "",
        hints: Optional[HintBundle] = None
    ) -> Optional[CandidateRecord]:
        """
        Produce a candidate record.

        Args:
            images: Label photographs, in upload order
            ocr_text: Combined OCR text of all images
            hints: Keyword hint windows built from the OCR text

        Returns:
            CandidateRecord, or None when the source is unavailable or
            returned nothing usable
        """
        pass

    @property
    @abstractmethod
    def extractor_name(self) -> str:
        """Get the name of the extraction source."""
        pass
