"""
Text Extractor Port

Abstract interface for OCR engine implementations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..value_objects.image_data import ImageData
from ..entities.extraction_result import OcrResult


class TextExtractorPort(ABC):
    """
    Port (interface) for OCR implementations.

    Responsible for reading printed text from one label photograph.
    Languages are Tesseract-style codes ("eng", "nep").
    """

    @abstractmethod
    def recognize(
        self,
        image: ImageData,
        languages: Optional[Union[str, List[str]]] = None
    ) -> OcrResult:
        """
        Recognize the text on an image.

        Args:
            image: Image data to process
            languages: Language codes joined by "+", "," or spaces, or a list.
                       If None, the engine default is used.

        Returns:
            OcrResult with the text and mean confidence.
            Never raises on engine failure: returns an empty result.
        """
        pass

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Get the name of the OCR engine."""
        pass

    def is_available(self) -> bool:
        """Check if the engine binary/runtime is installed."""
        return True
