"""OCR adapters."""

from .tesseract_ocr import TesseractOCRExtractor, DummyOCRExtractor, normalize_languages
from .factory import OCRFactory, OCRType

__all__ = [
    "TesseractOCRExtractor",
    "DummyOCRExtractor",
    "normalize_languages",
    "OCRFactory",
    "OCRType",
]
