"""
OCR Factory

Factory for creating OCR extractor instances.
"""

from typing import Dict, Any
from enum import Enum

from ...config.settings import OCRConfig
from ...domain.ports.text_extractor import TextExtractorPort
from .tesseract_ocr import TesseractOCRExtractor, DummyOCRExtractor


class OCRType(Enum):
    """Available OCR implementations."""

    TESSERACT = "tesseract"
    DUMMY = "dummy"


class OCRFactory:
    """
    Factory for creating OCR extractor instances.

    Usage:
        ocr = OCRFactory.create(OCRType.TESSERACT, languages="eng+nep")
    """

    @staticmethod
    def create(
        ocr_type: OCRType,
        **kwargs
    ) -> TextExtractorPort:
        """
        Create an OCR extractor instance.

        Args:
            ocr_type: Type of OCR to create
            **kwargs: Configuration options
                For TESSERACT:
                - languages: Tesseract language set (default: "eng+nep")
                - psm: Page segmentation mode
                - threshold: Binarization cutoff
                For DUMMY:
                - preset_text: Text returned for every image

        Returns:
            TextExtractorPort implementation
        """
        if ocr_type == OCRType.TESSERACT:
            return TesseractOCRExtractor(
                languages=kwargs.get("languages", "eng+nep"),
                oem=kwargs.get("oem", 3),
                psm=kwargs.get("psm", 6),
                threshold=kwargs.get("threshold", 160),
                timeout_seconds=kwargs.get("timeout_seconds", 30.0),
                config=kwargs.get("config", ""),
            )

        elif ocr_type == OCRType.DUMMY:
            return DummyOCRExtractor(
                preset_text=kwargs.get("preset_text", "SAMPLE DRUG 500mg Tablet")
            )

        else:
            raise ValueError(f"Unknown OCR type: {ocr_type}")

    @staticmethod
    def create_from_config(config: OCRConfig) -> TextExtractorPort:
        """
        Create OCR from the OCR configuration section.

        Args:
            config: OCRConfig

        Returns:
            TextExtractorPort implementation
        """
        return OCRFactory.create(
            OCRType(config.type),
            languages=config.language,
            oem=config.oem,
            psm=config.psm,
            threshold=config.threshold,
            timeout_seconds=config.timeout_seconds,
        )

    @staticmethod
    def create_from_dict(config: Dict[str, Any]) -> TextExtractorPort:
        """Create OCR from a dictionary with 'type' and other options."""
        options = dict(config)
        ocr_type = OCRType(options.pop("type", "tesseract"))
        return OCRFactory.create(ocr_type, **options)
