"""
Tesseract OCR Text Extractor

OCR implementation using Tesseract through pytesseract.
"""

from contextlib import contextmanager
from io import BytesIO
from typing import Iterator, List, Optional, Union
import logging
import time

import pytesseract
from PIL import Image

from ...domain.ports.text_extractor import TextExtractorPort
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.extraction_result import OcrResult
from ...domain.exceptions import OCREngineError
from ...cross_cutting.error_handling import FailureGuard
from ..utils.image_processing import prepare_for_ocr, DEFAULT_THRESHOLD


logger = logging.getLogger(__name__)


DEFAULT_LANGUAGES = "eng"


def normalize_languages(languages: Optional[Union[str, List[str]]]) -> str:
    """
    Canonical "+"-joined language set.

    Accepts "eng+nep", "eng, nep", "eng nep" or ["eng", "nep"]. Duplicates are
    dropped, order is kept, and empty input falls back to "eng".
    """
    if not languages:
        return DEFAULT_LANGUAGES
    if isinstance(languages, str):
        parts = languages.replace(",", " ").replace("+", " ").split()
    else:
        parts = [str(p).strip() for p in languages]
    unique = list(dict.fromkeys(p for p in parts if p))
    return "+".join(unique) or DEFAULT_LANGUAGES


def mean_confidence(confidences: List) -> float:
    """Mean of the word confidences Tesseract reports (ignores -1 entries)."""
    values = []
    for conf in confidences:
        try:
            value = float(conf)
        except (TypeError, ValueError):
            continue
        if value >= 0:
            values.append(value)
    return sum(values) / len(values) if values else 0.0


class TesseractOCRExtractor(TextExtractorPort):
    """
    Text extractor implementation using Tesseract OCR.

    Requires the tesseract binary and the configured language packs
    (e.g. "eng" and "nep") to be installed on the system.

    Attributes:
        languages: Default "+"-joined language set
        oem: OCR Engine Mode (3 = default)
        psm: Page Segmentation Mode (6 = single uniform block)
    """

    def __init__(
        self,
        languages: Union[str, List[str]] = "eng+nep",
        oem: int = 3,
        psm: int = 6,
        threshold: int = DEFAULT_THRESHOLD,
        timeout_seconds: float = 30.0,
        config: str = ""
    ):
        """
        Initialize Tesseract OCR extractor.

        Args:
            languages: Tesseract language(s), e.g., "eng+nep"
            oem: OCR Engine Mode
            psm: Page Segmentation Mode
            threshold: Binarization cutoff used in preprocessing
            timeout_seconds: Per-call Tesseract timeout (0 disables)
            config: Additional tesseract configuration
        """
        self._languages = normalize_languages(languages)
        self._oem = oem
        self._psm = psm
        self._threshold = threshold
        self._timeout = timeout_seconds
        self._config = config

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def languages(self) -> str:
        return self._languages

    def _get_tesseract_config(self) -> str:
        """Build tesseract configuration string."""
        config_parts = [
            f"--oem {self._oem}",
            f"--psm {self._psm}",
        ]
        if self._config:
            config_parts.append(self._config)
        return " ".join(config_parts)

    @contextmanager
    def _worker(self, image: ImageData) -> Iterator[Image.Image]:
        """
        Scoped OCR input for one call.

        The preprocessed page is released on every exit path.
        """
        try:
            page = Image.open(BytesIO(prepare_for_ocr(image.bytes, self._threshold)))
        except Exception as e:
            raise OCREngineError(f"Failed to prepare image for OCR: {e}", engine_name=self.engine_name)
        try:
            yield page
        finally:
            page.close()

    def _run(self, page: Image.Image, lang: str) -> OcrResult:
        config = self._get_tesseract_config()
        try:
            data = pytesseract.image_to_data(
                page,
                lang=lang,
                config=config,
                output_type=pytesseract.Output.DICT,
                timeout=self._timeout,
            )
            text = pytesseract.image_to_string(
                page,
                lang=lang,
                config=config,
                timeout=self._timeout,
            )
        except Exception as e:
            raise OCREngineError(f"Tesseract OCR failed: {e}", engine_name=self.engine_name)

        return OcrResult(
            text=(text or "").strip(),
            confidence=mean_confidence(data.get("conf", [])),
        )

    def recognize(
        self,
        image: ImageData,
        languages: Optional[Union[str, List[str]]] = None
    ) -> OcrResult:
        """
        Recognize the text on an image.

        Engine failures are logged and turned into an empty result so one bad
        image never aborts the batch.

        Args:
            image: Image data to process
            languages: Override language set

        Returns:
            OcrResult with text and mean confidence
        """
        start_time = time.time()
        lang = normalize_languages(languages) if languages else self._languages

        result = OcrResult.empty(image.filename)
        with FailureGuard(
            self.logger,
            context=f"OCR on {image.filename}, continuing with empty text",
            suppress=True,
            log_level=logging.WARNING,
        ):
            with self._worker(image) as page:
                result = self._run(page, lang)
                result.original_name = image.filename

        result.processing_time_ms = (time.time() - start_time) * 1000
        return result

    def is_available(self) -> bool:
        try:
            pytesseract.get_tesseract_version()
        except Exception:
            return False
        return True

    @property
    def engine_name(self) -> str:
        return "Tesseract"


class DummyOCRExtractor(TextExtractorPort):
    """
    Dummy OCR extractor for testing without Tesseract.

    Returns preset text for every image, or per-filename text when a mapping
    is given.
    """

    def __init__(self, preset_text: str = "SAMPLE DRUG 500mg Tablet", texts: Optional[dict] = None):
        self._preset_text = preset_text
        self._texts = texts or {}

    def recognize(
        self,
        image: ImageData,
        languages: Optional[Union[str, List[str]]] = None
    ) -> OcrResult:
        text = self._texts.get(image.filename, self._preset_text)
        return OcrResult(
            text=text,
            confidence=95.0 if text else 0.0,
            original_name=image.filename,
            processing_time_ms=1.0,
        )

    @property
    def engine_name(self) -> str:
        return "DummyOCR"
