"""
Chat Model Label Extractors

Vision and text-model extraction of a CandidateRecord through an
OpenAI-compatible chat completions API.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional
import logging
import time

from ...domain.ports.label_extractor import LabelExtractorPort
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.extraction_result import HintBundle
from ...domain.entities.label_record import CandidateRecord
from ...domain.exceptions import ModelConnectionError, ModelResponseError
from ...domain.services.batch import finalize_batch
from ...cross_cutting.error_handling import handle_exception
from ..utils.image_processing import prepare_for_vision
from .client import create_chat_client
from .parsing import parse_candidate
from .prompts import (
    VISION_SYSTEM_PROMPT,
    VISION_PROMPT,
    TEXT_SYSTEM_PROMPT,
    build_text_prompt,
)


logger = logging.getLogger(__name__)


class ChatModelLabelExtractor(LabelExtractorPort):
    """
    Base class for chat-model extractors.

    Requests temperature 0 and JSON object responses. Any network, timeout or
    parse failure is logged and yields None so the pipeline can fall through
    to the next tier.

    Attributes:
        model: Model name at the provider
        provider: "openrouter", "openai" or "groq"
        client: Optional pre-built client (tests inject fakes here)
    """

    title = "Product Info Extractor"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        provider: str = "openrouter",
        base_url: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 500,
        timeout: float = 60.0,
        max_retries: int = 1,
        referer: str = "http://localhost:3000",
        client: Any = None
    ):
        """
        Initialize the extractor.

        Args:
            model: Model name
            api_key: Provider API key
            provider: Provider name
            base_url: API base URL for OpenAI-compatible providers
            temperature: Sampling temperature
            max_tokens: Maximum response tokens
            timeout: Request timeout in seconds
            max_retries: Client-level retries
            referer: HTTP-Referer sent to OpenRouter
            client: Pre-built chat client
        """
        self._model = model
        self._api_key = api_key
        self._provider = provider
        self._base_url = base_url
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._max_retries = max_retries
        self._referer = referer
        self._client = client

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_openrouter(self) -> bool:
        return self._provider == "openrouter"

    def _initialize(self) -> None:
        """Lazy initialization of the chat client."""
        if self._client is not None:
            return

        headers = None
        if self.is_openrouter:
            headers = {"HTTP-Referer": self._referer, "X-Title": self.title}

        self._client = create_chat_client(
            provider=self._provider,
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=self._max_retries,
            headers=headers,
        )

    def _extra_body(self) -> Optional[Dict[str, Any]]:
        """Provider-specific request fields."""
        return None

    def _request(self, messages: List[Dict[str, Any]]) -> str:
        """Send one chat completion and return the message content."""
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "temperature": self._temperature,
            "response_format": {"type": "json_object"},
            "max_tokens": self._max_tokens,
            "messages": messages,
        }
        extra_body = self._extra_body()
        if extra_body:
            kwargs["extra_body"] = extra_body

        try:
            response = self._client.chat.completions.create(**kwargs)
        except Exception as e:
            raise ModelConnectionError(f"{self.extractor_name} request failed: {e}", provider=self._provider)

        if not getattr(response, "choices", None):
            return ""
        return response.choices[0].message.content or ""

    @abstractmethod
    def _build_messages(
        self,
        images: List[ImageData],
        ocr_text: str,
        hints: HintBundle
    ) -> Optional[List[Dict[str, Any]]]:
        """Build the chat messages, or None when there is nothing to send."""
        pass

    @handle_exception(default_return=None, log_level=logging.WARNING)
    def extract(
        self,
        images: List[ImageData],
        ocr_text: str = "",
        hints: Optional[HintBundle] = None
    ) -> Optional[CandidateRecord]:
        """
        Extract a candidate record with the chat model.

        Args:
            images: Label photographs
            ocr_text: Combined OCR text
            hints: Keyword hint windows

        Returns:
            CandidateRecord with a normalized batch code, or None on failure
        """
        start_time = time.time()
        messages = self._build_messages(images, ocr_text or "", hints or HintBundle())
        if messages is None:
            return None

        self._initialize()
        raw = self._request(messages)

        record = parse_candidate(raw)
        if record is None:
            raise ModelResponseError(raw_response=raw)

        if record.batch_number:
            record.batch_number = finalize_batch(record.batch_number)

        self.logger.info(
            f"{self.extractor_name} returned {len(record.populated_fields)} fields "
            f"in {(time.time() - start_time) * 1000:.0f}ms"
        )
        return record


class VisionLabelExtractor(ChatModelLabelExtractor):
    """
    Vision-capable model reading all label images at once.

    Images are EXIF-rotated, downscaled and sent as JPEG data URLs.
    """

    title = "Product Info Extractor (Vision)"

    def __init__(self, model: str, max_width: int = 1600, jpeg_quality: int = 80, **kwargs):
        super().__init__(model, **kwargs)
        self._max_width = max_width
        self._jpeg_quality = jpeg_quality

    def _build_messages(
        self,
        images: List[ImageData],
        ocr_text: str,
        hints: HintBundle
    ) -> Optional[List[Dict[str, Any]]]:
        if not images:
            return None

        parts: List[Dict[str, Any]] = [{"type": "text", "text": VISION_PROMPT}]
        for image in images:
            url = prepare_for_vision(image.bytes, self._max_width, self._jpeg_quality)
            parts.append({"type": "image_url", "image_url": {"url": url}})

        return [
            {"role": "system", "content": VISION_SYSTEM_PROMPT},
            {"role": "user", "content": parts},
        ]

    @property
    def extractor_name(self) -> str:
        return "vision"


class TextLabelExtractor(ChatModelLabelExtractor):
    """
    Text-only model reading the combined OCR text and hint windows.

    Skipped (returns None) when the OCR text is empty.
    """

    title = "Product Info Extractor (OCR)"

    def _extra_body(self) -> Optional[Dict[str, Any]]:
        if self.is_openrouter:
            return {"reasoning": {"enabled": False}}
        return None

    def _build_messages(
        self,
        images: List[ImageData],
        ocr_text: str,
        hints: HintBundle
    ) -> Optional[List[Dict[str, Any]]]:
        if not ocr_text.strip():
            self.logger.warning("No OCR text; skipping text model")
            return None

        return [
            {"role": "system", "content": TEXT_SYSTEM_PROMPT},
            {"role": "user", "content": build_text_prompt(ocr_text, hints)},
        ]

    @property
    def extractor_name(self) -> str:
        return "text_model"


class DummyLabelExtractor(LabelExtractorPort):
    """
    Dummy extractor for testing without a model provider.

    Returns a preset record (or None) for every call.
    """

    def __init__(self, record: Optional[CandidateRecord] = None, name: str = "dummy"):
        self._record = record
        self._name = name
        self.calls = 0

    def extract(
        self,
        images: List[ImageData],
        ocr_text: str = "",
        hints: Optional[HintBundle] = None
    ) -> Optional[CandidateRecord]:
        self.calls += 1
        return self._record

    @property
    def extractor_name(self) -> str:
        return self._name
