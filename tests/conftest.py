"""Shared fixtures: in-memory images and deterministic fakes for OCR and models."""

from io import BytesIO
from types import SimpleNamespace
from typing import Dict, List, Optional
import json

import pytest
from PIL import Image

from label_scanner.domain.entities.extraction_result import OcrResult, HintBundle
from label_scanner.domain.entities.label_record import CandidateRecord
from label_scanner.domain.ports.label_extractor import LabelExtractorPort
from label_scanner.domain.ports.text_extractor import TextExtractorPort
from label_scanner.domain.value_objects.image_data import ImageData


def make_image_bytes(size=(64, 32), color="white", fmt="PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_image(filename: str = "front.png", size=(64, 32), fmt="PNG") -> ImageData:
    return ImageData.from_bytes(make_image_bytes(size=size, fmt=fmt), filename=filename)


class FakeOCR(TextExtractorPort):
    """Returns preset text per filename; filenames in `failing` raise."""

    def __init__(self, texts: Dict[str, str], failing: Optional[List[str]] = None):
        self.texts = texts
        self.failing = set(failing or [])
        self.seen: List[str] = []

    def recognize(self, image: ImageData, languages: Optional[str] = None) -> OcrResult:
        self.seen.append(image.filename)
        if image.filename in self.failing:
            raise RuntimeError(f"engine crashed on {image.filename}")
        text = self.texts.get(image.filename, "")
        return OcrResult(text=text, confidence=91.6 if text else 0.0, original_name=image.filename)

    @property
    def engine_name(self) -> str:
        return "fake"


class FakeExtractor(LabelExtractorPort):
    """Returns a preset record, or raises the preset error."""

    def __init__(self, record: Optional[CandidateRecord] = None, error: Optional[Exception] = None):
        self.record = record
        self.error = error
        self.calls = 0
        self.last_ocr_text: Optional[str] = None
        self.last_hints: Optional[HintBundle] = None

    def extract(self, images, ocr_text="", hints=None):
        self.calls += 1
        self.last_ocr_text = ocr_text
        self.last_hints = hints
        if self.error is not None:
            raise self.error
        return self.record

    @property
    def extractor_name(self) -> str:
        return "fake"


class FakeCompletions:
    """Stands in for client.chat.completions; records every request."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.requests: List[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_chat_client(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.fixture
def two_images() -> List[ImageData]:
    return [make_image("front.png"), make_image("back.png")]


@pytest.fixture
def chat_client():
    """Factory fixture: chat_client(content=dict|str, error=Exception)."""
    def build(content=None, error=None):
        if isinstance(content, dict):
            content = json.dumps(content)
        return make_chat_client(content=content, error=error)
    return build
