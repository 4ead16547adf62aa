"""Tesseract adapter with pytesseract patched out."""

from label_scanner.infrastructure.ocr import tesseract_ocr
from label_scanner.infrastructure.ocr.tesseract_ocr import (
    TesseractOCRExtractor,
    DummyOCRExtractor,
    normalize_languages,
    mean_confidence,
)
from label_scanner.infrastructure.ocr.factory import OCRFactory, OCRType
from label_scanner.domain.value_objects.image_data import ImageData

from conftest import make_image


def test_normalize_languages():
    assert normalize_languages("eng+nep") == "eng+nep"
    assert normalize_languages("eng, nep eng") == "eng+nep"
    assert normalize_languages(["nep", "eng", "nep"]) == "nep+eng"
    assert normalize_languages(None) == "eng"
    assert normalize_languages(" + ") == "eng"


def test_mean_confidence_ignores_missing_words():
    assert mean_confidence(["90", -1, "80.0", "x", None]) == 85.0
    assert mean_confidence([-1, "-1"]) == 0.0
    assert mean_confidence([]) == 0.0


def test_recognize_uses_language_override(monkeypatch):
    calls = []

    def fake_data(page, lang, config, output_type, timeout):
        calls.append(("data", lang, config))
        return {"conf": ["96", "-1", "88"]}

    def fake_string(page, lang, config, timeout):
        calls.append(("string", lang, config))
        return "  BUSTOP\nBatch No: AB 1234  \n"

    monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_data", fake_data)
    monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_string", fake_string)

    ocr = TesseractOCRExtractor(languages="eng", psm=6)
    result = ocr.recognize(make_image("front.png"), languages="eng,nep")

    assert result.text == "BUSTOP\nBatch No: AB 1234"
    assert result.confidence == 92.0
    assert result.original_name == "front.png"
    assert calls[0] == ("data", "eng+nep", "--oem 3 --psm 6")
    assert result.to_dict() == {"original_name": "front.png", "text": "BUSTOP\nBatch No: AB 1234", "confidence": 92}


def test_engine_failure_gives_empty_result(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("tesseract is not installed")

    monkeypatch.setattr(tesseract_ocr.pytesseract, "image_to_data", boom)

    result = TesseractOCRExtractor().recognize(make_image("side.png"))
    assert result.text == ""
    assert result.confidence == 0.0
    assert result.original_name == "side.png"
    assert not result.has_text


def test_undecodable_image_gives_empty_result():
    image = ImageData.from_bytes(b"not an image", filename="broken.jpg")
    result = TesseractOCRExtractor().recognize(image)
    assert result.text == ""
    assert result.original_name == "broken.jpg"


def test_dummy_ocr_and_factory():
    dummy = OCRFactory.create(OCRType.DUMMY, preset_text="BUSTOP")
    assert isinstance(dummy, DummyOCRExtractor)
    assert dummy.recognize(make_image("a.png")).text == "BUSTOP"

    ocr = OCRFactory.create_from_dict({"type": "tesseract", "languages": "nep"})
    assert isinstance(ocr, TesseractOCRExtractor)
    assert ocr.languages == "nep"
