"""Scan service validation and the command line entry point."""

import json

import pytest

from label_scanner.application.services import LabelScanService, create_default_service
from label_scanner.application.pipeline import PipelineBuilder
from label_scanner.cli import build_parser, load_config, main
from label_scanner.config.settings import AppConfig, ValidationConfig
from label_scanner.domain.exceptions import InvalidImageError, InvalidInputError
from label_scanner.domain.value_objects.image_data import ImageData
from label_scanner.infrastructure.llm import DummyLabelExtractor, StaticMedicineInfoLookup
from label_scanner.infrastructure.ocr.tesseract_ocr import TesseractOCRExtractor

from conftest import FakeOCR, make_image, make_image_bytes


@pytest.fixture
def service():
    pipeline = PipelineBuilder().with_text_extractor(FakeOCR({"front.png": "BUSTOP"})).build()
    return LabelScanService(pipeline)


def test_scan_returns_report(service, two_images):
    report = service.scan(two_images)
    assert report.record.name == "BUSTOP"
    assert len(report.ocr_results) == 2


def test_too_few_images(service):
    with pytest.raises(InvalidInputError) as exc:
        service.scan([make_image()])
    assert exc.value.details["field"] == "images"
    assert exc.value.is_recoverable is False


def test_too_many_images():
    pipeline = PipelineBuilder().with_text_extractor(FakeOCR({})).build()
    service = LabelScanService(pipeline, validation=ValidationConfig(max_images=2))
    with pytest.raises(InvalidInputError):
        service.scan([make_image(f"{i}.png") for i in range(3)])


def test_undecodable_image(service):
    broken = ImageData.from_bytes(b"definitely not a png", filename="broken.png")
    with pytest.raises(InvalidImageError) as exc:
        service.scan([make_image(), broken])
    assert exc.value.details["filename"] == "broken.png"


def test_scan_files(service, tmp_path):
    paths = []
    for name in ("front.png", "back.png"):
        path = tmp_path / name
        path.write_bytes(make_image_bytes())
        paths.append(str(path))

    report = service.scan_files(paths)
    assert [r.original_name for r in report.ocr_results] == ["front.png", "back.png"]

    with pytest.raises(InvalidImageError):
        service.scan_files([paths[0], str(tmp_path / "missing.png")])


def test_default_service_wiring():
    config = AppConfig.from_dict({"model": {"provider": "dummy"}})
    service = create_default_service(config)
    pipeline = service.pipeline
    assert isinstance(pipeline._text_extractor, TesseractOCRExtractor)
    assert isinstance(pipeline._vision_extractor, DummyLabelExtractor)
    assert isinstance(pipeline._medicine_info, StaticMedicineInfoLookup)
    assert pipeline.config.timeout_seconds == 120.0

    config.model.vision_enabled = False
    config.enrichment.enabled = False
    pipeline = create_default_service(config).pipeline
    assert pipeline._vision_extractor is None
    assert pipeline._medicine_info is None


def test_cli_overrides(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("")
    args = build_parser().parse_args([
        "a.jpg", "b.jpg", "--provider", "groq", "--no-vision", "--lang", "nep",
        "--env-file", str(env_file),
    ])
    config = load_config(args)
    assert config.model.provider == "groq"
    assert config.model.base_url is None
    assert config.model.vision_enabled is False
    assert config.ocr.language == "nep"


def test_cli_rejects_single_image(tmp_path, capsys):
    image = tmp_path / "front.png"
    image.write_bytes(make_image_bytes())
    env_file = tmp_path / ".env"
    env_file.write_text("")

    code = main([str(image), "--provider", "dummy", "--env-file", str(env_file), "--log-level", "CRITICAL"])

    assert code == 2
    error = json.loads(capsys.readouterr().err)["error"]
    assert error["type"] == "InvalidInputError"


def test_cli_provider_override_picks_matching_key(tmp_path, monkeypatch):
    for name in ("LABEL_SCANNER_PROVIDER", "LABEL_SCANNER_API_KEY", "OPENROUTER_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    env_file = tmp_path / ".env"
    env_file.write_text("")

    args = build_parser().parse_args(["a.png", "b.png", "--provider", "groq", "--env-file", str(env_file)])
    config = load_config(args)
    assert config.model.provider == "groq"
    assert config.model.api_key == "gsk-test"


def test_cli_provider_override_back_to_openrouter(tmp_path, monkeypatch):
    for name in ("LABEL_SCANNER_API_KEY", "OPENAI_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LABEL_SCANNER_PROVIDER", "groq")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or")
    env_file = tmp_path / ".env"
    env_file.write_text("")

    args = build_parser().parse_args(["a.png", "b.png", "--provider", "openrouter", "--env-file", str(env_file)])
    config = load_config(args)
    assert config.model.base_url == "https://openrouter.ai/api/v1"
    assert config.model.api_key == "sk-or"
