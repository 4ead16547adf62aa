"""Configuration from the environment and from dictionaries."""

import pytest

from label_scanner.config.settings import AppConfig, OPENROUTER_BASE_URL


ENV_NAMES = [
    "LABEL_SCANNER_OCR_LANGUAGE",
    "LABEL_SCANNER_OCR_MAX_WORKERS",
    "LABEL_SCANNER_PROVIDER",
    "LABEL_SCANNER_VISION_MODEL",
    "LABEL_SCANNER_TEXT_MODEL",
    "LABEL_SCANNER_MODEL_TIMEOUT",
    "LABEL_SCANNER_ENRICHMENT",
    "LABEL_SCANNER_LOG_LEVEL",
    "LABEL_SCANNER_API_KEY",
    "OPENROUTER_API_KEY",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    empty_env = tmp_path / ".env"
    empty_env.write_text("")
    return str(empty_env)


def test_defaults(clean_env):
    config = AppConfig.from_env(clean_env)
    assert config.ocr.language == "eng+nep"
    assert config.model.provider == "openrouter"
    assert config.model.base_url == OPENROUTER_BASE_URL
    assert config.model.api_key is None
    assert config.pipeline.timeout_seconds == 120.0
    assert config.validation.max_file_size == 10 * 1024 * 1024


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("LABEL_SCANNER_OCR_LANGUAGE", "eng")
    monkeypatch.setenv("LABEL_SCANNER_OCR_MAX_WORKERS", "0")
    monkeypatch.setenv("LABEL_SCANNER_PROVIDER", "GROQ")
    monkeypatch.setenv("LABEL_SCANNER_MODEL_TIMEOUT", "15")
    monkeypatch.setenv("LABEL_SCANNER_ENRICHMENT", "off")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")

    config = AppConfig.from_env(clean_env)
    assert config.ocr.language == "eng"
    assert config.ocr.max_workers == 1
    assert config.model.provider == "groq"
    assert config.model.base_url is None
    assert config.model.timeout == 15.0
    assert config.model.api_key == "gsk-test"
    assert config.enrichment.enabled is False


def test_api_key_precedence(clean_env, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or")
    assert AppConfig.from_env(clean_env).model.api_key == "sk-or"

    monkeypatch.setenv("LABEL_SCANNER_API_KEY", "sk-own")
    assert AppConfig.from_env(clean_env).model.api_key == "sk-own"


def test_groq_key_only_for_groq(clean_env, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    assert AppConfig.from_env(clean_env).model.api_key is None


def test_dotenv_file_is_loaded(clean_env, monkeypatch, tmp_path):
    env_file = tmp_path / "scanner.env"
    env_file.write_text("LABEL_SCANNER_VISION_MODEL=some/vision\n")
    monkeypatch.setenv("LABEL_SCANNER_VISION_MODEL", "placeholder")
    monkeypatch.delenv("LABEL_SCANNER_VISION_MODEL")
    config = AppConfig.from_env(str(env_file))
    assert config.model.vision_model == "some/vision"


def test_dict_round_trip_never_leaks_key():
    config = AppConfig.from_dict({
        "model": {"provider": "dummy", "api_key": "secret", "not_a_field": 1},
        "pipeline": {"timeout_seconds": 5},
    })
    assert config.model.provider == "dummy"
    assert config.pipeline.timeout_seconds == 5
    assert not hasattr(config.model, "not_a_field")

    data = config.to_dict()
    assert "api_key" not in data["model"]
    assert "secret" not in repr(data)
    assert AppConfig.from_dict(data).model.provider == "dummy"


def test_api_key_follows_provider_change(clean_env, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    config = AppConfig.from_env(clean_env)
    assert config.model.api_key is None

    config.model.use_provider("Groq")
    assert config.resolve_api_key() == "gsk-test"
    assert config.model.provider == "groq"
    assert config.model.base_url is None
