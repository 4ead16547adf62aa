"""
Application Configuration

Settings and configuration management for the label scanner.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import os

from dotenv import load_dotenv


ENV_PREFIX = "LABEL_SCANNER_"

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass
class OCRConfig:
    """OCR configuration."""

    type: str = "tesseract"  # tesseract, dummy
    language: str = "eng+nep"  # Tesseract language codes
    oem: int = 3
    psm: int = 6
    threshold: int = 160
    timeout_seconds: float = 30.0
    max_workers: int = 4


@dataclass
class ModelConfig:
    """Vision and text model configuration."""

    provider: str = "openrouter"  # openrouter, openai, groq, dummy
    vision_model: str = "qwen/qwen-2.5-vl-72b-instruct"
    text_model: str = "nvidia/nemotron-nano-9b-v2:free"
    base_url: Optional[str] = OPENROUTER_BASE_URL
    api_key: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 500
    timeout: float = 60.0  # Request timeout in seconds
    max_retries: int = 1
    vision_enabled: bool = True
    text_enabled: bool = True
    vision_max_width: int = 1600
    jpeg_quality: int = 80
    referer: str = "http://localhost:3000"
    app_title: str = "Pharmacy Label Scanner"

    def use_provider(self, provider: str) -> None:
        """Switch provider; only OpenRouter talks to a custom base URL."""
        self.provider = provider.lower()
        self.base_url = OPENROUTER_BASE_URL if self.provider == "openrouter" else None


@dataclass
class EnrichmentConfig:
    """Uses / safety-notes enrichment configuration."""

    enabled: bool = True
    lookup_model: str = "openai/gpt-4o-mini"
    max_items: int = 6


@dataclass
class PipelineConfig:
    """Pipeline orchestration configuration."""

    timeout_seconds: float = 120.0
    stage_retry_count: int = 0
    stage_retry_delay: float = 1.0


@dataclass
class ValidationConfig:
    """Scan input limits."""

    min_images: int = 2
    max_images: int = 20
    max_file_size_mb: float = 10.0

    @property
    def max_file_size(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    ocr: OCRConfig = field(default_factory=OCRConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AppConfig":
        """
        Create configuration from environment variables.

        A .env file is loaded first; variables already set win.

        Environment variables:
            LABEL_SCANNER_OCR_LANGUAGE: OCR language set (e.g. eng+nep)
            LABEL_SCANNER_OCR_MAX_WORKERS: Concurrent OCR calls
            LABEL_SCANNER_PROVIDER: openrouter / openai / groq / dummy
            LABEL_SCANNER_VISION_MODEL: Vision model name
            LABEL_SCANNER_TEXT_MODEL: Text model name
            LABEL_SCANNER_MODEL_TIMEOUT: Model request timeout (seconds)
            LABEL_SCANNER_ENRICHMENT: Enable uses / safety-notes lookups
            LABEL_SCANNER_LOG_LEVEL: Logging level
            LABEL_SCANNER_API_KEY, OPENROUTER_API_KEY, GROQ_API_KEY, OPENAI_API_KEY
        """
        load_dotenv(dotenv_path=dotenv_path)
        config = cls()

        # OCR
        if ocr_lang := _env("OCR_LANGUAGE"):
            config.ocr.language = ocr_lang
        if workers := _env("OCR_MAX_WORKERS"):
            config.ocr.max_workers = max(1, int(workers))

        # Models
        if provider := _env("PROVIDER"):
            config.model.use_provider(provider)
        if vision_model := _env("VISION_MODEL"):
            config.model.vision_model = vision_model
        if text_model := _env("TEXT_MODEL"):
            config.model.text_model = text_model
        if timeout := _env("MODEL_TIMEOUT"):
            config.model.timeout = float(timeout)

        # Enrichment
        if enrichment := _env("ENRICHMENT"):
            config.enrichment.enabled = _as_bool(enrichment)

        # Logging
        if log_level := _env("LOG_LEVEL"):
            config.logging.level = log_level

        config.resolve_api_key()
        return config

    def resolve_api_key(self) -> Optional[str]:
        """
        Pick the API key for the configured provider.

        LABEL_SCANNER_API_KEY wins, then OPENROUTER_API_KEY, then GROQ_API_KEY
        (groq provider only), then OPENAI_API_KEY. Call again after changing
        the provider.
        """
        key = _env("API_KEY") or os.getenv("OPENROUTER_API_KEY")
        if not key and self.model.provider == "groq":
            key = os.getenv("GROQ_API_KEY")
        self.model.api_key = key or os.getenv("OPENAI_API_KEY")
        return self.model.api_key

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary."""
        config = cls()

        for section in ("ocr", "model", "enrichment", "pipeline", "validation", "logging"):
            if section in data:
                target = getattr(config, section)
                for key, value in data[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (the API key is never included)."""
        return {
            "ocr": {
                "type": self.ocr.type,
                "language": self.ocr.language,
                "psm": self.ocr.psm,
                "threshold": self.ocr.threshold,
                "max_workers": self.ocr.max_workers,
            },
            "model": {
                "provider": self.model.provider,
                "vision_model": self.model.vision_model,
                "text_model": self.model.text_model,
                "base_url": self.model.base_url,
                "temperature": self.model.temperature,
                "max_tokens": self.model.max_tokens,
                "timeout": self.model.timeout,
                "vision_enabled": self.model.vision_enabled,
                "text_enabled": self.model.text_enabled,
            },
            "enrichment": {
                "enabled": self.enrichment.enabled,
                "lookup_model": self.enrichment.lookup_model,
            },
            "pipeline": {
                "timeout_seconds": self.pipeline.timeout_seconds,
                "stage_retry_count": self.pipeline.stage_retry_count,
            },
            "validation": {
                "min_images": self.validation.min_images,
                "max_images": self.validation.max_images,
                "max_file_size_mb": self.validation.max_file_size_mb,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
            },
        }


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig.from_env()
