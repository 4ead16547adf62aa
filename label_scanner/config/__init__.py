"""Configuration module."""

from .settings import (
    AppConfig,
    OCRConfig,
    ModelConfig,
    EnrichmentConfig,
    PipelineConfig,
    ValidationConfig,
    LoggingConfig,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "OCRConfig",
    "ModelConfig",
    "EnrichmentConfig",
    "PipelineConfig",
    "ValidationConfig",
    "LoggingConfig",
    "get_default_config",
]
