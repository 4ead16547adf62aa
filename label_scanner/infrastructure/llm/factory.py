"""
LLM Factory

Factory for creating the chat-model label extractors and the medicine info
lookup from configuration.
"""

from typing import Optional
from enum import Enum

from ...config.settings import ModelConfig, EnrichmentConfig
from ...domain.ports.label_extractor import LabelExtractorPort
from ...domain.ports.medicine_info import MedicineInfoPort
from .label_extractors import (
    VisionLabelExtractor,
    TextLabelExtractor,
    DummyLabelExtractor,
)
from .medicine_info import ChatMedicineInfoLookup, StaticMedicineInfoLookup


class LLMType(Enum):
    """Available chat model providers."""

    OPENROUTER = "openrouter"
    OPENAI = "openai"
    GROQ = "groq"
    DUMMY = "dummy"


class LLMFactory:
    """
    Factory for creating model-backed adapters.

    Usage:
        vision = LLMFactory.create_vision_extractor(config.model)
        text = LLMFactory.create_text_extractor(config.model)
        lookup = LLMFactory.create_medicine_info(config.model, config.enrichment)
    """

    @staticmethod
    def _common_kwargs(config: ModelConfig) -> dict:
        return {
            "api_key": config.api_key,
            "provider": config.provider,
            "base_url": config.base_url,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "timeout": config.timeout,
            "max_retries": config.max_retries,
            "referer": config.referer,
        }

    @staticmethod
    def create_vision_extractor(config: ModelConfig) -> Optional[LabelExtractorPort]:
        """
        Create the vision extractor.

        Returns:
            LabelExtractorPort, or None when vision is disabled
        """
        if not config.vision_enabled:
            return None
        if LLMType(config.provider) == LLMType.DUMMY:
            return DummyLabelExtractor(name="vision")
        return VisionLabelExtractor(
            config.vision_model,
            max_width=config.vision_max_width,
            jpeg_quality=config.jpeg_quality,
            **LLMFactory._common_kwargs(config),
        )

    @staticmethod
    def create_text_extractor(config: ModelConfig) -> Optional[LabelExtractorPort]:
        """
        Create the text-model extractor.

        Returns:
            LabelExtractorPort, or None when the text model is disabled
        """
        if not config.text_enabled:
            return None
        if LLMType(config.provider) == LLMType.DUMMY:
            return DummyLabelExtractor(name="text_model")
        return TextLabelExtractor(config.text_model, **LLMFactory._common_kwargs(config))

    @staticmethod
    def create_medicine_info(
        config: ModelConfig,
        enrichment: EnrichmentConfig
    ) -> Optional[MedicineInfoPort]:
        """
        Create the uses / safety-notes lookup.

        Returns:
            MedicineInfoPort, or None when enrichment lookups are disabled
        """
        if not enrichment.enabled:
            return None
        if LLMType(config.provider) == LLMType.DUMMY:
            return StaticMedicineInfoLookup()
        return ChatMedicineInfoLookup(
            model=enrichment.lookup_model,
            api_key=config.api_key,
            provider=config.provider,
            base_url=config.base_url,
            timeout=config.timeout,
            max_items=enrichment.max_items,
            referer=config.referer,
        )
