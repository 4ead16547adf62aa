"""
Application Layer

Pipeline orchestration, context management, and application services.
"""

from .pipeline import PipelineOrchestrator, PipelineBuilder, PipelineContext
from .services import LabelScanService, create_default_service

__all__ = [
    "PipelineOrchestrator",
    "PipelineBuilder",
    "PipelineContext",
    "LabelScanService",
    "create_default_service",
]
