"""
Pipeline Orchestrator

Main orchestration logic for the label scan pipeline.
Implements Chain of Responsibility pattern.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
import logging
import time

from .context import PipelineContext
from .stages import (
    PipelineStageExecutor,
    StageConfig,
    OcrStage,
    HintStage,
    VisionStage,
    TextModelStage,
    RegexStage,
    MergeStage,
    NormalizeStage,
    EnrichmentStage,
)
from ...config.settings import AppConfig
from ...cross_cutting.logging import ScanLogger
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.label_record import MergedRecord
from ...domain.entities.scan_report import ScanReport, PipelineStage
from ...domain.ports.text_extractor import TextExtractorPort
from ...domain.ports.label_extractor import LabelExtractorPort
from ...domain.ports.medicine_info import MedicineInfoPort
from ...domain.exceptions import PipelineConfigurationError
from ...infrastructure.extraction.regex_extractor import RegexLabelExtractor


logger = logging.getLogger(__name__)


@dataclass
class OrchestratorConfig:
    """
    Configuration for the pipeline orchestrator.

    Attributes:
        timeout_seconds: Time budget; network stages are skipped once it is spent
        ocr_max_workers: Concurrent OCR calls
        stages: Per-stage configurations
    """

    timeout_seconds: Optional[float] = 120.0
    ocr_max_workers: int = 4
    stages: Dict[PipelineStage, StageConfig] = field(default_factory=dict)

    def get_stage_config(self, stage: PipelineStage) -> StageConfig:
        """Get configuration for a specific stage."""
        return self.stages.get(stage, StageConfig())

    @classmethod
    def from_app_config(cls, config: AppConfig) -> "OrchestratorConfig":
        """Build from the application configuration."""
        stage_config = StageConfig(
            retry_count=config.pipeline.stage_retry_count,
            retry_delay_seconds=config.pipeline.stage_retry_delay,
        )
        return cls(
            timeout_seconds=config.pipeline.timeout_seconds,
            ocr_max_workers=config.ocr.max_workers,
            stages={stage: stage_config for stage in PipelineStage},
        )


class PipelineOrchestrator:
    """
    Main pipeline orchestrator for label scans.

    Orchestrates the flow:
    OCR → HINTS → VISION → TEXT MODEL → REGEX → MERGE → NORMALIZE → ENRICHMENT

    Features:
    - Sequential stage execution (OCR is concurrent per image)
    - Vision short-circuits the text model when it is sufficient
    - Error accumulation without crash
    - Time budget for the network stages
    - A record is always returned

    Usage:
        orchestrator = PipelineOrchestrator(
            text_extractor=tesseract_ocr,
            vision_extractor=vision_model,
            text_model_extractor=text_model,
        )

        report = orchestrator.run(images)
    """

    def __init__(
        self,
        text_extractor: TextExtractorPort,
        vision_extractor: Optional[LabelExtractorPort] = None,
        text_model_extractor: Optional[LabelExtractorPort] = None,
        regex_extractor: Optional[RegexLabelExtractor] = None,
        medicine_info: Optional[MedicineInfoPort] = None,
        config: Optional[OrchestratorConfig] = None
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            text_extractor: OCR implementation
            vision_extractor: Vision model extractor (None: vision disabled)
            text_model_extractor: Text model extractor (None: text model disabled)
            regex_extractor: Regex fallback extractor
            medicine_info: Uses / safety-notes lookup (None: table enrichment only)
            config: Orchestrator configuration
        """
        self.config = config or OrchestratorConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        # Store adapters
        self._text_extractor = text_extractor
        self._vision_extractor = vision_extractor
        self._text_model_extractor = text_model_extractor
        self._regex_extractor = regex_extractor or RegexLabelExtractor()
        self._medicine_info = medicine_info

        # Build stage chain
        self._stages = self._build_stages()

        self.logger.info(f"Pipeline initialized with {len(self._stages)} stages")

    def _build_stages(self) -> List[PipelineStageExecutor]:
        """Build the ordered list of pipeline stages."""
        get = self.config.get_stage_config
        return [
            OcrStage(
                extractor=self._text_extractor,
                max_workers=self.config.ocr_max_workers,
                config=get(PipelineStage.OCR)
            ),
            HintStage(config=get(PipelineStage.HINTS)),
            VisionStage(
                extractor=self._vision_extractor,
                config=get(PipelineStage.VISION_MODEL)
            ),
            TextModelStage(
                extractor=self._text_model_extractor,
                config=get(PipelineStage.TEXT_MODEL)
            ),
            RegexStage(
                extractor=self._regex_extractor,
                config=get(PipelineStage.REGEX)
            ),
            MergeStage(config=get(PipelineStage.MERGE)),
            NormalizeStage(config=get(PipelineStage.NORMALIZE)),
            EnrichmentStage(
                medicine_info=self._medicine_info,
                config=get(PipelineStage.ENRICHMENT)
            ),
        ]

    def run(
        self,
        images: List[ImageData],
        options: Optional[Dict[str, Any]] = None
    ) -> ScanReport:
        """
        Run the complete pipeline on a set of label images.

        Args:
            images: Label photographs, already validated
            options: Optional per-run options

        Returns:
            ScanReport whose record is always present
        """
        start_time = time.time()

        context = PipelineContext.create(
            images=images,
            timeout_seconds=self.config.timeout_seconds,
            options=options,
        )
        plog = ScanLogger(context.request_id)
        self.logger.info(
            f"Starting pipeline execution (request_id={context.request_id}, images={len(images)})"
        )

        stages_completed = 0
        stages_failed = 0

        for stage_executor in self._stages:
            if context.should_abort:
                self.logger.warning(f"Pipeline aborted: {context.abort_reason}")
                break

            if stage_executor.requires_network and context.budget_spent:
                reason = f"time budget of {self.config.timeout_seconds}s spent"
                plog.stage_skipped(stage_executor.name, reason)
                context.add_warning(f"{stage_executor.name} skipped: {reason}")
                context.skip_stage(stage_executor.stage)
                continue

            plog.stage_start(stage_executor.name)
            success = stage_executor.run(context)
            plog.stage_end(stage_executor.name, success)

            if success:
                stages_completed += 1
            else:
                stages_failed += 1

        if context.record is None:
            context.add_warning("No merged record; returning an empty regex-only record")
            context.record = MergedRecord.empty()

        report = context.to_scan_report()

        elapsed_total = (time.time() - start_time) * 1000
        report.processing_time_ms = elapsed_total
        plog.summary(report.source, len(report.warnings), len(report.errors), elapsed_total)
        self.logger.info(f"Pipeline completed: {stages_completed} stages succeeded, {stages_failed} failed")

        return report

    def run_partial(
        self,
        images: List[ImageData],
        until_stage: PipelineStage,
        options: Optional[Dict[str, Any]] = None
    ) -> PipelineContext:
        """
        Run pipeline up to a specific stage (for testing/debugging).

        Args:
            images: Label photographs
            until_stage: Stop after this stage
            options: Optional per-run options

        Returns:
            PipelineContext with partial results
        """
        context = PipelineContext.create(images=images, options=options)

        for stage_executor in self._stages:
            if context.should_abort:
                break

            stage_executor.run(context)

            if stage_executor.stage == until_stage:
                break

        return context

    def validate_configuration(self) -> bool:
        """
        Validate that the pipeline is properly configured.

        Returns:
            True if configuration is valid

        Raises:
            PipelineConfigurationError: If configuration is invalid
        """
        if self._text_extractor is None:
            raise PipelineConfigurationError(
                message="Pipeline is missing required components: text_extractor",
                missing_components=["text_extractor"]
            )
        return True

    @property
    def stage_count(self) -> int:
        """Get the number of stages in the pipeline."""
        return len(self._stages)

    @property
    def stage_names(self) -> List[str]:
        """Get the names of all stages."""
        return [s.name for s in self._stages]


class PipelineBuilder:
    """
    Builder for constructing pipeline orchestrators.

    Usage:
        pipeline = (
            PipelineBuilder()
            .with_text_extractor(tesseract_ocr)
            .with_vision_extractor(vision_model)
            .with_text_model_extractor(text_model)
            .with_medicine_info(lookup)
            .with_config(orchestrator_config)
            .build()
        )
    """

    def __init__(self):
        self._text_extractor: Optional[TextExtractorPort] = None
        self._vision_extractor: Optional[LabelExtractorPort] = None
        self._text_model_extractor: Optional[LabelExtractorPort] = None
        self._regex_extractor: Optional[RegexLabelExtractor] = None
        self._medicine_info: Optional[MedicineInfoPort] = None
        self._config: Optional[OrchestratorConfig] = None

    def with_text_extractor(self, extractor: TextExtractorPort) -> "PipelineBuilder":
        """Set the OCR engine."""
        self._text_extractor = extractor
        return self

    def with_vision_extractor(self, extractor: Optional[LabelExtractorPort]) -> "PipelineBuilder":
        """Set the vision model extractor."""
        self._vision_extractor = extractor
        return self

    def with_text_model_extractor(self, extractor: Optional[LabelExtractorPort]) -> "PipelineBuilder":
        """Set the text model extractor."""
        self._text_model_extractor = extractor
        return self

    def with_regex_extractor(self, extractor: RegexLabelExtractor) -> "PipelineBuilder":
        """Set the regex fallback extractor."""
        self._regex_extractor = extractor
        return self

    def with_medicine_info(self, lookup: Optional[MedicineInfoPort]) -> "PipelineBuilder":
        """Set the uses / safety-notes lookup."""
        self._medicine_info = lookup
        return self

    def with_config(self, config: OrchestratorConfig) -> "PipelineBuilder":
        """Set the orchestrator configuration."""
        self._config = config
        return self

    def build(self) -> PipelineOrchestrator:
        """
        Build the pipeline orchestrator.

        Returns:
            Configured PipelineOrchestrator

        Raises:
            PipelineConfigurationError: If the OCR engine is missing
        """
        if self._text_extractor is None:
            raise PipelineConfigurationError(
                message="Cannot build pipeline, missing: text_extractor",
                missing_components=["text_extractor"]
            )

        return PipelineOrchestrator(
            text_extractor=self._text_extractor,
            vision_extractor=self._vision_extractor,
            text_model_extractor=self._text_model_extractor,
            regex_extractor=self._regex_extractor,
            medicine_info=self._medicine_info,
            config=self._config
        )
