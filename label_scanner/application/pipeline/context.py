"""
Pipeline Context

Carries state through the pipeline stages.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from datetime import datetime
import time
import uuid

from ...domain.value_objects.image_data import ImageData
from ...domain.entities.extraction_result import OcrResult, HintBundle
from ...domain.entities.label_record import CandidateRecord, MergedRecord, ExtractionSource
from ...domain.entities.scan_report import (
    ScanReport,
    PipelineError,
    PipelineStage,
    StageStatus,
)
from ...domain.services.merge import LabelHits


@dataclass
class StageMetrics:
    """
    Metrics for a single pipeline stage execution.

    Attributes:
        stage: The pipeline stage
        start_time: When execution started
        end_time: When execution completed
        duration_ms: Total execution time in milliseconds
        retries: Number of retry attempts
    """

    stage: PipelineStage
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_ms: float = 0.0
    retries: int = 0

    def start(self) -> None:
        """Mark stage as started."""
        self.start_time = datetime.now()

    def finish(self) -> None:
        """Mark stage as finished and calculate duration."""
        self.end_time = datetime.now()
        if self.start_time:
            delta = self.end_time - self.start_time
            self.duration_ms = delta.total_seconds() * 1000


@dataclass
class PipelineContext:
    """
    Context object that carries state through the pipeline.

    Each stage reads what it needs and writes its results here.

    Attributes:
        request_id: Unique identifier for this pipeline execution
        images: Input label photographs, in caller order

        # Stage results (populated as pipeline progresses)
        ocr_results: One OCR result per image, in input order
        combined_text: Per-image OCR texts joined with newlines
        cleaned_text: combined_text after OCR cleanup
        hints: Keyword hint windows over cleaned_text
        vision_record: Candidate from the vision model
        text_record: Candidate from the text model
        regex_record: Candidate from the regex fallback
        label_hits: Values pulled after printed labels
        record: Merged record
        source: Provenance of the merged record

        # Error tracking
        errors: List of errors from all stages
        warnings: Fallbacks taken during the run

        # Metadata
        deadline: Monotonic time after which network stages are skipped
    """

    # Input
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    images: List[ImageData] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    # Stage results
    ocr_results: List[OcrResult] = field(default_factory=list)
    combined_text: str = ""
    cleaned_text: str = ""
    hints: HintBundle = field(default_factory=HintBundle)
    vision_record: Optional[CandidateRecord] = None
    text_record: Optional[CandidateRecord] = None
    regex_record: Optional[CandidateRecord] = None
    label_hits: LabelHits = field(default_factory=LabelHits)
    record: Optional[MergedRecord] = None
    source: ExtractionSource = ExtractionSource.REGEX_ONLY

    # Error and warning tracking
    errors: List[PipelineError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    # Execution metadata
    created_at: datetime = field(default_factory=datetime.now)
    stage_metrics: Dict[PipelineStage, StageMetrics] = field(default_factory=dict)
    stage_statuses: Dict[PipelineStage, StageStatus] = field(default_factory=dict)
    current_stage: Optional[PipelineStage] = None
    deadline: Optional[float] = None

    # Control flags
    should_abort: bool = False
    abort_reason: Optional[str] = None

    def add_error(
        self,
        stage: PipelineStage,
        error_type: str,
        message: str,
        is_recoverable: bool = True,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Add an error to the context.

        Args:
            stage: Pipeline stage where error occurred
            error_type: Type/category of error
            message: Human-readable error message
            is_recoverable: Whether the error came from a fail-soft stage
            details: Additional error details
        """
        self.errors.append(PipelineError(
            stage=stage,
            error_type=error_type,
            message=message,
            is_recoverable=is_recoverable,
            details=details
        ))

    def add_warning(self, warning: str) -> None:
        """Add a warning to include in the final output."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def start_stage(self, stage: PipelineStage) -> None:
        """Mark a stage as started."""
        self.current_stage = stage
        self.stage_statuses[stage] = StageStatus.RUNNING
        self.stage_metrics[stage] = StageMetrics(stage=stage)
        self.stage_metrics[stage].start()

    def finish_stage(self, stage: PipelineStage, status: StageStatus = StageStatus.COMPLETED) -> None:
        """Mark a stage as finished."""
        self.stage_statuses[stage] = status
        if stage in self.stage_metrics:
            self.stage_metrics[stage].finish()

    def skip_stage(self, stage: PipelineStage) -> None:
        self.stage_statuses[stage] = StageStatus.SKIPPED

    def get_stage_duration(self, stage: PipelineStage) -> float:
        """Get execution time for a stage in milliseconds."""
        if stage in self.stage_metrics:
            return self.stage_metrics[stage].duration_ms
        return 0.0

    @property
    def total_duration_ms(self) -> float:
        """Get total pipeline execution time in milliseconds."""
        return sum(m.duration_ms for m in self.stage_metrics.values())

    @property
    def has_errors(self) -> bool:
        """Check if any errors occurred."""
        return len(self.errors) > 0

    @property
    def ocr_texts(self) -> List[str]:
        """Raw OCR text of each image."""
        return [r.text for r in self.ocr_results]

    @property
    def vision_sufficient(self) -> bool:
        """Vision returned at least one populated field."""
        return self.vision_record is not None and self.vision_record.is_populated

    @property
    def budget_spent(self) -> bool:
        """Check whether the run's time budget is used up."""
        return self.deadline is not None and time.monotonic() >= self.deadline

    def to_scan_report(self) -> ScanReport:
        """
        Convert context to a ScanReport.

        Returns:
            ScanReport; an empty regex-only record stands in when merging failed
        """
        return ScanReport(
            record=self.record or MergedRecord.empty(),
            ocr_results=list(self.ocr_results),
            combined_text=self.combined_text,
            warnings=self.warnings.copy(),
            errors=self.errors.copy(),
            stage_statuses=dict(self.stage_statuses),
            request_id=self.request_id,
            created_at=self.created_at,
            processing_time_ms=self.total_duration_ms,
        )

    def __str__(self) -> str:
        stages_done = len(self.stage_metrics)
        errors = len(self.errors)
        return f"PipelineContext(id={self.request_id[:8]}..., stages={stages_done}, errors={errors})"

    @classmethod
    def create(
        cls,
        images: List[ImageData],
        timeout_seconds: Optional[float] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> "PipelineContext":
        """
        Create a new pipeline context.

        Args:
            images: Label photographs to process
            timeout_seconds: Time budget for the network stages (None: unlimited)
            options: Optional per-run options

        Returns:
            Initialized PipelineContext
        """
        deadline = None
        if timeout_seconds is not None:
            deadline = time.monotonic() + timeout_seconds
        return cls(
            images=list(images),
            options=options or {},
            deadline=deadline,
        )
