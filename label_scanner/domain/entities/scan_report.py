"""
Scan Report Entity

Final output entity of one label scan: the merged record plus the per-image
OCR results and the run's diagnostics.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from datetime import datetime

from .extraction_result import OcrResult
from .label_record import MergedRecord


class StageStatus(Enum):
    """Status of a pipeline stage execution."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class PipelineStage(Enum):
    """Enumeration of pipeline stages, in execution order."""

    OCR = "ocr"
    HINTS = "hints"
    VISION_MODEL = "vision_model"
    TEXT_MODEL = "text_model"
    REGEX = "regex"
    MERGE = "merge"
    NORMALIZE = "normalize"
    ENRICHMENT = "enrichment"


@dataclass
class PipelineError:
    """
    Represents an error that occurred during pipeline execution.

    Attributes:
        stage: Pipeline stage where error occurred
        error_type: Type of error
        message: Human-readable error message
        details: Additional error details
        timestamp: When the error occurred
        is_recoverable: Whether pipeline can continue
    """

    stage: PipelineStage
    error_type: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)
    is_recoverable: bool = True

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.error_type}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "stage": self.stage.value,
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "is_recoverable": self.is_recoverable,
        }


@dataclass
class ScanReport:
    """
    Result of scanning one medicine package.

    Attributes:
        record: Merged and normalized record (always present)
        ocr_results: One OCR result per input image, in input order
        combined_text: Non-empty per-image OCR texts joined with newlines
        warnings: Fallbacks taken during the run
        errors: Recoverable errors collected from the stages
        stage_statuses: Final status per stage
        request_id: Unique identifier for this run
        created_at: Timestamp of report creation
        processing_time_ms: Wall time of the run
    """

    record: MergedRecord = field(default_factory=MergedRecord.empty)
    ocr_results: List[OcrResult] = field(default_factory=list)
    combined_text: str = ""
    warnings: List[str] = field(default_factory=list)
    errors: List[PipelineError] = field(default_factory=list)
    stage_statuses: Dict[PipelineStage, StageStatus] = field(default_factory=dict)
    request_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    processing_time_ms: float = 0.0

    @property
    def source(self) -> str:
        return self.record.source.value

    @property
    def has_errors(self) -> bool:
        """Check if any errors occurred."""
        return len(self.errors) > 0

    @property
    def skipped_stages(self) -> List[PipelineStage]:
        return [
            stage for stage, status in self.stage_statuses.items()
            if status == StageStatus.SKIPPED
        ]

    def to_dict(self) -> Dict[str, Any]:
        """
        Get the response body for a scan.

        Returns:
            Dictionary with `ocr` (one entry per image) and `fields`
        """
        return {
            "ocr": [r.to_dict() for r in self.ocr_results],
            "fields": self.record.to_dict(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information.

        Returns:
            Dictionary with debugging information
        """
        return {
            "request_id": self.request_id,
            "created_at": self.created_at.isoformat(),
            "processing_time_ms": self.processing_time_ms,
            "source": self.source,
            "stages": {
                stage.value: status.value
                for stage, status in self.stage_statuses.items()
            },
            "warnings": list(self.warnings),
            "errors": [e.to_dict() for e in self.errors],
        }

    def __str__(self) -> str:
        name = self.record.name or "Unknown"
        return f"ScanReport({name}, source={self.source}, images={len(self.ocr_results)})"
