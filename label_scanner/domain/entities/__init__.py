"""Domain entities."""

from .extraction_result import OcrResult, HintBundle, HINT_FAMILIES
from .label_record import (
    CandidateRecord,
    MergedRecord,
    SafetyNotes,
    ExtractionSource,
)
from .scan_report import ScanReport, PipelineError, PipelineStage, StageStatus

__all__ = [
    "OcrResult",
    "HintBundle",
    "HINT_FAMILIES",
    "CandidateRecord",
    "MergedRecord",
    "SafetyNotes",
    "ExtractionSource",
    "ScanReport",
    "PipelineError",
    "PipelineStage",
    "StageStatus",
]
