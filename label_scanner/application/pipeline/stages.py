"""
Pipeline Stage Definitions

Defines individual pipeline stages and their execution logic.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import logging
import time

from .context import PipelineContext
from ...cross_cutting.error_handling import FailureGuard
from ...domain.entities.extraction_result import OcrResult
from ...domain.entities.label_record import ExtractionSource
from ...domain.entities.scan_report import PipelineStage, StageStatus
from ...domain.exceptions import DomainException
from ...domain.ports.label_extractor import LabelExtractorPort
from ...domain.ports.medicine_info import MedicineInfoPort
from ...domain.ports.text_extractor import TextExtractorPort
from ...domain.value_objects.image_data import ImageData
from ...domain.services.dates import finalize_date
from ...domain.services.dosage import decide_dosage_form, parse_liquid_meta
from ...domain.services.hints import build_hints, split_lines
from ...domain.services.merge import MergeInputs, merge_candidates, compute_total
from ...domain.services.text_cleanup import cleanup_ocr
from ...domain.services.uses import (
    extract_uses_from_text,
    infer_active_from_name,
    common_uses_for,
    merge_uses,
)
from ...infrastructure.extraction.regex_extractor import RegexLabelExtractor, extract_labeled_values


logger = logging.getLogger(__name__)

MAX_LOOKUP_USES = 6


@dataclass
class StageConfig:
    """
    Configuration for a pipeline stage.

    Attributes:
        enabled: Whether the stage is enabled
        retry_count: Number of retries on failure
        retry_delay_seconds: Delay between retries
        fail_soft: If True, continue pipeline on failure
        options: Stage-specific options
    """

    enabled: bool = True
    retry_count: int = 0
    retry_delay_seconds: float = 1.0
    fail_soft: bool = True
    options: Dict[str, Any] = field(default_factory=dict)


class PipelineStageExecutor(ABC):
    """
    Abstract base class for pipeline stage executors.

    Each stage in the pipeline implements this interface.
    Stages are responsible for:
    - Reading required data from context
    - Executing their specific logic
    - Writing results back to context
    - Handling errors appropriately
    """

    # Stages calling a remote model are skipped once the time budget is spent
    requires_network = False

    def __init__(self, config: Optional[StageConfig] = None):
        """
        Initialize the stage executor.

        Args:
            config: Stage configuration
        """
        self.config = config or StageConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def stage(self) -> PipelineStage:
        """Get the pipeline stage this executor handles."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get human-readable stage name."""
        pass

    @abstractmethod
    def execute(self, context: PipelineContext) -> None:
        """
        Execute the stage logic.

        Args:
            context: Pipeline context to read from and write to
        """
        pass

    def skip_reason(self, context: PipelineContext) -> Optional[str]:
        """
        Reason to skip this stage given the current context.

        Args:
            context: Current pipeline context

        Returns:
            Reason string, or None when the stage should run
        """
        if context.should_abort:
            return context.abort_reason or "pipeline aborted"
        return None

    def run(self, context: PipelineContext) -> bool:
        """
        Run the stage with error handling and retries.

        Args:
            context: Pipeline context

        Returns:
            True if stage completed successfully (or was skipped)
        """
        if not self.config.enabled:
            self.logger.info(f"Stage {self.name} is disabled, skipping")
            context.skip_stage(self.stage)
            return True

        reason = self.skip_reason(context)
        if reason:
            self.logger.info(f"Stage {self.name} skipped: {reason}")
            context.skip_stage(self.stage)
            return True

        context.start_stage(self.stage)

        attempts = 0
        last_error: Optional[Exception] = None

        while attempts <= self.config.retry_count:
            try:
                self.logger.debug(f"Executing stage {self.name} (attempt {attempts + 1})")
                self.execute(context)
                context.finish_stage(self.stage)
                return True

            except DomainException as e:
                last_error = e
                self.logger.warning(f"Stage {self.name} failed: {e}")
                if not e.is_recoverable:
                    break

            except Exception as e:
                last_error = e
                self.logger.error(f"Unexpected error in stage {self.name}: {e}", exc_info=True)

            attempts += 1
            if attempts <= self.config.retry_count:
                self.logger.info(f"Retrying stage {self.name} after {self.config.retry_delay_seconds}s")
                context.stage_metrics[self.stage].retries += 1
                time.sleep(self.config.retry_delay_seconds)

        details = {"attempts": attempts}
        if isinstance(last_error, DomainException):
            details.update(last_error.details)
        context.add_error(
            stage=self.stage,
            error_type=last_error.__class__.__name__ if last_error else "UnknownError",
            message=str(last_error) if last_error else "Stage failed with unknown error",
            is_recoverable=self.config.fail_soft,
            details=details
        )
        context.finish_stage(self.stage, StageStatus.FAILED)

        if not self.config.fail_soft:
            context.should_abort = True
            context.abort_reason = f"Stage {self.name} failed"

        return False


# =============================================================================
# Concrete Stage Executors
# =============================================================================

class OcrStage(PipelineStageExecutor):
    """
    OCR Stage Executor.

    Recognizes every image concurrently. Results keep the input order and a
    failure on one image leaves an empty result for that image only.
    """

    def __init__(
        self,
        extractor: TextExtractorPort,
        max_workers: int = 4,
        config: Optional[StageConfig] = None
    ):
        super().__init__(config)
        self.extractor = extractor
        self.max_workers = max(1, max_workers)

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.OCR

    @property
    def name(self) -> str:
        return "OCR"

    def _recognize_one(self, image: ImageData) -> OcrResult:
        result = None
        with FailureGuard(
            self.logger,
            context=f"OCR on {image.filename}, continuing with empty text",
            suppress=True,
            log_level=logging.WARNING,
        ):
            result = self.extractor.recognize(image)
        return result or OcrResult.empty(image.filename)

    def execute(self, context: PipelineContext) -> None:
        images = context.images
        if not images:
            context.add_warning("No images to recognize")
            return

        workers = min(self.max_workers, len(images))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self._recognize_one, images))

        for image, result in zip(images, results):
            if result.original_name is None:
                result.original_name = image.filename
            if not result.has_text:
                context.add_warning(f"No text recognized on {image.filename}")

        context.ocr_results = results
        context.combined_text = "\n".join(r.text for r in results if r.text)
        context.cleaned_text = cleanup_ocr(context.combined_text)

        self.logger.info(
            f"Recognized {sum(1 for r in results if r.has_text)}/{len(results)} images, "
            f"{len(context.cleaned_text)} chars"
        )


class HintStage(PipelineStageExecutor):
    """
    Hint Building Stage Executor.

    Collects keyword line windows used to focus the text model and the
    batch vote.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.HINTS

    @property
    def name(self) -> str:
        return "Hint Building"

    def execute(self, context: PipelineContext) -> None:
        context.hints = build_hints(context.cleaned_text)


class VisionStage(PipelineStageExecutor):
    """
    Vision Model Stage Executor.

    First extraction attempt; trusted most when it returns populated fields.
    """

    requires_network = True

    def __init__(
        self,
        extractor: Optional[LabelExtractorPort],
        config: Optional[StageConfig] = None
    ):
        super().__init__(config)
        self.extractor = extractor

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.VISION_MODEL

    @property
    def name(self) -> str:
        return "Vision Model"

    def skip_reason(self, context: PipelineContext) -> Optional[str]:
        if self.extractor is None:
            return "no vision model configured"
        if not context.images:
            return "no images"
        return super().skip_reason(context)

    def execute(self, context: PipelineContext) -> None:
        record = self.extractor.extract(
            images=context.images,
            ocr_text=context.cleaned_text,
            hints=context.hints,
        )
        context.vision_record = record

        if not context.vision_sufficient:
            context.add_warning("Vision model unavailable or insufficient; falling back to OCR text")


class TextModelStage(PipelineStageExecutor):
    """
    Text Model Stage Executor.

    Runs only when vision was unavailable or insufficient and OCR produced text.
    """

    requires_network = True

    def __init__(
        self,
        extractor: Optional[LabelExtractorPort],
        config: Optional[StageConfig] = None
    ):
        super().__init__(config)
        self.extractor = extractor

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.TEXT_MODEL

    @property
    def name(self) -> str:
        return "Text Model"

    def skip_reason(self, context: PipelineContext) -> Optional[str]:
        if context.vision_sufficient:
            return "vision result is sufficient"
        if self.extractor is None:
            return "no text model configured"
        if not context.cleaned_text.strip():
            context.add_warning("No OCR text; text model skipped")
            return "no OCR text"
        return super().skip_reason(context)

    def execute(self, context: PipelineContext) -> None:
        record = self.extractor.extract(
            images=context.images,
            ocr_text=context.cleaned_text,
            hints=context.hints,
        )
        context.text_record = record

        if record is None or not record.is_populated:
            context.add_warning("Text model unavailable or empty; using regex fallback")


class RegexStage(PipelineStageExecutor):
    """
    Regex Fallback Stage Executor.

    Always runs: last resort, batch vote and name tie-break. Also pulls the
    values printed after batch / Mfg / Exp labels.
    """

    def __init__(
        self,
        extractor: Optional[RegexLabelExtractor] = None,
        config: Optional[StageConfig] = None
    ):
        super().__init__(config)
        self.extractor = extractor or RegexLabelExtractor()

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.REGEX

    @property
    def name(self) -> str:
        return "Regex Fallback"

    def execute(self, context: PipelineContext) -> None:
        context.regex_record = self.extractor.extract(
            images=context.images,
            ocr_text=context.cleaned_text,
            hints=context.hints,
        )
        lines = context.hints.lines or split_lines(context.cleaned_text)
        context.label_hits = extract_labeled_values(lines)


class MergeStage(PipelineStageExecutor):
    """
    Merge & Vote Stage Executor.

    Picks the model candidate and provenance, then merges field by field.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.MERGE

    @property
    def name(self) -> str:
        return "Merge & Vote"

    def execute(self, context: PipelineContext) -> None:
        if context.vision_sufficient:
            model, source = context.vision_record, ExtractionSource.VISION
        elif context.text_record is not None and context.text_record.is_populated:
            model, source = context.text_record, ExtractionSource.OCR_LLM
        else:
            model, source = None, ExtractionSource.REGEX_ONLY

        context.source = source
        context.record = merge_candidates(
            MergeInputs(
                model=model,
                regex=context.regex_record,
                label_hits=context.label_hits,
                ocr_texts=context.ocr_texts,
                lines=context.hints.lines,
            ),
            source=source,
        )
        self.logger.info(f"Merged record from source '{source.value}'")


class NormalizeStage(PipelineStageExecutor):
    """
    Normalization Stage Executor.

    Finalizes dates, the pack total, the dosage form, liquid metadata and
    the label uses fallback.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.NORMALIZE

    @property
    def name(self) -> str:
        return "Normalize"

    def skip_reason(self, context: PipelineContext) -> Optional[str]:
        if context.record is None:
            return "no merged record"
        return super().skip_reason(context)

    def execute(self, context: PipelineContext) -> None:
        record = context.record
        text = context.cleaned_text

        record.manufacturing_date = finalize_date(record.manufacturing_date, text)
        record.expiry_date = finalize_date(record.expiry_date, text)
        record.total_tablets = compute_total(record.slips_count, record.tablets_per_slip)

        form = decide_dosage_form(record.dosage_form_on_label, text)
        record.dosage_form = form.label if form else None

        if form is not None and form.is_liquid:
            liquid = parse_liquid_meta(text)
            record.bottle_volume_ml = liquid.bottle_volume_ml
            record.bottles_per_pack = liquid.bottles_per_pack or 1
            record.dose_ml = liquid.dose_ml
            record.concentration_mg_per_5ml = liquid.concentration_mg_per_5ml
            record.concentration_label = liquid.concentration_label

        if record.uses_on_label is None:
            record.uses_on_label = extract_uses_from_text(text) or None


class EnrichmentStage(PipelineStageExecutor):
    """
    Enrichment Stage Executor.

    Table-based uses always apply. Chat-model lookups of general uses and
    safety notes run only while the time budget lasts.
    """

    def __init__(
        self,
        medicine_info: Optional[MedicineInfoPort] = None,
        config: Optional[StageConfig] = None
    ):
        super().__init__(config)
        self.medicine_info = medicine_info

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.ENRICHMENT

    @property
    def name(self) -> str:
        return "Enrichment"

    def skip_reason(self, context: PipelineContext) -> Optional[str]:
        if context.record is None:
            return "no merged record"
        return super().skip_reason(context)

    def execute(self, context: PipelineContext) -> None:
        record = context.record

        active_guess = record.active_ingredient_on_label or infer_active_from_name(record.name)
        if not record.active_ingredient_on_label and active_guess:
            record.active_ingredient_on_label = active_guess

        if not record.uses_on_label:
            record.inferred_uses = common_uses_for(active_guess)

        query = active_guess or record.name
        if self.medicine_info is None or not query:
            return

        if context.budget_spent:
            context.add_warning("Time budget spent; medicine info lookups skipped")
            return

        extra: List[str] = self.medicine_info.lookup_uses(query) or []
        record.inferred_uses = merge_uses(record.inferred_uses, extra[:MAX_LOOKUP_USES])

        notes = self.medicine_info.lookup_safety_notes(query)
        if notes.is_empty:
            self.logger.info(f"No safety notes for {query}")
        record.apply_safety_notes(notes)
