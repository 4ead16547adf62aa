"""
Label Scan Service

High-level application service for scanning medicine labels.
"""

from typing import Optional, Dict, Any, List
import logging

from ..pipeline.orchestrator import PipelineOrchestrator, PipelineBuilder, OrchestratorConfig
from ...config.settings import AppConfig, ValidationConfig, get_default_config
from ...cross_cutting.validation import validate_image, validate_image_count, validate_image_file
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.label_record import ExtractionSource
from ...domain.entities.scan_report import ScanReport
from ...domain.exceptions import InvalidImageError, InvalidInputError
from ...infrastructure.ocr.factory import OCRFactory
from ...infrastructure.llm.factory import LLMFactory


logger = logging.getLogger(__name__)


class LabelScanService:
    """
    Application service for scanning medicine labels.

    This is the main entry point for external consumers.
    It validates the caller's input before the pipeline runs:
    - 2 to 20 images per scan
    - supported, decodable images within the size limit

    Usage:
        service = LabelScanService(pipeline)

        # From ImageData
        report = service.scan(images)

        # From file paths
        report = service.scan_files(["front.jpg", "back.jpg"])
    """

    def __init__(
        self,
        pipeline: PipelineOrchestrator,
        validation: Optional[ValidationConfig] = None
    ):
        """
        Initialize the service.

        Args:
            pipeline: Configured pipeline orchestrator
            validation: Input limits
        """
        self.pipeline = pipeline
        self.validation = validation or ValidationConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        # Validate pipeline
        pipeline.validate_configuration()

    def validate(self, images: List[ImageData]) -> None:
        """
        Validate scan input.

        Raises:
            InvalidInputError: If the image count is out of range
            InvalidImageError: If an image is unsupported, oversize or undecodable
        """
        ok, message = validate_image_count(
            images,
            min_images=self.validation.min_images,
            max_images=self.validation.max_images,
        )
        if not ok:
            raise InvalidInputError(field="images", reason=message)

        for image in images:
            ok, message = validate_image(image, max_file_size=self.validation.max_file_size)
            if not ok:
                raise InvalidImageError(f"{image.filename}: {message}", filename=image.filename)

    def scan(
        self,
        images: List[ImageData],
        options: Optional[Dict[str, Any]] = None
    ) -> ScanReport:
        """
        Scan one medicine package.

        Args:
            images: Label photographs, in the order they were taken
            options: Optional per-run options

        Returns:
            ScanReport with the merged record and per-image OCR results
        """
        self.validate(images)
        self.logger.info(f"Starting label scan of {len(images)} images")

        report = self.pipeline.run(images, options)

        if report.record.source is ExtractionSource.REGEX_ONLY:
            self.logger.warning(f"Scan finished without model output: {len(report.warnings)} warnings")
        else:
            self.logger.info(f"Scan successful: {report}")

        return report

    def scan_files(
        self,
        file_paths: List[str],
        options: Optional[Dict[str, Any]] = None
    ) -> ScanReport:
        """
        Scan label photographs from file paths.

        Raises:
            InvalidImageError: If a file is missing or not a supported image
        """
        images = []
        for file_path in file_paths:
            ok, message = validate_image_file(file_path, max_file_size=self.validation.max_file_size)
            if not ok:
                raise InvalidImageError(message, filename=file_path)
            images.append(ImageData.from_file(file_path))
        return self.scan(images, options)

    def get_debug_info(self, report: ScanReport) -> Dict[str, Any]:
        """
        Get detailed debug information about pipeline execution.

        Args:
            report: Scan report

        Returns:
            Dictionary with debug information
        """
        return report.get_debug_info()


def create_default_service(config: Optional[AppConfig] = None) -> LabelScanService:
    """
    Wire a scan service from configuration.

    Args:
        config: Application configuration (default: from environment)

    Returns:
        LabelScanService with Tesseract OCR and the configured model adapters
    """
    config = config or get_default_config()

    pipeline = (
        PipelineBuilder()
        .with_text_extractor(OCRFactory.create_from_config(config.ocr))
        .with_vision_extractor(LLMFactory.create_vision_extractor(config.model))
        .with_text_model_extractor(LLMFactory.create_text_extractor(config.model))
        .with_medicine_info(LLMFactory.create_medicine_info(config.model, config.enrichment))
        .with_config(OrchestratorConfig.from_app_config(config))
        .build()
    )
    return LabelScanService(pipeline, validation=config.validation)
