"""
Domain Exceptions

Custom exceptions for the label extraction domain.
Exceptions are grouped by pipeline concern so callers can tell an unavailable
source apart from a caller-side input error.
"""

from typing import Optional, Dict, Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
        is_recoverable: Whether the pipeline can fall through to another source
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        is_recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_recoverable = is_recoverable

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "is_recoverable": self.is_recoverable,
        }


# =============================================================================
# Text Extraction (OCR) Exceptions
# =============================================================================

class TextExtractionError(DomainException):
    """Base exception for text extraction errors."""
    pass


class OCREngineError(TextExtractionError):
    """OCR engine encountered an error."""

    def __init__(
        self,
        message: str = "OCR engine error",
        engine_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if engine_name:
            self.details["engine"] = engine_name


# =============================================================================
# Label Extraction (vision / text model) Exceptions
# =============================================================================

class LabelExtractionError(DomainException):
    """Base exception for model-based label extraction errors."""
    pass


class ModelConnectionError(LabelExtractionError):
    """Failed to reach the model provider, or no credentials are configured."""

    def __init__(
        self,
        message: str = "Failed to connect to model provider",
        provider: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if provider:
            self.details["provider"] = provider


class ModelResponseError(LabelExtractionError):
    """The model answered, but not with a usable JSON object."""

    def __init__(
        self,
        message: str = "Model response is not a JSON object",
        raw_response: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if raw_response:
            self.details["raw_preview"] = raw_response[:200]


class EnrichmentError(DomainException):
    """A uses / safety-notes lookup failed."""
    pass


# =============================================================================
# Pipeline Exceptions
# =============================================================================

class PipelineConfigurationError(DomainException):
    """Pipeline is not properly configured."""

    def __init__(
        self,
        message: str = "Pipeline is not properly configured",
        missing_components: Optional[list] = None,
        **kwargs
    ):
        super().__init__(message, is_recoverable=False, **kwargs)
        if missing_components:
            self.details["missing_components"] = missing_components


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainException):
    """Base exception for validation errors."""
    pass


class InvalidImageError(ValidationError):
    """Input image is invalid, unsupported or too large."""

    def __init__(
        self,
        message: str = "Invalid or corrupted image",
        filename: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, is_recoverable=False, **kwargs)
        if filename:
            self.details["filename"] = filename


class InvalidInputError(ValidationError):
    """Invalid input provided to a function or method."""

    def __init__(
        self,
        field: str,
        reason: str,
        **kwargs
    ):
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(message, is_recoverable=False, **kwargs)
        self.details["field"] = field
        self.details["reason"] = reason
