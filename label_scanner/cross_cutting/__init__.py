"""
Cross-Cutting Concerns

Utilities and services that span across multiple layers.
"""

from .logging import setup_logging, ScanLogger
from .validation import validate_image, validate_image_count, validate_image_file
from .error_handling import handle_exception, FailureGuard, describe_error

__all__ = [
    "setup_logging",
    "ScanLogger",
    "validate_image",
    "validate_image_count",
    "validate_image_file",
    "handle_exception",
    "FailureGuard",
    "describe_error",
]
