"""Infrastructure utilities."""

from .image_processing import (
    prepare_for_ocr,
    prepare_for_vision,
    bytes_to_cv2,
)

__all__ = [
    "prepare_for_ocr",
    "prepare_for_vision",
    "bytes_to_cv2",
]
