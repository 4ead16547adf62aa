"""
Image Processing Utilities

OpenCV preprocessing for OCR and Pillow re-encoding for vision model upload.
"""

import base64
import logging
from io import BytesIO

import cv2
import numpy as np
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)


DEFAULT_THRESHOLD = 160
DEFAULT_VISION_WIDTH = 1600
DEFAULT_JPEG_QUALITY = 80


def bytes_to_cv2(image_bytes: bytes) -> np.ndarray:
    """
    Convert image bytes to OpenCV BGR format.

    Args:
        image_bytes: Raw image bytes (JPEG, PNG, etc.)

    Returns:
        OpenCV image in BGR format (numpy array)
    """
    nparr = np.frombuffer(image_bytes, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if img is None:
        raise ValueError("Failed to decode image from bytes")

    return img


def cv2_to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert BGR to grayscale."""
    if len(img.shape) == 2:
        return img  # Already grayscale
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def normalize_contrast(gray: np.ndarray) -> np.ndarray:
    """Stretch luminance to the full 0-255 range."""
    return cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX)


def sharpen(gray: np.ndarray) -> np.ndarray:
    """Sharpen text edges using unsharp masking."""
    gaussian = cv2.GaussianBlur(gray, (0, 0), 1.0)
    return cv2.addWeighted(gray, 1.5, gaussian, -0.5, 0)


def binarize(gray: np.ndarray, threshold: int = DEFAULT_THRESHOLD) -> np.ndarray:
    """Hard threshold at a fixed luminance cutoff."""
    _, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)
    return binary


def enhance_for_ocr(img: np.ndarray, threshold: int = DEFAULT_THRESHOLD) -> np.ndarray:
    """
    Enhance image for OCR.

    1. Convert to grayscale
    2. Normalize contrast
    3. Sharpen
    4. Threshold

    Args:
        img: Input image (BGR or grayscale)
        threshold: Luminance cutoff

    Returns:
        Binary image
    """
    gray = cv2_to_grayscale(img)
    return binarize(sharpen(normalize_contrast(gray)), threshold)


def prepare_for_ocr(image_bytes: bytes, threshold: int = DEFAULT_THRESHOLD) -> bytes:
    """
    Preprocess an image for the OCR engine.

    Deterministic; the same input always gives the same PNG bytes.

    Args:
        image_bytes: Raw image bytes
        threshold: Luminance cutoff

    Returns:
        PNG-encoded binary image
    """
    enhanced = enhance_for_ocr(bytes_to_cv2(image_bytes), threshold)
    ok, encoded = cv2.imencode(".png", enhanced)
    if not ok:
        raise ValueError("Failed to encode preprocessed image")
    return encoded.tobytes()


def fit_width(image: Image.Image, max_width: int) -> Image.Image:
    """Downscale to at most max_width pixels wide, keeping aspect ratio."""
    width, height = image.size
    if width <= max_width:
        return image
    new_height = max(1, round(height * max_width / width))
    logger.debug(f"Resized image from {width}x{height} to {max_width}x{new_height}")
    return image.resize((max_width, new_height), Image.LANCZOS)


def prepare_for_vision(
    image_bytes: bytes,
    max_width: int = DEFAULT_VISION_WIDTH,
    quality: int = DEFAULT_JPEG_QUALITY
) -> str:
    """
    Re-encode an image for vision model upload.

    Applies the EXIF orientation, downscales and re-encodes as JPEG.

    Args:
        image_bytes: Raw image bytes
        max_width: Maximum output width in pixels
        quality: JPEG quality

    Returns:
        "data:image/jpeg;base64,..." URL
    """
    with Image.open(BytesIO(image_bytes)) as img:
        rotated = ImageOps.exif_transpose(img)
        resized = fit_width(rotated.convert("RGB"), max_width)

        buffer = BytesIO()
        resized.save(buffer, format="JPEG", quality=quality)

    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/jpeg;base64,{encoded}"

