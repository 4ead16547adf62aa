"""
Input Validation

Validation utilities for scan inputs.
"""

from typing import Optional, List, Tuple
from pathlib import Path
from io import BytesIO

from PIL import Image as PILImage

from ..domain.value_objects.image_data import ImageData


# Supported image formats
SUPPORTED_FORMATS = {"jpeg", "jpg", "png", "bmp", "webp", "gif", "tiff"}

# Accepted declared content types
SUPPORTED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/bmp",
    "image/webp",
    "image/gif",
    "image/tiff",
}

# Maximum image dimensions
MAX_IMAGE_DIMENSION = 8192

# Maximum file size (10 MB)
MAX_FILE_SIZE = 10 * 1024 * 1024

# Images per scan
MIN_IMAGES = 2
MAX_IMAGES = 20


def validate_image(
    image: ImageData,
    max_file_size: int = MAX_FILE_SIZE
) -> Tuple[bool, Optional[str]]:
    """
    Validate image data.

    Args:
        image: ImageData to validate
        max_file_size: Size limit in bytes

    Returns:
        Tuple of (is_valid, error_message)
    """
    image_bytes = image.bytes

    if not image_bytes:
        return False, "Image is empty"

    # Check file size
    if len(image_bytes) > max_file_size:
        return False, f"Image size exceeds maximum ({max_file_size / 1024 / 1024:.1f} MB)"

    # Check declared content type
    if image.content_type and image.content_type.lower() not in SUPPORTED_CONTENT_TYPES:
        return False, f"Unsupported content type: {image.content_type}"

    # Check if it's a valid image
    try:
        pil_image = PILImage.open(BytesIO(image_bytes))
        pil_image.verify()

        # Reopen because verify() can only be called once
        with PILImage.open(BytesIO(image_bytes)) as pil_image:
            width, height = pil_image.size
            img_format = pil_image.format.lower() if pil_image.format else "unknown"
    except Exception as e:
        return False, f"Invalid image data: {e}"

    # Check dimensions
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        return False, f"Image dimensions exceed maximum ({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"

    # Check format
    if img_format not in SUPPORTED_FORMATS:
        return False, f"Unsupported image format: {img_format}"

    return True, None


def validate_image_count(
    images: List[ImageData],
    min_images: int = MIN_IMAGES,
    max_images: int = MAX_IMAGES
) -> Tuple[bool, Optional[str]]:
    """
    Validate the number of images in one scan.

    Args:
        images: Images to scan
        min_images: Lower bound (inclusive)
        max_images: Upper bound (inclusive)

    Returns:
        Tuple of (is_valid, error_message)
    """
    count = len(images)
    if count < min_images:
        return False, f"At least {min_images} images are required (got {count})"
    if count > max_images:
        return False, f"At most {max_images} images are allowed (got {count})"
    return True, None


def validate_image_file(file_path: str, max_file_size: int = MAX_FILE_SIZE) -> Tuple[bool, Optional[str]]:
    """
    Validate an image file path.

    Args:
        file_path: Path to image file
        max_file_size: Size limit in bytes

    Returns:
        Tuple of (is_valid, error_message)
    """
    path = Path(file_path)

    if not path.exists():
        return False, f"File not found: {file_path}"

    if not path.is_file():
        return False, f"Not a file: {file_path}"

    suffix = path.suffix.lower().lstrip(".")
    if suffix == "tif":
        suffix = "tiff"
    if suffix not in SUPPORTED_FORMATS:
        return False, f"Unsupported file format: {suffix}"

    if path.stat().st_size > max_file_size:
        return False, f"File size exceeds maximum ({max_file_size / 1024 / 1024:.1f} MB)"

    return True, None
