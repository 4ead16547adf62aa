"""
Image Data Value Object

Represents one uploaded photograph passed through the pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import base64


# File extension to MIME content type
CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


@dataclass(frozen=True)
class ImageData:
    """
    Immutable value object representing a raw image.

    The pipeline never persists it; the caller owns the bytes.

    Attributes:
        filename: Original filename as uploaded
        content_type: Declared MIME type (e.g., "image/jpeg")
        _bytes: Raw image bytes (internal)
    """

    filename: str = "image"
    content_type: Optional[str] = None
    _bytes: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self._bytes, (bytes, bytearray)):
            raise ValueError("ImageData requires raw bytes")

    @property
    def bytes(self) -> bytes:
        """Raw image bytes."""
        return bytes(self._bytes)

    @property
    def base64_string(self) -> str:
        """Base64 encoded image bytes."""
        return base64.b64encode(self._bytes).decode("utf-8")

    def __len__(self) -> int:
        """Return size of image data in bytes."""
        return len(self._bytes)

    def __str__(self) -> str:
        return f"ImageData({self.filename}, {self.content_type or 'unknown type'}, {len(self)} bytes)"

    @classmethod
    def from_file(cls, file_path: str) -> "ImageData":
        """
        Create ImageData from a file path.

        Args:
            file_path: Path to the image file

        Returns:
            ImageData instance
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {file_path}")

        return cls(
            filename=path.name,
            content_type=CONTENT_TYPES.get(path.suffix.lower()),
            _bytes=path.read_bytes()
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        filename: str = "image",
        content_type: Optional[str] = None
    ) -> "ImageData":
        """Create ImageData from raw bytes."""
        if content_type is None:
            content_type = CONTENT_TYPES.get(Path(filename).suffix.lower())
        return cls(filename=filename, content_type=content_type, _bytes=data)
