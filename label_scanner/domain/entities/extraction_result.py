"""
Extraction Result Entities

Raw per-image OCR output and the keyword hint view derived from it.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class OcrResult:
    """
    Result of recognizing one image.

    Attributes:
        text: Recognized text (empty when the engine failed)
        confidence: Mean word confidence, 0..100
        original_name: Filename of the source image
        processing_time_ms: Time taken for recognition
    """

    text: str = ""
    confidence: float = 0.0
    original_name: Optional[str] = None
    processing_time_ms: float = 0.0

    @property
    def has_text(self) -> bool:
        """Check if any text was recognized."""
        return bool(self.text.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_name": self.original_name or "image",
            "text": self.text,
            "confidence": round(self.confidence or 0),
        }

    @classmethod
    def empty(cls, original_name: Optional[str] = None) -> "OcrResult":
        """Result used when the engine could not read an image."""
        return cls(text="", confidence=0.0, original_name=original_name)

    def __str__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"OcrResult('{preview}', confidence={self.confidence:.0f})"


# Keyword families scanned by the hint builder, in prompt order
HINT_FAMILIES = ("mfg", "exp", "batch", "price", "license")


@dataclass(frozen=True)
class HintBundle:
    """
    Read-only view of the OCR lines that sit near label keywords.

    Each family holds its deduplicated line window joined with " | ".
    `lines` is the full trimmed, non-empty line list of the OCR text.
    """

    mfg: str = ""
    exp: str = ""
    batch: str = ""
    price: str = ""
    license: str = ""
    lines: List[str] = field(default_factory=list)

    def get(self, family: str) -> str:
        """Get the joined hint window for a keyword family."""
        if family not in HINT_FAMILIES:
            raise KeyError(family)
        return getattr(self, family)

    @property
    def is_empty(self) -> bool:
        return not any(self.get(f) for f in HINT_FAMILIES)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {f: self.get(f) for f in HINT_FAMILIES}
        data["_lines"] = list(self.lines)
        return data
