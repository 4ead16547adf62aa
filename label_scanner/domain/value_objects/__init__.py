"""
Value Objects

Immutable objects that represent domain concepts with no identity.
"""

from .dosage_info import DosageForm, LiquidInfo
from .image_data import ImageData

__all__ = [
    "DosageForm",
    "LiquidInfo",
    "ImageData",
]
