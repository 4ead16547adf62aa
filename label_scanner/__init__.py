"""
Pharmacy Label Scanner

Turns a handful of photographs of a medicine package into one structured record.
Pipeline: OCR → HINTS → VISION MODEL → TEXT MODEL → REGEX → MERGE & VOTE → NORMALIZE
"""

__version__ = "1.0.0"
__author__ = "Pharmacy Label Scanner Team"
