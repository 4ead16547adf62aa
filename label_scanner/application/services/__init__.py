"""
Application Services

High-level services that coordinate domain operations.
"""

from .label_scan_service import LabelScanService, create_default_service

__all__ = [
    "LabelScanService",
    "create_default_service",
]
