"""Rule-based extraction."""

from .regex_extractor import RegexLabelExtractor, extract_labeled_values, pull_labeled_value

__all__ = [
    "RegexLabelExtractor",
    "extract_labeled_values",
    "pull_labeled_value",
]
