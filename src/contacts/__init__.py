"""Contact detection and extraction from sheet rows."""

from .header_classifier import KEYWORD_RULES, KeywordRule, classify
from .record_extractor import extract

__all__ = [
    "KEYWORD_RULES",
    "KeywordRule",
    "classify",
    "extract",
]
