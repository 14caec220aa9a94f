"""
Feedback extraction and classification module.

Turns raw rubric feedback into numbered blocks with heuristic flags.
"""

from .extractor import extract_feedback
from .heuristics import is_generic, is_low_info, is_negative, is_positive

__all__ = [
    "extract_feedback",
    "is_generic",
    "is_low_info",
    "is_negative",
    "is_positive",
]
