"""
Schema definitions for parsed essays, feedback blocks and collaborator mappings.
"""

from .units import EssaySegment, FeedbackBlock, SegmentationResult
from .mappings import ChecklistItem, EssayPart, FeedbackMapping, ParsedWork

__all__ = [
    "EssaySegment",
    "FeedbackBlock",
    "SegmentationResult",
    "ChecklistItem",
    "EssayPart",
    "FeedbackMapping",
    "ParsedWork",
]
