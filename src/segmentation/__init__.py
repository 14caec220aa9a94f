"""
Essay segmentation module.

Splits essay text into sentence-level segments with stable 1-based ids.
"""

from .essay_segmenter import segment_essay, segment_essay_result

__all__ = ["segment_essay", "segment_essay_result"]
