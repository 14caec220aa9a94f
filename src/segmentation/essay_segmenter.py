"""Essay segmentation — deterministic sentence splitting, no LLM needed.

Line breaks are flattened before splitting, so a heading-style break inside a
sentence never fragments it. A boundary is sentence-final punctuation followed
by whitespace and a capital letter (or an opening quote and a capital).

Known limitation: "Mr. Smith" splits after "Mr." because the next word is
capitalized. No abbreviation list is applied.
"""

from __future__ import annotations

import re
from typing import Optional

from ..schema.units import EssaySegment, SegmentationResult


# ── Patterns ───────────────────────────────────────────────────────────────

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z]|[\"“][A-Z])")


def normalize_essay_text(text: str) -> str:
    """Collapse every line break and whitespace run into one space, then trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def split_sentences(normalized: str) -> list[str]:
    """Split normalized text at sentence boundaries, keeping the punctuation."""
    pieces = _SENTENCE_BOUNDARY_RE.split(normalized)
    return [p.strip() for p in pieces if p.strip()]


def segment_essay(text: Optional[str]) -> list[EssaySegment]:
    """Split raw essay text into ordered, 1-based sentence segments.

    Args:
        text: Raw essay text. None, empty and whitespace-only give [].

    Returns:
        List of EssaySegment in document order.

    Raises:
        TypeError: If text is neither None nor a string.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        raise TypeError(f"essay text must be str, got {type(text).__name__}")

    normalized = normalize_essay_text(text)
    if not normalized:
        return []

    return [
        EssaySegment(id=i + 1, text=sentence)
        for i, sentence in enumerate(split_sentences(normalized))
    ]


def segment_essay_result(text: Optional[str]) -> SegmentationResult:
    """Same as segment_essay, wrapped as {segments: [...]}."""
    return SegmentationResult(segments=segment_essay(text))
