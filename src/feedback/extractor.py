"""Rubric feedback extraction — deterministic block parsing, no LLM needed.

Pipeline, in order:
1. Skip any preamble before the first "CONCEPTS &" line.
2. Split into blank-line-delimited blocks.
3. Drop OVERALL SCORE summaries; when any block carries "(x pts)",
   keep only the blocks that do.
4. Peel a heading line into the block title (a stacked all-caps section
   heading above it is discarded). Heading-only blocks are dropped.
5. Strip markdown list markers from the body.
6. Drop bodies that are still a heading in disguise.
7. Classify the cleaned text.
8. Number the survivors 1..N.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..schema.units import FeedbackBlock
from . import heuristics


logger = logging.getLogger(__name__)

_BLOCK_SPLIT_RE = re.compile(r"\n{2,}")
_LIST_MARKER_RE = re.compile(r"^[-*]\s*")


@dataclass
class BlockDraft:
    """A candidate block after heading detection, before classification."""

    title: str
    body_lines: list[str]

    @property
    def has_body(self) -> bool:
        return bool("\n".join(self.body_lines).strip())


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def locate_start(text: str) -> str:
    """Return text from the first "CONCEPTS &" line on, or all of it."""
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if heuristics.SECTION_START_RE.match(line.strip()):
            return "\n".join(lines[i:])
    return text


def split_blocks(text: str) -> list[str]:
    """Split on runs of blank lines; trim; drop empties.

    Only runs of bare newlines separate blocks: CRLF line endings and lines
    holding only spaces do not split, so such text stays one block.
    """
    blocks = (b.strip() for b in _BLOCK_SPLIT_RE.split(text))
    return [b for b in blocks if b]


def filter_blocks(blocks: list[str]) -> list[str]:
    """Drop score summaries and, in points-format documents, unscored blocks."""
    has_any_points = any(heuristics.has_points_format(b) for b in blocks)

    kept: list[str] = []
    for block in blocks:
        first_line = block.split("\n")[0].strip()
        if heuristics.OVERALL_SCORE_RE.match(first_line):
            continue
        if has_any_points and not heuristics.has_points_format(block):
            continue
        kept.append(block)
    return kept


def detect_heading(block: str) -> Optional[BlockDraft]:
    """Split a block into title and body lines.

    Returns None when the block is only a heading.
    """
    lines = [line.strip() for line in block.split("\n")]
    lines = [line for line in lines if line]
    first_line = lines[0] if lines else ""

    if not heuristics.looks_like_title(first_line):
        return BlockDraft(title="", body_lines=lines)

    # Section heading stacked above the item heading
    if (
        len(lines) > 1
        and heuristics.is_all_caps(first_line)
        and heuristics.looks_like_title(lines[1])
    ):
        lines = lines[1:]
        first_line = lines[0]

    if len(lines) == 1:
        return None
    return BlockDraft(title=first_line, body_lines=lines[1:])


def clean_body(body_lines: list[str]) -> str:
    """Strip leading "-"/"*" list markers; drop lines left empty."""
    body = "\n".join(body_lines).strip()
    cleaned = (_LIST_MARKER_RE.sub("", line.strip()) for line in body.split("\n"))
    return "\n".join(line for line in cleaned if line).strip()


def classify(block_id: int, title: str, text: str, has_body: bool) -> FeedbackBlock:
    """Attach heuristic flags to cleaned feedback text."""
    return FeedbackBlock(
        id=block_id,
        title=title,
        text=text,
        has_body=has_body,
        is_low_info=heuristics.is_low_info(text, has_body=has_body),
        is_negative=heuristics.is_negative(text),
        is_positive=heuristics.is_positive(text),
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def extract_feedback(text: Optional[str]) -> list[FeedbackBlock]:
    """Extract classified feedback blocks from raw rubric feedback text.

    Args:
        text: Raw feedback text. None and empty give [].

    Returns:
        FeedbackBlocks with dense ids 1..N in source order. An empty list is a
        valid outcome (e.g. feedback made only of headings).

    Raises:
        TypeError: If text is neither None nor a string.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        raise TypeError(f"feedback text must be str, got {type(text).__name__}")
    if not text.strip():
        return []

    blocks = filter_blocks(split_blocks(locate_start(text)))

    results: list[FeedbackBlock] = []
    for block in blocks:
        draft = detect_heading(block)
        if draft is None:
            logger.debug("Dropped heading-only block: %r", block[:60])
            continue

        main_text = clean_body(draft.body_lines)
        if not main_text:
            logger.debug("Dropped block with empty body: %r", block[:60])
            continue
        if heuristics.looks_like_heading_text(main_text):
            logger.debug("Dropped block whose body is a heading: %r", main_text[:60])
            continue

        results.append(classify(len(results) + 1, draft.title, main_text, draft.has_body))

    return results
