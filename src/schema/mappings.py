"""
Structures exchanged with the LLM collaborators and the per-work container.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .units import EssaySegment, FeedbackBlock


class FeedbackMapping(BaseModel):
    """One mapping row returned by a collaborator, keyed by feedback id."""

    feedback_id: int
    related_paragraph_ids: list[int] = Field(default_factory=list)
    checklist_items: list[int] = Field(default_factory=list)
    essay_part_ids: list[int] = Field(default_factory=list)
    reason: Optional[str] = None


class EssayPart(BaseModel):
    """A named group of segments from the LLM essay-part segmentation."""

    id: int
    name: str
    description: str = ""
    paragraph_ids: list[int] = Field(default_factory=list)


class ChecklistItem(BaseModel):
    """A knowledge/skill criterion (C1, C2, ...)."""

    id: int = Field(..., ge=1)
    name: str
    description: str = ""

    @classmethod
    def numbered(cls, descriptions: list[str]) -> list["ChecklistItem"]:
        """Build C1..Cn items from a list of descriptions, in order."""
        return [
            cls(id=i + 1, name=f"C{i + 1}", description=desc or "")
            for i, desc in enumerate(descriptions)
        ]


class ParsedWork(BaseModel):
    """
    Parsed state for one work (one essay plus its feedback).

    related_segments is empty until collaborator mappings are applied.
    """

    work_index: int
    segments: list[EssaySegment] = Field(default_factory=list)
    feedback_blocks: list[FeedbackBlock] = Field(default_factory=list)
    related_segments: dict[int, list[int]] = Field(default_factory=dict)

    def get_segment(self, segment_id: int) -> Optional[EssaySegment]:
        """Get a segment by id."""
        if 1 <= segment_id <= len(self.segments):
            return self.segments[segment_id - 1]
        return None

    def get_feedback(self, feedback_id: int) -> Optional[FeedbackBlock]:
        """Get a feedback block by id."""
        if 1 <= feedback_id <= len(self.feedback_blocks):
            return self.feedback_blocks[feedback_id - 1]
        return None

    def summary(self) -> str:
        """Return a summary of the work."""
        return (
            f"ParsedWork(index={self.work_index}, segments={len(self.segments)}, "
            f"feedback={len(self.feedback_blocks)}, mapped={len(self.related_segments)})"
        )
