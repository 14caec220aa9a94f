"""
Addressable text units produced by the parsers.

- EssaySegment: a sentence-level unit of an essay
- FeedbackBlock: one rubric-item comment with heuristic flags

Both are immutable. Ids are 1-based and dense within one parse call; all
downstream state (caches, mappings, matrices) is keyed off them.
"""

from pydantic import BaseModel, ConfigDict, Field


class EssaySegment(BaseModel):
    """One sentence (or trailing fragment) of an essay."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    text: str = Field(..., min_length=1)

    def payload(self) -> dict:
        """Shape sent to the feedback-mapping collaborator."""
        return {"id": self.id, "text": self.text}


class SegmentationResult(BaseModel):
    """Wrapper returned to callers that expect `{segments: [...]}`."""

    segments: list[EssaySegment] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.segments)


class FeedbackBlock(BaseModel):
    """
    One feedback card extracted from rubric text.

    Dumps with camelCase aliases (hasBody, isLowInfo, ...) when
    by_alias=True, which is the shape the display layer reads.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., ge=1)
    title: str = ""
    text: str = Field(..., min_length=1)
    has_body: bool = Field(True, alias="hasBody")
    is_low_info: bool = Field(False, alias="isLowInfo")
    is_negative: bool = Field(False, alias="isNegative")
    is_positive: bool = Field(False, alias="isPositive")

    def payload(self) -> dict:
        """Shape sent to the feedback-mapping collaborator."""
        return {"id": self.id, "title": self.title, "text": self.text}
