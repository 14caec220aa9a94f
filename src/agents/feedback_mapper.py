"""
Feedback-to-segment mapping agent.

Links each feedback block to the single essay segment it most directly
refers to, or to none. The request and response shapes are fixed; how the
model decides is not.
"""

import json
from typing import Any

from ..schema.mappings import FeedbackMapping
from ..schema.units import EssaySegment, FeedbackBlock
from .base import BaseAgent, coerce_id_list, extract_json_object


class FeedbackMapper(BaseAgent):
    """Map feedback blocks to the essay segments they refer to."""

    SYSTEM_PROMPT = """You are an expert writing instructor linking rubric feedback to the essay sentences it refers to.

## Rules

- Link a feedback item only when at least one complete sentence of a paragraph directly supports it.
- Generic praise ("Good job!", "Well done.", "Nice.") is never enough to create a link.
- A feedback item that only names a rubric category (e.g. "CONCISENESS: Exceeds (10 pts)") gets no link.
- When in doubt, return an empty list rather than guessing.
- related_paragraph_ids holds EXACTLY ONE paragraph id (the most relevant) or is empty.

## Input Format

```json
{
  "paragraphs": [{"id": 1, "text": "..."}],
  "feedback_items": [{"id": 1, "title": "...", "text": "..."}]
}
```

## Output Format

```json
{
  "mappings": [
    {
      "feedback_id": 1,
      "related_paragraph_ids": [1],
      "reason": "Quote every complete sentence that anchors this feedback."
    }
  ]
}
```

Every feedback_id from the input must appear exactly once in mappings."""

    def get_system_prompt(self) -> str:
        return self.SYSTEM_PROMPT

    def format_input(
        self,
        segments: list[EssaySegment],
        feedback_blocks: list[FeedbackBlock],
        **kwargs: Any,
    ) -> str:
        """
        Format the mapping request.

        Args:
            segments: Parsed essay segments
            feedback_blocks: Parsed feedback blocks
        """
        return json.dumps(
            {
                "paragraphs": [s.payload() for s in segments],
                "feedback_items": [f.payload() for f in feedback_blocks],
            },
            ensure_ascii=False,
        )

    def parse_output(self, response: str) -> list[FeedbackMapping]:
        """
        Parse the mapping response.

        Rows without an integer feedback_id are skipped. Only the first
        related paragraph id of a row is kept.
        """
        data = extract_json_object(response)
        if data is None:
            return []

        mappings: list[FeedbackMapping] = []
        for row in data.get("mappings", []):
            if not isinstance(row, dict):
                continue
            feedback_ids = coerce_id_list([row.get("feedback_id")])
            if not feedback_ids:
                continue
            reason = row.get("reason")
            mappings.append(
                FeedbackMapping(
                    feedback_id=feedback_ids[0],
                    related_paragraph_ids=coerce_id_list(row.get("related_paragraph_ids"))[:1],
                    reason=reason if isinstance(reason, str) else None,
                )
            )

        return mappings
