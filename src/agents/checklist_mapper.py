"""
Feedback-to-checklist mapping agent.

Given essay parts (from a separate LLM segmentation), mapped feedback and a
knowledge checklist, asks which checklist items each feedback satisfies and
which essay parts it touches.
"""

import json
from typing import Any, Optional

from ..schema.mappings import ChecklistItem, EssayPart, FeedbackMapping
from ..schema.units import FeedbackBlock
from .base import BaseAgent, coerce_id_list, extract_json_object


class ChecklistMapper(BaseAgent):
    """Map feedback blocks to knowledge checklist items and essay parts."""

    SYSTEM_PROMPT = """You are an expert writing instructor mapping rubric feedback to a knowledge checklist.

## Task

1. Map each feedback to the knowledge checklist items (by id) whose description it addresses.
2. Map each feedback to the essay parts that contain the paragraphs in its related_paragraph_ids.
3. Return each feedback's related_paragraph_ids unchanged.

## Input Format

```json
{
  "essay_parts": [{"id": 1, "name": "Part 1: Introduction", "description": "...", "paragraph_ids": [1, 2]}],
  "feedbacks": [{"id": 1, "text": "...", "related_paragraph_ids": [1]}],
  "knowledge_checklist": [{"id": 1, "name": "C1", "description": "..."}]
}
```

## Output Format

```json
{
  "mappings": [
    {"feedback_id": 1, "checklist_items": [1, 3], "essay_part_ids": [1], "related_paragraph_ids": [1]}
  ]
}
```

Every feedback_id must appear exactly once. Use [] when a feedback matches no checklist item."""

    def get_system_prompt(self) -> str:
        return self.SYSTEM_PROMPT

    def format_input(
        self,
        essay_parts: list[EssayPart],
        feedback_blocks: list[FeedbackBlock],
        checklist: list[ChecklistItem],
        related_segments: Optional[dict[int, list[int]]] = None,
        **kwargs: Any,
    ) -> str:
        """
        Format the checklist mapping request.

        Args:
            essay_parts: Named segment groups for the work
            feedback_blocks: Parsed feedback blocks
            checklist: Knowledge checklist items
            related_segments: feedback id -> related segment ids, if mapped
        """
        related_segments = related_segments or {}
        return json.dumps(
            {
                "essay_parts": [p.model_dump() for p in essay_parts],
                "feedbacks": [
                    {
                        "id": f.id,
                        "text": f.text,
                        "related_paragraph_ids": related_segments.get(f.id, []),
                    }
                    for f in feedback_blocks
                ],
                "knowledge_checklist": [c.model_dump() for c in checklist],
            },
            ensure_ascii=False,
        )

    def parse_output(self, response: str) -> list[FeedbackMapping]:
        """
        Parse the checklist mapping response.

        Malformed rows are skipped. Only the first related paragraph id of a
        row is kept, as with FeedbackMapper.
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
            mappings.append(
                FeedbackMapping(
                    feedback_id=feedback_ids[0],
                    checklist_items=coerce_id_list(row.get("checklist_items")),
                    essay_part_ids=coerce_id_list(row.get("essay_part_ids")),
                    related_paragraph_ids=coerce_id_list(row.get("related_paragraph_ids"))[:1],
                )
            )

        return mappings
