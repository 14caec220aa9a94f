"""
Tests for the collaborator agents (no network).
"""

import json
from types import SimpleNamespace
from unittest.mock import patch

from src.agents import base
from src.agents.base import coerce_id_list, extract_json_object
from src.agents.checklist_mapper import ChecklistMapper
from src.agents.feedback_mapper import FeedbackMapper
from src.schema.mappings import ChecklistItem, EssayPart
from src.schema.units import EssaySegment, FeedbackBlock


SEGMENTS = [EssaySegment(id=1, text="One."), EssaySegment(id=2, text="Two.")]
BLOCKS = [FeedbackBlock(id=1, title="THESIS: Meets (10 pts)", text="The thesis is clear.")]


def fake_completion(content: str):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
        model="test-model",
    )


class TestHelpers:
    """Tests for JSON helpers."""

    def test_extract_json_object(self):
        assert extract_json_object('noise {"a": 1} noise') == {"a": 1}

    def test_extract_json_object_invalid(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("{broken") is None
        assert extract_json_object(None) is None

    def test_coerce_id_list(self):
        assert coerce_id_list([1, "2", "x", True, 3.5, 4]) == [1, 2, 4]
        assert coerce_id_list("1, 2") == []


class TestFeedbackMapper:
    """Tests for FeedbackMapper."""

    def test_format_input(self):
        payload = json.loads(
            FeedbackMapper().format_input(segments=SEGMENTS, feedback_blocks=BLOCKS)
        )

        assert payload["paragraphs"] == [{"id": 1, "text": "One."}, {"id": 2, "text": "Two."}]
        assert payload["feedback_items"][0]["title"] == "THESIS: Meets (10 pts)"

    def test_parse_output(self):
        response = json.dumps(
            {
                "mappings": [
                    {"feedback_id": 1, "related_paragraph_ids": [2, 1], "reason": "Two."},
                    {"feedback_id": "x", "related_paragraph_ids": [1]},
                    "garbage",
                    {"feedback_id": 2, "related_paragraph_ids": None},
                ]
            }
        )
        mappings = FeedbackMapper().parse_output(response)

        assert [(m.feedback_id, m.related_paragraph_ids) for m in mappings] == [
            (1, [2]),
            (2, []),
        ]
        assert mappings[0].reason == "Two."

    def test_parse_output_not_json(self):
        assert FeedbackMapper().parse_output("Sorry, I cannot help.") == []

    def test_execute(self):
        content = json.dumps({"mappings": [{"feedback_id": 1, "related_paragraph_ids": [1]}]})
        with patch.object(base.litellm, "completion", return_value=fake_completion(content)) as completion:
            result = FeedbackMapper(model="test-model").execute(
                segments=SEGMENTS, feedback_blocks=BLOCKS
            )

        assert result.success
        assert result.output[0].related_paragraph_ids == [1]
        assert result.metrics["input_tokens"] == 10
        assert completion.call_args.kwargs["response_format"] == {"type": "json_object"}

    def test_execute_captures_errors(self):
        with patch.object(base.litellm, "completion", side_effect=RuntimeError("down")):
            result = FeedbackMapper().execute(segments=SEGMENTS, feedback_blocks=BLOCKS)

        assert not result.success
        assert result.errors == ["down"]


class TestChecklistMapper:
    """Tests for ChecklistMapper."""

    def test_format_input(self):
        payload = json.loads(
            ChecklistMapper().format_input(
                essay_parts=[EssayPart(id=1, name="Part 1: Introduction", paragraph_ids=[1])],
                feedback_blocks=BLOCKS,
                checklist=ChecklistItem.numbered(["States a thesis"]),
                related_segments={1: [1]},
            )
        )

        assert payload["feedbacks"] == [
            {"id": 1, "text": "The thesis is clear.", "related_paragraph_ids": [1]}
        ]
        assert payload["knowledge_checklist"][0]["name"] == "C1"
        assert payload["essay_parts"][0]["paragraph_ids"] == [1]

    def test_format_input_unmapped(self):
        payload = json.loads(
            ChecklistMapper().format_input(essay_parts=[], feedback_blocks=BLOCKS, checklist=[])
        )
        assert payload["feedbacks"][0]["related_paragraph_ids"] == []

    def test_parse_output(self):
        response = json.dumps(
            {"mappings": [{"feedback_id": 1, "checklist_items": [1, 3], "essay_part_ids": [1]}]}
        )
        mappings = ChecklistMapper().parse_output(response)

        assert mappings[0].checklist_items == [1, 3]
        assert mappings[0].essay_part_ids == [1]

    def test_parse_output_keeps_related_paragraph(self):
        response = json.dumps(
            {
                "mappings": [
                    {
                        "feedback_id": 1,
                        "checklist_items": [1],
                        "essay_part_ids": [1],
                        "related_paragraph_ids": [2, 3],
                    }
                ]
            }
        )
        mappings = ChecklistMapper().parse_output(response)

        assert mappings[0].related_paragraph_ids == [2]
