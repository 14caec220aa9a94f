"""
Tests for the annotation pipeline.
"""

import pytest

from src.agents.base import AgentResult
from src.pipeline.pipeline import AnnotationPipeline, PipelineConfig
from src.pipeline.state import PipelineStage, PipelineState
from src.pipeline.work_cache import WorkCache
from src.schema.mappings import FeedbackMapping


ESSAY = "Carbon taxes reduce emissions. They also raise revenue."
FEEDBACK = "The revenue argument is well supported by the second sentence."


class FakeMapper:
    """Stands in for FeedbackMapper; records calls."""

    def __init__(self, result: AgentResult) -> None:
        self.result = result
        self.calls = 0

    def execute(self, **kwargs):
        self.calls += 1
        return self.result


def make_pipeline(result: AgentResult, **config) -> tuple[AnnotationPipeline, FakeMapper]:
    mapper = FakeMapper(result)
    return AnnotationPipeline(config=PipelineConfig(**config), mapper=mapper), mapper


class TestAnnotationPipeline:
    """Tests for AnnotationPipeline."""

    def test_parse_only(self):
        pipeline, mapper = make_pipeline(AgentResult(True, []), map_feedback=False)
        state = PipelineState()

        works = pipeline.run([(ESSAY, FEEDBACK)], state=state)

        assert len(works[0].segments) == 2
        assert mapper.calls == 0
        assert state.stage == PipelineStage.COMPLETED
        assert state.summary()["works_parsed"] == 1

    def test_mapping_merged_and_cached(self):
        result = AgentResult(True, [FeedbackMapping(feedback_id=1, related_paragraph_ids=[2])])
        pipeline, mapper = make_pipeline(result)

        works = pipeline.run([(ESSAY, FEEDBACK)])

        assert works[0].related_segments == {1: [2]}
        assert pipeline.cache.get(0).related_segments == {1: [2]}
        assert mapper.calls == 1

    def test_mapping_not_repeated(self):
        result = AgentResult(True, [FeedbackMapping(feedback_id=1, related_paragraph_ids=[2])])
        pipeline, mapper = make_pipeline(result)

        pipeline.run([(ESSAY, FEEDBACK)])
        pipeline.run([(ESSAY, FEEDBACK)])

        assert mapper.calls == 1

    def test_empty_mapping_not_repeated(self):
        pipeline, mapper = make_pipeline(AgentResult(True, []))
        state = PipelineState()

        pipeline.run([(ESSAY, FEEDBACK)])
        works = pipeline.run([(ESSAY, FEEDBACK)], state=state)

        assert works[0].related_segments == {}
        assert mapper.calls == 1
        assert any("already mapped" in line for line in state.processing_log)

    def test_failed_mapping_retried(self):
        pipeline, mapper = make_pipeline(AgentResult(False, None, errors=["timeout"]))

        pipeline.run([(ESSAY, FEEDBACK)])
        pipeline.run([(ESSAY, FEEDBACK)])

        assert mapper.calls == 2
        assert not pipeline.cache.is_mapped(0)

    def test_skips_work_without_feedback(self):
        pipeline, mapper = make_pipeline(AgentResult(True, []))
        state = PipelineState()

        pipeline.run([(ESSAY, "")], state=state)

        assert mapper.calls == 0
        assert any("nothing to map" in line for line in state.processing_log)

    def test_mapping_failure_recorded(self):
        pipeline, _ = make_pipeline(AgentResult(False, None, errors=["timeout"]))
        state = PipelineState()

        works = pipeline.run([(ESSAY, FEEDBACK)], state=state)

        assert works[0].related_segments == {}
        assert state.errors == ["Work 0: mapping failed: timeout"]
        assert state.stage == PipelineStage.COMPLETED

    def test_unknown_ids_become_warnings(self):
        result = AgentResult(True, [FeedbackMapping(feedback_id=5, related_paragraph_ids=[1])])
        pipeline, _ = make_pipeline(result)
        state = PipelineState()

        pipeline.run([(ESSAY, FEEDBACK)], state=state)

        assert len(state.warnings) == 1

    def test_bad_input_type(self):
        pipeline, _ = make_pipeline(AgentResult(True, []))
        state = PipelineState()

        with pytest.raises(TypeError):
            pipeline.run([(123, FEEDBACK)], state=state)
        assert state.stage == PipelineStage.ERROR

    def test_shared_cache(self):
        cache = WorkCache()
        cache.get_or_parse(0, "Cached essay.", None)
        pipeline = AnnotationPipeline(
            config=PipelineConfig(map_feedback=False),
            cache=cache,
            mapper=FakeMapper(AgentResult(True, [])),
        )

        works = pipeline.run([(ESSAY, FEEDBACK)])

        assert [s.text for s in works[0].segments] == ["Cached essay."]


class TestPipelineState:
    """Tests for PipelineState."""

    def test_advance_logs(self):
        state = PipelineState()
        state.advance_to(PipelineStage.PARSING)
        assert state.processing_log == ["Stage: init → parsing"]

    def test_warning_and_error(self):
        state = PipelineState()
        state.add_warning("w")
        state.add_error("e")
        assert state.summary()["warnings"] == 1
        assert state.processing_log[-1] == "ERROR: e"
