"""
Annotation pipeline.

Parses works through the cache and, optionally, links feedback to essay
segments through the mapping collaborator (LiteLLM).
"""

from dataclasses import dataclass
from typing import Optional

from ..agents.base import DEFAULT_MODEL
from ..agents.feedback_mapper import FeedbackMapper
from ..schema.mappings import ParsedWork
from .state import PipelineState, PipelineStage
from .work_cache import WorkCache, apply_mappings


@dataclass
class PipelineConfig:
    """Pipeline configuration."""

    # LLM (LiteLLM format)
    # Examples:
    #   - "gpt-4o" (OpenAI GPT-4o)
    #   - "gemini/gemini-2.0-flash" (Google Gemini)
    model: str = DEFAULT_MODEL
    max_tokens: int = 2048
    temperature: float = 0.0

    # Mapping
    map_feedback: bool = True


class AnnotationPipeline:
    """
    Essay annotation pipeline.

    Each work is parsed once and cached; mapping is skipped for works with no
    segments or no feedback blocks.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        cache: Optional[WorkCache] = None,
        mapper: Optional[FeedbackMapper] = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            cache: Work cache to fill (a new one if omitted)
            mapper: Feedback mapping agent (built from config if omitted)
        """
        self.config = config or PipelineConfig()
        self.cache = cache if cache is not None else WorkCache()
        self.mapper = mapper or FeedbackMapper(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )

    def run(
        self,
        works: list[tuple[Optional[str], Optional[str]]],
        state: Optional[PipelineState] = None,
    ) -> list[ParsedWork]:
        """
        Run the pipeline over (essay_text, feedback_text) pairs.

        Args:
            works: Pairs in work-index order
            state: State to record progress in (a new one if omitted)

        Returns:
            ParsedWork per input pair, in order
        """
        state = state if state is not None else PipelineState()

        state.advance_to(PipelineStage.PARSING)
        parsed: list[ParsedWork] = []
        for index, (essay_text, feedback_text) in enumerate(works):
            try:
                work = self.cache.get_or_parse(index, essay_text, feedback_text)
            except TypeError as e:
                state.add_error(f"Work {index}: {e}")
                state.advance_to(PipelineStage.ERROR)
                raise
            parsed.append(work)
            state.works_parsed += 1
            state.total_segments += len(work.segments)
            state.total_feedback_blocks += len(work.feedback_blocks)
            state.log(
                f"Work {index}: {len(work.segments)} segments, "
                f"{len(work.feedback_blocks)} feedback blocks"
            )

        if self.config.map_feedback:
            state.advance_to(PipelineStage.MAPPING)
            parsed = [self.map_work(work, state) for work in parsed]

        state.advance_to(PipelineStage.COMPLETED)
        return parsed

    def map_work(self, work: ParsedWork, state: PipelineState) -> ParsedWork:
        """Link one work's feedback to its segments and update the cache."""
        if not work.segments or not work.feedback_blocks:
            state.log(f"Work {work.work_index}: nothing to map, skipped")
            return work
        if self.cache.is_mapped(work.work_index):
            state.log(f"Work {work.work_index}: already mapped")
            return work

        result = self.mapper.execute(
            segments=work.segments,
            feedback_blocks=work.feedback_blocks,
        )
        if not result.success:
            for error in result.errors:
                state.add_error(f"Work {work.work_index}: mapping failed: {error}")
            return work

        mapped, warnings = apply_mappings(work, result.output)
        for warning in warnings:
            state.add_warning(warning)

        self.cache.mark_mapped(mapped)
        state.works_mapped += 1
        state.log(f"Work {work.work_index}: mapped {len(mapped.related_segments)} feedback blocks")
        return mapped
