"""
Pipeline orchestration.

Essay + feedback text → Segment / Extract (cached per work) →
  optional feedback-to-segment mapping (LLM collaborator) → ParsedWork
"""

from .pipeline import AnnotationPipeline, PipelineConfig
from .state import PipelineState, PipelineStage
from .work_cache import (
    WorkCache,
    apply_mappings,
    build_mapping_payload,
    parse_work,
    parse_works,
)

__all__ = [
    "AnnotationPipeline",
    "PipelineConfig",
    "PipelineState",
    "PipelineStage",
    "WorkCache",
    "apply_mappings",
    "build_mapping_payload",
    "parse_work",
    "parse_works",
]
