"""
Pipeline state management.
"""

from dataclasses import dataclass, field
from enum import Enum


class PipelineStage(Enum):
    """Pipeline execution stages."""

    INIT = "init"
    PARSING = "parsing"
    MAPPING = "mapping"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class PipelineState:
    """
    Pipeline execution state.

    Tracks progress through the annotation stages for a batch of works.
    """

    stage: PipelineStage = PipelineStage.INIT

    # Tracking
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    processing_log: list[str] = field(default_factory=list)

    # Metrics
    works_parsed: int = 0
    works_mapped: int = 0
    total_segments: int = 0
    total_feedback_blocks: int = 0

    def log(self, message: str) -> None:
        """Add a log message."""
        self.processing_log.append(message)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.log(f"ERROR: {error}")

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)
        self.log(f"WARNING: {warning}")

    def advance_to(self, stage: PipelineStage) -> None:
        """Advance to a new stage."""
        self.log(f"Stage: {self.stage.value} → {stage.value}")
        self.stage = stage

    def summary(self) -> dict:
        """Return a summary of the pipeline state."""
        return {
            "stage": self.stage.value,
            "works_parsed": self.works_parsed,
            "works_mapped": self.works_mapped,
            "segments": self.total_segments,
            "feedback_blocks": self.total_feedback_blocks,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }
