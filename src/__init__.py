"""
Essay Annotator - structured feedback on student essays.

Core modules:
- segmentation: Essay text to sentence segments
- feedback: Rubric feedback to classified feedback blocks
- schema: Segment/FeedbackBlock/mapping definitions
- agents: LLM collaborators (feedback and checklist mapping)
- pipeline: Per-work cache and orchestration
- analysis: Checklist matrices
"""

__version__ = "0.1.0"
