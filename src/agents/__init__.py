"""
LLM collaborator agents.

Agents:
- FeedbackMapper: link feedback blocks to essay segments
- ChecklistMapper: link feedback blocks to knowledge checklist items
"""

from .base import BaseAgent, AgentResult, DEFAULT_MODEL
from .feedback_mapper import FeedbackMapper
from .checklist_mapper import ChecklistMapper

__all__ = [
    "BaseAgent",
    "AgentResult",
    "DEFAULT_MODEL",
    "FeedbackMapper",
    "ChecklistMapper",
]
