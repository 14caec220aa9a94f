"""
Checklist matrix aggregation.
"""

from .checklist_matrix import (
    ChecklistStatus,
    MatrixRow,
    attach_related_segments,
    checklist_counts,
    essay_checklist_row,
    feedback_checklist_rows,
    filter_rows,
    mapping_counts,
    remove_checklist_definition,
    remove_checklist_item,
    sort_by_checklist,
    sort_checklist_by_count,
)

__all__ = [
    "ChecklistStatus",
    "MatrixRow",
    "attach_related_segments",
    "checklist_counts",
    "essay_checklist_row",
    "feedback_checklist_rows",
    "filter_rows",
    "mapping_counts",
    "remove_checklist_definition",
    "remove_checklist_item",
    "sort_by_checklist",
    "sort_checklist_by_count",
]
