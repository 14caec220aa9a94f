"""Checklist matrices — aggregate collaborator mappings per work and per feedback.

Pure data: which checklist items each feedback (or each work, across all its
feedback) satisfies, and which essay segments back that up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..schema.mappings import ChecklistItem, FeedbackMapping
from ..schema.units import FeedbackBlock


@dataclass
class ChecklistStatus:
    """Status of one checklist item within a row."""

    checklist_id: int
    satisfied: bool
    paragraph_ids: list[int] = field(default_factory=list)
    feedback_id: Optional[int] = None  # representative feedback (work rows only)
    is_negative: bool = False
    is_positive: bool = False


@dataclass
class MatrixRow:
    """One matrix row: a whole work, or one feedback block of a work."""

    work_index: int
    statuses: list[ChecklistStatus]
    feedback_id: Optional[int] = None
    feedback_title: str = ""
    feedback_text: str = ""
    is_negative: bool = False
    is_positive: bool = False

    @property
    def satisfied_ids(self) -> set[int]:
        return {s.checklist_id for s in self.statuses if s.satisfied}

    @property
    def satisfied_count(self) -> int:
        return len(self.satisfied_ids)


def _merge_paragraphs(target: list[int], ids: Iterable[int]) -> None:
    """Append ids not already present, keeping first-seen order."""
    for pid in ids:
        if pid not in target:
            target.append(pid)


def feedback_checklist_rows(
    work_index: int,
    blocks: list[FeedbackBlock],
    mappings: list[FeedbackMapping],
    checklist: list[ChecklistItem],
) -> list[MatrixRow]:
    """One row per feedback block, in block order.

    A checklist item is satisfied when the block's mapping names it; its
    paragraph ids are the mapping's related paragraph ids.
    """
    by_feedback: dict[int, FeedbackMapping] = {}
    for m in mappings:
        by_feedback.setdefault(m.feedback_id, m)

    rows: list[MatrixRow] = []
    for block in blocks:
        mapping = by_feedback.get(block.id)
        named = set(mapping.checklist_items) if mapping else set()
        related = list(mapping.related_paragraph_ids) if mapping else []

        statuses = [
            ChecklistStatus(
                checklist_id=item.id,
                satisfied=item.id in named,
                paragraph_ids=list(related) if item.id in named else [],
            )
            for item in checklist
        ]
        rows.append(
            MatrixRow(
                work_index=work_index,
                statuses=statuses,
                feedback_id=block.id,
                feedback_title=block.title,
                feedback_text=block.text,
                is_negative=block.is_negative,
                is_positive=block.is_positive,
            )
        )
    return rows


def essay_checklist_row(
    work_index: int,
    blocks: list[FeedbackBlock],
    mappings: list[FeedbackMapping],
    checklist: list[ChecklistItem],
) -> MatrixRow:
    """One row for a whole work.

    Per checklist item: satisfied iff related paragraphs were found through
    any mapping naming it; paragraph ids are the union over those mappings.
    The first mapping naming the item is its representative feedback, and
    that block's sentiment is copied onto the status.
    """
    blocks_by_id = {b.id: b for b in blocks}

    statuses: list[ChecklistStatus] = []
    for item in checklist:
        paragraph_ids: list[int] = []
        representative: Optional[int] = None
        for m in mappings:
            if item.id not in m.checklist_items:
                continue
            if representative is None:
                representative = m.feedback_id
            _merge_paragraphs(paragraph_ids, m.related_paragraph_ids)

        block = blocks_by_id.get(representative) if representative is not None else None
        statuses.append(
            ChecklistStatus(
                checklist_id=item.id,
                satisfied=bool(paragraph_ids),
                paragraph_ids=paragraph_ids,
                feedback_id=representative,
                is_negative=block.is_negative if block else False,
                is_positive=block.is_positive if block else False,
            )
        )

    return MatrixRow(work_index=work_index, statuses=statuses)


def attach_related_segments(
    mappings: list[FeedbackMapping],
    related_segments: dict[int, list[int]],
) -> list[FeedbackMapping]:
    """Fill empty related_paragraph_ids from a work's feedback-to-segment links.

    Rows that already carry paragraph ids are left as they are.
    """
    return [
        m.model_copy(update={"related_paragraph_ids": list(related_segments.get(m.feedback_id, []))})
        if not m.related_paragraph_ids
        else m
        for m in mappings
    ]


def checklist_counts(rows: list[MatrixRow]) -> dict[int, int]:
    """Number of rows satisfying each checklist id.

    Row satisfaction needs related paragraphs; use mapping_counts to count
    every work whose mappings name an id.
    """
    counts: dict[int, int] = {}
    for row in rows:
        for cid in row.satisfied_ids:
            counts[cid] = counts.get(cid, 0) + 1
    return counts


def mapping_counts(mappings_by_work: dict[int, list[FeedbackMapping]]) -> dict[int, int]:
    """Number of works whose mappings name each checklist id, with or without paragraphs."""
    counts: dict[int, int] = {}
    for mappings in mappings_by_work.values():
        named = {cid for m in mappings for cid in m.checklist_items}
        for cid in named:
            counts[cid] = counts.get(cid, 0) + 1
    return counts


def sort_checklist_by_count(
    items: list[ChecklistItem],
    counts: dict[int, int],
) -> list[ChecklistItem]:
    """Most-satisfied checklist items first; ties keep id order."""
    return sorted(items, key=lambda item: (-counts.get(item.id, 0), item.id))


def remove_checklist_item(
    mappings: list[FeedbackMapping],
    item_id: int,
) -> list[FeedbackMapping]:
    """Drop a deleted checklist item from mappings.

    Ids above item_id shift down by one so checklist ids stay 1..N. Mappings
    left with no checklist items are dropped.
    """
    updated: list[FeedbackMapping] = []
    for m in mappings:
        items = [cid - 1 if cid > item_id else cid for cid in m.checklist_items if cid != item_id]
        if not items:
            continue
        updated.append(m.model_copy(update={"checklist_items": items}))
    return updated


def remove_checklist_definition(items: list[ChecklistItem], item_id: int) -> list[ChecklistItem]:
    """Delete a checklist item and renumber the rest as C1..Cn."""
    return ChecklistItem.numbered([i.description for i in items if i.id != item_id])


def filter_rows(rows: list[MatrixRow], required_ids: Iterable[int]) -> list[MatrixRow]:
    """Keep rows that satisfy every required checklist id."""
    required = set(required_ids)
    if not required:
        return list(rows)
    return [row for row in rows if required <= row.satisfied_ids]


def sort_by_checklist(rows: list[MatrixRow], checklist_id: Optional[int]) -> list[MatrixRow]:
    """Rows satisfying checklist_id first, then work order (stable)."""
    if checklist_id is None:
        return sorted(rows, key=lambda r: r.work_index)
    return sorted(rows, key=lambda r: (checklist_id not in r.satisfied_ids, r.work_index))
