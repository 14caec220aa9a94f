"""
Per-work parse cache and helpers around it.

The parsers are pure, so the cache is the only place parsed state lives.
It is owned by whoever creates it; nothing here is process-global.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from ..feedback.extractor import extract_feedback
from ..schema.mappings import FeedbackMapping, ParsedWork
from ..segmentation.essay_segmenter import segment_essay


def parse_work(
    work_index: int,
    essay_text: Optional[str],
    feedback_text: Optional[str],
) -> ParsedWork:
    """Parse one work's essay and feedback into a fresh ParsedWork."""
    return ParsedWork(
        work_index=work_index,
        segments=segment_essay(essay_text),
        feedback_blocks=extract_feedback(feedback_text),
    )


def parse_works(
    works: list[tuple[Optional[str], Optional[str]]],
    max_workers: int = 4,
) -> list[ParsedWork]:
    """
    Parse many (essay_text, feedback_text) pairs concurrently.

    Args:
        works: Pairs in work-index order.
        max_workers: ThreadPoolExecutor parallelism.

    Returns:
        ParsedWork list in the same order; work_index is the list position.
    """
    if not works:
        return []

    with ThreadPoolExecutor(max_workers=min(max_workers, len(works))) as ex:
        return list(
            ex.map(lambda item: parse_work(item[0], item[1][0], item[1][1]), enumerate(works))
        )


def build_mapping_payload(work: ParsedWork) -> dict:
    """Request body for the feedback-mapping collaborator."""
    return {
        "paragraphs": [s.payload() for s in work.segments],
        "feedback_items": [f.payload() for f in work.feedback_blocks],
    }


def apply_mappings(
    work: ParsedWork,
    mappings: Iterable[FeedbackMapping],
) -> tuple[ParsedWork, list[str]]:
    """
    Merge collaborator mappings back into a work by id.

    Unknown feedback ids and segment ids are dropped.

    Returns:
        (new ParsedWork with related_segments set, list of warnings)
    """
    segment_ids = {s.id for s in work.segments}
    feedback_ids = {f.id for f in work.feedback_blocks}

    related: dict[int, list[int]] = {}
    warnings: list[str] = []

    for mapping in mappings:
        if mapping.feedback_id not in feedback_ids:
            warnings.append(
                f"Work {work.work_index}: unknown feedback id {mapping.feedback_id}"
            )
            continue

        ids: list[int] = []
        for pid in mapping.related_paragraph_ids:
            if pid not in segment_ids:
                warnings.append(
                    f"Work {work.work_index}: feedback {mapping.feedback_id} "
                    f"references unknown segment {pid}"
                )
            elif pid not in ids:
                ids.append(pid)
        related[mapping.feedback_id] = ids

    return work.model_copy(update={"related_segments": related}), warnings


class WorkCache:
    """
    Parsed results keyed by work index.

    Entries are computed once and replaced wholesale on re-import.
    """

    def __init__(self) -> None:
        self.works: dict[int, ParsedWork] = {}
        self.mapped: set[int] = set()  # indices whose mapping call succeeded

    def has(self, work_index: int) -> bool:
        """Whether the work has been parsed."""
        return work_index in self.works

    def get(self, work_index: int) -> ParsedWork:
        """Get a parsed work; raises KeyError if it was never parsed."""
        return self.works[work_index]

    def put(self, work: ParsedWork) -> None:
        """Store (or replace) a parsed work."""
        self.works[work.work_index] = work

    def mark_mapped(self, work: ParsedWork) -> None:
        """Store a mapped work; it is not sent for mapping again until invalidated."""
        self.works[work.work_index] = work
        self.mapped.add(work.work_index)

    def is_mapped(self, work_index: int) -> bool:
        return work_index in self.mapped

    def get_or_parse(
        self,
        work_index: int,
        essay_text: Optional[str],
        feedback_text: Optional[str],
    ) -> ParsedWork:
        """Return the cached work, parsing it on first access."""
        if work_index not in self.works:
            self.works[work_index] = parse_work(work_index, essay_text, feedback_text)
        return self.works[work_index]

    def invalidate(self, work_index: int) -> None:
        """Forget a work so the next access re-parses it."""
        self.works.pop(work_index, None)
        self.mapped.discard(work_index)

    def clear(self) -> None:
        self.works.clear()
        self.mapped.clear()

    def all_works(self) -> list[ParsedWork]:
        """All cached works in work-index order."""
        return [self.works[i] for i in sorted(self.works)]

    def __contains__(self, work_index: object) -> bool:
        return work_index in self.works

    def __len__(self) -> int:
        return len(self.works)
