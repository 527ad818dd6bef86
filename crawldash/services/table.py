"""Client-side sorting and row selection for the job table."""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, List, Literal

from crawldash.models.crawl_job import CrawlJob

SortDirection = Literal["asc", "desc"]

SORTABLE_FIELDS = frozenset(CrawlJob.model_fields) - {"heading_counts", "broken_link_details"}


@dataclass
class SortState:
    """Current sort column; newest jobs first by default."""

    field: str = "created_at"
    direction: SortDirection = "desc"

    def toggle(self, field: str) -> None:
        """Flip direction on the active column, or switch to *field* ascending."""
        if field not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {field!r}")
        if field == self.field:
            self.direction = "desc" if self.direction == "asc" else "asc"
        else:
            self.field = field
            self.direction = "asc"


def _compare(a: Any, b: Any, direction: SortDirection) -> int:
    sign = 1 if direction == "asc" else -1
    # Missing values come first ascending and last descending.
    if a is None and b is None:
        return 0
    if a is None:
        return -sign
    if b is None:
        return sign
    if a < b:
        return -sign
    if a > b:
        return sign
    return 0


def sort_jobs(jobs: Iterable[CrawlJob], state: SortState) -> List[CrawlJob]:
    """Return a new, stably sorted list; the input is left untouched."""
    key = cmp_to_key(
        lambda a, b: _compare(getattr(a, state.field), getattr(b, state.field), state.direction)
    )
    return sorted(jobs, key=key)


class Selection:
    """Insertion-ordered set of selected job ids."""

    def __init__(self) -> None:
        self._ids: dict = {}

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def toggle(self, job_id: str, checked: bool) -> None:
        if checked:
            self._ids.setdefault(job_id, None)
        else:
            self._ids.pop(job_id, None)

    def toggle_all(self, visible_ids: Iterable[str], checked: bool) -> None:
        """Select exactly *visible_ids*, or clear the selection."""
        self._ids = dict.fromkeys(visible_ids) if checked else {}

    def all_selected(self, visible_ids: Iterable[str]) -> bool:
        visible = list(visible_ids)
        return bool(visible) and len(self._ids) == len(visible) and all(i in self._ids for i in visible)

    def clear(self) -> None:
        self._ids = {}
