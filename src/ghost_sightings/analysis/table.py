"""Filtering, pagination and the page-button window for the sightings table.

The table shows the working set in its own order (no re-sorting), filtered
by four case-insensitive substring criteria and cut into fixed-size pages.

Boundaries:
  - no matching rows -> ``total_pages == 0`` and an empty window; the page
    number clamps to 1 and the table shows its empty-state message.
  - any page request is clamped into ``[1, total_pages]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from ghost_sightings.reference.display import PAGE_SIZE, PAGE_WINDOW

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ghost_sightings.schemas import Sighting


@dataclass(frozen=True)
class FilterCriteria:
    """Four optional substring patterns; empty means "no constraint"."""

    city: str = ""
    state: str = ""
    apparition_tag: str = ""
    time_of_day: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.city or self.state or self.apparition_tag or self.time_of_day)

    def update(self, **changes: str | None) -> FilterCriteria:
        """Copy with some criteria replaced (``None`` clears a criterion)."""
        return replace(self, **{k: v or "" for k, v in changes.items()})


def _contains(value: str, pattern: str) -> bool:
    return not pattern or pattern.lower() in value.lower()


def matches(sighting: Sighting, criteria: FilterCriteria) -> bool:
    """True if the sighting satisfies every non-empty criterion."""
    return (
        _contains(sighting.city, criteria.city)
        and _contains(sighting.state, criteria.state)
        and _contains(sighting.apparition_tag, criteria.apparition_tag)
        and _contains(sighting.time_of_day, criteria.time_of_day)
    )


def filter_sightings(sightings: Iterable[Sighting], criteria: FilterCriteria) -> list[Sighting]:
    """Sightings passing ``criteria``, in input order."""
    if criteria.is_empty:
        return list(sightings)
    return [s for s in sightings if matches(s, criteria)]


def distinct_values(values: Iterable[str]) -> list[str]:
    """Distinct non-empty values in order of first occurrence."""
    return [v for v in dict.fromkeys(values) if v]


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """``ceil(count / page_size)``; 0 when there is nothing to show."""
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into ``[1, pages]`` (1 when there are no pages)."""
    return max(1, min(page, pages))


def paginate(rows: Sequence[Sighting], page: int, page_size: int = PAGE_SIZE) -> list[Sighting]:
    """Rows on 1-based ``page`` (assumed already clamped)."""
    start = (page - 1) * page_size
    return list(rows[start : start + page_size])


def page_window(current: int, pages: int, width: int = PAGE_WINDOW) -> list[int]:
    """Page numbers for the compact button strip.

    With the default width of 5:
      - ``pages <= 5``: every page
      - ``current <= 3``: pages 1-5
      - ``current >= pages - 2``: the last five pages
      - otherwise: ``current - 2`` .. ``current + 2``
    """
    if pages <= width:
        return list(range(1, pages + 1))
    half = width // 2
    if current <= half + 1:
        return list(range(1, width + 1))
    if current >= pages - half:
        return list(range(pages - width + 1, pages + 1))
    return list(range(current - half, current + half + 1))


@dataclass(frozen=True)
class TablePage:
    """Everything the table renderer needs for one view of the table."""

    rows: list[Sighting]
    criteria: FilterCriteria
    page: int
    total_pages: int
    filtered_count: int
    page_size: int = PAGE_SIZE
    window: list[int] = field(default_factory=list)
    tag_options: list[str] = field(default_factory=list)
    time_options: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.filtered_count == 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def first_row(self) -> int:
        """1-based index of the first row shown (0 when empty)."""
        return 0 if self.is_empty else (self.page - 1) * self.page_size + 1

    @property
    def last_row(self) -> int:
        return 0 if self.is_empty else self.first_row + len(self.rows) - 1


def build_table_page(
    sightings: Sequence[Sighting],
    criteria: FilterCriteria,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> TablePage:
    """Filter, clamp and slice the snapshot into one table page.

    Selector options come from the unfiltered snapshot.
    """
    filtered = filter_sightings(sightings, criteria)
    pages = total_pages(len(filtered), page_size)
    current = clamp_page(page, pages)
    return TablePage(
        rows=paginate(filtered, current, page_size),
        criteria=criteria,
        page=current,
        total_pages=pages,
        filtered_count=len(filtered),
        page_size=page_size,
        window=page_window(current, pages),
        tag_options=distinct_values(s.apparition_tag for s in sightings),
        time_options=distinct_values(s.time_of_day for s in sightings),
    )
