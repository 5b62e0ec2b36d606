"""Summary statistics for the stats cards.

Everything is recomputed from the full snapshot on every change; nothing
is cached or updated incrementally.

Tie-breaks are deliberate and tested:
  - most recent: among sightings sharing the latest date, the one earliest
    in input order wins (``sorted`` is stable, ``reverse=True`` included).
  - most ghostly city: among ``"city, state"`` keys sharing the highest
    count, the key first seen in input order wins.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ghost_sightings.schemas import Sighting

NO_CITY = "N/A"

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Stats:
    """Derived summary of the working set."""

    total: int
    most_recent: Sighting | None
    days_ago: int
    most_ghostly_city: str

    @property
    def days_label(self) -> str:
        """``Day`` or ``Days`` for the "days ago" card."""
        return "Day" if self.days_ago == 1 else "Days"


def days_between(event_date: date, now: datetime) -> int:
    """Whole days elapsed from ``event_date`` (UTC midnight) to ``now``.

    Naive ``now`` values are taken as UTC.  Floors, so a future date gives
    a negative number.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    start = datetime.combine(event_date, time.min, tzinfo=UTC)
    return math.floor((now - start) / _ONE_DAY)


def most_ghostly_city(sightings: Sequence[Sighting]) -> str:
    """The ``"city, state"`` key with the most sightings, or ``N/A``."""
    counts = Counter(s.city_key for s in sightings)
    if not counts:
        return NO_CITY
    # Counter keeps first-seen order and max() returns the first maximum.
    return max(counts, key=lambda key: counts[key])


def compute_stats(sightings: Sequence[Sighting], now: datetime) -> Stats:
    """Compute ``Stats`` for a snapshot.

    Args:
        sightings: Any finite sequence, in any order.
        now: Reference time for ``days_ago`` (injected, never read here).
    """
    by_date = sorted(sightings, key=lambda s: s.date, reverse=True)
    most_recent = by_date[0] if by_date else None
    days_ago = days_between(most_recent.date, now) if most_recent else 0
    return Stats(
        total=len(sightings),
        most_recent=most_recent,
        days_ago=days_ago,
        most_ghostly_city=most_ghostly_city(sightings),
    )
