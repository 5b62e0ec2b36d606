"""Derived views over the in-memory working set.

Each module is a set of pure functions over a sequence of ``Sighting``
records. This is the domain logic layer.

Dependency rule: analysis/ imports ``schemas`` and ``reference`` only.
It never fetches data or produces HTML.

Modules:
  - stats: total, most recent sighting, days ago, most ghostly city
  - table: four-field filter, distinct selector values, pagination, page window
  - coordinates: load-time policy for records with a zero coordinate

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with a pure function taking the snapshot
   (``Sequence[Sighting]``) plus any UI state it needs.
2. No I/O, no HTTP, no wall-clock reads: take ``now`` as a parameter.
3. Call it from ``view.py`` so it is re-derived on every mutation.
4. Re-export in ``__init__.py`` and add tests in ``tests/test_{name}.py``.
"""

from ghost_sightings.analysis.coordinates import apply_coordinate_policy, has_zero_coordinate
from ghost_sightings.analysis.stats import NO_CITY, Stats, compute_stats, days_between
from ghost_sightings.analysis.table import (
    FilterCriteria,
    TablePage,
    build_table_page,
    clamp_page,
    distinct_values,
    filter_sightings,
    matches,
    page_window,
    paginate,
    total_pages,
)

__all__ = [
    "NO_CITY",
    "FilterCriteria",
    "Stats",
    "TablePage",
    "apply_coordinate_policy",
    "build_table_page",
    "clamp_page",
    "compute_stats",
    "days_between",
    "distinct_values",
    "filter_sightings",
    "has_zero_coordinate",
    "matches",
    "page_window",
    "paginate",
    "total_pages",
]
