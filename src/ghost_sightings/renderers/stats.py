"""Stats cards renderer (total, days since the latest sighting, top city)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghost_sightings.renderers import render_template

if TYPE_CHECKING:
    from ghost_sightings.analysis.stats import Stats


def build_stats_html(stats: Stats) -> str:
    """Build the three stats cards."""
    return render_template(
        "stats.html.j2",
        total=f"{stats.total:,}",
        days_ago=stats.days_ago,
        days_label=stats.days_label,
        most_ghostly_city=stats.most_ghostly_city,
        most_recent=stats.most_recent,
    )
