"""Full home page: stats cards, map, table and the submission form."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghost_sightings.renderers import render_template
from ghost_sightings.renderers.sighting_form import build_sighting_form_html
from ghost_sightings.renderers.sightings_map import build_sightings_map_html
from ghost_sightings.renderers.sightings_table import build_sightings_table_html
from ghost_sightings.renderers.stats import build_stats_html

if TYPE_CHECKING:
    from datetime import datetime

    from ghost_sightings.analysis.table import TablePage
    from ghost_sightings.view import HomeView


def build_page_html(
    view: HomeView,
    updated: datetime,
    *,
    interactive: bool = True,
    table: TablePage | None = None,
) -> str:
    """Render the whole page for a view.

    Args:
        view: Live view (working set, criteria, page, form state).
        updated: Timestamp shown in the footer.
        interactive: False for the static site, which has no API to post to.
        table: Table page to show instead of the view's own criteria/page.
    """
    snapshot = view.snapshot()
    map_html, map_script = build_sightings_map_html(snapshot, interactive=interactive)
    return render_template(
        "base.html.j2",
        updated=updated.strftime("%Y-%m-%d %H:%M"),
        stats_html=build_stats_html(view.stats()),
        map_html=map_html,
        map_script=map_script,
        table_html=build_sightings_table_html(table or view.table(), interactive=interactive),
        form_html=build_sighting_form_html(view.form, updated.date()) if interactive else "",
        interactive=interactive,
        load_error=view.load_error,
    )
