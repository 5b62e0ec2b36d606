"""Sightings table renderer: filter panel, rows, pagination strip."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode

from ghost_sightings.renderers import render_template

if TYPE_CHECKING:
    from ghost_sightings.analysis.table import FilterCriteria, TablePage


def page_href(criteria: FilterCriteria, page: int) -> str:
    """Query string for a table page, keeping only the non-empty criteria."""
    params = {
        "city": criteria.city,
        "state": criteria.state,
        "apparitionTag": criteria.apparition_tag,
        "timeOfDay": criteria.time_of_day,
    }
    query = {k: v for k, v in params.items() if v}
    query["page"] = str(page)
    return "?" + urlencode(query)


def static_page_href(page: int) -> str:
    """File name of a table page in the static site (page 1 is the index)."""
    return "index.html" if page <= 1 else f"page-{page}.html"


def build_sightings_table_html(table: TablePage, *, interactive: bool = True) -> str:
    """Build the paginated sightings table.

    The live page links its pager and filter panel through the query
    string.  The static site (``interactive=False``) has no server to read
    it, so the filter panel is left out and the pager links to the
    pre-built page files instead.
    """

    def href(page: int) -> str:
        if interactive:
            return page_href(table.criteria, page)
        return static_page_href(page)

    rows = [
        {
            "date": s.date.isoformat(),
            "time_of_day": s.time_of_day,
            "type": s.apparition_tag,
            "city": s.city,
            "state": s.state,
            "notes": s.notes,
        }
        for s in table.rows
    ]
    pages = [
        {"number": n, "href": href(n), "current": n == table.page}
        for n in table.window
    ]
    return render_template(
        "sightings_table.html.j2",
        table=table,
        criteria=table.criteria,
        rows=rows,
        pages=pages,
        interactive=interactive,
        previous_href=href(table.page - 1) if table.has_previous else "",
        next_href=href(table.page + 1) if table.has_next else "",
    )
