"""
Prefect flow for building the static site from the cached snapshot.

The static pages show the same stats, map and table as the live server
but have no submission form or filter panel (there is nothing to post to
and no server to read a query string).  Each table page is written as its
own file: ``index.html`` for page 1, ``page-N.html`` after that.

Run locally:
    python -m ghost_sightings.flows.build
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from prefect import flow, task

from ghost_sightings.config import get_settings
from ghost_sightings.errors import StoreError
from ghost_sightings.renderers.page import build_page_html
from ghost_sightings.renderers.sightings_table import static_page_href
from ghost_sightings.store import SIGHTINGS_PATH, SITE_PATH, DataStore
from ghost_sightings.view import HomeView

if TYPE_CHECKING:
    from pathlib import Path

    from ghost_sightings.schemas import NewSighting, Sighting

# Store
store = DataStore(get_settings().data_dir)


class SnapshotSource:
    """Read-only source over an already-fetched snapshot."""

    def __init__(self, sightings: list[Sighting]) -> None:
        self.sightings = sightings

    def fetch_all(self, cancel: threading.Event | None = None) -> list[Sighting]:  # noqa: ARG002
        return list(self.sightings)

    def insert(self, record: NewSighting) -> Sighting:  # noqa: ARG002
        msg = "The static site cannot accept new sightings"
        raise StoreError(msg)


# =============================================================================
# Tasks
# =============================================================================


@task(name="load-sightings")
def load_sightings() -> list[Sighting] | None:
    """Load the cached sightings snapshot from store."""
    return store.load_sightings()


@task(name="build-html")
def build_html(sightings: list[Sighting], fetched_at: datetime) -> dict[str, str]:
    """Render every table page for a snapshot taken at ``fetched_at``.

    Returns:
        File name -> HTML, in page order (always at least ``index.html``).
    """
    view = HomeView(
        SnapshotSource(sightings),
        policy=get_settings().coordinate_policy,
        now=fetched_at,
    )
    view.load()
    pages: dict[str, str] = {}
    for number in range(1, max(view.table().total_pages, 1) + 1):
        view.go_to_page(number)
        pages[static_page_href(number)] = build_page_html(view, fetched_at, interactive=False)
    return pages


@task(name="write-site")
def write_site(pages: dict[str, str]) -> list[Path]:
    """Write the page files to the site directory."""
    return [store.write_text(SITE_PATH.with_name(name), html) for name, html in pages.items()]


@flow(name="build-site", log_prints=True)
def build_all() -> dict[str, Any]:
    """
    Build static site from the cached snapshot.

    This is the main Prefect flow that generates the static site.
    """
    print("Loading sightings snapshot...")
    sightings = load_sightings()

    if sightings is None:
        print("No sightings snapshot found. Run fetch flow first.")
        return {"error": "no data"}

    fetched_at_raw = store.meta(SIGHTINGS_PATH).get("fetched_at")
    fetched_at = datetime.fromisoformat(fetched_at_raw) if fetched_at_raw else datetime.now(UTC)
    if fetched_at.tzinfo is None:
        fetched_at = fetched_at.replace(tzinfo=UTC)

    print(f"Building HTML for {len(sightings)} sightings...")
    pages = build_html(sightings, fetched_at)

    print(f"Writing {len(pages)} page(s)...")
    paths = write_site(pages)

    print(f"Site built: {paths[0]}")
    return {"pages": len(paths), "sightings": len(sightings), "output": str(paths[0])}


if __name__ == "__main__":
    result = build_all()
    print(f"Flow complete: {result}")
