"""
Prefect flow for fetching sightings from the backing store.

The snapshot is cached for ``snapshot_ttl_seconds`` (60 s by default), the
same window in which a rendered page is considered current.  Within that
window the flow skips the store entirely.

Run locally:
    python -m ghost_sightings.flows.fetch

Run with Prefect dashboard:
    prefect server start &
    python -m ghost_sightings.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from prefect import flow, task

from ghost_sightings.config import get_settings
from ghost_sightings.datasources.sightings import SightingRepository
from ghost_sightings.store import SIGHTINGS_PATH, DataStore

if TYPE_CHECKING:
    from pathlib import Path

    from ghost_sightings.schemas import Sighting

# Data store rooted at the configured data directory
store = DataStore(get_settings().data_dir)


@task(name="fetch-sightings-table", retries=2, retry_delay_seconds=5)
def fetch_sightings() -> list[Sighting]:
    """Page every sighting out of the store, newest first."""
    repository = SightingRepository.from_settings(get_settings())
    return repository.fetch_all()


@task(name="save-sightings")
def save_sightings(sightings: list[Sighting]) -> Path:
    """Save the snapshot via store with the configured TTL."""
    settings = get_settings()
    return store.save_sightings(
        sightings,
        source=settings.store_url or "store",
        valid_until=datetime.now(UTC) + timedelta(seconds=settings.snapshot_ttl_seconds),
    )


@flow(name="fetch-sightings", log_prints=True)
def fetch_all(force: bool = False) -> dict[str, Any]:
    """
    Fetch the sightings table unless the cached snapshot is still fresh.

    Args:
        force: Fetch even if the cached snapshot has not expired.

    Returns:
        Summary dict with ``skipped`` and, after a fetch, ``sightings`` count.
    """
    if not force and store.is_fresh(SIGHTINGS_PATH):
        print("Sightings snapshot is fresh, skipping fetch.")
        return {"skipped": True, "sightings": store.meta(SIGHTINGS_PATH).get("count")}

    print("Fetching sightings from the store...")
    sightings = fetch_sightings()
    print(f"  Got {len(sightings)} sightings")

    path = save_sightings(sightings)
    print(f"Saved snapshot: {path}")
    return {"skipped": False, "sightings": len(sightings)}


if __name__ == "__main__":
    result = fetch_all()
    print(f"Flow complete: {result}")
