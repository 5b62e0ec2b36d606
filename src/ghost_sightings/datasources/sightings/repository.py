"""Sighting repository: the only code that reads or writes the store.

``fetch_all`` pages through the table in fixed-size batches, strictly one
request at a time, and is all-or-nothing: if any batch fails (or the
caller cancels) nothing is returned.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from ghost_sightings.datasources.sightings.client import FETCH_BATCH_SIZE, StoreClient
from ghost_sightings.datasources.sightings.rows import row_to_sighting, sighting_to_row
from ghost_sightings.errors import FetchCancelledError, StoreError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ghost_sightings.config import Settings
    from ghost_sightings.schemas import NewSighting, Sighting

logger = logging.getLogger(__name__)


class SightingSource(Protocol):
    """What the view and the API need from a repository."""

    def fetch_all(self, cancel: threading.Event | None = None) -> list[Sighting]: ...

    def insert(self, record: NewSighting) -> Sighting: ...


def _to_models(rows: list[dict[str, Any]]) -> list[Sighting]:
    try:
        return [row_to_sighting(row) for row in rows]
    except (KeyError, PydanticValidationError) as e:
        msg = f"Store returned a malformed sighting row: {e}"
        raise StoreError(msg, details=str(e)) from e


class SightingRepository:
    """Read/write sightings through a ``StoreClient``."""

    def __init__(self, client: StoreClient, batch_size: int = FETCH_BATCH_SIZE) -> None:
        self.client = client
        self.batch_size = batch_size

    @classmethod
    def from_settings(cls, settings: Settings, *, service: bool = False) -> SightingRepository:
        """Build a repository from configuration.

        Raises:
            ConfigurationError: if the store URL or key is missing.
        """
        url, key = settings.require_store(service=service)
        return cls(StoreClient(url, key, table=settings.store_table))

    def fetch_all(self, cancel: threading.Event | None = None) -> list[Sighting]:
        """
        Fetch every sighting, newest first.

        Issues successive range requests of ``batch_size`` rows until a batch
        comes back short or empty.  ``cancel`` is checked before each request.

        Raises:
            StoreError: if any batch fails; earlier batches are discarded.
            FetchCancelledError: if ``cancel`` was set mid-fetch.
        """
        sightings = self._fetch_pages(cancel=cancel)
        logger.info("Fetched %d total sightings from the store", len(sightings))
        return sightings

    def insert(self, record: NewSighting) -> Sighting:
        """Insert one sighting and return it with its store-assigned id."""
        try:
            created = self.client.insert([sighting_to_row(record)])
        except StoreError:
            logger.exception("Error adding sighting")
            raise
        if len(created) != 1:
            msg = f"Store returned {len(created)} rows for a single insert"
            raise StoreError(msg, details=created)
        return _to_models(created)[0]

    def insert_many(self, records: Sequence[NewSighting]) -> list[Sighting]:
        """Insert a batch of sightings in one request."""
        created = self.client.insert([sighting_to_row(r) for r in records])
        return _to_models(created)

    def fetch_by_state(self, state: str) -> list[Sighting]:
        """Sightings whose state equals ``state`` exactly, newest first."""
        return self._fetch_pages(filters={"state": state})

    def fetch_by_city(self, city: str, state: str) -> list[Sighting]:
        """Sightings for one exact ``city, state`` pair, newest first."""
        return self._fetch_pages(filters={"city": city, "state": state})

    def count(self) -> int:
        """Exact number of stored sightings."""
        return self.client.count()

    def _fetch_pages(
        self,
        filters: dict[str, str] | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Sighting]:
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            if cancel is not None and cancel.is_set():
                logger.info("Sighting fetch cancelled after %d rows", len(rows))
                msg = "Sighting fetch cancelled"
                raise FetchCancelledError(msg)
            try:
                batch = self.client.select(offset=offset, limit=self.batch_size, filters=filters)
            except StoreError:
                logger.exception("Error fetching sightings at offset %d", offset)
                raise
            rows.extend(batch)
            if len(batch) < self.batch_size:
                break
            offset += self.batch_size
        return _to_models(rows)
