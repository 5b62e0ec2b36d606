"""Sightings table in the backing store.

Public API:
  - client: StoreClient (low-level PostgREST requests), FETCH_BATCH_SIZE
  - rows: row_to_sighting, sighting_to_row
  - repository: SightingRepository, SightingSource
  - csv_import: parse_csv, import_sightings, ImportReport
"""

from ghost_sightings.datasources.sightings.client import FETCH_BATCH_SIZE, StoreClient
from ghost_sightings.datasources.sightings.csv_import import (
    BatchResult,
    ImportReport,
    import_sightings,
    parse_csv,
    parse_rows,
)
from ghost_sightings.datasources.sightings.repository import SightingRepository, SightingSource
from ghost_sightings.datasources.sightings.rows import row_to_sighting, sighting_to_row

__all__ = [
    "FETCH_BATCH_SIZE",
    "BatchResult",
    "ImportReport",
    "SightingRepository",
    "SightingSource",
    "StoreClient",
    "import_sightings",
    "parse_csv",
    "parse_rows",
    "row_to_sighting",
    "sighting_to_row",
]
