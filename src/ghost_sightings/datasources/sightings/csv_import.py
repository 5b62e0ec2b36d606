"""Bulk import of sightings from a delimited file.

The whole file is parsed before anything is written: a single malformed
row raises ``ParseError`` and nothing is inserted.  Inserts then go out in
batches with a short pause between them.  A failed batch is recorded and
the import moves on; batches that succeeded are not rolled back.

Expected columns::

    Date of Sighting, Latitude of Sighting, Longitude of Sighting,
    Nearest Approximate City, US State, Notes about the sighting,
    Time of Day, Tag of Apparition, Image Link
"""

from __future__ import annotations

import csv
import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from ghost_sightings.errors import ParseError, StoreError
from ghost_sightings.schemas import NewSighting

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from ghost_sightings.datasources.sightings.repository import SightingRepository

logger = logging.getLogger(__name__)

IMPORT_BATCH_SIZE = 1000
IMPORT_BATCH_DELAY_SECONDS = 0.1

# CSV header -> model field
COLUMNS: dict[str, str] = {
    "Date of Sighting": "date",
    "Latitude of Sighting": "latitude",
    "Longitude of Sighting": "longitude",
    "Nearest Approximate City": "city",
    "US State": "state",
    "Notes about the sighting": "notes",
    "Time of Day": "time_of_day",
    "Tag of Apparition": "apparition_tag",
    "Image Link": "image_link",
}

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


# =============================================================================
# Data Model
# =============================================================================


@dataclass
class BatchResult:
    """Outcome of inserting one batch."""

    number: int
    size: int
    inserted: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ImportReport:
    """Summary of a bulk import run."""

    total: int
    count_before: int
    count_after: int | None = None
    batches: list[BatchResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(b.inserted for b in self.batches)

    @property
    def failed(self) -> int:
        return sum(b.size for b in self.batches if not b.ok)


# =============================================================================
# Parsing
# =============================================================================


def _parse_date(value: str, line: int) -> date:
    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    msg = f"Line {line}: unparseable date {value!r}"
    raise ParseError(msg, line=line)


def _parse_coordinate(value: str, column: str, line: int) -> float:
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        msg = f"Line {line}: {column} is not a number: {value!r}"
        raise ParseError(msg, line=line)
    return number


def parse_rows(lines: Iterable[str]) -> list[NewSighting]:
    """Parse CSV text lines (header first) into sightings.

    Blank lines are skipped.

    Raises:
        ParseError: on a missing column or a malformed row.
    """
    reader = csv.DictReader(lines)
    missing = [c for c in COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        msg = f"Missing column(s): {', '.join(missing)}"
        raise ParseError(msg, line=1)

    sightings: list[NewSighting] = []
    for row in reader:
        line = reader.line_num
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        if None in row:
            msg = f"Line {line}: more fields than columns"
            raise ParseError(msg, line=line)
        values = {COLUMNS[col]: (row[col] or "").strip() for col in COLUMNS}
        try:
            sightings.append(
                NewSighting(
                    date=_parse_date(values["date"], line),
                    latitude=_parse_coordinate(values["latitude"], "Latitude", line),
                    longitude=_parse_coordinate(values["longitude"], "Longitude", line),
                    city=values["city"],
                    state=values["state"],
                    notes=values["notes"],
                    time_of_day=values["time_of_day"],
                    apparition_tag=values["apparition_tag"],
                    image_link=values["image_link"] or None,
                )
            )
        except PydanticValidationError as e:
            msg = f"Line {line}: {e}"
            raise ParseError(msg, line=line) from e
    return sightings


def parse_csv(path: Path) -> list[NewSighting]:
    """Read and parse a sightings CSV file."""
    with path.open(newline="", encoding="utf-8-sig") as f:
        return parse_rows(f)


# =============================================================================
# Import
# =============================================================================


def import_sightings(
    repository: SightingRepository,
    records: Sequence[NewSighting],
    *,
    batch_size: int = IMPORT_BATCH_SIZE,
    delay: float = IMPORT_BATCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    on_batch: Callable[[BatchResult, int], None] | None = None,
) -> ImportReport:
    """
    Insert parsed records in batches.

    Args:
        repository: Target repository (service-key credentials for bulk writes).
        records: Parsed sightings.
        batch_size: Rows per insert request.
        delay: Pause between batches, in seconds.
        sleep: Sleep function (injected for tests).
        on_batch: Optional progress callback ``(result, total_batches)``.

    Returns:
        ImportReport with per-batch outcomes and before/after counts.

    Raises:
        StoreError: if the table cannot be reached before the first batch.
    """
    count_before = repository.count()
    report = ImportReport(total=len(records), count_before=count_before)
    total_batches = math.ceil(len(records) / batch_size) if records else 0

    for start in range(0, len(records), batch_size):
        batch = records[start : start + batch_size]
        result = BatchResult(number=start // batch_size + 1, size=len(batch))
        try:
            created = repository.insert_many(batch)
            result.inserted = len(created) or len(batch)
        except StoreError as e:
            logger.error("Error inserting batch %d: %s", result.number, e)
            result.error = str(e)
        report.batches.append(result)
        if on_batch is not None:
            on_batch(result, total_batches)

        if start + batch_size < len(records):
            sleep(delay)

    try:
        report.count_after = repository.count()
    except StoreError as e:
        logger.warning("Could not read final record count: %s", e)
    return report
