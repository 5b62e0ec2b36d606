"""Local data store with freshness-aware caching.

Manages read/write of JSON data files organized into tiers:
  - live/: Ephemeral snapshot of the sightings table (short TTL)
  - derived/: Computed outputs, always recomputed (the static HTML site)

Every JSON file is wrapped in a metadata envelope with ``valid_until`` so the
fetch flow can skip the store round-trip while the snapshot is still fresh.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from ghost_sightings.errors import StoreError
from ghost_sightings.schemas import Sighting

if TYPE_CHECKING:
    from collections.abc import Sequence

SIGHTINGS_PATH = Path("live/sightings.json")
SITE_PATH = Path("derived/site/index.html")


class DataStore:
    """Manages read/write of cached data files with TTL."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.live = base_dir / "live"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any | None:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``live/sightings.json``).
            data: Payload to store under the ``data`` key.
            source: Data source identifier (e.g. the store URL).
            valid_until: Expiry timestamp. None means derived/no-cache.
            **params: Extra metadata fields (table name, row count, etc.).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        if params:
            meta.update(params)

        with full.open("w") as f:
            json.dump({"meta": meta, "data": data}, f, indent=2)
        return full

    def write_text(self, path: Path, text: str) -> Path:
        """Write a derived text file (no envelope, never fresh)."""
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(text, encoding="utf-8")
        return full

    def meta(self, path: Path) -> dict[str, Any]:
        """Metadata of an enveloped JSON file ({} when missing)."""
        envelope = self.read_raw(path)
        if envelope is None:
            return {}
        meta: dict[str, Any] = envelope.get("meta", {})
        return meta

    def is_fresh(self, path: Path, now: datetime | None = None) -> bool:
        """Check if a file exists and hasn't expired.

        Returns False if the file is missing, has no ``valid_until``, or
        the expiry time has passed.
        """
        valid_until = self.meta(path).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return (now or datetime.now(UTC)) < expiry

    # -- sightings snapshot --------------------------------------------------

    def save_sightings(
        self,
        sightings: Sequence[Sighting],
        source: str,
        valid_until: datetime | None = None,
    ) -> Path:
        """Cache a full sightings snapshot."""
        return self.write(
            SIGHTINGS_PATH,
            [s.model_dump(mode="json") for s in sightings],
            source=source,
            valid_until=valid_until,
            count=len(sightings),
        )

    def load_sightings(self) -> list[Sighting] | None:
        """Load the cached snapshot, or None if nothing has been fetched yet.

        Raises:
            StoreError: if the cached file holds malformed records.
        """
        rows = self.read(SIGHTINGS_PATH)
        if rows is None:
            return None
        try:
            return [Sighting.model_validate(row) for row in rows]
        except PydanticValidationError as e:
            msg = f"Cached sightings snapshot is malformed: {self._resolve(SIGHTINGS_PATH)}"
            raise StoreError(msg, details=str(e)) from e

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
