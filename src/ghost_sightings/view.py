"""View composition: the live working set and the events that change it.

``HomeView`` owns the authoritative in-memory collection of sightings
for one rendered view.  Stats and the table page are pure functions of
``collection.snapshot()`` plus the current criteria/page, re-derived on
every call; nothing derived is cached across mutations.

Submissions are optimistic but reconciled (``HomeView.submit``): the
record is appended right away tagged ``pending`` under a local id, then
written through the repository.  On success the pending entry is replaced
in place by the stored record (``confirmed``, store id).  On failure the
entry is removed again.  Concurrent submissions are appended in the order
they arrive and persisted independently.

The live server calls ``submit`` directly for every ``POST /sightings``;
the browser dialog keeps its own state in the page script.  The
``SubmissionForm`` state machine and the ``on_*`` events model that dialog
for a single user driving the view (the renderer draws it from
``view.form``), and route their submissions through the same ``submit``.

Form states::

    CLOSED --open / map click--> OPEN --submit--> SUBMITTING
    SUBMITTING --stored--> SUBMITTED --after SUCCESS_DISPLAY--> CLOSED
    SUBMITTING --store error--> OPEN (with error)
    SUBMITTED --open / map click--> OPEN
    SUBMITTED --submit--> SUBMITTING
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from ghost_sightings.analysis.coordinates import apply_coordinate_policy
from ghost_sightings.analysis.stats import compute_stats
from ghost_sightings.analysis.table import (
    FilterCriteria,
    build_table_page,
    clamp_page,
    filter_sightings,
    total_pages,
)
from ghost_sightings.errors import (
    FetchCancelledError,
    StoreError,
    SubmissionInProgressError,
    ValidationError,
)
from ghost_sightings.reference.display import CLOCK_REFRESH, PAGE_SIZE, SUCCESS_DISPLAY
from ghost_sightings.schemas import CoordinatePolicy, Sighting, SightingFormData, SyncStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ghost_sightings.analysis.stats import Stats
    from ghost_sightings.analysis.table import TablePage
    from ghost_sightings.datasources.sightings.repository import SightingSource
    from ghost_sightings.schemas import NewSighting

logger = logging.getLogger(__name__)


# =============================================================================
# Working set
# =============================================================================


@dataclass(frozen=True)
class TrackedSighting:
    """A sighting plus its persistence state.

    ``local_id`` is set while the record is pending; confirmed records are
    identified by ``sighting.id`` from the store.
    """

    sighting: Sighting
    status: SyncStatus = SyncStatus.CONFIRMED
    local_id: str | None = None


class SightingCollection:
    """Ordered, append-only collection of sightings.

    Mutations hold a lock so submissions persisted from several threads
    reconcile against the entries they appended.
    """

    def __init__(self, sightings: Iterable[Sighting] = ()) -> None:
        self._entries: list[TrackedSighting] = [TrackedSighting(s) for s in sightings]
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def append(
        self,
        sighting: Sighting,
        status: SyncStatus = SyncStatus.CONFIRMED,
        local_id: str | None = None,
    ) -> TrackedSighting:
        entry = TrackedSighting(sighting, status, local_id)
        with self._lock:
            self._entries.append(entry)
        return entry

    def snapshot(self) -> list[Sighting]:
        """All sightings, pending ones included, in insertion order."""
        with self._lock:
            return [e.sighting for e in self._entries]

    def entries(self) -> list[TrackedSighting]:
        with self._lock:
            return list(self._entries)

    def pending(self) -> list[TrackedSighting]:
        return [e for e in self.entries() if e.status is SyncStatus.PENDING]

    def confirm(self, local_id: str, stored: Sighting) -> None:
        """Replace the pending entry ``local_id`` with the stored record, in place."""
        with self._lock:
            index = self._index_of(local_id)
            self._entries[index] = TrackedSighting(stored, SyncStatus.CONFIRMED)

    def discard(self, local_id: str) -> None:
        """Roll back the pending entry ``local_id``."""
        with self._lock:
            del self._entries[self._index_of(local_id)]

    def _index_of(self, local_id: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry.status is SyncStatus.PENDING and entry.local_id == local_id:
                return i
        msg = f"No pending sighting with local id {local_id!r}"
        raise KeyError(msg)


# =============================================================================
# Submission form
# =============================================================================


class FormState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class SubmissionForm:
    """State of the "post a sighting" dialog."""

    def __init__(self) -> None:
        self.state = FormState.CLOSED
        self.latitude: float | None = None
        self.longitude: float | None = None
        self.error: str | None = None
        self.acknowledged_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.state is not FormState.CLOSED

    @property
    def show_success(self) -> bool:
        return self.state is FormState.SUBMITTED

    def open(self, latitude: float | None = None, longitude: float | None = None) -> None:
        """Open the form, optionally pre-filled with a coordinate.

        Opening an open form only updates the coordinate; opening it while
        the success banner shows starts a fresh entry.  Ignored while a
        submission is in flight.
        """
        if self.state is FormState.SUBMITTING:
            return
        if self.state is FormState.SUBMITTED:
            self.acknowledged_at = None
        self.state = FormState.OPEN
        if latitude is not None and longitude is not None:
            self.latitude = latitude
            self.longitude = longitude

    def begin_submit(self) -> None:
        """Start a submission.

        Raises:
            SubmissionInProgressError: if the previous insert has not
                been answered yet.
        """
        if self.state is FormState.SUBMITTING:
            msg = "A submission is already in progress"
            raise SubmissionInProgressError(msg)
        self.state = FormState.SUBMITTING
        self.error = None
        self.acknowledged_at = None

    def succeed(self, now: datetime) -> None:
        self.state = FormState.SUBMITTED
        self.acknowledged_at = now

    def fail(self, message: str) -> None:
        self.state = FormState.OPEN
        self.error = message
        self.acknowledged_at = None

    def tick(self, now: datetime) -> None:
        """Close the form once the success banner has been shown long enough."""
        if self.state is FormState.SUBMITTED and self.acknowledged_at is not None:
            if now - self.acknowledged_at >= SUCCESS_DISPLAY:
                self.close()

    def close(self) -> None:
        self.state = FormState.CLOSED
        self.latitude = None
        self.longitude = None
        self.error = None
        self.acknowledged_at = None


# =============================================================================
# Home view
# =============================================================================


REQUIRED_FIELDS = (
    "date",
    "latitude",
    "longitude",
    "city",
    "state",
    "notes",
    "timeOfDay",
    "apparitionTag",
)
_PYTHON_NAMES = {"timeOfDay": "time_of_day", "apparitionTag": "apparition_tag"}


def _missing_field(data: Mapping[str, Any]) -> str | None:
    """First required field that is absent, null or blank."""
    for name in REQUIRED_FIELDS:
        value = data.get(name, data.get(_PYTHON_NAMES.get(name, name)))
        if value is None or (isinstance(value, str) and not value.strip()):
            return name
    return None


def _validation_error(e: PydanticValidationError) -> ValidationError:
    details = json.loads(e.json(include_url=False))
    first = details[0]
    field = str(first["loc"][0]) if first.get("loc") else None
    if first.get("type") == "missing":
        return ValidationError(f"Missing required field: {field}", field=field, details=details)
    return ValidationError(f"Invalid field: {field}", field=field, details=details)


def parse_form(data: SightingFormData | Mapping[str, Any]) -> SightingFormData:
    """Validate raw form input.

    Raises:
        ValidationError: naming the first missing or malformed field.
    """
    if isinstance(data, SightingFormData):
        return data
    missing = _missing_field(data)
    if missing is not None:
        msg = f"Missing required field: {missing}"
        raise ValidationError(msg, field=missing)
    try:
        return SightingFormData.model_validate(dict(data))
    except PydanticValidationError as e:
        raise _validation_error(e) from e


class HomeView:
    """Stats cards, map and table over one live working set."""

    def __init__(
        self,
        repository: SightingSource,
        *,
        policy: CoordinatePolicy = CoordinatePolicy.DROP_EITHER_ZERO,
        now: datetime | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.repository = repository
        self.policy = policy
        self.page_size = page_size
        self.collection = SightingCollection()
        self.form = SubmissionForm()
        self.criteria = FilterCriteria()
        self.page = 1
        self.now = now or datetime.now(UTC)
        self.load_error: str | None = None
        self._cancel = threading.Event()
        self._local_ids = itertools.count(1)

    # -- lifecycle -----------------------------------------------------------

    def load(self) -> int:
        """Fill the working set from the repository.

        A store failure leaves an empty, working view and records the
        message in ``load_error``.

        Returns:
            Number of sightings in the working set.

        Raises:
            FetchCancelledError: if ``close()`` was called during the fetch.
        """
        try:
            fetched = self.repository.fetch_all(cancel=self._cancel)
        except FetchCancelledError:
            raise
        except StoreError as e:
            logger.error("Error fetching sightings: %s", e)
            self.load_error = str(e)
            fetched = []
        else:
            self.load_error = None

        working = apply_coordinate_policy(fetched, self.policy)
        dropped = len(fetched) - len(working)
        if dropped:
            logger.info("Coordinate policy %s dropped %d sightings", self.policy, dropped)
        self.collection = SightingCollection(working)
        self.page = 1
        return len(self.collection)

    def close(self) -> None:
        """Tear down: cancel any in-flight fetch."""
        self._cancel.set()

    @property
    def closed(self) -> bool:
        return self._cancel.is_set()

    def tick(self, now: datetime) -> bool:
        """Advance the view clock.

        Closes the form after the success banner and, once per
        ``CLOCK_REFRESH``, moves the reference time used for "days ago".

        Returns:
            True if the stats clock was refreshed.
        """
        self.form.tick(now)
        if now - self.now >= CLOCK_REFRESH:
            self.now = now
            return True
        return False

    # -- derived values ------------------------------------------------------

    def snapshot(self) -> list[Sighting]:
        return self.collection.snapshot()

    def stats(self) -> Stats:
        return compute_stats(self.snapshot(), self.now)

    def table(self) -> TablePage:
        return build_table_page(self.snapshot(), self.criteria, self.page, self.page_size)

    # -- table navigation ----------------------------------------------------

    def set_criteria(self, **changes: str | None) -> None:
        """Change filter criteria; always returns to page 1."""
        self.criteria = self.criteria.update(**changes)
        self.page = 1

    def go_to_page(self, page: int) -> int:
        """Navigate to ``page``, clamped to the filtered page range."""
        filtered = filter_sightings(self.snapshot(), self.criteria)
        self.page = clamp_page(page, total_pages(len(filtered), self.page_size))
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    # -- user events ---------------------------------------------------------

    def on_add_clicked(self) -> None:
        self.form.open()

    def on_map_coordinate_chosen(self, lat: float, lng: float) -> None:
        self.form.open(lat, lng)

    def on_form_submitted(
        self,
        form_data: SightingFormData | Mapping[str, Any],
        now: datetime | None = None,
    ) -> Sighting:
        """Validate the dialog's input and submit it.

        A new submission may start while the previous success banner is
        still showing.

        Args:
            form_data: Validated form model or raw field mapping.
            now: Submission time (local id and success banner timing).

        Returns:
            The stored sighting with its store-assigned id.

        Raises:
            ValidationError: if the form data is incomplete or malformed.
            SubmissionInProgressError: if the previous insert is still in flight.
            StoreError: if the store rejected the insert (already rolled back).
        """
        try:
            data = parse_form(form_data)
        except ValidationError as e:
            self.form.error = str(e)
            raise
        now = now or datetime.now(UTC)
        self.form.begin_submit()

        try:
            stored = self.submit(data.to_new_sighting(), now)
        except StoreError as e:
            self.form.fail(str(e))
            raise

        self.form.succeed(now)
        return stored

    def submit(self, record: NewSighting, now: datetime | None = None) -> Sighting:
        """Append ``record`` as pending, persist it and reconcile.

        Safe to call from several threads at once; each call confirms or
        rolls back only its own entry.

        Raises:
            StoreError: if the store rejected the insert (already rolled back).
        """
        now = now or datetime.now(UTC)
        collection = self.collection
        local_id = f"sighting-{int(now.timestamp() * 1000)}-{next(self._local_ids)}"
        placeholder = Sighting(id=local_id, **record.model_dump())
        collection.append(placeholder, SyncStatus.PENDING, local_id)

        try:
            stored = self.repository.insert(record)
        except StoreError as e:
            logger.error("Error adding sighting, rolling back %s: %s", local_id, e)
            collection.discard(local_id)
            raise

        collection.confirm(local_id, stored)
        return stored
