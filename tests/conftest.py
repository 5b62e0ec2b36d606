"""Shared fixtures: sighting factories and fake repositories."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from ghost_sightings.errors import FetchCancelledError, StoreError
from ghost_sightings.schemas import NewSighting, Sighting

SightingFactory = Callable[..., Sighting]


@pytest.fixture
def make_sighting() -> SightingFactory:
    """Build a ``Sighting`` with sensible defaults; override any field by name."""
    ids = itertools.count(1)

    def _make(**overrides: Any) -> Sighting:
        fields: dict[str, Any] = {
            "id": str(next(ids)),
            "date": date(2024, 10, 1),
            "latitude": 30.2672,
            "longitude": -97.7431,
            "city": "Austin",
            "state": "TX",
            "notes": "Cold spot near the stairs",
            "time_of_day": "Night",
            "apparition_tag": "Shadow Figure",
            "image_link": None,
        }
        fields.update(overrides)
        return Sighting(**fields)

    return _make


class FakeRepository:
    """In-memory stand-in for ``SightingRepository``."""

    def __init__(self, sightings: list[Sighting] | None = None) -> None:
        self.sightings = list(sightings or [])
        self.inserted: list[NewSighting] = []
        self.fetch_error: StoreError | None = None
        self.insert_error: StoreError | None = None
        self.on_fetch: Callable[[], None] | None = None
        self._ids = itertools.count(1000)

    def fetch_all(self, cancel: threading.Event | None = None) -> list[Sighting]:
        if self.on_fetch is not None:
            self.on_fetch()
        if cancel is not None and cancel.is_set():
            msg = "Sighting fetch cancelled"
            raise FetchCancelledError(msg)
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.sightings)

    def insert(self, record: NewSighting) -> Sighting:
        if self.insert_error is not None:
            raise self.insert_error
        self.inserted.append(record)
        stored = Sighting(id=str(next(self._ids)), **record.model_dump())
        self.sightings.append(stored)
        return stored


@pytest.fixture
def fake_repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def form_payload() -> dict[str, Any]:
    """A complete, valid submission as the browser sends it (camelCase)."""
    return {
        "date": "2024-10-31",
        "time": "23:15",
        "latitude": 30.2672,
        "longitude": -97.7431,
        "city": "Austin",
        "state": "TX",
        "notes": "Figure in the window",
        "timeOfDay": "Night",
        "apparitionTag": "Shadow Figure",
        "imageLink": "",
    }
