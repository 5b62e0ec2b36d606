"""
Domain models for ghost sightings.

Pydantic models for records read from the backing store, records about to
be written, and submissions coming from the form or the HTTP API.
Field names are snake_case in Python; the API and templates use the
camelCase aliases (``timeOfDay``, ``apparitionTag``, ``imageLink``).
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Enumerations
# =============================================================================


class TimeOfDay(StrEnum):
    """Allowed time-of-day labels on the submission form."""

    DAWN = "Dawn"
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"
    MIDNIGHT = "Midnight"


class CoordinatePolicy(StrEnum):
    """What to do at load time with records that carry a zero coordinate.

    The store holds imported rows whose unparseable coordinates became 0,
    but 0 is also a legitimate equator / prime-meridian value.
    """

    DROP_EITHER_ZERO = "drop-either-zero"
    DROP_BOTH_ZERO = "drop-both-zero"
    RETAIN = "retain"


class SyncStatus(StrEnum):
    """Persistence state of a record in the in-memory working set."""

    PENDING = "pending"
    CONFIRMED = "confirmed"


# =============================================================================
# Sightings
# =============================================================================


class NewSighting(BaseModel):
    """A sighting that has not been assigned an id by the store yet."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    date: date
    latitude: float = Field(..., allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)
    city: str
    state: str
    notes: str
    time_of_day: str = Field(..., alias="timeOfDay")
    apparition_tag: str = Field(..., alias="apparitionTag")
    image_link: str | None = Field(default=None, alias="imageLink")

    @field_validator("image_link", mode="before")
    @classmethod
    def _blank_link_is_absent(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @property
    def city_key(self) -> str:
        """``"{city}, {state}"`` label used for per-city ranking."""
        return f"{self.city}, {self.state}"

    def to_api(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, ``imageLink`` omitted when absent."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Sighting(NewSighting):
    """A single reported ghost/apparition event, as stored."""

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        # Stores hand back integer or UUID keys; the id is opaque here.
        return str(v) if v is not None else v


class SightingFormData(BaseModel):
    """Validated submission from the "post a sighting" form.

    ``time`` is collected by the form but only the calendar ``date`` is
    persisted: ``to_new_sighting()`` drops it.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    date: date
    time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}(:\d{2})?$")
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    notes: str = Field(..., min_length=1)
    time_of_day: TimeOfDay = Field(..., alias="timeOfDay")
    apparition_tag: str = Field(..., alias="apparitionTag", min_length=1)
    image_link: str | None = Field(default=None, alias="imageLink")

    @field_validator("time", "image_link", mode="before")
    @classmethod
    def _blank_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_new_sighting(self) -> NewSighting:
        """Convert to the persisted shape (``time`` is not carried over)."""
        return NewSighting(
            date=self.date,
            latitude=self.latitude,
            longitude=self.longitude,
            city=self.city,
            state=self.state,
            notes=self.notes,
            time_of_day=self.time_of_day.value,
            apparition_tag=self.apparition_tag,
            image_link=self.image_link,
        )
