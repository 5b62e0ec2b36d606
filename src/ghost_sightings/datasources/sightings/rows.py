"""Row <-> model transformation.

The store's columns are lower-case (``timeofday``, ``apparitiontag``,
``imagelink``); the model uses snake_case attributes with camelCase API
aliases.  The mapping is a pure field rename, except that an empty or
null ``imagelink`` means "no image".
"""

from __future__ import annotations

from typing import Any

from ghost_sightings.schemas import NewSighting, Sighting


def row_to_sighting(row: dict[str, Any]) -> Sighting:
    """Transform a store row into a ``Sighting``.

    Bookkeeping columns such as ``created_at`` are ignored.
    """
    return Sighting(
        id=row["id"],
        date=row["date"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        city=row["city"],
        state=row["state"],
        notes=row["notes"],
        time_of_day=row["timeofday"],
        apparition_tag=row["apparitiontag"],
        image_link=row.get("imagelink") or None,
    )


def sighting_to_row(sighting: NewSighting) -> dict[str, Any]:
    """Transform a sighting into a store row (no ``id``; the store assigns it)."""
    return {
        "date": sighting.date.isoformat(),
        "latitude": sighting.latitude,
        "longitude": sighting.longitude,
        "city": sighting.city,
        "state": sighting.state,
        "notes": sighting.notes,
        "timeofday": sighting.time_of_day,
        "apparitiontag": sighting.apparition_tag,
        "imagelink": sighting.image_link or None,
    }
