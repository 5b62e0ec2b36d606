"""Map defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LatLng:
    """A latitude/longitude pair."""

    lat: float
    lng: float


# Geographic centre of the contiguous US, used when there is nothing to average.
DEFAULT_MAP_CENTER = LatLng(lat=39.8283, lng=-98.5795)
DEFAULT_MAP_ZOOM: int = 4
