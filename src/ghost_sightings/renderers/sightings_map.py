"""Leaflet map renderer for sightings.

Generates an interactive map whose markers carry structured data for
popups (image, date, time of day, type, location, notes).  Clicking the
map opens the submission form pre-filled with the clicked coordinate.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any

from ghost_sightings.reference.display import MAX_MAP_MARKERS
from ghost_sightings.reference.geography import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM, LatLng
from ghost_sightings.renderers import render_template

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ghost_sightings.schemas import Sighting


def sample_markers(
    sightings: Sequence[Sighting], limit: int = MAX_MAP_MARKERS
) -> list[Sighting]:
    """Every Nth sighting so that at most ``limit`` markers are drawn."""
    if len(sightings) <= limit:
        return list(sightings)
    step = math.ceil(len(sightings) / limit)
    return list(sightings[::step])


def map_center(sightings: Sequence[Sighting]) -> LatLng:
    """Mean coordinate of all sightings, or the US centre when there are none."""
    if not sightings:
        return DEFAULT_MAP_CENTER
    return LatLng(
        lat=sum(s.latitude for s in sightings) / len(sightings),
        lng=sum(s.longitude for s in sightings) / len(sightings),
    )


def _marker(sighting: Sighting) -> dict[str, Any]:
    return {
        "lat": sighting.latitude,
        "lng": sighting.longitude,
        "date": sighting.date.isoformat(),
        "timeOfDay": sighting.time_of_day,
        "type": sighting.apparition_tag,
        "location": sighting.city_key,
        "notes": sighting.notes,
        "image": sighting.image_link or "",
    }


def _script_json(data: Any) -> str:
    """JSON that is safe to inline inside a <script> element."""
    return json.dumps(data).replace("</", "<\\/")


def build_sightings_map_html(
    sightings: Sequence[Sighting], *, interactive: bool = True
) -> tuple[str, str]:
    """Build a Leaflet map of sightings.

    With ``interactive=False`` (static site) there is no "Add Sighting"
    button and map clicks do nothing.

    Returns a (map_div_html, map_script_js) tuple.
    """
    shown = sample_markers(sightings)
    center = map_center(sightings)

    map_div = render_template(
        "sightings_map.html.j2",
        shown_count=len(shown),
        total_count=len(sightings),
        interactive=interactive,
    )
    map_script = render_template(
        "sightings_map_script.html.j2",
        markers_json=_script_json([_marker(s) for s in shown]),
        center_lat=center.lat,
        center_lng=center.lng,
        zoom=DEFAULT_MAP_ZOOM,
    )
    return (map_div, map_script)
