"""Load-time handling of records with a zero coordinate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ghost_sightings.schemas import CoordinatePolicy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ghost_sightings.schemas import Sighting


def has_zero_coordinate(sighting: Sighting, policy: CoordinatePolicy) -> bool:
    """True if ``policy`` treats this record as having no location."""
    if policy is CoordinatePolicy.DROP_EITHER_ZERO:
        return sighting.latitude == 0 or sighting.longitude == 0
    if policy is CoordinatePolicy.DROP_BOTH_ZERO:
        return sighting.latitude == 0 and sighting.longitude == 0
    return False


def apply_coordinate_policy(
    sightings: Iterable[Sighting],
    policy: CoordinatePolicy = CoordinatePolicy.DROP_EITHER_ZERO,
) -> list[Sighting]:
    """Return the working set: ``sightings`` minus those the policy drops.

    Order is preserved.
    """
    return [s for s in sightings if not has_zero_coordinate(s, policy)]
