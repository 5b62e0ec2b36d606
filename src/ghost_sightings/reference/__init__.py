"""Static constants.

Values that don't change at runtime: batch and page sizes, display
timings, map defaults.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from ghost_sightings.reference.display import CLOCK_REFRESH as CLOCK_REFRESH
from ghost_sightings.reference.display import MAX_MAP_MARKERS as MAX_MAP_MARKERS
from ghost_sightings.reference.display import PAGE_SIZE as PAGE_SIZE
from ghost_sightings.reference.display import PAGE_WINDOW as PAGE_WINDOW
from ghost_sightings.reference.display import SUCCESS_DISPLAY as SUCCESS_DISPLAY
from ghost_sightings.reference.geography import DEFAULT_MAP_CENTER as DEFAULT_MAP_CENTER
from ghost_sightings.reference.geography import DEFAULT_MAP_ZOOM as DEFAULT_MAP_ZOOM
from ghost_sightings.reference.geography import LatLng as LatLng
