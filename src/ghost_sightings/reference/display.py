"""Table, map and form display constants."""

from datetime import timedelta

# Sightings table: rows per page and number of page buttons in the strip.
PAGE_SIZE: int = 50
PAGE_WINDOW: int = 5

# Map: markers beyond this are sampled (every Nth record).
MAX_MAP_MARKERS: int = 500

# How long the "Successfully Submitted" banner stays before the form closes.
SUCCESS_DISPLAY: timedelta = timedelta(seconds=2)

# "Days ago" is recomputed at this interval; data is not refetched.
CLOCK_REFRESH: timedelta = timedelta(hours=1)
