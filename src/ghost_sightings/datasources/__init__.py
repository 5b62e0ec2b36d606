"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # URLs, constants, low-level requests
    ├── rows.py           # Row <-> model transformation (optional)
    └── {feature}.py      # Higher-level operations (one per concept)

Currently there is a single source, ``sightings/``: the PostgREST-style
table (e.g. Supabase) that holds every reported sighting.
"""
