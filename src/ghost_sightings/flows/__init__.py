"""
Prefect flows for the sightings pipeline.

Flows:
- fetch: Page the whole sightings table out of the store into live/sightings.json
- build: Render the cached snapshot into a static site under derived/site/

Usage (local):
    python -m ghost_sightings.flows.fetch
    python -m ghost_sightings.flows.build

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'fetch-sightings/default'
"""
