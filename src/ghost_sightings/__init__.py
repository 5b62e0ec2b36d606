"""Ghost Sightings - crowdsourced ghost sighting map, table and submissions.

Architecture::

    datasources/   Backing store access (PostgREST client, repository, CSV import)
    store.py       Local snapshot cache with TTL (live -> derived)
    analysis/      Pure logic over the working set (stats, filters, pagination)
    view.py        Live working set, submission form, optimistic inserts
    renderers/     Pure data -> HTML (stats cards, map, table, form, page)
    flows/         Prefect orchestration (fetch checks freshness, build renders site)
    api/           FastAPI app (live page, POST /sightings)
    services/      Shared utilities (HTTP client with retry)

Data flow: store -> repository -> view (working set) -> analysis -> renderers

Extension points, see each package's docstring:
  - New analysis:      analysis/__init__.py
  - New UI module:     renderers/__init__.py
"""

__version__ = "0.1.0"

from ghost_sightings.config import Settings  # noqa: E402
from ghost_sightings.schemas import NewSighting, Sighting, SightingFormData  # noqa: E402

__all__ = ["NewSighting", "Settings", "Sighting", "SightingFormData", "__version__"]
