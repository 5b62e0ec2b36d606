"""HTTP API: FastAPI app serving the live page and the sightings endpoint.

Run with::

    ghost-sightings api
    # or
    uvicorn ghost_sightings.api.app:app
"""

from ghost_sightings.api.app import create_app

__all__ = ["create_app"]
