"""FastAPI application: the live page and the sightings endpoint.

Example:
    >>> from ghost_sightings.api.app import create_app
    >>> app = create_app(repository=my_repository)
    >>>
    >>> # Run with: uvicorn ghost_sightings.api.app:app

Routes:
    GET  /            Home page (stats, map, table, form) from the live view
    POST /sightings   Validate and store one sighting
    GET  /sightings   Always 405
    GET  /health      Liveness and working-set size
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from ghost_sightings import __version__
from ghost_sightings.analysis.table import FilterCriteria, build_table_page
from ghost_sightings.config import Settings, get_settings
from ghost_sightings.datasources.sightings import SightingRepository
from ghost_sightings.errors import StoreError, ValidationError
from ghost_sightings.renderers.page import build_page_html
from ghost_sightings.view import HomeView, parse_form

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from ghost_sightings.datasources.sightings.repository import SightingSource

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


def create_app(
    repository: SightingSource | None = None,
    view: HomeView | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        repository: Store access; built from settings at startup when omitted.
        view: Live view; built over ``repository`` at startup when omitted.
        settings: Configuration (defaults to ``get_settings()``).

    Returns:
        Configured FastAPI application.

    Raises:
        ConfigurationError: at startup, if no repository was given and the
            store URL or key is not configured.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s %s", settings.app_name, __version__)
        if app.state.view is None:
            repo = app.state.repository or SightingRepository.from_settings(settings)
            app.state.repository = repo
            app.state.view = HomeView(repo, policy=settings.coordinate_policy)
        elif app.state.repository is None:
            app.state.repository = app.state.view.repository

        loaded = await run_in_threadpool(app.state.view.load)
        logger.info("Loaded %d sightings", loaded)

        yield

        logger.info("Shutting down")
        app.state.view.close()

    app = FastAPI(
        title="Ghost Sightings",
        description="Crowdsourced ghost sighting map and table",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.repository = repository
    app.state.view = view

    # =========================================================================
    # Pages
    # =========================================================================

    @app.get("/", response_class=HTMLResponse)
    def home(
        city: str = "",
        state: str = "",
        apparition_tag: str = Query("", alias="apparitionTag"),
        time_of_day: str = Query("", alias="timeOfDay"),
        page: int = 1,
    ) -> str:
        """Render the home page with the requested filters and page."""
        live: HomeView = app.state.view
        now = datetime.now(UTC)
        live.tick(now)
        criteria = FilterCriteria(
            city=city, state=state, apparition_tag=apparition_tag, time_of_day=time_of_day
        )
        table = build_table_page(live.snapshot(), criteria, page, live.page_size)
        return build_page_html(live, now, table=table)

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health check endpoint."""
        live: HomeView | None = app.state.view
        return {
            "status": "healthy",
            "sightings": len(live.collection) if live is not None else 0,
            "load_error": live.load_error if live is not None else None,
        }

    # =========================================================================
    # Sightings
    # =========================================================================

    @app.post("/sightings")
    async def create_sighting(request: Request) -> JSONResponse:
        """Validate the JSON body and store one sighting through the live view."""
        try:
            body = json.loads(await request.body())
        except json.JSONDecodeError as e:
            return _error(400, "Request body is not valid JSON", str(e))
        if not isinstance(body, dict):
            return _error(400, "Request body must be a JSON object")

        try:
            form = parse_form(body)
        except ValidationError as e:
            return _error(400, str(e), e.details)

        live: HomeView = app.state.view
        try:
            stored = await run_in_threadpool(live.submit, form.to_new_sighting())
        except StoreError as e:
            logger.error("Error adding sighting: %s", e)
            return _error(500, str(e), e.details)

        logger.info("Stored sighting %s (%s)", stored.id, stored.city_key)
        return JSONResponse(stored.to_api(), status_code=201)

    @app.get("/sightings")
    def list_sightings() -> JSONResponse:
        """Listing is not offered; sightings are read through the page."""
        return JSONResponse({"message": "Use POST to add a new sighting"}, status_code=405)

    return app


app = create_app()
