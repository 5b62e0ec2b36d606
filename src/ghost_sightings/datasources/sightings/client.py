"""
Low-level HTTP client for the sightings table.

Speaks the PostgREST dialect (Supabase's REST API): rows are selected with
``select``/``order``/``offset``/``limit`` query parameters, equality
filters are ``column=eq.value``, inserts are POSTed as a JSON array with
``Prefer: return=representation`` and exact counts come back in the
``Content-Range`` header.

Every transport or HTTP failure is raised as ``StoreError``.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from ghost_sightings.errors import StoreError
from ghost_sightings.services.http import create_session

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
REST_PATH = "rest/v1"
FETCH_BATCH_SIZE = 1000  # rows per range request (store's default row cap)
# Unique tiebreak keeps offset paging stable across rows that share a date.
DEFAULT_ORDER = "date.desc,id.asc"


def _error_details(resp: requests.Response | None) -> Any:
    """Best-effort structured error body from a failed response."""
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


class StoreClient:
    """Thin wrapper around one table of the backing store."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "sightings",
        session: requests.Session | None = None,
    ) -> None:
        self.table = table
        self.endpoint = f"{url.rstrip('/')}/{REST_PATH}/{table}"
        self.session = session or create_session(
            headers={"apikey": key, "Authorization": f"Bearer {key}"}
        )

    def _request(self, method: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.session.request(method, self.endpoint, **kwargs)
            resp.raise_for_status()
        except requests.HTTPError as e:
            details = _error_details(e.response)
            msg = f"{method} {self.table} failed with status {e.response.status_code}"
            raise StoreError(msg, details=details) from e
        except requests.RequestException as e:
            msg = f"{method} {self.table} failed: {e}"
            raise StoreError(msg, details=str(e)) from e
        return resp

    def select(
        self,
        *,
        offset: int = 0,
        limit: int = FETCH_BATCH_SIZE,
        order: str = DEFAULT_ORDER,
        filters: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """GET one range of rows.

        Args:
            offset: Index of the first row (0-based).
            limit: Maximum rows to return.
            order: PostgREST order clause, e.g. ``date.desc,id.asc``.
            filters: Column -> value equality filters.
        """
        params: dict[str, Any] = {
            "select": "*",
            "order": order,
            "offset": offset,
            "limit": limit,
        }
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        resp = self._request("GET", params=params)
        rows: list[dict[str, Any]] = resp.json() or []
        return rows

    def insert(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """POST rows and return them as stored (ids assigned)."""
        resp = self._request(
            "POST",
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        created: list[dict[str, Any]] = resp.json() or []
        return created

    def count(self) -> int:
        """Exact number of rows in the table."""
        resp = self._request(
            "HEAD",
            params={"select": "*"},
            headers={"Prefer": "count=exact"},
        )
        content_range = resp.headers.get("Content-Range", "")
        _, _, total = content_range.partition("/")
        if not total.isdigit():
            msg = f"Store returned no usable Content-Range header: {content_range!r}"
            raise StoreError(msg)
        return int(total)
