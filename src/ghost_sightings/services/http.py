"""
Shared HTTP client with automatic retry and backoff.

Builds ``requests.Session`` objects that retry idempotent requests on
transient failures (timeouts, connection resets, 429/502/503/504) with
exponential backoff.  Inserts (POST) are never retried, so a timed-out
insert is reported rather than replayed into a duplicate row.

Usage::

    from ghost_sightings.services.http import create_session

    s = create_session(headers={"apikey": key})
    resp = s.get(f"{url}/rest/v1/sightings", params={"select": "*"})
    resp.raise_for_status()
"""

from __future__ import annotations

from collections.abc import Mapping

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ghost_sightings import __version__

#: Default retry strategy for store reads.
DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=1,  # 0s, 1s, 2s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 30  # seconds

USER_AGENT = f"ghost-sightings/{__version__}"


def create_session(
    headers: Mapping[str, str] | None = None,
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        headers: Extra headers sent with every request (e.g. store credentials).
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT
    if headers:
        s.headers.update(headers)

    # Inject a default timeout so callers don't need to pass ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s
