"""Exception hierarchy.

Library code raises these; ``api/`` maps them to HTTP status codes and
``cli.py`` maps them to exit codes.

    GhostSightingsError
    ├── ConfigurationError   missing store URL / key
    ├── ValidationError      missing or malformed submission field (4xx)
    ├── StoreError           backing store unreachable or rejected a request (5xx)
    │   └── FetchCancelledError
    ├── ParseError           malformed bulk-import row
    └── SubmissionInProgressError   form submitted again while the insert is in flight
"""

from __future__ import annotations

from typing import Any


class GhostSightingsError(Exception):
    """Base exception for ghost-sightings."""


class ConfigurationError(GhostSightingsError):
    """Required configuration is missing or invalid."""


class ValidationError(GhostSightingsError):
    """A submitted sighting is missing a field or has a malformed value.

    Args:
        message: Human-readable message, e.g. ``Missing required field: city``.
        field: Name of the offending field (API spelling).
        details: Optional structured detail (e.g. pydantic error list).
    """

    def __init__(self, message: str, field: str | None = None, details: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.details = details


class StoreError(GhostSightingsError):
    """The backing store failed (connectivity, rejected insert, bad batch)."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class FetchCancelledError(StoreError):
    """A bulk fetch was cancelled before it completed."""


class ParseError(GhostSightingsError):
    """A bulk-import row could not be parsed.

    ``line`` is the 1-based line number in the source file (header = 1).
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class SubmissionInProgressError(GhostSightingsError):
    """The submission form is still waiting for the store to answer."""
