"""Failures surfaced by the ingestion and reconciliation services.

Each error is local to the operation that raised it; nothing here is retried.
"""

from __future__ import annotations


class DeedSyncError(Exception):
    """Base class for every error the services raise on purpose."""


class Unauthorized(DeedSyncError):
    """The caller's bearer credential is absent or does not match."""


class InvalidInput(DeedSyncError):
    """A request field has the wrong shape or a value the operation refuses."""


class InvalidIdentity(InvalidInput):
    """The node token is missing or blank, so no identity can be formed."""


class StorageError(DeedSyncError):
    """The underlying store failed; carries the store's diagnostic message."""


class PropertyNotFound(DeedSyncError):
    def __init__(self, property_id: int) -> None:
        super().__init__(f"Property {property_id} not found")
        self.property_id = property_id


class RunNotFound(DeedSyncError):
    """No ``running`` run matches the scraper name and run id being finished."""

    def __init__(self, scraper_name: str, run_id: str) -> None:
        super().__init__(f"No running run {run_id!r} for scraper {scraper_name!r}")
        self.scraper_name = scraper_name
        self.run_id = run_id


class RunAlreadyExists(DeedSyncError):
    def __init__(self, scraper_name: str, run_id: str) -> None:
        super().__init__(f"Run {run_id!r} already exists for scraper {scraper_name!r}")
        self.scraper_name = scraper_name
        self.run_id = run_id
