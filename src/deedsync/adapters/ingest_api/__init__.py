"""Scraper-side adapter for the ingest API."""

from __future__ import annotations

from .client import IngestApiClient, IngestApiError
from .schema import (
    ExistenceResponse,
    IngestResponse,
    MarkRemovedResponse,
    ScraperRunPayload,
    ScraperStatePayload,
)

__all__ = [
    "ExistenceResponse",
    "IngestApiClient",
    "IngestApiError",
    "IngestResponse",
    "MarkRemovedResponse",
    "ScraperRunPayload",
    "ScraperStatePayload",
]
