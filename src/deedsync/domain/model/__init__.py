"""Domain model for tax-deed listings and scraper bookkeeping."""

from __future__ import annotations

from .enums import IngestAction, PropertyStatus, RunStatus
from .fields import UNSET, Patch, Unset, is_set, patched
from .property import AUCTION_FIELDS, AUTHORITATIVE_FIELDS, Identity, Property
from .scraper import RUN_COUNTERS, STATE_FIELDS, ScraperRun, ScraperState

__all__ = [
    "AUCTION_FIELDS",
    "AUTHORITATIVE_FIELDS",
    "RUN_COUNTERS",
    "STATE_FIELDS",
    "UNSET",
    "Identity",
    "IngestAction",
    "Patch",
    "Property",
    "PropertyStatus",
    "RunStatus",
    "ScraperRun",
    "ScraperState",
    "Unset",
    "is_set",
    "patched",
]
