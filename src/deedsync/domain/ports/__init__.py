"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    PropertyRepository,
    ScraperRunRepository,
    ScraperStateRepository,
    UpsertOutcome,
)
from .unit_of_work import (
    DeedRepositories,
    DeedUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DeedRepositories",
    "DeedUnitOfWork",
    "PropertyRepository",
    "RepositoryCollection",
    "ScraperRunRepository",
    "ScraperStateRepository",
    "UnitOfWork",
    "UpsertOutcome",
]
