"""SQLAlchemy adapter package for deedsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyPropertyRepository,
    SqlAlchemyScraperRunRepository,
    SqlAlchemyScraperStateRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    enable_sqlite_transactions,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyPropertyRepository",
    "SqlAlchemyScraperRunRepository",
    "SqlAlchemyScraperStateRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "enable_sqlite_transactions",
    "mapper_registry",
    "start_mappers",
    "shutdown",
    "startup",
]
