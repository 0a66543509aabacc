"""SQLAlchemy mapping metadata for the deedsync domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from deedsync.domain.model import (
    Property,
    PropertyStatus,
    RunStatus,
    ScraperRun,
    ScraperState,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_column_type(enum_cls: type[StrEnum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=16,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

property_table = Table(
    "property",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("county", String, nullable=False),
    Column("state", String(8), nullable=False),
    Column("node", String, nullable=False),
    Column("tax_sale_id", String, nullable=True),
    Column("parcel_number", String, nullable=True),
    Column("sale_date", String, nullable=True),
    Column("opening_bid", Numeric(14, 2), nullable=True),
    Column("deed_status", String, nullable=True),
    Column("applicant_name", String, nullable=True),
    Column("pdf_url", String, nullable=True),
    Column("address", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state_address", String, nullable=True),
    Column("zip", String, nullable=True),
    Column("address_source_marker", String, nullable=True),
    Column("auction_location", String, nullable=True),
    Column("auction_start_time", String, nullable=True),
    Column("auction_platform", String, nullable=True),
    Column("auction_source_url", String, nullable=True),
    Column(
        "status",
        _enum_column_type(PropertyStatus, "property_status"),
        nullable=False,
        default=PropertyStatus.NEW,
    ),
    Column("notes", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("removed_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("county", "state", "node"),
    Index("ix_property_jurisdiction_active", "county", "state", "is_active"),
)

scraper_state_table = Table(
    "scraper_state",
    mapper_registry.metadata,
    Column("scraper_name", String, primary_key=True),
    Column("offset", Integer, nullable=False, default=0),
    Column("last_tax_sale_id", String, nullable=True),
    Column("last_node", String, nullable=True),
    Column("last_run_id", String, nullable=True),
    Column("last_run_at", UTCDateTime(), nullable=True),
    Column("done_for_today", Boolean, nullable=False, default=False),
    Column("resume_after", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=False),
)

scraper_run_table = Table(
    "scraper_run",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("scraper_name", String, nullable=False),
    Column("run_id", String, nullable=False),
    Column(
        "status",
        _enum_column_type(RunStatus, "run_status"),
        nullable=False,
        default=RunStatus.RUNNING,
    ),
    Column("message", Text, nullable=True),
    Column("found_total", Integer, nullable=False, default=0),
    Column("processed", Integer, nullable=False, default=0),
    Column("inserted", Integer, nullable=False, default=0),
    Column("updated", Integer, nullable=False, default=0),
    Column("skipped", Integer, nullable=False, default=0),
    Column("removed_marked", Integer, nullable=False, default=0),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("finished_at", UTCDateTime(), nullable=True),
    UniqueConstraint("scraper_name", "run_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(Property, property_table)
    mapper_registry.map_imperatively(ScraperState, scraper_state_table)
    mapper_registry.map_imperatively(ScraperRun, scraper_run_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
