"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING, Final, cast

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite

from deedsync.adapters.sqlalchemy.errors import storage_errors
from deedsync.adapters.sqlalchemy.mappings import (
    property_table,
    scraper_run_table,
    scraper_state_table,
)
from deedsync.domain.errors import StorageError
from deedsync.domain.model import Property, PropertyStatus, RunStatus, ScraperRun, ScraperState
from deedsync.domain.ports.persistence import UpsertOutcome

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from datetime import datetime

    from sqlalchemy import CursorResult, Table
    from sqlalchemy.orm import Session

    from deedsync.domain.model import Identity

_IDENTITY_COLUMNS: Final[tuple[str, ...]] = ("county", "state", "node")
_SERVER_MANAGED_COLUMNS: Final[frozenset[str]] = frozenset({"id", "created_at", "updated_at"})


def _insert_for(session: Session, table: Table) -> sqlite.Insert | postgresql.Insert:
    """Return the dialect's ``INSERT`` supporting ``ON CONFLICT`` clauses."""

    dialect_name = session.get_bind().dialect.name
    if dialect_name == "sqlite":
        return sqlite.insert(table)
    if dialect_name == "postgresql":
        return postgresql.insert(table)
    raise StorageError(f"Upserts are not supported on the {dialect_name!r} dialect")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SqlAlchemyPropertyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, property_id: int) -> Property | None:
        with storage_errors("property lookup"):
            return self.session.get(Property, property_id)

    def get_by_identity(self, identity: Identity) -> Property | None:
        stmt = (
            select(Property)
            .where(property_table.c.county == identity.county)
            .where(property_table.c.state == identity.state)
            .where(property_table.c.node == identity.node)
        )
        with storage_errors("property lookup"):
            return self.session.execute(stmt).scalar_one_or_none()

    def upsert(self, entity: Property, *, now: datetime) -> UpsertOutcome:
        timestamp = _as_utc(now)
        values = {
            column.key: getattr(entity, column.key)
            for column in property_table.columns
            if column.key not in _SERVER_MANAGED_COLUMNS
        }
        insert = _insert_for(self.session, property_table)
        stmt = insert.values(**values, created_at=timestamp, updated_at=timestamp)
        refreshed = {
            name: stmt.excluded[name]
            for name in (*values, "updated_at")
            if name not in _IDENTITY_COLUMNS
        }
        stmt = stmt.on_conflict_do_update(
            index_elements=[property_table.c[name] for name in _IDENTITY_COLUMNS],
            set_=refreshed,
        ).returning(property_table.c.id, property_table.c.created_at)

        with storage_errors("property upsert"):
            row = self.session.execute(stmt).one()
            record = self._load(row.id)
        return UpsertOutcome(record=record, created=row.created_at == timestamp)

    def existing_nodes(self, county: str, state: str, nodes: Collection[str]) -> set[str]:
        if not nodes:
            return set()
        stmt = (
            select(property_table.c.node)
            .where(property_table.c.county == county)
            .where(property_table.c.state == state)
            .where(property_table.c.node.in_(list(nodes)))
        )
        with storage_errors("existence check"):
            return set(self.session.execute(stmt).scalars())

    def active_nodes(self, county: str, state: str) -> dict[int, str]:
        stmt = (
            select(property_table.c.id, property_table.c.node)
            .where(property_table.c.county == county)
            .where(property_table.c.state == state)
            .where(property_table.c.is_active.is_(True))
            .with_for_update()
        )
        with storage_errors("active set read"):
            return {row.id: row.node for row in self.session.execute(stmt)}

    def mark_removed(self, property_ids: Sequence[int], *, now: datetime) -> int:
        if not property_ids:
            return 0
        timestamp = _as_utc(now)
        stmt = (
            update(property_table)
            .where(property_table.c.id.in_(list(property_ids)))
            .where(property_table.c.is_active.is_(True))
            .values(
                is_active=False,
                removed_at=timestamp,
                status=PropertyStatus.REMOVED,
                updated_at=timestamp,
            )
        )
        with storage_errors("removal update"):
            result = cast("CursorResult[tuple[()]]", self.session.execute(stmt))
            return result.rowcount

    def _load(self, property_id: int) -> Property:
        stmt = (
            select(Property)
            .where(property_table.c.id == property_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyScraperStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(self, scraper_name: str, *, now: datetime) -> ScraperState:
        insert = _insert_for(self.session, scraper_state_table)
        stmt = insert.values(
            scraper_name=scraper_name,
            offset=0,
            done_for_today=False,
            updated_at=_as_utc(now),
        ).on_conflict_do_nothing(index_elements=[scraper_state_table.c.scraper_name])
        with storage_errors("scraper state read"):
            self.session.execute(stmt)
            return self._load(scraper_name)

    def apply(
        self,
        scraper_name: str,
        changes: Mapping[str, object],
        *,
        now: datetime,
    ) -> ScraperState:
        changed = {**changes, "updated_at": _as_utc(now)}
        insert = _insert_for(self.session, scraper_state_table)
        stmt = insert.values(
            {"scraper_name": scraper_name, "offset": 0, "done_for_today": False, **changed}
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[scraper_state_table.c.scraper_name],
            set_={name: stmt.excluded[name] for name in changed},
        )
        with storage_errors("scraper state write"):
            self.session.execute(stmt)
            return self._load(scraper_name)

    def _load(self, scraper_name: str) -> ScraperState:
        stmt = (
            select(ScraperState)
            .where(scraper_state_table.c.scraper_name == scraper_name)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyScraperRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_if_absent(self, run: ScraperRun) -> ScraperRun | None:
        values = {
            column.key: getattr(run, column.key)
            for column in scraper_run_table.columns
            if column.key != "id"
        }
        insert = _insert_for(self.session, scraper_run_table)
        stmt = (
            insert.values(**values)
            .on_conflict_do_nothing(
                index_elements=[scraper_run_table.c.scraper_name, scraper_run_table.c.run_id]
            )
            .returning(scraper_run_table.c.id)
        )
        with storage_errors("run start"):
            run_pk = self.session.execute(stmt).scalar_one_or_none()
            if run_pk is None:
                return None
            return self._load(run_pk)

    def finish(
        self,
        scraper_name: str,
        run_id: str,
        changes: Mapping[str, object],
    ) -> ScraperRun | None:
        stmt = (
            update(scraper_run_table)
            .where(scraper_run_table.c.scraper_name == scraper_name)
            .where(scraper_run_table.c.run_id == run_id)
            .where(scraper_run_table.c.status == RunStatus.RUNNING)
            .values(**changes)
            .returning(scraper_run_table.c.id)
        )
        with storage_errors("run finish"):
            run_pk = self.session.execute(stmt).scalar_one_or_none()
            if run_pk is None:
                return None
            return self._load(run_pk)

    def _load(self, run_pk: int) -> ScraperRun:
        stmt = (
            select(ScraperRun)
            .where(scraper_run_table.c.id == run_pk)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one()


if TYPE_CHECKING:
    from deedsync.domain.ports.persistence import (
        PropertyRepository,
        ScraperRunRepository,
        ScraperStateRepository,
    )

    _session_stub = cast("Session", object())
    _property_repo: PropertyRepository = SqlAlchemyPropertyRepository(_session_stub)
    _state_repo: ScraperStateRepository = SqlAlchemyScraperStateRepository(_session_stub)
    _run_repo: ScraperRunRepository = SqlAlchemyScraperRunRepository(_session_stub)
