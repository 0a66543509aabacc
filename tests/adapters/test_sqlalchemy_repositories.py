"""Exercise the SQLAlchemy repositories against an in-memory SQLite database."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from deedsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyPropertyRepository,
    SqlAlchemyScraperRunRepository,
    SqlAlchemyScraperStateRepository,
)
from deedsync.domain.model import PropertyStatus, RunStatus, ScraperRun
from tests.helpers.listings import make_property

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
T1 = T0 + timedelta(minutes=5)


@pytest.fixture
def properties(sqlite_session: Session) -> SqlAlchemyPropertyRepository:
    return SqlAlchemyPropertyRepository(sqlite_session)


def test_upsert_inserts_then_updates_in_place(
    properties: SqlAlchemyPropertyRepository,
    sqlite_session: Session,
) -> None:
    created = properties.upsert(make_property("A1", opening_bid=Decimal("12500")), now=T0)
    sqlite_session.commit()

    updated = properties.upsert(
        make_property("A1", opening_bid=Decimal("13000"), deed_status="Redeemed"),
        now=T1,
    )
    sqlite_session.commit()

    assert created.created is True
    assert updated.created is False
    assert updated.record.id == created.record.id
    assert updated.record.created_at == T0
    assert updated.record.updated_at == T1
    assert updated.record.opening_bid == Decimal("13000")
    assert updated.record.deed_status == "Redeemed"


def test_upsert_keys_on_full_jurisdiction(properties: SqlAlchemyPropertyRepository) -> None:
    orange = properties.upsert(make_property("A1"), now=T0)
    seminole = properties.upsert(make_property("A1", county="Seminole"), now=T0)

    assert orange.created is True
    assert seminole.created is True
    assert orange.record.id != seminole.record.id


def test_get_by_identity_round_trips_status(
    properties: SqlAlchemyPropertyRepository,
    sqlite_session: Session,
) -> None:
    properties.upsert(
        make_property("A1", status=PropertyStatus.REVIEWED, notes="call owner"),
        now=T0,
    )
    sqlite_session.commit()

    stored = properties.get_by_identity(make_property("A1").identity)

    assert stored is not None
    assert stored.status is PropertyStatus.REVIEWED
    assert stored.notes == "call owner"
    assert stored.created_at == T0


def test_existing_nodes_filters_by_jurisdiction(
    properties: SqlAlchemyPropertyRepository,
) -> None:
    properties.upsert(make_property("A1"), now=T0)
    properties.upsert(make_property("B2"), now=T0)
    properties.upsert(make_property("C3", county="Seminole"), now=T0)

    assert properties.existing_nodes("Orange", "FL", ["A1", "C3", "Z9"]) == {"A1"}
    assert properties.existing_nodes("Orange", "FL", []) == set()


def test_mark_removed_only_touches_active_rows(
    properties: SqlAlchemyPropertyRepository,
    sqlite_session: Session,
) -> None:
    a1 = properties.upsert(make_property("A1"), now=T0).record
    b2 = properties.upsert(make_property("B2"), now=T0).record
    sqlite_session.commit()
    assert a1.id is not None
    assert b2.id is not None

    assert properties.active_nodes("Orange", "FL") == {a1.id: "A1", b2.id: "B2"}
    assert properties.mark_removed([b2.id], now=T1) == 1
    assert properties.mark_removed([b2.id], now=T1) == 0
    sqlite_session.commit()

    assert properties.active_nodes("Orange", "FL") == {a1.id: "A1"}
    removed = properties.get_by_identity(b2.identity)
    assert removed is not None
    sqlite_session.refresh(removed)
    assert removed.is_active is False
    assert removed.status is PropertyStatus.REMOVED
    assert removed.removed_at == T1


def test_scraper_state_is_created_then_sparsely_updated(sqlite_session: Session) -> None:
    states = SqlAlchemyScraperStateRepository(sqlite_session)

    fresh = states.get_or_create("orange_taxdeed", now=T0)
    assert fresh.offset == 0
    assert fresh.done_for_today is False

    states.apply("orange_taxdeed", {"offset": 25, "last_node": "A1"}, now=T1)
    state = states.apply("orange_taxdeed", {"done_for_today": True}, now=T1)
    sqlite_session.commit()

    assert state.offset == 25
    assert state.last_node == "A1"
    assert state.done_for_today is True
    assert state.updated_at == T1


def test_apply_creates_missing_state(sqlite_session: Session) -> None:
    states = SqlAlchemyScraperStateRepository(sqlite_session)

    state = states.apply("new_scraper", {"last_tax_sale_id": "TS-1"}, now=T0)

    assert state.offset == 0
    assert state.last_tax_sale_id == "TS-1"


def test_run_log_start_conflict_and_single_finish(sqlite_session: Session) -> None:
    runs = SqlAlchemyScraperRunRepository(sqlite_session)
    run = ScraperRun(scraper_name="scraperX", run_id="run1", found_total=4, started_at=T0)

    stored = runs.add_if_absent(run)
    duplicate = runs.add_if_absent(
        ScraperRun(scraper_name="scraperX", run_id="run1", started_at=T1)
    )
    finished = runs.finish(
        "scraperX",
        "run1",
        {"status": RunStatus.OK, "processed": 4, "finished_at": T1},
    )
    again = runs.finish("scraperX", "run1", {"status": RunStatus.FAILED, "finished_at": T1})
    sqlite_session.commit()

    assert stored is not None
    assert stored.status is RunStatus.RUNNING
    assert duplicate is None
    assert finished is not None
    assert finished.status is RunStatus.OK
    assert finished.processed == 4
    assert finished.found_total == 4
    assert finished.finished_at == T1
    assert again is None


def test_finish_unknown_run_returns_none(sqlite_session: Session) -> None:
    runs = SqlAlchemyScraperRunRepository(sqlite_session)

    assert runs.finish("scraperX", "missing", {"status": RunStatus.OK}) is None
