"""Run the domain services end to end on the SQLAlchemy unit of work."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from deedsync.app import build_services
from deedsync.config import JurisdictionConfig, SyncConfig
from deedsync.domain.admin import AdminEdit
from deedsync.domain.errors import RunNotFound, StorageError
from deedsync.domain.model import IngestAction, PropertyStatus
from deedsync.domain.run_state import RunCompletion, ScraperStateUpdate
from tests.helpers.listings import make_payload, payload_from

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from deedsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from deedsync.app import DeedServices
    from tests.helpers.fakes import FakeClock


@pytest.fixture
def services(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    clock: FakeClock,
) -> DeedServices:
    return build_services(
        unit_of_work_factory=sqlite_unit_of_work,
        jurisdictions=JurisdictionConfig(),
        sync=SyncConfig(existence_chunk_size=3, reconcile_chunk_size=2),
        now_provider=clock,
    )


@pytest.mark.integration
def test_bid_scenario_and_empty_reconcile_guard(services: DeedServices) -> None:
    result = services.ingestion.ingest(
        payload_from({"node": "A1", "county": "Orange", "state": "FL", "opening_bid": "12,500.00"})
    )
    assert result.action is IngestAction.CREATED
    assert result.record.opening_bid == Decimal("12500")
    assert result.record.auction_location == "109 E Church St, Orlando, FL 32801"

    reconcile = services.reconciliation.reconcile("Orange", "FL", [])

    assert reconcile.removed_marked == 0
    assert reconcile.skipped is True
    assert services.existence.check_existing("Orange", "FL", ["A1"]) == ["A1"]


@pytest.mark.integration
def test_idempotent_ingestion_keeps_record(services: DeedServices) -> None:
    first = services.ingestion.ingest(make_payload("A1"))
    second = services.ingestion.ingest(make_payload("A1"))

    assert first.action is IngestAction.CREATED
    assert second.action is IngestAction.UPDATED
    assert second.property_id == first.property_id
    assert second.record.created_at == first.record.created_at
    assert second.record.opening_bid == first.record.opening_bid


@pytest.mark.integration
def test_admin_fields_survive_reingestion(services: DeedServices) -> None:
    created = services.ingestion.ingest(make_payload("A1"))
    assert created.property_id is not None
    services.admin.edit(
        created.property_id,
        AdminEdit(status=PropertyStatus.REVIEWED, notes="call owner"),
    )

    again = services.ingestion.ingest(make_payload("A1", deed_status="Redeemed"))

    assert again.record.status is PropertyStatus.REVIEWED
    assert again.record.notes == "call owner"
    assert again.record.deed_status == "Redeemed"


@pytest.mark.integration
def test_reconcile_scope_idempotence_and_resurrection(
    services: DeedServices,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    for node in ("X1", "Y2", "Z3"):
        services.ingestion.ingest(make_payload(node))
    neighbour = services.ingestion.ingest(make_payload("X1", county="Seminole"))

    first = services.reconciliation.reconcile("Orange", "FL", ["Y2"])
    second = services.reconciliation.reconcile("Orange", "FL", ["Y2"])

    assert first.removed_marked == 2
    assert second.removed_marked == 0
    assert services.existence.check_existing("Seminole", "FL", ["X1"]) == ["X1"]

    resurrected = services.ingestion.ingest(make_payload("X1"))

    assert resurrected.action is IngestAction.UPDATED
    assert resurrected.record.is_active is True
    assert resurrected.record.removed_at is None
    assert resurrected.record.status is PropertyStatus.NEW
    assert neighbour.property_id is not None
    with sqlite_unit_of_work() as uow:
        stored_neighbour = uow.repositories.properties.get(neighbour.property_id)
    assert stored_neighbour is not None
    assert stored_neighbour.is_active is True


@pytest.mark.integration
def test_existence_check_spans_chunks(services: DeedServices) -> None:
    for node in ("N1", "N3", "N5", "N7"):
        services.ingestion.ingest(make_payload(node))

    existing = services.existence.check_existing(
        "Orange",
        "FL",
        [f"N{index}" for index in range(1, 9)],
    )

    assert sorted(existing) == ["N1", "N3", "N5", "N7"]


@pytest.mark.integration
def test_run_state_round_trip(services: DeedServices) -> None:
    tracker = services.run_state
    tracker.save_state("scraperX", ScraperStateUpdate(offset=10, last_node="A1"))
    tracker.start_run("scraperX", "run1", found_total=5)
    finished = tracker.finish_run("scraperX", "run1", RunCompletion(processed=5))

    state = tracker.get_state("scraperX")

    assert state.offset == 10
    assert state.last_node == "A1"
    assert finished.processed == 5
    with pytest.raises(RunNotFound):
        tracker.finish_run("scraperX", "run2", RunCompletion())


@pytest.mark.integration
def test_store_failure_surfaces_as_storage_error(
    services: DeedServices,
    sqlite_engine: Engine,
) -> None:
    with sqlite_engine.begin() as connection:
        connection.exec_driver_sql("DROP TABLE property")

    with pytest.raises(StorageError, match="no such table: property"):
        services.ingestion.ingest(make_payload("A1"))
    with pytest.raises(StorageError, match="no such table: property"):
        services.reconciliation.reconcile("Orange", "FL", ["A1"])
