from __future__ import annotations

from datetime import UTC, datetime

import pytest

from deedsync.domain.errors import InvalidInput, RunAlreadyExists, RunNotFound
from deedsync.domain.model import RunStatus
from deedsync.domain.run_state import RunCompletion, RunStateTracker, ScraperStateUpdate
from tests.helpers.fakes import FakeClock, FakeStore


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def tracker(store: FakeStore) -> RunStateTracker:
    return RunStateTracker(unit_of_work_factory=store.unit_of_work, now_provider=FakeClock())


def test_first_read_creates_zeroed_state(tracker: RunStateTracker) -> None:
    state = tracker.get_state("orange_taxdeed")

    assert state.scraper_name == "orange_taxdeed"
    assert state.offset == 0
    assert state.done_for_today is False
    assert state.last_node is None
    assert state.updated_at is not None


def test_save_state_merges_only_sent_fields(tracker: RunStateTracker) -> None:
    tracker.save_state(
        "orange_taxdeed",
        ScraperStateUpdate(offset=40, last_node="A1", last_tax_sale_id="TS-1"),
    )
    before = tracker.get_state("orange_taxdeed").updated_at

    state = tracker.save_state("orange_taxdeed", ScraperStateUpdate(last_node="B2"))

    assert state.offset == 40
    assert state.last_tax_sale_id == "TS-1"
    assert state.last_node == "B2"
    assert before is not None
    assert state.updated_at is not None
    assert state.updated_at > before


def test_save_state_clears_nullable_fields_on_explicit_null(tracker: RunStateTracker) -> None:
    resume = datetime(2025, 3, 2, 6, tzinfo=UTC)
    tracker.save_state("s", ScraperStateUpdate(resume_after=resume))

    state = tracker.save_state("s", ScraperStateUpdate(resume_after=None))

    assert state.resume_after is None


@pytest.mark.parametrize(
    "update",
    [
        ScraperStateUpdate(offset=None),
        ScraperStateUpdate(done_for_today=None),
        ScraperStateUpdate(offset=-1),
    ],
)
def test_save_state_rejects_invalid_values(
    tracker: RunStateTracker,
    update: ScraperStateUpdate,
) -> None:
    with pytest.raises(InvalidInput):
        tracker.save_state("s", update)


def test_blank_scraper_name_is_rejected(tracker: RunStateTracker) -> None:
    with pytest.raises(InvalidInput):
        tracker.get_state("   ")


def test_start_and_finish_run(tracker: RunStateTracker) -> None:
    started = tracker.start_run("scraperX", "run1", found_total=12)
    assert started.status is RunStatus.RUNNING
    assert started.found_total == 12

    finished = tracker.finish_run(
        "scraperX",
        "run1",
        RunCompletion(processed=12, inserted=3, updated=9),
    )

    assert finished.status is RunStatus.OK
    assert finished.processed == 12
    assert finished.inserted == 3
    assert finished.skipped == 0
    assert finished.found_total == 12
    assert finished.finished_at is not None


def test_finish_without_start_is_run_not_found(tracker: RunStateTracker) -> None:
    with pytest.raises(RunNotFound):
        tracker.finish_run("scraperX", "run1", RunCompletion())


def test_run_finishes_only_once(tracker: RunStateTracker) -> None:
    tracker.start_run("scraperX", "run1")
    tracker.finish_run("scraperX", "run1", RunCompletion(status=RunStatus.FAILED, message="boom"))

    with pytest.raises(RunNotFound):
        tracker.finish_run("scraperX", "run1", RunCompletion())


def test_duplicate_start_is_rejected(tracker: RunStateTracker) -> None:
    tracker.start_run("scraperX", "run1")

    with pytest.raises(RunAlreadyExists):
        tracker.start_run("scraperX", "run1")


def test_start_without_run_id_generates_one(tracker: RunStateTracker) -> None:
    run = tracker.start_run("scraperX")

    assert run.run_id.startswith("run_")


def test_completion_cannot_finish_as_running() -> None:
    with pytest.raises(InvalidInput):
        RunCompletion(status=RunStatus.RUNNING).changes(finished_at=datetime.now(UTC))


def test_completion_rejects_null_counters() -> None:
    with pytest.raises(InvalidInput):
        RunCompletion(processed=None).changes(finished_at=datetime.now(UTC))
