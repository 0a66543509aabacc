"""Checkpoints and run log of scraper processes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
from logging import getLogger
from typing import TYPE_CHECKING, Final

from deedsync.domain.clock import NowProvider, utcnow
from deedsync.domain.errors import InvalidInput, RunAlreadyExists, RunNotFound
from deedsync.domain.model import UNSET, Patch, RunStatus, ScraperRun

if TYPE_CHECKING:
    from datetime import datetime

    from deedsync.domain.model import ScraperState
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork

log = getLogger(__name__)

_NON_NULLABLE_STATE_FIELDS: Final[frozenset[str]] = frozenset({"offset", "done_for_today"})


@dataclass(slots=True, kw_only=True)
class ScraperStateUpdate:
    """Sparse checkpoint update; ``UNSET`` fields keep their stored value."""

    offset: Patch[int | None] = UNSET
    last_tax_sale_id: Patch[str | None] = UNSET
    last_node: Patch[str | None] = UNSET
    last_run_id: Patch[str | None] = UNSET
    last_run_at: Patch[datetime | None] = UNSET
    done_for_today: Patch[bool | None] = UNSET
    resume_after: Patch[datetime | None] = UNSET

    def changes(self) -> dict[str, object]:
        changed: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is UNSET:
                continue
            if value is None and item.name in _NON_NULLABLE_STATE_FIELDS:
                raise InvalidInput(f"Field '{item.name}' cannot be null")
            changed[item.name] = value
        offset = changed.get("offset")
        if isinstance(offset, int) and offset < 0:
            raise InvalidInput("Field 'offset' must be non-negative")
        return changed


@dataclass(slots=True, kw_only=True)
class RunCompletion:
    """Terminal status and final counters of a run; ``UNSET`` counters are left as-is."""

    status: RunStatus = RunStatus.OK
    message: Patch[str | None] = UNSET
    found_total: Patch[int | None] = UNSET
    processed: Patch[int | None] = UNSET
    inserted: Patch[int | None] = UNSET
    updated: Patch[int | None] = UNSET
    skipped: Patch[int | None] = UNSET
    removed_marked: Patch[int | None] = UNSET

    def changes(self, *, finished_at: datetime) -> dict[str, object]:
        if self.status is RunStatus.RUNNING:
            raise InvalidInput("A run must finish as 'ok' or 'failed'")
        changed: dict[str, object] = {"status": self.status, "finished_at": finished_at}
        for item in fields(self):
            if item.name == "status":
                continue
            value = getattr(self, item.name)
            if value is UNSET:
                continue
            if item.name != "message":
                if value is None:
                    raise InvalidInput(f"Counter '{item.name}' cannot be null")
                if isinstance(value, int) and value < 0:
                    raise InvalidInput(f"Counter '{item.name}' must be non-negative")
            changed[item.name] = value
        return changed


def _require_name(scraper_name: str) -> str:
    name = scraper_name.strip()
    if not name:
        raise InvalidInput("Missing scraper name")
    return name


@dataclass(slots=True)
class RunStateTracker:
    """Per-scraper checkpoint plus an append-only run log."""

    unit_of_work_factory: Callable[[], DeedUnitOfWork]
    now_provider: NowProvider = utcnow

    def get_state(self, scraper_name: str) -> ScraperState:
        name = _require_name(scraper_name)
        with self.unit_of_work_factory() as uow:
            state = uow.repositories.scraper_states.get_or_create(name, now=self.now_provider())
            uow.commit()
        return state

    def save_state(self, scraper_name: str, update: ScraperStateUpdate) -> ScraperState:
        name = _require_name(scraper_name)
        changes = update.changes()
        with self.unit_of_work_factory() as uow:
            state = uow.repositories.scraper_states.apply(name, changes, now=self.now_provider())
            uow.commit()
        log.info("Saved state for %s: fields=%s", name, sorted(changes))
        return state

    def start_run(
        self,
        scraper_name: str,
        run_id: str | None = None,
        found_total: int = 0,
    ) -> ScraperRun:
        name = _require_name(scraper_name)
        if found_total < 0:
            raise InvalidInput("Counter 'found_total' must be non-negative")
        now = self.now_provider()
        effective_run_id = (run_id or "").strip() or f"run_{int(now.timestamp() * 1000)}"
        run = ScraperRun(
            scraper_name=name,
            run_id=effective_run_id,
            status=RunStatus.RUNNING,
            found_total=found_total,
            started_at=now,
        )
        with self.unit_of_work_factory() as uow:
            stored = uow.repositories.scraper_runs.add_if_absent(run)
            if stored is None:
                raise RunAlreadyExists(name, effective_run_id)
            uow.commit()
        log.info("Started run %s for %s: found_total=%s", effective_run_id, name, found_total)
        return stored

    def finish_run(
        self,
        scraper_name: str,
        run_id: str,
        completion: RunCompletion,
    ) -> ScraperRun:
        name = _require_name(scraper_name)
        changes = completion.changes(finished_at=self.now_provider())
        with self.unit_of_work_factory() as uow:
            finished = uow.repositories.scraper_runs.finish(name, run_id, changes)
            if finished is None:
                raise RunNotFound(name, run_id)
            uow.commit()
        log.info("Finished run %s for %s: status=%s", run_id, name, finished.status)
        return finished
