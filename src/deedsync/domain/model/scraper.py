"""Crawl checkpoints and the run log of scraper processes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .enums import RunStatus

if TYPE_CHECKING:
    from datetime import datetime


STATE_FIELDS: Final[tuple[str, ...]] = (
    "offset",
    "last_tax_sale_id",
    "last_node",
    "last_run_id",
    "last_run_at",
    "done_for_today",
    "resume_after",
)

RUN_COUNTERS: Final[tuple[str, ...]] = (
    "found_total",
    "processed",
    "inserted",
    "updated",
    "skipped",
    "removed_marked",
)


@dataclass(eq=False, kw_only=True)
class ScraperState:
    """Resumable progress of one scraper; one row per scraper name."""

    scraper_name: str
    offset: int = 0
    last_tax_sale_id: str | None = None
    last_node: str | None = None
    last_run_id: str | None = None
    last_run_at: datetime | None = None
    done_for_today: bool = False
    resume_after: datetime | None = None
    updated_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class ScraperRun:
    """One execution of a scraper, opened as ``running`` and closed exactly once."""

    scraper_name: str
    run_id: str
    status: RunStatus = RunStatus.RUNNING
    message: str | None = None
    found_total: int = 0
    processed: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    removed_marked: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    id: int | None = None

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING
