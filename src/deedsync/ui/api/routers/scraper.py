"""Scraper checkpoints and run log."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from deedsync.ui.api.deps import Services  # noqa: TC001
from deedsync.ui.api.schema import (
    ScraperRunOut,
    ScraperRunRequest,
    ScraperStateOut,
    ScraperStateRequest,
    dump_record,
)

router = APIRouter(tags=["scraper"])


@router.get("/scraper-state/{scraper_name}")
def get_scraper_state(scraper_name: str, services: Services) -> dict[str, Any]:
    state = services.run_state.get_state(scraper_name)
    return {"ok": True, "data": dump_record(ScraperStateOut, state)}


@router.post("/scraper-state/{scraper_name}")
def save_scraper_state(
    scraper_name: str,
    body: ScraperStateRequest,
    services: Services,
) -> dict[str, Any]:
    state = services.run_state.save_state(scraper_name, body.to_update())
    return {"ok": True, "data": dump_record(ScraperStateOut, state)}


@router.post("/scraper-run")
def scraper_run(body: ScraperRunRequest, services: Services) -> dict[str, Any]:
    tracker = services.run_state
    if body.mode == "start":
        run = tracker.start_run(body.scraper_name, body.run_id, body.found_total or 0)
    else:
        run = tracker.finish_run(body.scraper_name, body.finished_run_id(), body.to_completion())
    return {"ok": True, "data": dump_record(ScraperRunOut, run)}
