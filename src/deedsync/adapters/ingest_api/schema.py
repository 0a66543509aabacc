"""Pydantic models describing ingest API responses as seen by a scraper."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Literal

from pydantic import BaseModel, ConfigDict


class IngestApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ErrorResponse(IngestApiModel):
    ok: Literal[False] = False
    error: str
    code: str | None = None


class IdentityPayload(IngestApiModel):
    county: str
    state: str
    node: str


class IngestResponse(IngestApiModel):
    ok: bool
    action: Literal["created", "updated"]
    id: int | None = None
    identity: IdentityPayload


class ExistenceResponse(IngestApiModel):
    ok: bool
    existing: list[str]


class MarkRemovedResponse(IngestApiModel):
    ok: bool
    removed_marked: int
    skipped: bool = False
    note: str | None = None


class ScraperStatePayload(IngestApiModel):
    scraper_name: str
    offset: int = 0
    last_tax_sale_id: str | None = None
    last_node: str | None = None
    last_run_id: str | None = None
    last_run_at: datetime | None = None
    done_for_today: bool = False
    resume_after: datetime | None = None
    updated_at: datetime | None = None


class ScraperRunPayload(IngestApiModel):
    scraper_name: str
    run_id: str
    status: Literal["running", "ok", "failed"]
    message: str | None = None
    found_total: int = 0
    processed: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    removed_marked: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None


class ScraperStateResponse(IngestApiModel):
    ok: bool
    data: ScraperStatePayload


class ScraperRunResponse(IngestApiModel):
    ok: bool
    data: ScraperRunPayload
