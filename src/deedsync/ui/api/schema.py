"""Pydantic models for the HTTP surface and their translation into domain inputs."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from typing import Literal

from pydantic import BaseModel, ConfigDict

from deedsync.domain.admin import AdminEdit
from deedsync.domain.errors import InvalidInput
from deedsync.domain.model import PropertyStatus, RunStatus
from deedsync.domain.payload import RawPayload
from deedsync.domain.run_state import RunCompletion, ScraperStateUpdate

type Scalar = str | int | float


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# Requests --------------------------------------------------------------------


class IngestRequest(ApiModel):
    county: str | None = None
    state: str | None = None
    node: Scalar | None = None

    tax_sale_id: Scalar | None = None
    parcel_number: Scalar | None = None
    sale_date: str | None = None
    opening_bid: Scalar | None = None
    deed_status: str | None = None
    applicant_name: str | None = None
    pdf_url: str | None = None

    address: str | None = None
    city: str | None = None
    state_address: str | None = None
    zip: Scalar | None = None
    address_source_marker: str | None = None

    auction_location: str | None = None
    auction_start_time: str | None = None
    auction_platform: str | None = None
    auction_source_url: str | None = None

    status: str | None = None
    notes: str | None = None

    def to_payload(self) -> RawPayload:
        # only keys the caller actually sent, so omitted status/notes stay UNSET
        return RawPayload.from_mapping(self.model_dump(exclude_unset=True))


class ExistenceCheckRequest(ApiModel):
    county: str | None = None
    state: str | None = None
    nodes: list[Scalar | None]


class MarkRemovedRequest(ApiModel):
    county: str | None = None
    state: str | None = None
    current_nodes: list[Scalar | None]


class ScraperStateRequest(ApiModel):
    offset: int | None = None
    last_tax_sale_id: str | None = None
    last_node: str | None = None
    last_run_id: str | None = None
    last_run_at: datetime | None = None
    done_for_today: bool | None = None
    resume_after: datetime | None = None

    def to_update(self) -> ScraperStateUpdate:
        return ScraperStateUpdate(**self.model_dump(exclude_unset=True))


class ScraperRunRequest(ApiModel):
    mode: Literal["start", "finish"]
    scraper_name: str
    run_id: str | None = None
    status: Literal["ok", "failed"] | None = None
    message: str | None = None
    found_total: int | None = None
    processed: int | None = None
    inserted: int | None = None
    updated: int | None = None
    skipped: int | None = None
    removed_marked: int | None = None

    def finished_run_id(self) -> str:
        run_id = (self.run_id or "").strip()
        if not run_id:
            raise InvalidInput("Finishing a run requires 'run_id'")
        return run_id

    def to_completion(self) -> RunCompletion:
        sent = self.model_dump(
            exclude_unset=True,
            exclude={"mode", "scraper_name", "run_id", "status"},
        )
        status = RunStatus(self.status) if self.status is not None else RunStatus.OK
        return RunCompletion(status=status, **sent)


class PropertyEditRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str | None = None
    notes: str | None = None

    def to_edit(self) -> AdminEdit:
        sent = self.model_fields_set
        edit = AdminEdit()
        if "status" in sent:
            edit.status = None if self.status is None else _property_status(self.status)
        if "notes" in sent:
            edit.notes = self.notes
        return edit


def _property_status(value: str) -> PropertyStatus:
    try:
        return PropertyStatus(value.strip().lower())
    except ValueError:
        allowed = ", ".join(status.value for status in PropertyStatus)
        raise InvalidInput(f"Field 'status' must be one of: {allowed}") from None


# Responses -------------------------------------------------------------------


class RecordModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PropertyOut(RecordModel):
    id: int
    county: str
    state: str
    node: str
    tax_sale_id: str | None
    parcel_number: str | None
    sale_date: str | None
    opening_bid: Decimal | None
    deed_status: str | None
    applicant_name: str | None
    pdf_url: str | None
    address: str | None
    city: str | None
    state_address: str | None
    zip: str | None
    address_source_marker: str | None
    auction_location: str | None
    auction_start_time: str | None
    auction_platform: str | None
    auction_source_url: str | None
    status: PropertyStatus
    notes: str | None
    is_active: bool
    removed_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


class ScraperStateOut(RecordModel):
    scraper_name: str
    offset: int
    last_tax_sale_id: str | None
    last_node: str | None
    last_run_id: str | None
    last_run_at: datetime | None
    done_for_today: bool
    resume_after: datetime | None
    updated_at: datetime | None


class ScraperRunOut(RecordModel):
    scraper_name: str
    run_id: str
    status: RunStatus
    message: str | None
    found_total: int
    processed: int
    inserted: int
    updated: int
    skipped: int
    removed_marked: int
    started_at: datetime | None
    finished_at: datetime | None


def dump_record(model: type[RecordModel], record: object) -> dict[str, object]:
    return model.model_validate(record).model_dump(mode="json")

