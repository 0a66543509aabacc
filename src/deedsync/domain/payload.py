"""Incoming listing payloads as sent by scrapers."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final

from deedsync.domain.errors import InvalidInput
from deedsync.domain.model import UNSET, Patch, PropertyStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

_TEXT_FIELDS: Final[tuple[str, ...]] = (
    "county",
    "state",
    "tax_sale_id",
    "parcel_number",
    "sale_date",
    "deed_status",
    "applicant_name",
    "pdf_url",
    "address",
    "city",
    "state_address",
    "zip",
    "address_source_marker",
    "auction_location",
    "auction_start_time",
    "auction_platform",
    "auction_source_url",
)

_CURRENCY_SIGNS: Final[str] = "$"


def parse_bid(value: object) -> Decimal | None:
    """Parse an opening bid such as ``"12,500.00"``; unparsable input yields ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int | float):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.replace(",", "").strip().lstrip(_CURRENCY_SIGNS).strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    return parsed if parsed.is_finite() else None


@dataclass(slots=True, kw_only=True)
class RawPayload:
    """One scraped record before identity resolution and merging.

    Authoritative fields use ``None`` for "not reported". The reviewer-owned
    ``status``/``notes`` distinguish "omitted" (``UNSET``) from an explicit value.
    """

    node: object = None
    county: str | None = None
    state: str | None = None

    tax_sale_id: str | None = None
    parcel_number: str | None = None
    sale_date: str | None = None
    opening_bid: object = None
    deed_status: str | None = None
    applicant_name: str | None = None
    pdf_url: str | None = None

    address: str | None = None
    city: str | None = None
    state_address: str | None = None
    zip: str | None = None
    address_source_marker: str | None = None

    auction_location: str | None = None
    auction_start_time: str | None = None
    auction_platform: str | None = None
    auction_source_url: str | None = None

    status: Patch[PropertyStatus] = UNSET
    notes: Patch[str | None] = UNSET

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> RawPayload:
        """Build a payload from decoded JSON, reading key presence for status/notes."""

        payload = cls(node=data.get("node"), opening_bid=data.get("opening_bid"))
        for name in _TEXT_FIELDS:
            setattr(payload, name, _text(name, data.get(name)))
        if "status" in data:
            payload.status = _status(data["status"])
        if "notes" in data:
            payload.notes = _text("notes", data["notes"])
        return payload


def _text(name: str, value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int | float | Decimal) and not isinstance(value, bool):
        return str(value)
    raise InvalidInput(f"Field '{name}' must be a string")


def _status(value: object) -> Patch[PropertyStatus]:
    if value is None:
        return UNSET
    if isinstance(value, PropertyStatus):
        return value
    if isinstance(value, str):
        try:
            return PropertyStatus(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(status.value for status in PropertyStatus)
    raise InvalidInput(f"Field 'status' must be one of: {allowed}")
