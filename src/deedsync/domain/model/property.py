"""Property listing aggregate and its composite identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .enums import PropertyStatus

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal


@dataclass(frozen=True, slots=True)
class Identity:
    """Composite key of a listing: jurisdiction plus the source's opaque node token."""

    county: str
    state: str
    node: str

    def __str__(self) -> str:
        return f"{self.county}/{self.state}/{self.node}"


AUTHORITATIVE_FIELDS: Final[tuple[str, ...]] = (
    "tax_sale_id",
    "parcel_number",
    "sale_date",
    "opening_bid",
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

AUCTION_FIELDS: Final[tuple[str, ...]] = (
    "auction_location",
    "auction_start_time",
    "auction_platform",
    "auction_source_url",
)


@dataclass(eq=False, kw_only=True)
class Property:
    """A tax-deed listing as stored.

    Scraper-authoritative fields are replaced on every ingestion. ``status`` and
    ``notes`` belong to reviewers. ``is_active``/``removed_at`` track liveness and are
    only cleared by reconciliation.
    """

    county: str
    state: str
    node: str

    tax_sale_id: str | None = None
    parcel_number: str | None = None
    sale_date: str | None = None
    opening_bid: Decimal | None = None
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

    status: PropertyStatus = PropertyStatus.NEW
    notes: str | None = None

    is_active: bool = True
    removed_at: datetime | None = None

    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def identity(self) -> Identity:
        return Identity(county=self.county, state=self.state, node=self.node)

    @property
    def is_removed(self) -> bool:
        return not self.is_active
