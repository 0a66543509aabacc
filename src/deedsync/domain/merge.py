"""Merge policy between an incoming scrape and the stored listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from deedsync.domain.errors import InvalidInput
from deedsync.domain.model import AUCTION_FIELDS, AUTHORITATIVE_FIELDS, Property, PropertyStatus
from deedsync.domain.model.fields import patched
from deedsync.domain.payload import parse_bid

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from deedsync.domain.model import Identity
    from deedsync.domain.payload import RawPayload


@dataclass(frozen=True, slots=True)
class AuctionDefaults:
    auction_location: str | None = None
    auction_start_time: str | None = None
    auction_platform: str | None = None
    auction_source_url: str | None = None


def _jurisdiction_key(county: str, state: str) -> tuple[str, str]:
    return (" ".join(county.split()).casefold(), state.strip().upper())


@dataclass(slots=True)
class AuctionDefaultsTable:
    """Per-``(county, state)`` auction metadata used when a scrape omits it."""

    _entries: dict[tuple[str, str], AuctionDefaults] = field(default_factory=dict)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[tuple[str, str, AuctionDefaults]],
    ) -> AuctionDefaultsTable:
        table = cls()
        for county, state, defaults in entries:
            table._entries[_jurisdiction_key(county, state)] = defaults
        return table

    def lookup(self, county: str, state: str) -> AuctionDefaults | None:
        return self._entries.get(_jurisdiction_key(county, state))

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(slots=True)
class MergePolicy:
    auction_defaults: AuctionDefaultsTable = field(default_factory=AuctionDefaultsTable)

    def merge(
        self,
        existing: Property | None,
        incoming: RawPayload,
        *,
        identity: Identity,
    ) -> Property:
        """Return the field set to persist for ``identity``.

        Authoritative fields come from ``incoming`` only. ``status`` and ``notes`` keep
        their stored values unless the payload sends them. The result is always active.
        """

        if incoming.status is PropertyStatus.REMOVED:
            raise InvalidInput("Status 'removed' is set by reconciliation only")

        values: dict[str, object] = {
            name: getattr(incoming, name) for name in AUTHORITATIVE_FIELDS
        }
        values["opening_bid"] = parse_bid(incoming.opening_bid)
        values.update(self._auction_values(identity, values))

        return Property(
            county=identity.county,
            state=identity.state,
            node=identity.node,
            status=patched(incoming.status, self._carried_status(existing)),
            notes=patched(incoming.notes, existing.notes if existing is not None else None),
            is_active=True,
            removed_at=None,
            id=existing.id if existing is not None else None,
            created_at=existing.created_at if existing is not None else None,
            **values,  # pyright: ignore[reportArgumentType]
        )

    def _auction_values(
        self,
        identity: Identity,
        values: Mapping[str, object],
    ) -> dict[str, object]:
        defaults = self.auction_defaults.lookup(identity.county, identity.state)
        if defaults is None:
            return {}
        filled: dict[str, object] = {}
        for name in AUCTION_FIELDS:
            if values.get(name) is None:
                filled[name] = getattr(defaults, name)
        return filled

    @staticmethod
    def _carried_status(existing: Property | None) -> PropertyStatus:
        if existing is None or existing.status is PropertyStatus.REMOVED:
            return PropertyStatus.NEW
        return existing.status
