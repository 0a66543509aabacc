"""Ports for persisting listings and scraper bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from datetime import datetime

    from deedsync.domain.model import Identity, Property, ScraperRun, ScraperState


@dataclass(slots=True)
class UpsertOutcome:
    """Row as persisted by an upsert and whether the upsert inserted it."""

    record: Property
    created: bool


@runtime_checkable
class PropertyRepository(Protocol):
    """Persistence contract for listings keyed by ``(county, state, node)``."""

    def get(self, property_id: int) -> Property | None: ...

    def get_by_identity(self, identity: Identity) -> Property | None: ...

    def upsert(self, entity: Property, *, now: datetime) -> UpsertOutcome:
        """Insert or update ``entity`` atomically with the composite key as conflict target.

        ``created_at`` is only written on insert; ``updated_at`` is always set to ``now``.
        """
        ...

    def existing_nodes(self, county: str, state: str, nodes: Collection[str]) -> set[str]: ...

    def active_nodes(self, county: str, state: str) -> dict[int, str]:
        """Return ``{id: node}`` for active rows, locking them until the transaction ends."""
        ...

    def mark_removed(self, property_ids: Sequence[int], *, now: datetime) -> int: ...


@runtime_checkable
class ScraperStateRepository(Protocol):
    def get_or_create(self, scraper_name: str, *, now: datetime) -> ScraperState: ...

    def apply(
        self,
        scraper_name: str,
        changes: Mapping[str, object],
        *,
        now: datetime,
    ) -> ScraperState: ...


@runtime_checkable
class ScraperRunRepository(Protocol):
    def add_if_absent(self, run: ScraperRun) -> ScraperRun | None:
        """Insert ``run`` unless ``(scraper_name, run_id)`` exists; ``None`` on conflict."""
        ...

    def finish(
        self,
        scraper_name: str,
        run_id: str,
        changes: Mapping[str, object],
    ) -> ScraperRun | None:
        """Apply ``changes`` to the matching ``running`` row only; ``None`` when absent."""
        ...
