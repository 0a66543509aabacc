"""Active-set reconciliation: soft-delete listings the source no longer shows.

Callers pass the full node set of one complete enumeration pass, taken after the
ingestion batch it is reconciled against. The read of the active rows and the
removal write run in one unit of work, and the rows read stay locked until commit on
stores that support row locks.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deedsync.domain.clock import NowProvider, utcnow
from deedsync.domain.existence import chunked, unique_nodes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deedsync.domain.identity import IdentityResolver
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork

log = getLogger(__name__)

DEFAULT_RECONCILE_CHUNK_SIZE = 500


@dataclass(slots=True)
class ReconcileResult:
    county: str
    state: str
    removed_marked: int
    skipped: bool = False


@dataclass(slots=True)
class ReconciliationEngine:
    unit_of_work_factory: Callable[[], DeedUnitOfWork]
    resolver: IdentityResolver
    chunk_size: int = DEFAULT_RECONCILE_CHUNK_SIZE
    now_provider: NowProvider = utcnow

    def reconcile(
        self,
        county: str | None,
        state: str | None,
        observed_nodes: Iterable[object],
    ) -> ReconcileResult:
        """Mark every active listing of the jurisdiction absent from ``observed_nodes``.

        An empty observation is treated as a failed enumeration and changes nothing.
        """

        resolved_county = self.resolver.normalize_county(county)
        resolved_state = self.resolver.normalize_state(state)
        observed = set(unique_nodes(observed_nodes))
        if not observed:
            log.warning(
                "Skipping reconciliation for %s/%s: observed node set is empty",
                resolved_county,
                resolved_state,
            )
            return ReconcileResult(
                county=resolved_county,
                state=resolved_state,
                removed_marked=0,
                skipped=True,
            )

        now = self.now_provider()
        removed = 0
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.properties
            active = repository.active_nodes(resolved_county, resolved_state)
            vanished = sorted(
                property_id for property_id, node in active.items() if node not in observed
            )
            for chunk in chunked(vanished, self.chunk_size):
                removed += repository.mark_removed(chunk, now=now)
            uow.commit()

        log.info(
            "Reconciled %s/%s: active=%s, observed=%s, removed=%s",
            resolved_county,
            resolved_state,
            len(active),
            len(observed),
            removed,
        )
        return ReconcileResult(
            county=resolved_county,
            state=resolved_state,
            removed_marked=removed,
        )
