"""Ingestion of single scraped listings into the store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from deedsync.domain.clock import NowProvider, utcnow
from deedsync.domain.merge import MergePolicy
from deedsync.domain.model import IngestAction

if TYPE_CHECKING:
    from deedsync.domain.identity import IdentityResolver
    from deedsync.domain.model import Identity, Property
    from deedsync.domain.payload import RawPayload
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class IngestResult:
    identity: Identity
    action: IngestAction
    property_id: int | None
    record: Property


@dataclass(slots=True)
class IngestionService:
    """Validate, merge and upsert one scraped listing per call.

    The read of the stored row feeds the merge of ``status``/``notes``. Whether the
    row was created is decided by the store's atomic upsert, so two concurrent
    ingestions of one identity never both report ``created``. A row seen by the read
    is always reported as updated.
    """

    unit_of_work_factory: Callable[[], DeedUnitOfWork]
    resolver: IdentityResolver
    policy: MergePolicy = field(default_factory=MergePolicy)
    now_provider: NowProvider = utcnow

    def ingest(self, payload: RawPayload) -> IngestResult:
        identity = self.resolver.resolve(payload.county, payload.state, payload.node)
        now = self.now_provider()

        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.properties
            existing = repository.get_by_identity(identity)
            merged = self.policy.merge(existing, payload, identity=identity)
            outcome = repository.upsert(merged, now=now)
            uow.commit()

        created = outcome.created and existing is None
        action = IngestAction.CREATED if created else IngestAction.UPDATED
        log.info("Ingested %s: action=%s, id=%s", identity, action, outcome.record.id)
        return IngestResult(
            identity=identity,
            action=action,
            property_id=outcome.record.id,
            record=outcome.record,
        )
