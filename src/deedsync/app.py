"""Application wiring: configuration, adapters and domain services."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deedsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from deedsync.config import get_jurisdiction_config, get_sync_config
from deedsync.domain.admin import AdminEditService
from deedsync.domain.clock import utcnow
from deedsync.domain.existence import ExistenceChecker
from deedsync.domain.identity import IdentityResolver
from deedsync.domain.ingestion import IngestionService
from deedsync.domain.merge import AuctionDefaults, AuctionDefaultsTable, MergePolicy
from deedsync.domain.reconciliation import ReconciliationEngine
from deedsync.domain.run_state import RunStateTracker

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deedsync.config import AuctionDefaultsEntry, JurisdictionConfig, SyncConfig
    from deedsync.domain.clock import NowProvider
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork
    from deedsync.domain.reconciliation import ReconcileResult

type UnitOfWorkFactory = Callable[[], DeedUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class DeedServices:
    """Domain services sharing one store and one jurisdiction configuration."""

    ingestion: IngestionService
    existence: ExistenceChecker
    reconciliation: ReconciliationEngine
    run_state: RunStateTracker
    admin: AdminEditService


def build_auction_defaults(entries: Iterable[AuctionDefaultsEntry]) -> AuctionDefaultsTable:
    return AuctionDefaultsTable.from_entries(
        (
            entry.county,
            entry.state,
            AuctionDefaults(
                auction_location=entry.location,
                auction_start_time=entry.start_time,
                auction_platform=entry.platform,
                auction_source_url=entry.source_url,
            ),
        )
        for entry in entries
    )


def build_services(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    jurisdictions: JurisdictionConfig | None = None,
    sync: SyncConfig | None = None,
    now_provider: NowProvider = utcnow,
) -> DeedServices:
    """Assemble the domain services; defaults read configuration from the environment."""

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyUnitOfWork
    jurisdiction_config = jurisdictions or get_jurisdiction_config()
    sync_config = sync or get_sync_config()

    resolver = IdentityResolver(
        default_county=jurisdiction_config.default_county,
        default_state=jurisdiction_config.default_state,
        known_counties=jurisdiction_config.known_counties,
    )
    policy = MergePolicy(
        auction_defaults=build_auction_defaults(jurisdiction_config.auction_defaults)
    )
    log.debug(
        "Building services: default=%s/%s, auction_defaults=%s",
        resolver.default_county,
        resolver.default_state,
        len(policy.auction_defaults),
    )
    return DeedServices(
        ingestion=IngestionService(
            unit_of_work_factory=unit_of_work_factory,
            resolver=resolver,
            policy=policy,
            now_provider=now_provider,
        ),
        existence=ExistenceChecker(
            unit_of_work_factory=unit_of_work_factory,
            resolver=resolver,
            chunk_size=sync_config.existence_chunk_size,
        ),
        reconciliation=ReconciliationEngine(
            unit_of_work_factory=unit_of_work_factory,
            resolver=resolver,
            chunk_size=sync_config.reconcile_chunk_size,
            now_provider=now_provider,
        ),
        run_state=RunStateTracker(
            unit_of_work_factory=unit_of_work_factory,
            now_provider=now_provider,
        ),
        admin=AdminEditService(
            unit_of_work_factory=unit_of_work_factory,
            now_provider=now_provider,
        ),
    )


def initialise_database(*, database_uri: str | None = None) -> None:
    """Create or upgrade the schema of the configured database."""

    startup(database_uri=database_uri, force=True)
    log.info("Database schema is up to date")


def reconcile_jurisdiction(
    county: str | None,
    state: str | None,
    observed_nodes: Iterable[str],
    *,
    services: DeedServices | None = None,
) -> ReconcileResult:
    """Reconcile one jurisdiction against a complete crawl pass."""

    effective = services or build_services()
    return effective.reconciliation.reconcile(county, state, observed_nodes)
