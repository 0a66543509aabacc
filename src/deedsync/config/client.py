"""Configuration for scrapers talking to the ingest API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import require_env_vars

if TYPE_CHECKING:
    from collections.abc import Mapping

INGEST_API_TIMEOUT_SECONDS = 20.0


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retry budget for ingest calls.

    Every route is idempotent per identity, so POSTs are retried like GETs.
    Transport errors are always retried; statuses only when listed.
    """

    total: int = 3
    backoff_factor: float = 0.5
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 30.0
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 502, 503, 504})
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = INGEST_API_TIMEOUT_SECONDS
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None


@dataclass(frozen=True)
class IngestClientConfig:
    base_url: str
    token: str
    resilience: ResilienceConfig


def build_ingest_resilience(base_url: str, token: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="deedsync-ingest",
        base_url=base_url,
        retry=RetryPolicy(),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Authorization": f"Bearer {token}"},
    )


def get_ingest_client_config(*, resilience: ResilienceConfig | None = None) -> IngestClientConfig:
    values = require_env_vars(("DEEDSYNC_API_URL", "INGEST_API_TOKEN"))
    base_url = values["DEEDSYNC_API_URL"].rstrip("/")
    token = values["INGEST_API_TOKEN"]
    return IngestClientConfig(
        base_url=base_url,
        token=token,
        resilience=resilience or build_ingest_resilience(base_url, token),
    )
