"""Batching defaults for ingestion and reconciliation."""

from __future__ import annotations

from dataclasses import dataclass

from deedsync.domain.existence import DEFAULT_EXISTENCE_CHUNK_SIZE
from deedsync.domain.reconciliation import DEFAULT_RECONCILE_CHUNK_SIZE

from .env import env_int


@dataclass(frozen=True, slots=True)
class SyncConfig:
    existence_chunk_size: int = DEFAULT_EXISTENCE_CHUNK_SIZE
    reconcile_chunk_size: int = DEFAULT_RECONCILE_CHUNK_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        existence_chunk_size=env_int(
            "DEEDSYNC_EXISTENCE_CHUNK_SIZE", DEFAULT_EXISTENCE_CHUNK_SIZE
        ),
        reconcile_chunk_size=env_int(
            "DEEDSYNC_RECONCILE_CHUNK_SIZE", DEFAULT_RECONCILE_CHUNK_SIZE
        ),
    )
