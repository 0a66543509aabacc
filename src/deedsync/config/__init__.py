"""Application configuration helpers."""

from __future__ import annotations

from .api import ApiConfig, get_api_config
from .client import (
    IngestClientConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    build_ingest_resilience,
    get_ingest_client_config,
)
from .env import (
    ConfigurationError,
    MissingConfigurationError,
    require_env_var,
    require_env_vars,
)
from .jurisdictions import (
    AuctionDefaultsEntry,
    JurisdictionConfig,
    get_jurisdiction_config,
    load_auction_defaults,
    load_counties,
)
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ApiConfig",
    "AuctionDefaultsEntry",
    "ConfigurationError",
    "DatabaseConfig",
    "IngestClientConfig",
    "JurisdictionConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "build_ingest_resilience",
    "configure_logging",
    "get_api_config",
    "get_database_config",
    "get_ingest_client_config",
    "get_jurisdiction_config",
    "get_storage_config",
    "get_sync_config",
    "load_auction_defaults",
    "load_counties",
    "require_env_var",
    "require_env_vars",
]
