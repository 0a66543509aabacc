"""HTTP surface configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, env_or_default, require_env_vars

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000


@dataclass(frozen=True)
class ApiConfig:
    """Holds the shared bearer secret and bind address of the ingest API."""

    ingest_token: str
    host: str = DEFAULT_API_HOST
    port: int = DEFAULT_API_PORT


def get_api_config() -> ApiConfig:
    values = require_env_vars(("INGEST_API_TOKEN",))
    return ApiConfig(
        ingest_token=values["INGEST_API_TOKEN"],
        host=env_or_default("DEEDSYNC_API_HOST", DEFAULT_API_HOST),
        port=env_int("DEEDSYNC_API_PORT", DEFAULT_API_PORT),
    )
