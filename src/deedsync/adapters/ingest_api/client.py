"""Async client used by scraper processes to talk to the ingest API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from deedsync.adapters.http_resilience import ResilientClient
from deedsync.config.client import IngestClientConfig, get_ingest_client_config

from .schema import (
    ErrorResponse,
    ExistenceResponse,
    IngestResponse,
    MarkRemovedResponse,
    ScraperRunResponse,
    ScraperStateResponse,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from types import TracebackType

    from pydantic import BaseModel

    from deedsync.adapters.ingest_api.schema import ScraperRunPayload, ScraperStatePayload
    from deedsync.config.client import ResilienceConfig

log = getLogger(__name__)


class IngestApiError(RuntimeError):
    """Raised when the ingest API answers with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, *, status: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _without_none(values: Mapping[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass(slots=True)
class IngestApiClient:
    """Typed wrapper over the ingest API routes.

    Use as an async context manager so one pooled HTTP client serves a whole crawl.
    Retries and rate limiting happen in the resilient client underneath.
    """

    config: IngestClientConfig = field(default_factory=get_ingest_client_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> IngestApiClient:
        self._client = self.client_factory(self.config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ingest(self, record: Mapping[str, object]) -> IngestResponse:
        """Send one scraped record; keys left out stay untouched on the server."""

        response = await self._request("POST", "/ingest", json=dict(record))
        return _parse(IngestResponse, response)

    async def check_existing(
        self,
        nodes: Iterable[str],
        *,
        county: str | None = None,
        state: str | None = None,
    ) -> list[str]:
        body = {"nodes": list(nodes), **_without_none({"county": county, "state": state})}
        response = await self._request("POST", "/existence-check", json=body)
        return _parse(ExistenceResponse, response).existing

    async def mark_removed(
        self,
        current_nodes: Iterable[str],
        *,
        county: str | None = None,
        state: str | None = None,
    ) -> MarkRemovedResponse:
        body = {
            "current_nodes": list(current_nodes),
            **_without_none({"county": county, "state": state}),
        }
        response = await self._request("POST", "/mark-removed", json=body)
        return _parse(MarkRemovedResponse, response)

    async def get_state(self, scraper_name: str) -> ScraperStatePayload:
        response = await self._request("GET", _state_path(scraper_name))
        return _parse(ScraperStateResponse, response).data

    async def save_state(
        self,
        scraper_name: str,
        changes: Mapping[str, object],
    ) -> ScraperStatePayload:
        """Persist only the checkpoint fields present in ``changes``."""

        response = await self._request(
            "POST",
            _state_path(scraper_name),
            json=_jsonable(changes),
        )
        return _parse(ScraperStateResponse, response).data

    async def start_run(
        self,
        scraper_name: str,
        *,
        run_id: str | None = None,
        found_total: int = 0,
    ) -> ScraperRunPayload:
        body = {
            "mode": "start",
            "scraper_name": scraper_name,
            "found_total": found_total,
            **_without_none({"run_id": run_id}),
        }
        response = await self._request("POST", "/scraper-run", json=body)
        return _parse(ScraperRunResponse, response).data

    async def finish_run(
        self,
        scraper_name: str,
        run_id: str,
        *,
        status: str = "ok",
        message: str | None = None,
        counters: Mapping[str, int] | None = None,
    ) -> ScraperRunPayload:
        body: dict[str, object] = {
            "mode": "finish",
            "scraper_name": scraper_name,
            "run_id": run_id,
            "status": status,
            **dict(counters or {}),
        }
        if message is not None:
            body["message"] = message
        response = await self._request("POST", "/scraper-run", json=body)
        return _parse(ScraperRunResponse, response).data

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: object = None,
    ) -> httpx.Response:
        if self._client is None:
            raise IngestApiError("IngestApiClient used outside of 'async with'")
        if json is None:
            response = await self._client.request(method, path)
        else:
            response = await self._client.request(method, path, json=json)
        if response.is_success:
            return response

        message, code = _error_details(response)
        log.error(f"Ingest API {method} {path} failed ({response.status_code}): {message}")
        raise IngestApiError(message, status=response.status_code, code=code)


def _state_path(scraper_name: str) -> str:
    return f"/scraper-state/{quote(scraper_name, safe='')}"


def _jsonable(values: Mapping[str, object]) -> dict[str, object]:
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in values.items()
    }


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return response.text or response.reason_phrase, None
    return error.error, error.code


def _parse[TModel: BaseModel](model: type[TModel], response: httpx.Response) -> TModel:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise IngestApiError(
            f"Unexpected ingest API response: {exc}",
            status=response.status_code,
        ) from exc
