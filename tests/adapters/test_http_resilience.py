from __future__ import annotations

import asyncio

import httpx

from deedsync.adapters.http_resilience import ResilientClient
from deedsync.config import RateLimit, ResilienceConfig, RetryPolicy
from deedsync.config.client import build_ingest_resilience

BASE_URL = "https://deeds.example.test"


def _send(config: ResilienceConfig, transport: httpx.MockTransport, method: str, url: str) -> httpx.Response:
    async def go() -> httpx.Response:
        client = ResilientClient(config, transport=transport)
        try:
            return await client.request(method, url, json={"node": "A1"})
        finally:
            await client.aclose()

    return asyncio.run(go())


def test_client_sends_default_headers_against_base_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url=BASE_URL,
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={"Authorization": "Bearer secret"},
    )

    response = _send(config, httpx.MockTransport(handler), "POST", "/ingest")

    assert response.status_code == 200
    assert len(seen) == 1
    assert str(seen[0].url) == f"{BASE_URL}/ingest"
    assert seen[0].headers["Authorization"] == "Bearer secret"


def test_post_is_retried_on_unavailable() -> None:
    statuses = iter([503, 200])
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(next(statuses), json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url=BASE_URL,
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
    )

    response = _send(config, httpx.MockTransport(handler), "POST", "/ingest")

    assert response.status_code == 200
    assert calls == ["POST", "POST"]


def test_ingest_resilience_carries_bearer_and_rate_limit() -> None:
    config = build_ingest_resilience(BASE_URL, "secret")

    assert config.base_url == BASE_URL
    assert config.default_headers == {"Authorization": "Bearer secret"}
    assert config.ratelimit == RateLimit(max_calls=10, per_seconds=1.0)
    assert 503 in config.retry.status_forcelist
