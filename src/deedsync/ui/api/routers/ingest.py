"""Listing ingestion and existence checks."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from deedsync.ui.api.deps import Services  # noqa: TC001
from deedsync.ui.api.schema import ExistenceCheckRequest, IngestRequest  # noqa: TC001

router = APIRouter(tags=["ingest"])


@router.post("/ingest")
def ingest(body: IngestRequest, services: Services) -> dict[str, Any]:
    result = services.ingestion.ingest(body.to_payload())
    identity = result.identity
    return {
        "ok": True,
        "action": result.action.value,
        "id": result.property_id,
        "identity": {"county": identity.county, "state": identity.state, "node": identity.node},
    }


@router.post("/existence-check")
def existence_check(body: ExistenceCheckRequest, services: Services) -> dict[str, Any]:
    existing = services.existence.check_existing(body.county, body.state, body.nodes)
    return {"ok": True, "existing": existing}
