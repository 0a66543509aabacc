"""Removal of listings that vanished from the source."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from deedsync.ui.api.deps import Services  # noqa: TC001
from deedsync.ui.api.schema import MarkRemovedRequest  # noqa: TC001

router = APIRouter(tags=["reconcile"])


@router.post("/mark-removed")
def mark_removed(body: MarkRemovedRequest, services: Services) -> dict[str, Any]:
    result = services.reconciliation.reconcile(body.county, body.state, body.current_nodes)
    response: dict[str, Any] = {
        "ok": True,
        "removed_marked": result.removed_marked,
        "skipped": result.skipped,
    }
    if result.skipped:
        response["note"] = "current_nodes empty -> skipped"
    return response
