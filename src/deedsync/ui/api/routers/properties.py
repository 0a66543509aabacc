"""Reviewer edits of listings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from deedsync.ui.api.deps import Services  # noqa: TC001
from deedsync.ui.api.schema import PropertyEditRequest, PropertyOut, dump_record

router = APIRouter(tags=["properties"])


@router.patch("/properties/{property_id}")
def edit_property(
    property_id: int,
    body: PropertyEditRequest,
    services: Services,
) -> dict[str, Any]:
    record = services.admin.edit(property_id, body.to_edit())
    return {"ok": True, "data": dump_record(PropertyOut, record)}
