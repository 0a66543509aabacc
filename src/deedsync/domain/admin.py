"""Reviewer edits of the admin-owned listing fields."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deedsync.domain.clock import NowProvider, utcnow
from deedsync.domain.errors import InvalidInput, PropertyNotFound
from deedsync.domain.model import UNSET, Patch, PropertyStatus

if TYPE_CHECKING:
    from deedsync.domain.model import Property
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class AdminEdit:
    status: Patch[PropertyStatus | None] = UNSET
    notes: Patch[str | None] = UNSET


@dataclass(slots=True)
class AdminEditService:
    unit_of_work_factory: Callable[[], DeedUnitOfWork]
    now_provider: NowProvider = utcnow

    def edit(self, property_id: int, edit: AdminEdit) -> Property:
        """Apply a reviewer's ``status``/``notes`` change.

        ``removed`` stays reserved to reconciliation, and a removed listing only
        accepts notes until a later ingestion brings it back.
        """

        status = edit.status
        if status is None:
            raise InvalidInput("Field 'status' cannot be null")
        if status is PropertyStatus.REMOVED:
            raise InvalidInput("Status 'removed' is set by reconciliation only")

        with self.unit_of_work_factory() as uow:
            record = uow.repositories.properties.get(property_id)
            if record is None:
                raise PropertyNotFound(property_id)
            if status is not UNSET and not record.is_active:
                raise InvalidInput("Removed listings only accept notes")
            if status is not UNSET:
                record.status = status
            if edit.notes is not UNSET:
                record.notes = edit.notes
            record.updated_at = self.now_provider()
            uow.commit()

        log.info("Admin edit of property %s: status=%s", property_id, record.status)
        return record
