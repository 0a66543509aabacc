"""Translation of SQLAlchemy failures into the domain's storage error."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from deedsync.domain.errors import StorageError

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        message = str(getattr(exc, "orig", None) or exc)
        log.error("Storage failure during %s: %s", operation, message)
        raise StorageError(message) from exc
