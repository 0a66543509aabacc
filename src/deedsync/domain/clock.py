"""Time source shared by the services."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

type NowProvider = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)
