"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PropertyStatus(StrEnum):
    """Review status owned by human reviewers (``REMOVED`` is owned by reconciliation)."""

    NEW = "new"
    REVIEWED = "reviewed"
    SKIPPED = "skipped"
    EXPORTED = "exported"
    REMOVED = "removed"


class RunStatus(StrEnum):
    RUNNING = "running"
    OK = "ok"
    FAILED = "failed"


class IngestAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
