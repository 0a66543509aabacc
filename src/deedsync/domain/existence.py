"""Existence checks that let scrapers skip listings the store already knows."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deedsync.domain.errors import InvalidInput

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from deedsync.domain.identity import IdentityResolver
    from deedsync.domain.ports.unit_of_work import DeedUnitOfWork

log = getLogger(__name__)

DEFAULT_EXISTENCE_CHUNK_SIZE = 200


def chunked[T](items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size < 1:
        raise ValueError("Chunk size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def unique_nodes(nodes: Iterable[object]) -> list[str]:
    """Trim node tokens, drop blanks and duplicates, keep first-seen order."""

    seen: dict[str, None] = {}
    for node in nodes:
        if isinstance(node, (list, dict)):
            raise InvalidInput("Node tokens must be scalars")
        text = str(node).strip() if node is not None else ""
        if text:
            seen.setdefault(text, None)
    return list(seen)


@dataclass(slots=True)
class ExistenceChecker:
    unit_of_work_factory: Callable[[], DeedUnitOfWork]
    resolver: IdentityResolver
    chunk_size: int = DEFAULT_EXISTENCE_CHUNK_SIZE

    def check_existing(
        self,
        county: str | None,
        state: str | None,
        nodes: Iterable[object],
    ) -> list[str]:
        """Return the subset of ``nodes`` with a stored record for the jurisdiction.

        Lookups are issued in chunks of ``chunk_size``; the result order is unspecified
        and each node appears at most once.
        """

        candidates = unique_nodes(nodes)
        if not candidates:
            return []

        resolved_county = self.resolver.normalize_county(county)
        resolved_state = self.resolver.normalize_state(state)
        existing: set[str] = set()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.properties
            for chunk in chunked(candidates, self.chunk_size):
                existing |= repository.existing_nodes(resolved_county, resolved_state, chunk)

        log.info(
            "Existence check %s/%s: candidates=%s, existing=%s",
            resolved_county,
            resolved_state,
            len(candidates),
            len(existing),
        )
        return [node for node in candidates if node in existing]
