"""Canonical identity of incoming listings."""

from __future__ import annotations

from dataclasses import dataclass, field

from deedsync.domain.errors import InvalidIdentity
from deedsync.domain.model import Identity


def _collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


@dataclass(frozen=True, slots=True)
class IdentityResolver:
    """Compute ``(county, state, node)`` from raw request values.

    County and state fall back to the configured jurisdiction when absent or blank.
    Counties listed in ``known_counties`` keep their configured spelling, matched
    case-insensitively; any other county is title-cased.
    The node is an opaque source token: it is trimmed, never re-cased.
    """

    default_county: str
    default_state: str
    known_counties: tuple[str, ...] = ()
    _spellings: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        spellings: dict[str, str] = {}
        for name in self.known_counties:
            canonical = _collapse_whitespace(name)
            if canonical:
                spellings.setdefault(canonical.casefold(), canonical)
        object.__setattr__(self, "_spellings", spellings)

    def resolve(self, county: object, state: object, node: object) -> Identity:
        normalized_node = self.normalize_node(node)
        if normalized_node is None:
            raise InvalidIdentity("Missing node")
        return Identity(
            county=self.normalize_county(county),
            state=self.normalize_state(state),
            node=normalized_node,
        )

    def normalize_county(self, county: object) -> str:
        text = _collapse_whitespace(str(county)) if county is not None else ""
        text = text or _collapse_whitespace(self.default_county)
        return self._spellings.get(text.casefold(), text.title())

    def normalize_state(self, state: object) -> str:
        text = str(state).strip() if state is not None else ""
        return (text or self.default_state.strip()).upper()

    @staticmethod
    def normalize_node(node: object) -> str | None:
        if node is None or isinstance(node, bool):
            return None
        text = str(node).strip()
        return text or None
