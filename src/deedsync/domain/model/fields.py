"""Three-state field values for sparse updates.

A field can be omitted by the caller (``UNSET``), explicitly cleared (``None``), or
carry a value. Merges treat the first as "keep what is stored" and the second as
"overwrite with null".
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Literal


class Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = Unset.UNSET

type Patch[T] = T | Literal[Unset.UNSET]


def is_set[T](value: Patch[T]) -> bool:
    return value is not UNSET


def patched[T](value: Patch[T], current: T) -> T:
    """Return ``value`` when the caller sent it, otherwise ``current``."""

    if value is UNSET:
        return current
    return value
