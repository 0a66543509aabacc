"""Jurisdiction defaults: fallback county/state and per-county auction metadata."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, cast

from .env import ConfigurationError, env_or_default

DEFAULT_COUNTY: Final[str] = "Orange"
DEFAULT_STATE: Final[str] = "FL"


@dataclass(frozen=True, slots=True)
class AuctionDefaultsEntry:
    """Auction metadata applied to a county's listings when the scraper omits it."""

    county: str
    state: str
    location: str | None = None
    start_time: str | None = None
    platform: str | None = None
    source_url: str | None = None


BUILTIN_AUCTION_DEFAULTS: Final[tuple[AuctionDefaultsEntry, ...]] = (
    AuctionDefaultsEntry(
        county="Orange",
        state="FL",
        location="109 E Church St, Orlando, FL 32801",
        start_time="10:00 AM",
    ),
)


@dataclass(frozen=True, slots=True)
class JurisdictionConfig:
    default_county: str = DEFAULT_COUNTY
    default_state: str = DEFAULT_STATE
    auction_defaults: tuple[AuctionDefaultsEntry, ...] = field(
        default_factory=lambda: BUILTIN_AUCTION_DEFAULTS
    )
    counties: tuple[str, ...] = ()

    @property
    def known_counties(self) -> tuple[str, ...]:
        """County spellings to preserve: listed counties, then auction-default counties."""

        names = (*self.counties, *(entry.county for entry in self.auction_defaults))
        return tuple(dict.fromkeys(names))


_ENTRY_KEYS: Final[frozenset[str]] = frozenset(
    {"county", "state", "location", "start_time", "platform", "source_url"}
)


def _optional_str(entry: dict[str, object], key: str, origin: Path) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{origin}: '{key}' must be a string")
    return value


def _read_document(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Jurisdictions file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid jurisdictions file {path}: {exc}") from exc


def load_counties(path: Path) -> tuple[str, ...]:
    """Parse the top-level ``counties`` array of county spellings from a TOML file."""

    raw = _read_document(path).get("counties", [])
    if not isinstance(raw, list):
        raise ConfigurationError(f"{path}: 'counties' must be an array of strings")
    names: list[str] = []
    for value in cast(list[object], raw):
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"{path}: counties must be non-empty strings")
        names.append(value.strip())
    return tuple(names)


def load_auction_defaults(path: Path) -> tuple[AuctionDefaultsEntry, ...]:
    """Parse ``[[auction_defaults]]`` tables from a TOML file."""

    document = _read_document(path)
    raw_entries = document.get("auction_defaults", [])
    if not isinstance(raw_entries, list):
        raise ConfigurationError(f"{path}: 'auction_defaults' must be an array of tables")

    entries: list[AuctionDefaultsEntry] = []
    for raw in cast(list[object], raw_entries):
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{path}: auction_defaults entries must be tables")
        entry = cast(dict[str, object], raw)
        unknown = set(entry) - _ENTRY_KEYS
        if unknown:
            raise ConfigurationError(
                f"{path}: unknown auction_defaults keys: {', '.join(sorted(unknown))}"
            )
        county = _optional_str(entry, "county", path)
        state = _optional_str(entry, "state", path)
        if not county or not state:
            raise ConfigurationError(f"{path}: auction_defaults entries need county and state")
        entries.append(
            AuctionDefaultsEntry(
                county=county,
                state=state,
                location=_optional_str(entry, "location", path),
                start_time=_optional_str(entry, "start_time", path),
                platform=_optional_str(entry, "platform", path),
                source_url=_optional_str(entry, "source_url", path),
            )
        )
    return tuple(entries)


def get_jurisdiction_config() -> JurisdictionConfig:
    file_path = os.getenv("DEEDSYNC_JURISDICTIONS_FILE")
    auction_defaults = BUILTIN_AUCTION_DEFAULTS
    counties: tuple[str, ...] = ()
    if file_path:
        path = Path(file_path).expanduser()
        auction_defaults = load_auction_defaults(path)
        counties = load_counties(path)
    return JurisdictionConfig(
        default_county=env_or_default("DEEDSYNC_DEFAULT_COUNTY", DEFAULT_COUNTY),
        default_state=env_or_default("DEEDSYNC_DEFAULT_STATE", DEFAULT_STATE),
        auction_defaults=auction_defaults,
        counties=counties,
    )
