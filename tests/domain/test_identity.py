from __future__ import annotations

import pytest

from deedsync.domain.errors import InvalidIdentity, InvalidInput
from deedsync.domain.identity import IdentityResolver
from deedsync.domain.model import Identity


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver(default_county="Orange", default_state="FL")


def test_resolve_uses_configured_defaults_for_missing_jurisdiction(
    resolver: IdentityResolver,
) -> None:
    identity = resolver.resolve(None, "  ", "A1")

    assert identity == Identity(county="Orange", state="FL", node="A1")


def test_resolve_normalizes_county_and_state(resolver: IdentityResolver) -> None:
    identity = resolver.resolve("  palm   beach ", " fl", "N-9")

    assert identity.county == "Palm Beach"
    assert identity.state == "FL"


def test_resolve_trims_node_without_recasing(resolver: IdentityResolver) -> None:
    identity = resolver.resolve("Orange", "FL", "  abC-12 ")

    assert identity.node == "abC-12"


def test_resolve_accepts_numeric_node(resolver: IdentityResolver) -> None:
    assert resolver.resolve("Orange", "FL", 4512).node == "4512"


@pytest.mark.parametrize("node", [None, "", "   ", True])
def test_resolve_rejects_missing_node(resolver: IdentityResolver, node: object) -> None:
    with pytest.raises(InvalidIdentity):
        resolver.resolve("Orange", "FL", node)


def test_invalid_identity_is_an_input_error(resolver: IdentityResolver) -> None:
    with pytest.raises(InvalidInput):
        resolver.resolve("Orange", "FL", None)


def test_defaults_are_configuration_not_literals() -> None:
    resolver = IdentityResolver(default_county="hillsborough", default_state="fl")

    assert resolver.resolve(None, None, "X").county == "Hillsborough"
    assert resolver.resolve(None, None, "X").state == "FL"


def test_identity_string_form() -> None:
    assert str(Identity(county="Orange", state="FL", node="A1")) == "Orange/FL/A1"


def test_known_counties_keep_their_spelling() -> None:
    resolver = IdentityResolver(
        default_county="DeSoto",
        default_state="FL",
        known_counties=("DeSoto", "St. Johns", "McDowell"),
    )

    assert resolver.normalize_county("desoto") == "DeSoto"
    assert resolver.normalize_county("  DESOTO ") == "DeSoto"
    assert resolver.normalize_county(None) == "DeSoto"
    assert resolver.normalize_county("st.   johns") == "St. Johns"
    assert resolver.normalize_county("palm beach") == "Palm Beach"
