from __future__ import annotations

import pytest

from deedsync.domain.admin import AdminEdit, AdminEditService
from deedsync.domain.errors import InvalidInput, PropertyNotFound
from deedsync.domain.model import PropertyStatus
from tests.helpers.fakes import FakeClock, FakeStore
from tests.helpers.listings import make_property


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def service(store: FakeStore) -> AdminEditService:
    return AdminEditService(unit_of_work_factory=store.unit_of_work, now_provider=FakeClock())


def test_edit_sets_status_and_notes(service: AdminEditService, store: FakeStore) -> None:
    listing = store.properties.add(make_property("A1"))
    assert listing.id is not None

    edited = service.edit(
        listing.id,
        AdminEdit(status=PropertyStatus.REVIEWED, notes="call owner"),
    )

    assert edited.status is PropertyStatus.REVIEWED
    assert edited.notes == "call owner"
    assert edited.updated_at is not None
    assert store.commits == 1


def test_edit_leaves_unsent_fields_alone(service: AdminEditService, store: FakeStore) -> None:
    listing = store.properties.add(make_property("A1", status=PropertyStatus.EXPORTED))
    assert listing.id is not None

    edited = service.edit(listing.id, AdminEdit(notes="sent to buyer"))

    assert edited.status is PropertyStatus.EXPORTED


def test_unknown_property_is_not_found(service: AdminEditService) -> None:
    with pytest.raises(PropertyNotFound):
        service.edit(999, AdminEdit(notes="x"))


@pytest.mark.parametrize("status", [None, PropertyStatus.REMOVED])
def test_reserved_or_null_status_is_rejected(
    service: AdminEditService,
    store: FakeStore,
    status: PropertyStatus | None,
) -> None:
    listing = store.properties.add(make_property("A1"))
    assert listing.id is not None

    with pytest.raises(InvalidInput):
        service.edit(listing.id, AdminEdit(status=status))


def test_removed_listing_accepts_notes_but_not_status(
    service: AdminEditService,
    store: FakeStore,
) -> None:
    listing = store.properties.add(
        make_property("A1", status=PropertyStatus.REMOVED, is_active=False)
    )
    assert listing.id is not None

    edited = service.edit(listing.id, AdminEdit(notes="sold privately"))
    assert edited.notes == "sold privately"

    with pytest.raises(InvalidInput):
        service.edit(listing.id, AdminEdit(status=PropertyStatus.REVIEWED))
