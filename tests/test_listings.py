from dataclasses import replace

import pytest

from gallery.core.areas import is_valid_location
from gallery.core.errors import NotAuthorized
from gallery.core.favorites import FavoritesStore
from gallery.core.listings import ListingStore
from gallery.core.storage import LISTINGS_KEY
from gallery.models import ROLE_ADMIN, ROLE_ANONYMOUS, ROLE_USER

PAYLOAD = {
    "title": "Edremit Bahçeli Ev",
    "price": 7_500_000,
    "province": "Balıkesir",
    "district": "Edremit",
    "sqm": 140,
    "rooms": 4,
    "description": "Zeytinlik içinde.",
    "images": ["https://example.com/1.jpg", "https://example.com/2.jpg"],
}


@pytest.fixture
def favorites(storage):
    return FavoritesStore(storage)


@pytest.fixture
def store(storage, favorites):
    return ListingStore(storage, favorites)


def test_first_run_seeds_two_listings(store, storage):
    listings = store.all()
    assert [l.district for l in listings] == ["Ayvacık", "Akçay"]
    assert all(not l.removed for l in listings)
    # seeds are written back so ids are stable
    assert [r["id"] for r in storage.load(LISTINGS_KEY, [])] == [l.id for l in listings]


def test_seed_ids_survive_restart(storage, favorites):
    first = ListingStore(storage, favorites).all()
    second = ListingStore(storage, favorites).all()
    assert first == second


def test_malformed_store_is_reseeded(storage, favorites):
    storage.save(LISTINGS_KEY, [{"id": "x"}])
    assert len(ListingStore(storage, favorites).all()) == 2


def test_create_prepends_with_fresh_id(store):
    before = store.all()
    listing, coercions = store.create(PAYLOAD)
    assert coercions == []
    assert store.all()[0] == listing
    assert store.all()[1:] == before
    assert listing.id not in {l.id for l in before}
    assert listing.removed is False
    assert is_valid_location(listing.province, listing.district)


def test_ids_are_never_reused(store):
    listing, _ = store.create(PAYLOAD)
    store.hard_delete(listing.id, role=ROLE_ADMIN)
    again, _ = store.create(PAYLOAD)
    assert again.id != listing.id


def test_create_is_persisted(storage, favorites, store):
    listing, _ = store.create(PAYLOAD)
    reloaded = ListingStore(storage, favorites)
    assert reloaded.get(listing.id) == listing


def test_soft_remove_then_restore_is_lossless(store):
    original = store.all()[0]
    removed = store.soft_remove(original.id)
    assert removed.removed is True
    assert store.get(original.id).removed is True
    restored = store.restore(original.id)
    assert restored == original
    assert replace(removed, removed=False) == original


def test_soft_remove_keeps_favorites(store, favorites):
    target = store.all()[0]
    favorites.toggle(target.id)
    store.soft_remove(target.id)
    assert target.id in favorites


def test_unknown_ids_are_silent_no_ops(store):
    before = store.all()
    assert store.soft_remove("missing") is None
    assert store.restore("missing") is None
    assert store.hard_delete("missing", role=ROLE_ADMIN) is False
    assert store.all() == before


def test_hard_delete_purges_listing_and_favorite(store, favorites, storage):
    target = store.all()[1]
    favorites.toggle(target.id)
    assert store.hard_delete(target.id, role=ROLE_ADMIN) is True
    assert store.get(target.id) is None
    assert target.id not in favorites
    assert target.id not in {r["id"] for r in storage.load(LISTINGS_KEY, [])}


def test_hard_delete_requires_admin(store):
    target = store.all()[0]
    for role in (ROLE_USER, ROLE_ANONYMOUS):
        with pytest.raises(NotAuthorized):
            store.hard_delete(target.id, role=role)
    assert store.get(target.id) == target


def test_hard_delete_purges_stale_favorite(store, favorites):
    favorites.toggle("gone-already")
    store.hard_delete("gone-already", role=ROLE_ADMIN)
    assert "gone-already" not in favorites


def _stored(**overrides):
    record = {
        "id": "a", "title": "Ev", "price": 1_000_000, "province": "Balıkesir",
        "district": "Akçay", "sqm": 90, "rooms": 2, "description": "",
        "images": [], "coords": None, "removed": False,
    }
    record.update(overrides)
    return record


@pytest.mark.parametrize("overrides", [
    {"province": "Çanakkale", "district": "Akçay"},
    {"price": -5},
    {"sqm": -1},
    {"rooms": -2},
    {"rooms": 2.5},
])
def test_stored_listing_breaking_invariants_is_reseeded(storage, favorites, overrides):
    storage.save(LISTINGS_KEY, [_stored(**overrides)])
    listings = ListingStore(storage, favorites).all()
    assert "a" not in {l.id for l in listings}
    assert len(listings) == 2
    assert all(is_valid_location(l.province, l.district) for l in listings)


def test_valid_stored_listing_is_loaded(storage, favorites):
    storage.save(LISTINGS_KEY, [_stored()])
    assert [l.id for l in ListingStore(storage, favorites).all()] == ["a"]
