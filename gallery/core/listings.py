import logging
import uuid
from dataclasses import replace
from typing import Callable, Sequence

from gallery.core.errors import NotAuthorized
from gallery.core.favorites import FavoritesStore
from gallery.core.storage import LISTINGS_KEY, JsonStorage
from gallery.core.validation import placeholder_images, validate_listing_payload
from gallery.models import ROLE_ADMIN, Coercion, Coords, Listing

LOG = logging.getLogger("gallery.listings")


def seed_listings() -> list[Listing]:
    """Demo listings shown on first run."""
    return [
        Listing(
            id=str(uuid.uuid4()),
            title="Ege Apartmanı",
            price=15_000_000,
            province="Çanakkale",
            district="Ayvacık",
            sqm=120,
            rooms=3,
            description="Denize yakın, aydınlık daire.",
            images=tuple(placeholder_images("Canakkale-Ayvacik-Ege", 12)),
            coords=Coords(lat=39.7, lng=26.2),
        ),
        Listing(
            id=str(uuid.uuid4()),
            title="Akçay Sahil Sitesi 3+1",
            price=11_900_000,
            province="Balıkesir",
            district="Akçay",
            sqm=95,
            rooms=3,
            description="Site içinde, manzaralı.",
            images=tuple(placeholder_images("Akcay-Sahil-3plus1", 10)),
            coords=Coords(lat=39.57, lng=26.8),
        ),
    ]


class ListingStore:
    """Newest-first listing collection with soft/hard delete.

    Every command replaces the in-memory tuple in one step and then writes it
    once, so a failed write never leaves a half-applied change in memory.
    """

    def __init__(self, storage: JsonStorage, favorites: FavoritesStore,
                 seed: Callable[[], Sequence[Listing]] = seed_listings):
        self._storage = storage
        self._favorites = favorites
        self._listings: tuple[Listing, ...] = self._load(seed)

    def _load(self, seed: Callable[[], Sequence[Listing]]) -> tuple[Listing, ...]:
        raw = self._storage.load(LISTINGS_KEY, None)
        if raw is not None:
            try:
                if not isinstance(raw, list):
                    raise TypeError(f"expected a list, got {type(raw).__name__}")
                return tuple(Listing.from_dict(r) for r in raw)
            except (KeyError, TypeError, ValueError) as e:
                LOG.warning("Stored listings are malformed, using demo listings: %s", e)
        listings = tuple(seed())
        # persist the seed so its ids survive a restart
        self._storage.save(LISTINGS_KEY, [l.to_dict() for l in listings])
        return listings

    def _commit(self, listings: tuple[Listing, ...]) -> None:
        self._listings = listings
        self._storage.save(LISTINGS_KEY, [l.to_dict() for l in listings])

    def all(self) -> list[Listing]:
        return list(self._listings)

    def get(self, listing_id: str) -> Listing | None:
        for listing in self._listings:
            if listing.id == listing_id:
                return listing
        return None

    def create(self, payload: dict) -> tuple[Listing, list[Coercion]]:
        validated = validate_listing_payload(payload)
        listing = Listing(id=str(uuid.uuid4()), removed=False, **validated.fields)
        self._commit((listing, *self._listings))
        LOG.info("Created listing %s (%s / %s)", listing.id, listing.province, listing.district)
        return listing, validated.coercions

    def _set_removed(self, listing_id: str, removed: bool) -> Listing | None:
        target = self.get(listing_id)
        if target is None:
            LOG.debug("No listing %s, nothing to update", listing_id)
            return None
        if target.removed == removed:
            return target
        updated = replace(target, removed=removed)
        self._commit(tuple(updated if l.id == listing_id else l for l in self._listings))
        return updated

    def soft_remove(self, listing_id: str) -> Listing | None:
        listing = self._set_removed(listing_id, True)
        if listing is not None:
            LOG.info("Soft-removed listing %s", listing_id)
        return listing

    def restore(self, listing_id: str) -> Listing | None:
        listing = self._set_removed(listing_id, False)
        if listing is not None:
            LOG.info("Restored listing %s", listing_id)
        return listing

    def hard_delete(self, listing_id: str, role: str) -> bool:
        """Drop a listing for good and purge it from favorites. Admins only."""
        if role != ROLE_ADMIN:
            raise NotAuthorized("hard_delete", role)
        remaining = tuple(l for l in self._listings if l.id != listing_id)
        # stale favorites are purged even when the listing is already gone
        self._favorites.discard(listing_id)
        if len(remaining) == len(self._listings):
            LOG.debug("No listing %s, nothing to delete", listing_id)
            return False
        self._commit(remaining)
        LOG.info("Hard-deleted listing %s", listing_id)
        return True
