import logging

from gallery.core.storage import FAVORITES_KEY, JsonStorage

LOG = logging.getLogger("gallery.favorites")


class FavoritesStore:
    """Listing ids the viewer has marked on this device.

    Ids are never checked against the listing store; ids of deleted listings
    simply match nothing when the gallery is filtered.
    """

    def __init__(self, storage: JsonStorage):
        self._storage = storage
        self._ids: list[str] = self._load()

    def _load(self) -> list[str]:
        raw = self._storage.load(FAVORITES_KEY, [])
        if not isinstance(raw, list):
            LOG.warning("Ignoring malformed favorites: %r", raw)
            return []
        # dedupe, keep first occurrence
        return list(dict.fromkeys(str(i) for i in raw))

    def _save(self) -> None:
        self._storage.save(FAVORITES_KEY, self._ids)

    def ids(self) -> list[str]:
        return list(self._ids)

    def contains(self, listing_id: str) -> bool:
        return listing_id in self._ids

    def __contains__(self, listing_id: str) -> bool:
        return self.contains(listing_id)

    def __len__(self) -> int:
        return len(self._ids)

    def toggle(self, listing_id: str) -> bool:
        """Flip membership of ``listing_id``; returns True if it is now a favorite."""
        if listing_id in self._ids:
            self._ids = [i for i in self._ids if i != listing_id]
            added = False
        else:
            self._ids = [*self._ids, listing_id]
            added = True
        self._save()
        return added

    def discard(self, listing_id: str) -> None:
        if listing_id not in self._ids:
            return
        self._ids = [i for i in self._ids if i != listing_id]
        self._save()
