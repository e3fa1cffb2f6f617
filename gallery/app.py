from pathlib import Path

from gallery.core.auth import AuthStore
from gallery.core.favorites import FavoritesStore
from gallery.core.filters import FilterQuery, filter_listings
from gallery.core.listings import ListingStore
from gallery.core.storage import DATA_DIR, JsonStorage
from gallery.models import Coercion, Listing, User
from gallery.utils.i18n import LanguagePreference


class GalleryApp:
    """All gallery state for one device, plus the commands the UI may issue.

    The stores are built here and handed to the presentation layer as one
    object; nothing in the core is a module-level singleton.
    """

    def __init__(self, storage: JsonStorage):
        self.storage = storage
        self.favorites = FavoritesStore(storage)
        self.listings = ListingStore(storage, self.favorites)
        self.auth = AuthStore(storage)
        self.language = LanguagePreference(storage)

    @classmethod
    def from_data_dir(cls, data_dir: Path = DATA_DIR) -> "GalleryApp":
        return cls(JsonStorage(data_dir))

    # listings
    def create_listing(self, payload: dict) -> tuple[Listing, list[Coercion]]:
        return self.listings.create(payload)

    def soft_remove(self, listing_id: str) -> Listing | None:
        return self.listings.soft_remove(listing_id)

    def restore(self, listing_id: str) -> Listing | None:
        return self.listings.restore(listing_id)

    def hard_delete(self, listing_id: str) -> bool:
        return self.listings.hard_delete(listing_id, role=self.auth.current_role())

    # favorites
    def toggle_favorite(self, listing_id: str) -> bool:
        return self.favorites.toggle(listing_id)

    def is_favorite(self, listing_id: str) -> bool:
        return listing_id in self.favorites

    # auth
    def register(self, username: str, password: str) -> User:
        return self.auth.register(username, password)

    def login(self, username: str, password: str) -> User:
        return self.auth.login(username, password)

    def logout(self) -> None:
        self.auth.logout()

    def current_role(self) -> str:
        return self.auth.current_role()

    # browsing
    def filter(self, query: FilterQuery) -> list[Listing]:
        return filter_listings(self.listings.all(), query, set(self.favorites.ids()))

    @property
    def lang(self) -> str:
        return self.language.lang

    def set_language(self, lang: str) -> None:
        self.language.set(lang)
