from dataclasses import dataclass, replace
from typing import Collection, Iterable

from gallery.models import Listing

TAB_ALL = "all"
TAB_FAVORITES = "favorites"
TABS = (TAB_ALL, TAB_FAVORITES)


@dataclass(frozen=True)
class FilterQuery:
    """What the viewer has selected in the browse view."""
    province: str | None = None
    district: str | None = None
    tab: str = TAB_ALL
    query: str = ""

    def toggle_province(self, province: str) -> "FilterQuery":
        # picking the active province again clears the location filter
        if self.province == province:
            return replace(self, province=None, district=None)
        return replace(self, province=province, district=None)

    def toggle_district(self, district: str) -> "FilterQuery":
        if self.district == district:
            return replace(self, province=None, district=None)
        return replace(self, district=district)

    def with_tab(self, tab: str) -> "FilterQuery":
        if tab not in TABS:
            raise ValueError(f"unknown tab {tab!r}")
        return replace(self, tab=tab)

    def with_query(self, query: str) -> "FilterQuery":
        return replace(self, query=query)

    def cleared(self) -> "FilterQuery":
        return FilterQuery(tab=self.tab)


def filter_listings(listings: Iterable[Listing], query: FilterQuery,
                    favorites: Collection[str]) -> list[Listing]:
    """Narrow ``listings`` stage by stage, keeping their order.

    Stages: live only, province, district, favorites tab, free text.
    """
    out = [l for l in listings if not l.removed]
    if query.province:
        out = [l for l in out if l.province == query.province]
    if query.district:
        out = [l for l in out if l.district == query.district]
    if query.tab == TAB_FAVORITES:
        out = [l for l in out if l.id in favorites]
    text = query.query.strip().casefold()
    if text:
        out = [l for l in out if text in l.search_text().casefold()]
    return out
