from html import escape

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from gallery.models import Listing
from gallery.utils.i18n import t

DESCRIPTION_PREVIEW = 300


def format_price(amount: float) -> str:
    # tr-TR TRY, no fraction digits: 15000000 -> ₺15.000.000
    return "₺" + f"{round(amount):,}".replace(",", ".")


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}".replace(".", ",")


def maps_url(listing: Listing) -> str | None:
    if listing.coords is None:
        return None
    return f"https://www.google.com/maps?q={listing.coords.lat},{listing.coords.lng}"


def format_caption(listing: Listing, lang: str) -> str:
    # title, price, area badge, size line, then the description
    lines = [
        f"<b>{escape(listing.title)}</b>",
        f"<b>{format_price(listing.price)}</b>",
        f"📍 {escape(listing.province)} • {escape(listing.district)}",
        f"{format_number(listing.sqm)} m² • {listing.rooms} {t(lang, 'rooms').lower()}",
    ]
    if listing.removed:
        lines[0] += f" <i>({t(lang, 'removedBadge')})</i>"
    if listing.description:
        desc = listing.description
        if len(desc) > DESCRIPTION_PREVIEW:
            desc = desc[:DESCRIPTION_PREVIEW].rstrip() + "…"
        lines += ["", escape(desc)]
    return "\n".join(lines)


def format_admin_row(listing: Listing, lang: str) -> str:
    state = f" ({t(lang, 'removedBadge')})" if listing.removed else ""
    return (
        f"<b>{escape(listing.title)}</b>{state}\n"
        f"{escape(listing.province)} • {escape(listing.district)} • {format_price(listing.price)}"
    )


def build_keyboard(listing: Listing, lang: str, is_favorite: bool, is_admin: bool) -> InlineKeyboardMarkup:
    first_row = [
        InlineKeyboardButton(
            ("❤️ " + t(lang, "favRemove")) if is_favorite else ("🤍 " + t(lang, "favAdd")),
            callback_data=f"fav:{listing.id}",
        ),
    ]
    if is_admin:
        first_row.append(InlineKeyboardButton("🗑 " + t(lang, "remove"), callback_data=f"rm:{listing.id}"))
    rows = [first_row]

    second_row = []
    if len(listing.images) > 1:
        second_row.append(InlineKeyboardButton(f"🖼 1/{len(listing.images)}", callback_data=f"img:{listing.id}:0"))
    url = maps_url(listing)
    if url:
        second_row.append(InlineKeyboardButton("🗺️ " + t(lang, "openMap"), url=url))
    if second_row:
        rows.append(second_row)
    return InlineKeyboardMarkup(rows)


def build_admin_keyboard(listing: Listing, lang: str, is_admin: bool) -> InlineKeyboardMarkup:
    if listing.removed:
        row = [InlineKeyboardButton("↩️ " + t(lang, "restore"), callback_data=f"rs:{listing.id}")]
    else:
        row = [InlineKeyboardButton("🗑 " + t(lang, "remove"), callback_data=f"rm:{listing.id}")]
    if is_admin:
        row.append(InlineKeyboardButton("⛔ " + t(lang, "deleteForever"), callback_data=f"del:{listing.id}"))
    return InlineKeyboardMarkup([row])


def slider_index(index: int, total: int) -> int:
    """Wrap ``index`` into ``range(total)`` so prev/next cycle through images."""
    if total <= 0:
        return 0
    return index % total


def build_slider_keyboard(listing: Listing, index: int) -> InlineKeyboardMarkup:
    total = len(listing.images)
    prev_i = slider_index(index - 1, total)
    next_i = slider_index(index + 1, total)
    return InlineKeyboardMarkup([[
        InlineKeyboardButton("◀️", callback_data=f"img:{listing.id}:{prev_i}"),
        InlineKeyboardButton(f"{index + 1}/{total}", callback_data=f"img:{listing.id}:{index}"),
        InlineKeyboardButton("▶️", callback_data=f"img:{listing.id}:{next_i}"),
    ]])
