import logging
from html import escape
from typing import Sequence

from telegram import InputMediaPhoto, Update
from telegram.error import BadRequest
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from gallery.app import GalleryApp
from gallery.core.areas import AREAS, provinces
from gallery.core.errors import DuplicateUser, InvalidCredentials, NotAuthorized
from gallery.core.filters import TAB_ALL, TAB_FAVORITES, FilterQuery
from gallery.models import ROLE_ANONYMOUS, Listing
from gallery.utils.formatting import (build_admin_keyboard, build_keyboard, build_slider_keyboard,
                                      format_admin_row, format_caption, slider_index)
from gallery.utils.i18n import TRANSLATIONS, t
from gallery.utils.media import photo_payload

LOG = logging.getLogger("gallery.bot")

DEFAULT_PAGE_SIZE = 10

CREATE_FIELDS = ("title", "price", "province", "district", "sqm", "rooms", "description")


def parse_create_args(text: str) -> dict:
    """``title | price | province | district | sqm | rooms | description`` -> payload.

    Missing trailing parts are left out so validation applies its defaults;
    blank parts are kept as empty strings.
    """
    parts = [p.strip() for p in text.split("|")]
    if parts == [""]:
        return {}
    payload = dict(zip(CREATE_FIELDS, parts))
    if len(parts) > len(CREATE_FIELDS):
        # a "|" inside the description
        payload["description"] = " | ".join(parts[len(CREATE_FIELDS) - 1:])
    return payload


def parse_image_index(raw: str) -> int | None:
    """Image index from ``img:<id>:<index>`` callback data; None if forged."""
    try:
        return int(raw or 0)
    except ValueError:
        return None


def match_name(name: str, options: Sequence[str]) -> str | None:
    wanted = name.strip().casefold()
    for option in options:
        if option.casefold() == wanted:
            return option
    return None


def _gallery(context: ContextTypes.DEFAULT_TYPE) -> GalleryApp:
    return context.bot_data["gallery"]


def _view(context: ContextTypes.DEFAULT_TYPE) -> FilterQuery:
    return context.chat_data.get("view") or FilterQuery()


def _set_view(context: ContextTypes.DEFAULT_TYPE, view: FilterQuery) -> None:
    context.chat_data["view"] = view


def _describe_view(view: FilterQuery, lang: str) -> str:
    parts = [t(lang, "fav") if view.tab == TAB_FAVORITES else t(lang, "all")]
    if view.province:
        parts.append(view.province)
    if view.district:
        parts.append(view.district)
    if view.query.strip():
        parts.append(f"“{view.query.strip()}”")
    return " · ".join(parts)


async def send_listing(context: ContextTypes.DEFAULT_TYPE, chat_id: int, listing: Listing):
    gallery = _gallery(context)
    lang = gallery.lang
    caption = format_caption(listing, lang)
    kb = build_keyboard(listing, lang, gallery.is_favorite(listing.id), gallery.auth.is_admin())
    photo = photo_payload(listing.cover)
    if photo is not None:
        try:
            await context.bot.send_photo(
                chat_id=chat_id,
                photo=photo,
                caption=caption,
                parse_mode="HTML",
                reply_markup=kb,
            )
            return
        except BadRequest as e:
            # Telegram could not fetch or decode the cover; send text instead
            LOG.warning("Cover for %s rejected: %s", listing.id, e)
    await context.bot.send_message(
        chat_id=chat_id,
        text=caption,
        parse_mode="HTML",
        reply_markup=kb,
        disable_web_page_preview=True,
    )


async def show_results(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    lang = gallery.lang
    view = _view(context)
    results = gallery.filter(view)
    page_size = context.bot_data.get("page_size", DEFAULT_PAGE_SIZE)

    header = f"<b>{t(lang, 'results')}</b> ({_describe_view(view, lang)}): {len(results)}"
    await update.effective_message.reply_html(header)
    if not results:
        await update.effective_message.reply_text(t(lang, "noResults"))
        return
    for listing in results[:page_size]:
        await send_listing(context, update.effective_chat.id, listing)


# Handlers
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    lang = _gallery(context).lang
    await update.message.reply_text(f"{t(lang, 'appTitle')}\n\n{t(lang, 'help')}")


async def browse(update: Update, context: ContextTypes.DEFAULT_TYPE):
    if context.args:
        _set_view(context, _view(context).with_query(" ".join(context.args)))
    await show_results(update, context)


async def tab_all(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _set_view(context, _view(context).with_tab(TAB_ALL))
    await show_results(update, context)


async def tab_favorites(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _set_view(context, _view(context).with_tab(TAB_FAVORITES))
    await show_results(update, context)


async def province(update: Update, context: ContextTypes.DEFAULT_TYPE):
    lang = _gallery(context).lang
    name = match_name(" ".join(context.args or []), provinces())
    if name is None:
        await update.message.reply_text(f"{t(lang, 'unknownArea')}: {', '.join(provinces())}")
        return
    _set_view(context, _view(context).toggle_province(name))
    await show_results(update, context)


async def district(update: Update, context: ContextTypes.DEFAULT_TYPE):
    lang = _gallery(context).lang
    view = _view(context)
    # districts of the active province, or every district when none is active
    options = AREAS[view.province] if view.province else [d for ds in AREAS.values() for d in ds]
    name = match_name(" ".join(context.args or []), options)
    if name is None:
        await update.message.reply_text(f"{t(lang, 'unknownArea')}: {', '.join(options)}")
        return
    _set_view(context, view.toggle_district(name))
    await show_results(update, context)


async def search(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _set_view(context, _view(context).with_query(" ".join(context.args or [])))
    await show_results(update, context)


async def clear(update: Update, context: ContextTypes.DEFAULT_TYPE):
    _set_view(context, _view(context).cleared())
    await update.message.reply_text(t(_gallery(context).lang, "filtersCleared"))


async def new_listing(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    lang = gallery.lang
    payload = parse_create_args(" ".join(context.args or []))
    if not payload:
        await update.message.reply_text(t(lang, "createUsage"))
        return
    listing, coercions = gallery.create_listing(payload)
    note = ""
    if coercions:
        note = "\n" + ", ".join(sorted({c.field for c in coercions})) + " → default"
    await update.message.reply_text(f"{t(lang, 'created')} ✅{note}")
    await send_listing(context, update.effective_chat.id, listing)


async def register(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    lang = gallery.lang
    if len(context.args or []) != 2:
        await update.message.reply_text(t(lang, "authUsage").replace("/login", "/register"))
        return
    username, password = context.args
    try:
        gallery.register(username, password)
    except DuplicateUser:
        await update.message.reply_text(t(lang, "userExists"))
        return
    except InvalidCredentials:
        await update.message.reply_text(t(lang, "authUsage").replace("/login", "/register"))
        return
    await update.message.reply_text(f"{t(lang, 'registered')} ✅")


async def login(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    lang = gallery.lang
    if len(context.args or []) != 2:
        await update.message.reply_text(t(lang, "authUsage"))
        return
    username, password = context.args
    try:
        user = gallery.login(username, password)
    except InvalidCredentials:
        await update.message.reply_text(t(lang, "badLogin"))
        return
    await update.message.reply_text(f"{t(lang, 'welcome')}, {user.username} ({user.role})")


async def logout(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    gallery.logout()
    await update.message.reply_text(t(gallery.lang, "loggedOut") + " 👋")


async def whoami(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    user = gallery.auth.current_user()
    if user is None:
        await update.message.reply_text(t(gallery.lang, "anonymous"))
    else:
        await update.message.reply_text(f"{user.username} ({user.role})")


async def language(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    choice = (context.args or [""])[0].lower()
    if choice not in TRANSLATIONS:
        await update.message.reply_text(" | ".join(TRANSLATIONS))
        return
    gallery.set_language(choice)
    await update.message.reply_text(t(choice, "langSet"))


async def admin_panel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    gallery = _gallery(context)
    lang = gallery.lang
    if gallery.current_role() == ROLE_ANONYMOUS:
        await update.message.reply_text(t(lang, "anonymous"))
        return
    is_admin = gallery.auth.is_admin()
    await update.message.reply_html(f"<b>{t(lang, 'adminPanel')}</b>")
    for listing in gallery.listings.all():
        await update.message.reply_html(
            format_admin_row(listing, lang),
            reply_markup=build_admin_keyboard(listing, lang, is_admin),
        )


# Callbacks
async def _refresh_card(update: Update, context: ContextTypes.DEFAULT_TYPE, listing: Listing, admin_row: bool):
    gallery = _gallery(context)
    lang = gallery.lang
    if admin_row:
        kb = build_admin_keyboard(listing, lang, gallery.auth.is_admin())
    else:
        kb = build_keyboard(listing, lang, gallery.is_favorite(listing.id), gallery.auth.is_admin())
    try:
        await update.callback_query.edit_message_reply_markup(reply_markup=kb)
    except BadRequest as e:
        # "message is not modified" and friends
        LOG.debug("Keyboard refresh skipped: %s", e)


async def show_image(update: Update, context: ContextTypes.DEFAULT_TYPE, listing: Listing, index: int):
    query = update.callback_query
    index = slider_index(index, len(listing.images))
    photo = photo_payload(listing.images[index]) if listing.images else None
    caption = f"<b>{escape(listing.title)}</b> {index + 1}/{len(listing.images)}"
    if photo is None:
        await query.answer(f"{index + 1}/{len(listing.images)}")
        return
    try:
        await query.edit_message_media(
            InputMediaPhoto(media=photo, caption=caption, parse_mode="HTML"),
            reply_markup=build_slider_keyboard(listing, index),
        )
    except BadRequest as e:
        LOG.warning("Could not show image %d of %s: %s", index, listing.id, e)
    await query.answer()


async def on_button(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    gallery = _gallery(context)
    lang = gallery.lang
    action, _, rest = (query.data or "").partition(":")
    listing_id, _, extra = rest.partition(":")

    if action == "fav":
        added = gallery.toggle_favorite(listing_id)
        listing = gallery.listings.get(listing_id)
        await query.answer("❤️" if added else "🤍")
        if listing is not None:
            await _refresh_card(update, context, listing, admin_row=False)
        return

    if action == "img":
        listing = gallery.listings.get(listing_id)
        if listing is None:
            await query.answer(t(lang, "notFound"))
            return
        index = parse_image_index(extra)
        if index is None:
            await query.answer(t(lang, "notFound"))
            return
        await show_image(update, context, listing, index)
        return

    if gallery.current_role() == ROLE_ANONYMOUS:
        await query.answer(t(lang, "anonymous"))
        return

    if action in ("rm", "rs"):
        listing = gallery.soft_remove(listing_id) if action == "rm" else gallery.restore(listing_id)
        if listing is None:
            await query.answer(t(lang, "notFound"))
            return
        await query.answer(t(lang, "remove" if action == "rm" else "restore"))
        await _refresh_card(update, context, listing, admin_row=True)
        return

    if action == "del":
        try:
            deleted = gallery.hard_delete(listing_id)
        except NotAuthorized:
            await query.answer(t(lang, "adminOnly"), show_alert=True)
            return
        await query.answer(t(lang, "deleteForever") if deleted else t(lang, "notFound"))
        if deleted:
            await query.edit_message_reply_markup(reply_markup=None)
        return

    LOG.warning("Unknown callback data: %r", query.data)
    await query.answer()


def attach_handlers(app: Application):
    app.add_handler(CommandHandler(["start", "help"], start))
    app.add_handler(CommandHandler("browse", browse))
    app.add_handler(CommandHandler("all", tab_all))
    app.add_handler(CommandHandler("favs", tab_favorites))
    app.add_handler(CommandHandler("province", province))
    app.add_handler(CommandHandler("district", district))
    app.add_handler(CommandHandler("search", search))
    app.add_handler(CommandHandler("clear", clear))
    app.add_handler(CommandHandler("new", new_listing))
    app.add_handler(CommandHandler("register", register))
    app.add_handler(CommandHandler("login", login))
    app.add_handler(CommandHandler("logout", logout))
    app.add_handler(CommandHandler("whoami", whoami))
    app.add_handler(CommandHandler("lang", language))
    app.add_handler(CommandHandler("admin", admin_panel))
    app.add_handler(CallbackQueryHandler(on_button))


def bind_gallery(app: Application, gallery: GalleryApp, page_size: int = DEFAULT_PAGE_SIZE):
    app.bot_data["gallery"] = gallery
    app.bot_data["page_size"] = page_size
