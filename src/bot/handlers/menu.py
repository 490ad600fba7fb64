"""Commands, main menu, settings and search entry."""

from __future__ import annotations

import logging
from html import escape

from telegram import Update
from telegram.ext import ContextTypes

from src.bot import callbacks, keyboards
from src.bot.callbacks import CallbackAction
from src.bot.formatting import format_statistics
from src.bot.handlers.common import (
    answer,
    get_storefront,
    send_or_edit,
    user_id_of,
)
from src.bot.handlers.products import show_listing
from src.models.query import ListingContext, ProductFilters
from src.services.catalog_store import LoadError

logger = logging.getLogger(__name__)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    storefront = get_storefront(context)
    user_id = user_id_of(update)
    logger.info("User %s started the bot", user_id)
    await send_or_edit(
        update,
        context,
        storefront.languages.message(user_id, "CHOOSE_LANGUAGE"),
        keyboards.language_keyboard(),
    )


async def menu_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await show_main_menu(update, context)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await show_help(update, context)


async def lang_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await start_command(update, context)


async def show_main_menu(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    storefront = get_storefront(context)
    user_id = user_id_of(update)
    await send_or_edit(
        update,
        context,
        storefront.languages.message(user_id, "MAIN_MENU"),
        keyboards.main_menu_keyboard(storefront.languages, user_id),
    )


async def show_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    lang = get_storefront(context).languages
    user_id = user_id_of(update)
    text = f"{lang.message(user_id, 'HELP_TITLE')}\n\n{lang.message(user_id, 'HELP_CONTENT')}"
    await send_or_edit(update, context, text, keyboards.back_keyboard(lang, user_id))


async def on_language(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    code = action.arg(0)

    if code is None:
        await answer(update)
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "CHOOSE_LANGUAGE"),
            keyboards.language_keyboard(),
        )
        return

    if not lang.set_language(user_id, code):
        await answer(update, lang.message(user_id, "UNKNOWN_ACTION"), alert=True)
        return

    logger.info("User %s switched language to %s", user_id, code)
    await answer(update, lang.message(user_id, "LANGUAGE_CHANGED"))
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "WELCOME"),
        keyboards.main_menu_keyboard(lang, user_id),
    )


async def on_menu(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    await answer(update)
    await show_main_menu(update, context)


async def on_help(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    await answer(update)
    await show_help(update, context)


async def on_settings(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    lang = get_storefront(context).languages
    user_id = user_id_of(update)
    await answer(update)
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "SETTINGS_TITLE"),
        keyboards.settings_keyboard(lang, user_id),
    )


async def on_refresh(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    back = keyboards.back_keyboard(lang, user_id, "BACK_TO_SETTINGS", callbacks.SETTINGS)

    try:
        snapshot = storefront.catalog.refresh()
    except LoadError as exc:
        logger.error("Catalog refresh requested by %s failed: %s", user_id, exc)
        await answer(update)
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "REFRESH_FAILED", error=escape(str(exc))),
            back,
        )
        return

    await answer(update)
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "REFRESH_DONE", total=len(snapshot.products)),
        back,
    )


async def on_stats(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    back = keyboards.back_keyboard(lang, user_id, "BACK_TO_SETTINGS", callbacks.SETTINGS)
    await answer(update)

    platforms = storefront.catalog.platform_stats()
    brackets = storefront.catalog.price_bracket_stats()
    if platforms.degraded or brackets.degraded:
        logger.warning("Statistics requested while catalog unavailable: %s", platforms.error)
        await send_or_edit(update, context, lang.message(user_id, "STATS_UNAVAILABLE"), back)
        return

    text = format_statistics(
        lang,
        user_id,
        platforms.items,
        brackets.items,
        storefront.catalog.summary(),
    )
    await send_or_edit(update, context, text, back)


async def on_search(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    message = update.callback_query.message
    storefront.sessions.start(user_id, message.message_id if message else None)

    await answer(update)
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "SEARCH_PROMPT"),
        keyboards.back_keyboard(lang, user_id),
    )


async def on_noop(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    await answer(update)


async def search_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Plain text counts as a search term only right after a search prompt."""

    storefront = get_storefront(context)
    user_id = user_id_of(update)
    if storefront.sessions.pop(user_id) is None:
        return

    term = (update.message.text or "").strip()
    if not term:
        return

    logger.info("User %s searched for %r", user_id, term)
    listing = ListingContext(kind="search", filters=ProductFilters(search=term))
    await show_listing(update, context, listing)
