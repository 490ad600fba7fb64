"""Helpers shared by the bot handlers."""

from __future__ import annotations

import logging

from telegram import InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes

from src.models.query import ListingContext
from src.services.storefront import Storefront

logger = logging.getLogger(__name__)

STOREFRONT_KEY = "storefront"
LISTING_KEY = "listing"


def get_storefront(context: ContextTypes.DEFAULT_TYPE) -> Storefront:
    return context.bot_data[STOREFRONT_KEY]


def user_id_of(update: Update) -> int:
    return update.effective_user.id


def get_listing(context: ContextTypes.DEFAULT_TYPE) -> ListingContext | None:
    return context.user_data.get(LISTING_KEY)


def set_listing(context: ContextTypes.DEFAULT_TYPE, listing: ListingContext) -> None:
    context.user_data[LISTING_KEY] = listing


async def send_or_edit(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    text: str,
    keyboard: InlineKeyboardMarkup | None = None,
) -> None:
    """Edit the message behind a button press, or send a new one for commands."""

    query = update.callback_query
    if query is not None and query.message is not None:
        try:
            await query.edit_message_text(
                text,
                parse_mode=ParseMode.HTML,
                reply_markup=keyboard,
                disable_web_page_preview=True,
            )
            return
        except BadRequest as exc:
            if "message is not modified" in str(exc).lower():
                return
            logger.warning("Could not edit message, sending a new one: %s", exc)

    await context.bot.send_message(
        chat_id=update.effective_chat.id,
        text=text,
        parse_mode=ParseMode.HTML,
        reply_markup=keyboard,
        disable_web_page_preview=True,
    )


async def answer(update: Update, text: str | None = None, *, alert: bool = False) -> None:
    query = update.callback_query
    if query is None:
        return
    try:
        await query.answer(text=text, show_alert=alert)
    except TelegramError as exc:
        # Expired or already-answered queries cannot be answered again
        logger.debug("Callback query answer failed: %s", exc)


async def report_error(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Tell the user something failed; never raises."""

    storefront = get_storefront(context)
    user_id = update.effective_user.id if update.effective_user else None
    text = storefront.languages.message(user_id, "ERROR")
    if update.callback_query is not None:
        await answer(update, text, alert=True)
        return
    if update.effective_chat is None:
        return
    try:
        await context.bot.send_message(chat_id=update.effective_chat.id, text=text)
    except TelegramError as exc:
        logger.warning("Could not deliver error message: %s", exc)
