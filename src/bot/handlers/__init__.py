"""Bot handler registration."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from src.bot import callbacks
from src.bot.callbacks import parse_callback
from src.bot.handlers import cart, menu, products
from src.bot.handlers.common import answer, get_storefront, report_error, user_id_of

logger = logging.getLogger(__name__)

CALLBACK_ROUTES = {
    callbacks.LANG: menu.on_language,
    callbacks.MENU: menu.on_menu,
    callbacks.SETTINGS: menu.on_settings,
    callbacks.HELP: menu.on_help,
    callbacks.REFRESH: menu.on_refresh,
    callbacks.STATS: menu.on_stats,
    callbacks.SEARCH: menu.on_search,
    callbacks.NOOP: menu.on_noop,
    callbacks.BROWSE: products.on_browse,
    callbacks.PLATFORM: products.on_platform,
    callbacks.CATEGORY: products.on_category,
    callbacks.PRICE: products.on_price,
    callbacks.IN_STOCK: products.on_in_stock,
    callbacks.PAGE: products.on_page,
    callbacks.BACK_TO_LIST: products.on_back_to_list,
    callbacks.VIEW: products.on_view,
    callbacks.ADD: cart.on_add,
    callbacks.CART: cart.on_cart,
    callbacks.CHECKOUT: cart.on_checkout,
}


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route a button press to its handler by the action prefix."""

    query = update.callback_query
    action = parse_callback(query.data)
    handler = CALLBACK_ROUTES.get(action.action)
    if handler is None:
        logger.warning("Unknown callback data %r from user %s", query.data, user_id_of(update))
        lang = get_storefront(context).languages
        await answer(update, lang.message(user_id_of(update), "UNKNOWN_ACTION"), alert=True)
        return

    logger.debug("Callback %s%s from user %s", action.action, action.args, user_id_of(update))
    await handler(update, context, action)


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log handler failures and tell the user; the next update is handled normally."""

    logger.error("Error while handling update", exc_info=context.error)
    if isinstance(update, Update):
        await report_error(update, context)


def register_handlers(application: Application) -> None:
    """Attach every command, button and message handler to the application."""

    application.add_handler(CommandHandler("start", menu.start_command))
    application.add_handler(CommandHandler("menu", menu.menu_command))
    application.add_handler(CommandHandler("cart", cart.cart_command))
    application.add_handler(CommandHandler("help", menu.help_command))
    application.add_handler(CommandHandler("lang", menu.lang_command))
    application.add_handler(CallbackQueryHandler(handle_callback))
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, menu.search_message)
    )
    application.add_error_handler(handle_error)
