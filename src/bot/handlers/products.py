"""Browsing: platforms, categories, price brackets, listings and product detail."""

from __future__ import annotations

import logging
from html import escape

from telegram import Update
from telegram.ext import ContextTypes

from src.bot import callbacks, keyboards
from src.bot.callbacks import CallbackAction
from src.bot.formatting import format_listing_header, format_product, platform_emoji
from src.bot.handlers.common import (
    answer,
    get_listing,
    get_storefront,
    send_or_edit,
    set_listing,
    user_id_of,
)
from src.models.query import ListingContext, ProductFilters
from src.services.query_engine import query

logger = logging.getLogger(__name__)


def _parse_index(value: str | None) -> int | None:
    if value is None or not value.isdigit():
        return None
    return int(value)


async def show_listing(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    listing: ListingContext,
) -> None:
    """Render one page of a listing and remember it for paging and back buttons."""

    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    result = query(storefront.catalog.snapshot, listing.filters, listing.page)
    pagination = result.pagination
    set_listing(context, listing)

    if listing.kind == "category":
        back_data, back_key = callbacks.platform(listing.filters.platform or ""), "BACK_TO_CATEGORIES"
    else:
        back_data, back_key = callbacks.MENU, "MAIN_MENU"

    if pagination.total == 0:
        if listing.kind == "in_stock":
            text = lang.message(user_id, "NO_STOCK_PRODUCTS")
        elif listing.kind == "search":
            text = lang.message(user_id, "SEARCH_NO_RESULTS", query=escape(listing.filters.search or ""))
        else:
            text = lang.message(user_id, "NO_PRODUCTS")
        await send_or_edit(
            update, context, text, keyboards.back_keyboard(lang, user_id, back_key, back_data)
        )
        return

    if not result.products:
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "NO_MORE_PRODUCTS"),
            keyboards.back_keyboard(lang, user_id, back_key, back_data),
        )
        return

    await send_or_edit(
        update,
        context,
        format_listing_header(lang, user_id, listing, pagination),
        keyboards.product_list_keyboard(
            lang, user_id, result.products, pagination, back_data, back_key
        ),
    )


async def on_browse(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    await answer(update)

    if action.arg(0) == "price":
        stats = storefront.catalog.price_bracket_stats()
        if stats.degraded:
            await send_or_edit(
                update, context, lang.message(user_id, "STATS_UNAVAILABLE"),
                keyboards.back_keyboard(lang, user_id),
            )
            return
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "BROWSE_BY_PRICE"),
            keyboards.price_keyboard(lang, user_id, storefront.catalog.brackets, stats.items),
        )
        return

    stats = storefront.catalog.platform_stats()
    if stats.degraded:
        await send_or_edit(
            update, context, lang.message(user_id, "STATS_UNAVAILABLE"),
            keyboards.back_keyboard(lang, user_id),
        )
        return
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "BROWSE_BY_PLATFORM"),
        keyboards.platform_keyboard(lang, user_id, stats.items),
    )


async def on_platform(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    platform = action.arg(0, "")
    await answer(update)

    stats = storefront.catalog.category_stats(platform)
    if not stats.items:
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "NO_CATEGORIES", platform=escape(platform.upper())),
            keyboards.back_keyboard(
                lang, user_id, "BACK_TO_PLATFORMS", callbacks.encode(callbacks.BROWSE, "platform")
            ),
        )
        return

    await send_or_edit(
        update,
        context,
        lang.message(
            user_id,
            "PLATFORM_CATEGORIES",
            emoji=platform_emoji(platform),
            platform=escape(platform.upper()),
        ),
        keyboards.category_keyboard(lang, user_id, platform, stats.items),
    )


async def on_category(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    index = _parse_index(action.arg(0))
    platform = action.arg(1, "")

    categories = storefront.catalog.category_stats(platform).items
    if index is None or index >= len(categories):
        await answer(update, lang.message(user_id, "NO_PRODUCTS"), alert=True)
        return

    await answer(update)
    category = categories[index].platform_category
    listing = ListingContext(
        kind="category",
        filters=ProductFilters(platform=platform, category=category),
        label=category,
    )
    await show_listing(update, context, listing)


async def on_price(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    brackets = storefront.catalog.brackets
    index = _parse_index(action.arg(0))

    if index is None or index >= len(brackets):
        await answer(update, lang.message(user_id, "NO_PRODUCTS"), alert=True)
        return

    await answer(update)
    bracket = brackets[index]
    listing = ListingContext(
        kind="price",
        filters=ProductFilters(price_min=bracket.min, price_max=bracket.max),
        label=bracket.label,
    )
    await show_listing(update, context, listing)


async def on_in_stock(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    await answer(update)
    listing = ListingContext(kind="in_stock", filters=ProductFilters(in_stock=True))
    await show_listing(update, context, listing)


async def on_page(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    user_id = user_id_of(update)
    listing = get_listing(context)
    page = _parse_index(action.arg(0))

    if listing is None or page is None:
        await answer(update, storefront.languages.message(user_id, "NO_MORE_PRODUCTS"))
        return

    await answer(update)
    await show_listing(update, context, listing.model_copy(update={"page": page}))


async def on_back_to_list(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    listing = get_listing(context)
    await answer(update)
    if listing is None:
        listing = ListingContext(kind="in_stock", filters=ProductFilters(in_stock=True))
    await show_listing(update, context, listing)


async def on_view(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    product = storefront.catalog.get_product(action.arg(0, ""))

    if product is None:
        await answer(update, lang.message(user_id, "PRODUCT_NOT_FOUND"), alert=True)
        return

    await answer(update)
    await send_or_edit(
        update,
        context,
        format_product(lang, user_id, product),
        keyboards.product_detail_keyboard(lang, user_id, product),
    )
