"""Cart screens: add, view, quantity controls, clearing and checkout."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import ContextTypes

from src.bot import callbacks, keyboards
from src.bot.callbacks import CallbackAction
from src.bot.formatting import format_cart, format_checkout
from src.bot.handlers.common import answer, get_storefront, send_or_edit, user_id_of

logger = logging.getLogger(__name__)

QUANTITY_STEPS = {callbacks.CART_INC: 1, callbacks.CART_DEC: -1}


async def show_cart(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    storefront = get_storefront(context)
    user_id = user_id_of(update)
    cart = storefront.carts.view(user_id)
    await send_or_edit(
        update,
        context,
        format_cart(storefront.languages, user_id, cart),
        keyboards.cart_keyboard(storefront.languages, user_id, cart),
    )


async def cart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await show_cart(update, context)


async def on_add(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    """Add one unit, refusing unknown and out-of-stock products."""

    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    product = storefront.catalog.get_product(action.arg(0, ""))

    if product is None:
        await answer(update, lang.message(user_id, "PRODUCT_NOT_FOUND"), alert=True)
        return
    if not product.in_stock:
        await answer(update, lang.message(user_id, "OUT_OF_STOCK"), alert=True)
        return

    entry_id = storefront.carts.add_item(user_id, product.id)
    logger.info("User %s added product %s to cart (entry %s)", user_id, product.id, entry_id)
    await answer(update, lang.message(user_id, "ADDED_TO_CART"))
    await send_or_edit(
        update,
        context,
        lang.message(user_id, "ADDED_TO_CART"),
        keyboards.added_to_cart_keyboard(lang, user_id),
    )


async def change_quantity(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    entry_id: str,
    step: int,
) -> None:
    """Apply a +1/-1 step to a cart entry.

    The quantity is read before the callback is acknowledged and written after,
    so two presses handled concurrently can both read the same value and one
    increment is lost.
    """

    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)

    line = next(
        (line for line in storefront.carts.get_cart(user_id) if line.entry_id == entry_id),
        None,
    )
    if line is None:
        await answer(update, lang.message(user_id, "CART_ITEM_NOT_FOUND"), alert=True)
        return

    new_quantity = line.quantity + step
    await answer(
        update,
        lang.message(
            user_id,
            "CART_ITEM_DETAIL",
            name=line.name,
            quantity=max(new_quantity, 0),
            price=lang.format_price(user_id, line.price),
            total=lang.format_price(user_id, line.price * max(new_quantity, 0)),
        ),
    )
    storefront.carts.set_quantity(entry_id, new_quantity)
    await show_cart(update, context)


async def on_cart(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    op = action.arg(0, callbacks.CART_VIEW)
    entry_id = action.arg(1)

    if op == callbacks.CART_VIEW:
        await answer(update)
        await show_cart(update, context)
        return

    if op == callbacks.CART_CLEAR:
        await answer(update)
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "CLEAR_CART_CONFIRM"),
            keyboards.confirm_clear_keyboard(lang, user_id),
        )
        return

    if op == callbacks.CART_CLEAR_CONFIRM:
        storefront.carts.clear(user_id)
        logger.info("User %s cleared their cart", user_id)
        await answer(update)
        await send_or_edit(
            update,
            context,
            lang.message(user_id, "CART_CLEARED"),
            keyboards.back_keyboard(lang, user_id),
        )
        return

    if op == callbacks.CART_QTY:
        await answer(update, lang.message(user_id, "CART_QTY_HINT"))
        return

    if entry_id is None:
        await answer(update, lang.message(user_id, "UNKNOWN_ACTION"), alert=True)
        return

    if op in QUANTITY_STEPS:
        await change_quantity(update, context, entry_id, QUANTITY_STEPS[op])
        return

    if op == callbacks.CART_REMOVE:
        entry = storefront.carts.get_entry(entry_id)
        if entry is not None and entry.user_id == str(user_id):
            storefront.carts.remove_item(entry_id)
        await answer(update)
        await show_cart(update, context)
        return

    if op == callbacks.CART_ITEM:
        line = next(
            (line for line in storefront.carts.get_cart(user_id) if line.entry_id == entry_id),
            None,
        )
        if line is None:
            await answer(update, lang.message(user_id, "CART_ITEM_NOT_FOUND"), alert=True)
            return
        await answer(
            update,
            lang.message(
                user_id,
                "CART_ITEM_DETAIL",
                name=line.name,
                quantity=line.quantity,
                price=lang.format_price(user_id, line.price),
                total=lang.format_price(user_id, line.line_total),
            ),
            alert=True,
        )
        return

    await answer(update, lang.message(user_id, "UNKNOWN_ACTION"), alert=True)


async def on_checkout(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: CallbackAction
) -> None:
    storefront = get_storefront(context)
    lang = storefront.languages
    user_id = user_id_of(update)
    cart = storefront.carts.view(user_id)

    if cart.is_empty:
        await answer(update, lang.message(user_id, "CART_EMPTY"), alert=True)
        return

    logger.info(
        "User %s opened checkout with %d item(s), total %.2f",
        user_id,
        cart.item_count,
        cart.total,
    )
    await answer(update)
    await send_or_edit(
        update,
        context,
        format_checkout(lang, user_id, cart),
        keyboards.checkout_keyboard(lang, user_id),
    )
