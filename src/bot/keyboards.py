"""Inline keyboards for every bot screen."""

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from src.bot import callbacks
from src.bot.formatting import category_emoji, platform_emoji, truncate
from src.config import settings
from src.models.cart import CartView
from src.models.product import CategoryStat, PlatformStat, PriceBracket, PriceBracketStat, Product
from src.models.query import Pagination
from src.services.i18n import LanguageManager

LANGUAGE_LABELS = {"en": "🇺🇸 English", "zh": "🇨🇳 中文"}


def _button(text: str, data: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text, callback_data=data)


def _menu_row(lang: LanguageManager, user_id: int | str) -> list[InlineKeyboardButton]:
    return [_button(lang.button(user_id, "MAIN_MENU"), callbacks.MENU)]


def language_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [_button(label, callbacks.language(code))]
            for code, label in LANGUAGE_LABELS.items()
        ]
    )


def main_menu_keyboard(lang: LanguageManager, user_id: int | str) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [_button(b(user_id, "BROWSE_PLATFORM"), callbacks.encode(callbacks.BROWSE, "platform"))],
            [_button(b(user_id, "BROWSE_PRICE"), callbacks.encode(callbacks.BROWSE, "price"))],
            [_button(b(user_id, "IN_STOCK"), callbacks.IN_STOCK)],
            [_button(b(user_id, "SEARCH"), callbacks.SEARCH)],
            [
                _button(b(user_id, "CART"), callbacks.cart(callbacks.CART_VIEW)),
                _button(b(user_id, "SETTINGS"), callbacks.SETTINGS),
            ],
        ]
    )


def platform_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    platforms: list[PlatformStat],
) -> InlineKeyboardMarkup:
    rows = [
        [
            _button(
                f"{platform_emoji(stat.platform)} {stat.platform.upper()} "
                f"({stat.in_stock}/{stat.total})",
                callbacks.platform(stat.platform),
            )
        ]
        for stat in platforms
    ]
    rows.append(_menu_row(lang, user_id))
    return InlineKeyboardMarkup(rows)


def category_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    platform: str,
    categories: list[CategoryStat],
) -> InlineKeyboardMarkup:
    rows = []
    for index, stat in enumerate(categories):
        name = lang.translate_text(user_id, stat.platform_category) or stat.platform_category
        rows.append(
            [
                _button(
                    f"{category_emoji(stat.platform_category)} {truncate(name, 40)} "
                    f"({stat.in_stock}/{stat.total})",
                    callbacks.category(platform, index),
                )
            ]
        )
    rows.append(
        [_button(lang.button(user_id, "BACK_TO_PLATFORMS"), callbacks.encode(callbacks.BROWSE, "platform"))]
    )
    return InlineKeyboardMarkup(rows)


def price_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    brackets: list[PriceBracket],
    stats: list[PriceBracketStat],
) -> InlineKeyboardMarkup:
    """One button per non-empty bracket, addressed by its configured position."""

    populated = {stat.label: stat for stat in stats}
    rows = []
    for index, bracket in enumerate(brackets):
        stat = populated.get(bracket.label)
        if stat is None:
            continue
        rows.append(
            [
                _button(
                    f"💰 {bracket.label} ({stat.in_stock}/{stat.total})",
                    callbacks.price(index),
                )
            ]
        )
    rows.append(_menu_row(lang, user_id))
    return InlineKeyboardMarkup(rows)


def product_list_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    products: list[Product],
    pagination: Pagination,
    back_data: str = callbacks.MENU,
    back_key: str = "MAIN_MENU",
) -> InlineKeyboardMarkup:
    rows = []
    for product in products:
        localized = lang.localize_product(user_id, product)
        marker = "✅" if product.in_stock else "❌"
        rows.append(
            [
                _button(
                    f"{marker} {truncate(localized.name, 35)} - {localized.formatted_price}",
                    callbacks.view(product.id),
                )
            ]
        )

    nav = []
    if pagination.has_prev:
        nav.append(_button(lang.button(user_id, "PREV"), callbacks.page(pagination.page - 1)))
    if pagination.total_pages > 1:
        nav.append(
            _button(
                lang.button(
                    user_id,
                    "PAGE_INFO",
                    page=pagination.page,
                    total=pagination.total_pages,
                ),
                callbacks.NOOP,
            )
        )
    if pagination.has_next:
        nav.append(_button(lang.button(user_id, "NEXT"), callbacks.page(pagination.page + 1)))
    if nav:
        rows.append(nav)

    rows.append([_button(lang.button(user_id, back_key), back_data)])
    return InlineKeyboardMarkup(rows)


def product_detail_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    product: Product,
) -> InlineKeyboardMarkup:
    b = lang.button
    if product.in_stock:
        action = _button(b(user_id, "ADD_TO_CART"), callbacks.add(product.id))
    else:
        action = _button(b(user_id, "OUT_OF_STOCK"), callbacks.NOOP)
    return InlineKeyboardMarkup(
        [
            [action],
            [_button(b(user_id, "VIEW_CART"), callbacks.cart(callbacks.CART_VIEW))],
            [
                _button(b(user_id, "BACK_TO_LIST"), callbacks.BACK_TO_LIST),
                _button(b(user_id, "MAIN_MENU"), callbacks.MENU),
            ],
        ]
    )


def added_to_cart_keyboard(lang: LanguageManager, user_id: int | str) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [_button(b(user_id, "VIEW_CART"), callbacks.cart(callbacks.CART_VIEW))],
            [_button(b(user_id, "CONTINUE_SHOPPING"), callbacks.BACK_TO_LIST)],
        ]
    )


def cart_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    cart: CartView,
) -> InlineKeyboardMarkup:
    b = lang.button
    if cart.is_empty:
        return InlineKeyboardMarkup(
            [[_button(b(user_id, "START_SHOPPING"), callbacks.MENU)]]
        )

    rows = []
    for line in cart.lines:
        rows.append(
            [
                _button(
                    f"📦 {truncate(line.name, 25)}",
                    callbacks.cart(callbacks.CART_ITEM, line.entry_id),
                )
            ]
        )
        rows.append(
            [
                _button("➖", callbacks.cart(callbacks.CART_DEC, line.entry_id)),
                _button(
                    b(user_id, "QUANTITY", quantity=line.quantity),
                    callbacks.cart(callbacks.CART_QTY, line.entry_id),
                ),
                _button("➕", callbacks.cart(callbacks.CART_INC, line.entry_id)),
                _button("🗑️", callbacks.cart(callbacks.CART_REMOVE, line.entry_id)),
            ]
        )

    rows.append(
        [
            _button(b(user_id, "CHECKOUT"), callbacks.CHECKOUT),
            _button(b(user_id, "CLEAR_CART"), callbacks.cart(callbacks.CART_CLEAR)),
        ]
    )
    rows.append(_menu_row(lang, user_id))
    return InlineKeyboardMarkup(rows)


def cart_item_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    entry_id: str,
) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [
                _button("➖", callbacks.cart(callbacks.CART_DEC, entry_id)),
                _button("➕", callbacks.cart(callbacks.CART_INC, entry_id)),
            ],
            [_button(b(user_id, "REMOVE_ITEM"), callbacks.cart(callbacks.CART_REMOVE, entry_id))],
            [_button(b(user_id, "BACK_TO_CART"), callbacks.cart(callbacks.CART_VIEW))],
        ]
    )


def confirm_clear_keyboard(lang: LanguageManager, user_id: int | str) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [
                _button(b(user_id, "CONFIRM"), callbacks.cart(callbacks.CART_CLEAR_CONFIRM)),
                _button(b(user_id, "CANCEL"), callbacks.cart(callbacks.CART_VIEW)),
            ]
        ]
    )


def checkout_keyboard(lang: LanguageManager, user_id: int | str) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(
                    b(user_id, "CONTACT_SUPPORT"),
                    url=f"https://t.me/{settings.SUPPORT_USERNAME.lstrip('@')}",
                )
            ],
            [_button(b(user_id, "BACK_TO_CART"), callbacks.cart(callbacks.CART_VIEW))],
        ]
    )


def settings_keyboard(lang: LanguageManager, user_id: int | str) -> InlineKeyboardMarkup:
    b = lang.button
    return InlineKeyboardMarkup(
        [
            [_button(b(user_id, "REFRESH_PRODUCTS"), callbacks.REFRESH)],
            [_button(b(user_id, "STATISTICS"), callbacks.STATS)],
            [_button(b(user_id, "HELP"), callbacks.HELP)],
            [_button(b(user_id, "CHANGE_LANGUAGE"), callbacks.LANG)],
            _menu_row(lang, user_id),
        ]
    )


def back_keyboard(
    lang: LanguageManager,
    user_id: int | str,
    key: str = "MAIN_MENU",
    data: str = callbacks.MENU,
) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[_button(lang.button(user_id, key), data)]])
