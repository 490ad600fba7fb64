"""Tests for callback data, keyboards and message formatting."""

from __future__ import annotations

import pytest

from src.bot import callbacks, keyboards
from src.bot.formatting import format_cart, format_checkout, format_product, truncate
from src.models.product import Product
from src.services.i18n import LanguageManager


def _callback_data(markup):
    return [
        button.callback_data
        for row in markup.inline_keyboard
        for button in row
        if button.callback_data
    ]


def test_parse_category_callback_keeps_platform_with_colons():
    action = callbacks.parse_callback(callbacks.category("face:book", 3))

    assert action.action == callbacks.CATEGORY
    assert action.args == ("3", "face:book")


def test_parse_cart_callback():
    action = callbacks.parse_callback(callbacks.cart(callbacks.CART_INC, "cart-7"))

    assert action.arg(0) == callbacks.CART_INC
    assert action.arg(1) == "cart-7"


def test_parse_plain_action():
    action = callbacks.parse_callback("menu")

    assert action.action == callbacks.MENU
    assert action.arg(0) is None


def test_product_ids_may_contain_colons():
    action = callbacks.parse_callback(callbacks.view("sku:1:2"))

    assert action.arg(0) == "sku:1:2"


def test_callback_data_over_limit_is_rejected():
    with pytest.raises(ValueError):
        callbacks.view("x" * 80)


def test_category_keyboard_addresses_categories_by_index(catalog):
    lang = LanguageManager()
    markup = keyboards.category_keyboard(
        lang, 1, "facebook", catalog.category_stats("facebook").items
    )

    data = _callback_data(markup)
    assert data[:3] == ["cat:0:facebook", "cat:1:facebook", "cat:2:facebook"]
    assert all(len(d.encode("utf-8")) <= callbacks.MAX_CALLBACK_BYTES for d in data)


def test_price_keyboard_skips_empty_brackets(catalog):
    lang = LanguageManager()
    markup = keyboards.price_keyboard(
        lang, 1, catalog.brackets, catalog.price_bracket_stats().items
    )

    assert _callback_data(markup) == ["price:0", "price:1", "price:3", "menu"]


def test_product_list_keyboard_pagination_row(catalog):
    from src.models.query import ProductFilters
    from src.services.query_engine import query

    lang = LanguageManager()
    result = query(catalog.snapshot, ProductFilters(), page=1, page_size=2)
    markup = keyboards.product_list_keyboard(lang, 1, result.products, result.pagination)

    data = _callback_data(markup)
    assert data[:2] == ["view:p1", "view:p2"]
    assert "page:2" in data
    assert "page:0" not in data


def test_out_of_stock_detail_has_no_add_button(catalog):
    lang = LanguageManager()
    markup = keyboards.product_detail_keyboard(lang, 1, catalog.get_product("p2"))

    assert "add:p2" not in _callback_data(markup)


def test_format_product_escapes_html():
    lang = LanguageManager()
    product = Product(id="x", name="<b>Bold</b> & co", price=10, stock=1)

    text = format_product(lang, 1, product)

    assert "&lt;b&gt;Bold&lt;/b&gt; &amp; co" in text
    assert "$10.00" in text


def test_format_cart_shows_lines_and_total(carts):
    lang = LanguageManager()
    carts.add_item(1, "p1", 2)

    text = format_cart(lang, 1, carts.view(1))

    assert "FB Personal 2015" in text
    assert "$60.00" in text


def test_format_cart_empty(carts):
    lang = LanguageManager()

    assert format_cart(lang, 1, carts.view(1)) == lang.message(1, "CART_EMPTY")


def test_checkout_summary_uses_marked_up_prices(carts):
    lang = LanguageManager()
    lang.set_language(1, "zh")
    carts.add_item(1, "p4", 2)

    text = format_checkout(lang, 1, carts.view(1))

    assert "$15.00" in text
    assert "Gmail 2020" in text


def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("a" * 20, 10) == "aaaaaaa..."
