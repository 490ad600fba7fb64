"""Tests for the Telegram handlers with mocked Telegram objects."""

from __future__ import annotations

import asyncio

import pytest

from src.bot.handlers import handle_callback, handle_error
from src.bot.handlers.cart import cart_command
from src.bot.handlers.common import LISTING_KEY, report_error
from src.bot.handlers.menu import search_message, start_command


def _edited_text(update):
    return update.callback_query.edit_message_text.call_args.args[0]


def _answer_kwargs(update):
    return update.callback_query.answer.call_args.kwargs


@pytest.mark.asyncio
async def test_start_sends_language_choice(bot_context, message_update):
    update = message_update("/start")

    await start_command(update, bot_context)

    kwargs = bot_context.bot.send_message.call_args.kwargs
    assert kwargs["chat_id"] == 4242
    assert "Choose Your Language" in kwargs["text"]


@pytest.mark.asyncio
async def test_choosing_language_shows_welcome(bot_context, callback_update, storefront):
    update = callback_update("lang:zh")

    await handle_callback(update, bot_context)

    assert storefront.languages.language_of(42) == "zh"
    assert _answer_kwargs(update)["text"] == "✅ 语言已更改为中文"
    update.callback_query.edit_message_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_add_to_cart_requires_existing_product(bot_context, callback_update, storefront):
    update = callback_update("add:missing")

    await handle_callback(update, bot_context)

    assert _answer_kwargs(update) == {"text": "❌ Product not found.", "show_alert": True}
    assert storefront.carts.item_count(42) == 0


@pytest.mark.asyncio
async def test_add_to_cart_refuses_out_of_stock(bot_context, callback_update, storefront):
    update = callback_update("add:p2")

    await handle_callback(update, bot_context)

    assert _answer_kwargs(update)["show_alert"] is True
    assert storefront.carts.item_count(42) == 0


@pytest.mark.asyncio
async def test_add_to_cart_twice_merges(bot_context, callback_update, storefront):
    await handle_callback(callback_update("add:p1"), bot_context)
    await handle_callback(callback_update("add:p1"), bot_context)

    lines = storefront.carts.get_cart(42)
    assert len(lines) == 1
    assert lines[0].quantity == 2


@pytest.mark.asyncio
async def test_category_listing_is_remembered_for_paging(bot_context, callback_update):
    await handle_callback(callback_update("cat:0:facebook"), bot_context)

    listing = bot_context.user_data[LISTING_KEY]
    assert listing.kind == "category"
    assert listing.filters.platform == "facebook"
    assert listing.filters.category == "Personal Accounts"

    update = callback_update("page:2")
    await handle_callback(update, bot_context)

    # two matching products fit on one page
    assert bot_context.user_data[LISTING_KEY].page == 2
    assert "No more products" in _edited_text(update)


@pytest.mark.asyncio
async def test_price_listing_uses_bracket_bounds(bot_context, callback_update):
    update = callback_update("price:1")

    await handle_callback(update, bot_context)

    listing = bot_context.user_data[LISTING_KEY]
    assert (listing.filters.price_min, listing.filters.price_max) == (50, 100)
    assert "$50-$100" in _edited_text(update)


@pytest.mark.asyncio
async def test_stale_category_index_alerts(bot_context, callback_update):
    update = callback_update("cat:9:facebook")

    await handle_callback(update, bot_context)

    assert _answer_kwargs(update)["show_alert"] is True
    assert LISTING_KEY not in bot_context.user_data


@pytest.mark.asyncio
async def test_search_flow_consumes_next_message(
    bot_context, callback_update, message_update, storefront
):
    await handle_callback(callback_update("search"), bot_context)
    assert storefront.sessions.active(42)

    await search_message(message_update("unlimited"), bot_context)

    text = bot_context.bot.send_message.call_args.kwargs["text"]
    assert 'Search Results for "unlimited"' in text
    assert not storefront.sessions.active(42)


@pytest.mark.asyncio
async def test_text_without_search_session_is_ignored(bot_context, message_update):
    await search_message(message_update("hello"), bot_context)

    bot_context.bot.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_cart_decrement_to_zero_removes_entry(bot_context, callback_update, storefront):
    entry_id = storefront.carts.add_item(42, "p1")

    await handle_callback(callback_update(f"cart:dec:{entry_id}"), bot_context)

    assert storefront.carts.get_entry(entry_id) is None


@pytest.mark.asyncio
async def test_cart_remove_ignores_other_users_entries(bot_context, callback_update, storefront):
    entry_id = storefront.carts.add_item(7, "p1")

    await handle_callback(callback_update(f"cart:rm:{entry_id}", user_id=42), bot_context)

    assert storefront.carts.get_entry(entry_id) is not None


@pytest.mark.asyncio
async def test_concurrent_increments_can_lose_an_update(
    bot_context, callback_update, storefront
):
    """Both presses read quantity 1 before either writes, so one increment is lost."""

    # Arrange
    entry_id = storefront.carts.add_item(42, "p1")

    async def slow_answer(*args, **kwargs):
        await asyncio.sleep(0.01)

    first = callback_update(f"cart:inc:{entry_id}")
    second = callback_update(f"cart:inc:{entry_id}")
    first.callback_query.answer.side_effect = slow_answer
    second.callback_query.answer.side_effect = slow_answer

    # Act
    await asyncio.gather(
        handle_callback(first, bot_context),
        handle_callback(second, bot_context),
    )

    # Assert
    assert storefront.carts.get_entry(entry_id).quantity == 2


@pytest.mark.asyncio
async def test_sequential_increments_are_not_lost(bot_context, callback_update, storefront):
    entry_id = storefront.carts.add_item(42, "p1")

    await handle_callback(callback_update(f"cart:inc:{entry_id}"), bot_context)
    await handle_callback(callback_update(f"cart:inc:{entry_id}"), bot_context)

    assert storefront.carts.get_entry(entry_id).quantity == 3


@pytest.mark.asyncio
async def test_clear_cart_requires_confirmation(bot_context, callback_update, storefront):
    storefront.carts.add_item(42, "p1")

    await handle_callback(callback_update("cart:clear"), bot_context)
    assert storefront.carts.item_count(42) == 1

    await handle_callback(callback_update("cart:clear_ok"), bot_context)
    assert storefront.carts.item_count(42) == 0


@pytest.mark.asyncio
async def test_checkout_with_empty_cart_alerts(bot_context, callback_update):
    update = callback_update("checkout")

    await handle_callback(update, bot_context)

    assert _answer_kwargs(update)["show_alert"] is True
    update.callback_query.edit_message_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_cart_command_sends_cart(bot_context, message_update, storefront):
    storefront.carts.add_item(42, "p4", 3)

    await cart_command(message_update("/cart"), bot_context)

    assert "$15.00" in bot_context.bot.send_message.call_args.kwargs["text"]


@pytest.mark.asyncio
async def test_failed_refresh_reports_error_and_keeps_catalog(
    bot_context, callback_update, storefront, catalog_path
):
    catalog_path.write_text("{broken", encoding="utf-8")
    update = callback_update("refresh")

    await handle_callback(update, bot_context)

    assert "Refresh failed" in _edited_text(update)
    assert storefront.catalog.get_product("p1") is not None


@pytest.mark.asyncio
async def test_statistics_screen(bot_context, callback_update):
    update = callback_update("stats")

    await handle_callback(update, bot_context)

    text = _edited_text(update)
    assert "Store Statistics" in text
    assert "FACEBOOK: 3/4" in text
    assert "Availability: 80.0%" in text


@pytest.mark.asyncio
async def test_unknown_callback_alerts(bot_context, callback_update):
    update = callback_update("bogus:1")

    await handle_callback(update, bot_context)

    assert _answer_kwargs(update) == {"text": "Unknown action", "show_alert": True}


@pytest.mark.asyncio
async def test_report_error_alerts_on_button_press(bot_context, callback_update):
    update = callback_update("menu")

    await report_error(update, bot_context)

    assert _answer_kwargs(update) == {
        "text": "❌ Something went wrong. Please try again.",
        "show_alert": True,
    }


@pytest.mark.asyncio
async def test_report_error_messages_chat_for_commands(bot_context, message_update):
    await report_error(message_update("/menu"), bot_context)

    kwargs = bot_context.bot.send_message.call_args.kwargs
    assert kwargs["text"] == "❌ Something went wrong. Please try again."


@pytest.mark.asyncio
async def test_error_handler_ignores_non_update_objects(bot_context):
    bot_context.error = RuntimeError("boom")

    await handle_error({"not": "an update"}, bot_context)

    bot_context.bot.send_message.assert_not_awaited()
