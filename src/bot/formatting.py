"""Message text for catalog, cart and checkout screens (Telegram HTML)."""

from __future__ import annotations

from html import escape

from src.config import CATEGORY_EMOJIS, PLATFORM_EMOJIS, settings
from src.models.cart import CartView
from src.models.product import CatalogSummary, PlatformStat, PriceBracketStat, Product
from src.models.query import ListingContext, Pagination
from src.services.i18n import LanguageManager

DESCRIPTION_LIMIT = 500


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def platform_emoji(platform: str) -> str:
    return PLATFORM_EMOJIS.get(platform, "📦")


def category_emoji(category: str) -> str:
    return CATEGORY_EMOJIS.get(category, "📂")


def format_product(lang: LanguageManager, user_id: int | str, product: Product) -> str:
    localized = lang.localize_product(user_id, product)
    if localized.stock > 0:
        stock_line = f"✅ {lang.message(user_id, 'IN_STOCK')} ({localized.stock})"
    else:
        stock_line = f"❌ {lang.message(user_id, 'OUT_OF_STOCK_STATUS')}"
    price = (
        localized.formatted_price
        if localized.price
        else lang.message(user_id, "PRICE_ON_REQUEST")
    )

    lines = [f"📦 <b>{escape(localized.name)}</b>", "", f"💰 {price}", stock_line]
    if localized.platform_category:
        lines.append(
            f"{category_emoji(product.platform_category)} {escape(localized.platform_category)}"
        )
    description = localized.description.strip()
    if description:
        lines += [
            "",
            lang.message(user_id, "DESCRIPTION_LABEL"),
            escape(truncate(description, DESCRIPTION_LIMIT)),
        ]
    return "\n".join(lines)


def format_listing_header(
    lang: LanguageManager,
    user_id: int | str,
    listing: ListingContext,
    pagination: Pagination,
) -> str:
    counts = {
        "page": pagination.page,
        "totalPages": pagination.total_pages,
        "total": pagination.total,
    }
    filters = listing.filters
    if listing.kind == "category":
        platform = filters.platform or ""
        category = filters.category or ""
        return lang.message(
            user_id,
            "CATEGORY_PRODUCTS",
            platform_emoji=platform_emoji(platform),
            platform=escape(platform.upper()),
            category_emoji=category_emoji(category),
            category=escape(lang.translate_text(user_id, category) or ""),
            **counts,
        )
    if listing.kind == "price":
        return lang.message(
            user_id, "PRICE_PRODUCTS", label=escape(listing.label or ""), **counts
        )
    if listing.kind == "search":
        return lang.message(
            user_id, "SEARCH_RESULTS", query=escape(filters.search or ""), **counts
        )
    return lang.message(user_id, "PRODUCTS_IN_STOCK", **counts)


def format_cart(lang: LanguageManager, user_id: int | str, cart: CartView) -> str:
    if cart.is_empty:
        return lang.message(user_id, "CART_EMPTY")

    lines = [lang.message(user_id, "CART_TITLE"), ""]
    for line in cart.lines:
        lines.append(f"📦 {escape(truncate(line.name, 30))}")
        lines.append(
            f"   💰 {lang.format_price(user_id, line.price)} × {line.quantity}"
            f" = {lang.format_price(user_id, line.line_total)}"
        )
        lines.append("")
    lines.append(
        lang.message(user_id, "CART_TOTAL", total=lang.format_price(user_id, cart.total))
    )
    lines.append(lang.message(user_id, "CART_ITEMS_COUNT", count=len(cart.lines)))
    return "\n".join(lines)


def format_checkout(lang: LanguageManager, user_id: int | str, cart: CartView) -> str:
    """Order summary the user forwards to support for manual fulfillment."""

    lines = [
        lang.message(user_id, "CHECKOUT_TITLE"),
        "",
        lang.message(user_id, "CHECKOUT_ORDER_SUMMARY"),
    ]
    for line in cart.lines:
        lines.append(f"• {escape(line.name)}")
        lines.append(
            f"  {lang.format_price(user_id, line.price)} × {line.quantity}"
            f" = {lang.format_price(user_id, line.line_total)}"
        )
        lines.append("")
    lines += [
        lang.message(user_id, "CART_TOTAL", total=lang.format_price(user_id, cart.total)),
        "",
        lang.message(user_id, "CHECKOUT_NEXT_STEPS"),
        "",
        lang.message(
            user_id,
            "CHECKOUT_CONTACT",
            support_username=escape(settings.SUPPORT_USERNAME),
            support_email=escape(settings.SUPPORT_EMAIL),
        ),
    ]
    return "\n".join(lines)


def format_statistics(
    lang: LanguageManager,
    user_id: int | str,
    platforms: list[PlatformStat],
    brackets: list[PriceBracketStat],
    summary: CatalogSummary,
) -> str:
    lines = [lang.message(user_id, "STATS_TITLE"), "", lang.message(user_id, "STATS_BY_PLATFORM")]
    for stat in platforms:
        lines.append(
            f"{platform_emoji(stat.platform)} {escape(stat.platform.upper())}: "
            f"{stat.in_stock}/{stat.total}"
        )

    lines += ["", lang.message(user_id, "STATS_BY_PRICE")]
    for stat in brackets:
        lines.append(f"{escape(stat.label)}: {stat.in_stock}/{stat.total}")

    total = summary.total_products
    availability = (summary.in_stock / total * 100) if total else 0.0
    lines += [
        "",
        lang.message(user_id, "STATS_SUMMARY"),
        lang.message(user_id, "STATS_TOTAL_PRODUCTS", total=total),
        lang.message(user_id, "STATS_IN_STOCK", inStock=summary.in_stock),
        lang.message(user_id, "STATS_AVAILABILITY", percent=f"{availability:.1f}"),
    ]
    return "\n".join(lines)
