"""Localized strings, per-user language choice and display pricing."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from src.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_EN_HELP = """<b>How to use this bot:</b>
1️⃣ Browse products by platform or price
2️⃣ View product details and availability
3️⃣ Add items to your cart
4️⃣ Checkout when ready

<b>Product Categories:</b>
📘 <b>Facebook</b> - Personal accounts, Business Manager, Fan Pages
📧 <b>Gmail</b> - Google accounts
🔗 <b>Mixed</b> - Various account types

<b>Need Help?</b>
Contact our support team for assistance with:
• Product questions • Payment methods
• Account delivery • Technical issues

<b>Commands:</b>
/start - Start the bot
/help - Show this help
/cart - View your cart
/menu - Main menu
/lang - Change language"""

_ZH_HELP = """<b>如何使用此机器人：</b>
1️⃣ 按平台或价格浏览产品
2️⃣ 查看产品详情和可用性
3️⃣ 将商品添加到购物车
4️⃣ 准备好后结账

<b>产品分类：</b>
📘 <b>Facebook</b> - 个人账户、商业管理、粉丝页面
📧 <b>Gmail</b> - Google 账户
🔗 <b>混合</b> - 各种账户类型

<b>需要帮助？</b>
联系我们的客服团队获取以下帮助：
• 产品问题 • 付款方式
• 账户交付 • 技术问题

<b>命令：</b>
/start - 启动机器人
/help - 显示此帮助
/cart - 查看购物车
/menu - 主菜单
/lang - 更改语言"""

LANGUAGES: dict[str, dict] = {
    "en": {
        "code": "en",
        "name": "English",
        "flag": "🇺🇸",
        "messages": {
            "CHOOSE_LANGUAGE": "🌐 <b>Choose Your Language / 选择语言</b>\n\nSelect your preferred language:",
            "LANGUAGE_CHANGED": "✅ Language changed to English",
            "WELCOME": (
                "🛍️ <b>Welcome to the Advertising Accounts Store!</b>\n\n"
                "Browse our premium collection of social media accounts:\n"
                "• Facebook Personal &amp; Business Manager accounts\n"
                "• Gmail accounts\n"
                "• Professional advertising accounts\n\n"
                "All accounts are verified and ready to use. "
                "Choose from the menu below to get started!"
            ),
            "MAIN_MENU": "🏠 <b>Main Menu</b>\n\nChoose an option below to browse our products:",
            "BROWSE_BY_PLATFORM": "📱 <b>Browse by Platform</b>\n\nSelect a platform to view available products:",
            "BROWSE_BY_PRICE": "💰 <b>Browse by Price</b>\n\nSelect a price range to view products:",
            "PLATFORM_CATEGORIES": "{emoji} <b>{platform} Categories</b>\n\nSelect a category to view products:",
            "NO_CATEGORIES": "❌ No categories found for {platform}",
            "CATEGORY_PRODUCTS": "{platform_emoji} <b>{platform}</b>\n{category_emoji} <b>{category}</b>\n\nPage {page}/{totalPages} • {total} products",
            "PRICE_PRODUCTS": "💰 <b>Products {label}</b>\n\nPage {page}/{totalPages} • {total} products found",
            "PRODUCTS_IN_STOCK": "🔥 <b>Products In Stock</b>\n\nPage {page}/{totalPages} • {total} products available",
            "SEARCH_RESULTS": '🔍 <b>Search Results for "{query}"</b>\n\nPage {page}/{totalPages} • {total} products found',
            "NO_PRODUCTS": "❌ No products found in this category.",
            "NO_MORE_PRODUCTS": "❌ No more products.",
            "NO_STOCK_PRODUCTS": "❌ No products currently in stock.",
            "PRODUCT_NOT_FOUND": "❌ Product not found.",
            "OUT_OF_STOCK": "⚠️ This product is currently out of stock.",
            "ADDED_TO_CART": "✅ Product added to cart!",
            "PRICE_ON_REQUEST": "Price on request",
            "DESCRIPTION_LABEL": "📋 <b>Description:</b>",
            "CART_EMPTY": "🛒 Your cart is empty.",
            "CART_TITLE": "🛒 <b>Your Cart</b>",
            "CART_TOTAL": "💳 <b>Total: {total}</b>",
            "CART_ITEMS_COUNT": "📊 {count} item(s) in cart",
            "CART_ITEM_NOT_FOUND": "Cart item not found",
            "CART_ITEM_DETAIL": "{name}\nQty: {quantity} × {price} = {total}",
            "CART_QTY_HINT": "Use + and - buttons to adjust quantity",
            "CLEAR_CART_CONFIRM": "🗑️ <b>Clear Cart</b>\n\nAre you sure you want to remove all items from your cart?",
            "CART_CLEARED": "✅ <b>Cart Cleared</b>\n\nAll items have been removed from your cart.",
            "CHECKOUT_TITLE": "💳 <b>Checkout</b>",
            "CHECKOUT_ORDER_SUMMARY": "📋 <b>Order Summary:</b>",
            "CHECKOUT_NEXT_STEPS": (
                "📞 <b>Next Steps:</b>\n1. Contact our support team\n2. Send this order summary\n"
                "3. Choose payment method\n4. Receive your accounts"
            ),
            "CHECKOUT_CONTACT": "💬 <b>Contact:</b> @{support_username}\n📧 <b>Email:</b> {support_email}",
            "SEARCH_PROMPT": "🔍 <b>Search Products</b>\n\nEnter your search term:",
            "SEARCH_NO_RESULTS": '🔍 No products found for "{query}"\n\nTry different keywords or browse by category.',
            "SETTINGS_TITLE": "⚙️ <b>Settings</b>\n\nBot settings and information:",
            "HELP_TITLE": "❓ <b>Help &amp; Support</b>",
            "HELP_CONTENT": _EN_HELP,
            "REFRESH_DONE": "✅ Products refreshed: {total} products loaded.",
            "REFRESH_FAILED": "❌ Refresh failed, the previous catalog is still active.\n{error}",
            "STATS_TITLE": "📊 <b>Store Statistics</b>",
            "STATS_BY_PLATFORM": "<b>📱 By Platform:</b>",
            "STATS_BY_PRICE": "<b>💰 By Price Range:</b>",
            "STATS_SUMMARY": "<b>📈 Summary:</b>",
            "STATS_TOTAL_PRODUCTS": "• Total Products: {total}",
            "STATS_IN_STOCK": "• In Stock: {inStock}",
            "STATS_AVAILABILITY": "• Availability: {percent}%",
            "STATS_UNAVAILABLE": "⚠️ Statistics are unavailable right now.",
            "IN_STOCK": "In Stock",
            "OUT_OF_STOCK_STATUS": "Out of Stock",
            "ERROR": "❌ Something went wrong. Please try again.",
            "UNKNOWN_ACTION": "Unknown action",
        },
        "buttons": {
            "BROWSE_PLATFORM": "📱 Browse by Platform",
            "BROWSE_PRICE": "💰 Browse by Price",
            "IN_STOCK": "🔥 In Stock Now",
            "SEARCH": "🔍 Search",
            "CART": "🛒 Cart",
            "SETTINGS": "⚙️ Settings",
            "BACK_TO_MENU": "🔙 Back to Menu",
            "BACK_TO_PLATFORMS": "🔙 Back to Platforms",
            "BACK_TO_CATEGORIES": "🔙 Back to Categories",
            "BACK_TO_LIST": "🔙 Back to List",
            "BACK_TO_CART": "🔙 Back to Cart",
            "BACK_TO_SETTINGS": "🔙 Back to Settings",
            "MAIN_MENU": "🏠 Main Menu",
            "PREV": "◀️ Prev",
            "NEXT": "Next ▶️",
            "PAGE_INFO": "📄 {page}/{total}",
            "ADD_TO_CART": "➕ Add to Cart",
            "VIEW_CART": "🛒 View Cart",
            "CONTINUE_SHOPPING": "🛍️ Continue Shopping",
            "START_SHOPPING": "🛍️ Start Shopping",
            "CHECKOUT": "💳 Checkout",
            "CLEAR_CART": "🗑️ Clear Cart",
            "REMOVE_ITEM": "🗑️",
            "QUANTITY": "Qty: {quantity}",
            "OUT_OF_STOCK": "Out of Stock",
            "CONFIRM": "✅ Confirm",
            "CANCEL": "❌ Cancel",
            "CONTACT_SUPPORT": "💬 Contact Support",
            "REFRESH_PRODUCTS": "🔄 Refresh Products",
            "STATISTICS": "📊 Statistics",
            "HELP": "❓ Help",
            "CHANGE_LANGUAGE": "🌐 Language",
        },
    },
    "zh": {
        "code": "zh",
        "name": "中文",
        "flag": "🇨🇳",
        "messages": {
            "CHOOSE_LANGUAGE": "🌐 <b>选择您的语言 / Choose Your Language</b>\n\n选择您偏好的语言：",
            "LANGUAGE_CHANGED": "✅ 语言已更改为中文",
            "WELCOME": (
                "🛍️ <b>欢迎来到广告账户商店！</b>\n\n"
                "浏览我们的优质社交媒体账户：\n"
                "• Facebook 个人及商业管理账户\n"
                "• Gmail 账户\n"
                "• 专业广告账户\n\n"
                "所有账户均已验证，随时可用。从下方菜单开始选购！"
            ),
            "MAIN_MENU": "🏠 <b>主菜单</b>\n\n选择下面的选项浏览我们的产品：",
            "BROWSE_BY_PLATFORM": "📱 <b>按平台浏览</b>\n\n选择平台查看可用产品：",
            "BROWSE_BY_PRICE": "💰 <b>按价格浏览</b>\n\n选择价格范围查看产品：",
            "PLATFORM_CATEGORIES": "{emoji} <b>{platform} 分类</b>\n\n选择分类查看产品：",
            "NO_CATEGORIES": "❌ 未找到 {platform} 的分类",
            "CATEGORY_PRODUCTS": "{platform_emoji} <b>{platform}</b>\n{category_emoji} <b>{category}</b>\n\n第 {page}/{totalPages} 页 • {total} 个产品",
            "PRICE_PRODUCTS": "💰 <b>产品 {label}</b>\n\n第 {page}/{totalPages} 页 • 找到 {total} 个产品",
            "PRODUCTS_IN_STOCK": "🔥 <b>现货产品</b>\n\n第 {page}/{totalPages} 页 • {total} 个产品可用",
            "SEARCH_RESULTS": '🔍 <b>"{query}" 的搜索结果</b>\n\n第 {page}/{totalPages} 页 • 找到 {total} 个产品',
            "NO_PRODUCTS": "❌ 该分类中未找到产品。",
            "NO_MORE_PRODUCTS": "❌ 没有更多产品了。",
            "NO_STOCK_PRODUCTS": "❌ 目前没有现货产品。",
            "PRODUCT_NOT_FOUND": "❌ 未找到产品。",
            "OUT_OF_STOCK": "⚠️ 该产品目前缺货。",
            "ADDED_TO_CART": "✅ 产品已添加到购物车！",
            "PRICE_ON_REQUEST": "价格面议",
            "DESCRIPTION_LABEL": "📋 <b>描述:</b>",
            "CART_EMPTY": "🛒 您的购物车为空。",
            "CART_TITLE": "🛒 <b>您的购物车</b>",
            "CART_TOTAL": "💳 <b>总计：{total}</b>",
            "CART_ITEMS_COUNT": "📊 购物车中有 {count} 件商品",
            "CART_ITEM_NOT_FOUND": "未找到购物车商品",
            "CART_ITEM_DETAIL": "{name}\n数量：{quantity} × {price} = {total}",
            "CART_QTY_HINT": "使用 + 和 - 按钮调整数量",
            "CLEAR_CART_CONFIRM": "🗑️ <b>清空购物车</b>\n\n您确定要移除购物车中的所有商品吗？",
            "CART_CLEARED": "✅ <b>购物车已清空</b>\n\n所有商品已从购物车中移除。",
            "CHECKOUT_TITLE": "💳 <b>结账</b>",
            "CHECKOUT_ORDER_SUMMARY": "📋 <b>订单摘要：</b>",
            "CHECKOUT_NEXT_STEPS": (
                "📞 <b>下一步：</b>\n1. 联系我们的客服团队\n2. 发送此订单摘要\n"
                "3. 选择付款方式\n4. 接收您的账户"
            ),
            "CHECKOUT_CONTACT": "💬 <b>联系：</b> @{support_username}\n📧 <b>邮箱：</b> {support_email}",
            "SEARCH_PROMPT": "🔍 <b>搜索产品</b>\n\n输入您的搜索词：",
            "SEARCH_NO_RESULTS": '🔍 未找到 "{query}" 的相关产品\n\n尝试不同的关键词或按分类浏览。',
            "SETTINGS_TITLE": "⚙️ <b>设置</b>\n\n机器人设置和信息：",
            "HELP_TITLE": "❓ <b>帮助与支持</b>",
            "HELP_CONTENT": _ZH_HELP,
            "REFRESH_DONE": "✅ 产品已刷新：已加载 {total} 个产品。",
            "REFRESH_FAILED": "❌ 刷新失败，仍在使用之前的目录。\n{error}",
            "STATS_TITLE": "📊 <b>商店统计</b>",
            "STATS_BY_PLATFORM": "<b>📱 按平台：</b>",
            "STATS_BY_PRICE": "<b>💰 按价格范围：</b>",
            "STATS_SUMMARY": "<b>📈 总结：</b>",
            "STATS_TOTAL_PRODUCTS": "• 总产品数：{total}",
            "STATS_IN_STOCK": "• 现货：{inStock}",
            "STATS_AVAILABILITY": "• 可用性：{percent}%",
            "STATS_UNAVAILABLE": "⚠️ 暂时无法获取统计数据。",
            "IN_STOCK": "现货",
            "OUT_OF_STOCK_STATUS": "缺货",
            "ERROR": "❌ 出现问题，请重试。",
            "UNKNOWN_ACTION": "未知操作",
        },
        "buttons": {
            "BROWSE_PLATFORM": "📱 按平台浏览",
            "BROWSE_PRICE": "💰 按价格浏览",
            "IN_STOCK": "🔥 现货",
            "SEARCH": "🔍 搜索",
            "CART": "🛒 购物车",
            "SETTINGS": "⚙️ 设置",
            "BACK_TO_MENU": "🔙 返回菜单",
            "BACK_TO_PLATFORMS": "🔙 返回平台",
            "BACK_TO_CATEGORIES": "🔙 返回分类",
            "BACK_TO_LIST": "🔙 返回列表",
            "BACK_TO_CART": "🔙 返回购物车",
            "BACK_TO_SETTINGS": "🔙 返回设置",
            "MAIN_MENU": "🏠 主菜单",
            "PREV": "◀️ 上一页",
            "NEXT": "下一页 ▶️",
            "PAGE_INFO": "📄 {page}/{total}",
            "ADD_TO_CART": "➕ 加入购物车",
            "VIEW_CART": "🛒 查看购物车",
            "CONTINUE_SHOPPING": "🛍️ 继续购物",
            "START_SHOPPING": "🛍️ 开始购物",
            "CHECKOUT": "💳 结账",
            "CLEAR_CART": "🗑️ 清空购物车",
            "REMOVE_ITEM": "🗑️",
            "QUANTITY": "数量: {quantity}",
            "OUT_OF_STOCK": "缺货",
            "CONFIRM": "✅ 确认",
            "CANCEL": "❌ 取消",
            "CONTACT_SUPPORT": "💬 联系客服",
            "REFRESH_PRODUCTS": "🔄 刷新产品",
            "STATISTICS": "📊 统计",
            "HELP": "❓ 帮助",
            "CHANGE_LANGUAGE": "🌐 语言",
        },
    },
}

PRICE_MARKUP: dict[str, float] = {
    "zh": 1.5,
    "en": 1.0,
}

# Ordered most specific first; applied before the term glossary.
_ZH_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\$(\d+)"), r"¥\1"),
    (re.compile(r"\[(\$?\d+)\]"), r"【\1】"),
    (re.compile(r"\[NO LIMIT\]", re.I), "【无限制】"),
    (re.compile(r"\[UNLIMITED\]", re.I), "【无限制】"),
    (re.compile(r"Facebook BM(\d+)", re.I), r"Facebook商管\1"),
    (re.compile(r"BM(\d+)"), r"商管\1"),
    (re.compile(r"Can create (\d+) unlimited Ad accounts", re.I), r"可创建\1个无限制广告账户"),
    (re.compile(r"Can create (\d+)", re.I), r"可创建\1个"),
    (re.compile(r"(\d+) unlimited Ad accounts already created", re.I), r"已创建\1个无限制广告账户"),
    (re.compile(r"(\d+) Ad accounts already created", re.I), r"已创建\1个广告账户"),
    (re.compile(r"have (\$?\d+) limit", re.I), r"限额\1"),
    (re.compile(r"have NO limit", re.I), "无限额"),
    (re.compile(r"Can spend NO LIMIT", re.I), "可无限消费"),
    (re.compile(r"No ban risk when ad accounts creation", re.I), "创建广告账户无封号风险"),
    (re.compile(r"Currency can be changed", re.I), "可更改货币"),
    (re.compile(r"since first day", re.I), "从第一天起"),
]

_ZH_TERMS: dict[str, str] = {
    "Google": "谷歌",
    "Business Manager": "商业管理器",
    "Personal Account": "个人账户",
    "Fan Page": "粉丝页面",
    "Advertising Account": "广告账户",
    "Mixed Accounts": "混合账户",
    "UNLIMITED": "无限制",
    "NO LIMIT": "无限制",
    "Reinstated": "已恢复",
    "verified": "已验证",
    "ready to use": "即用型",
    "high quality": "高品质",
    "premium": "高级",
    "professional": "专业",
    "Ad accounts": "广告账户",
    "Ads manager": "广告管理器",
    "spending limit": "消费限额",
    "no ban risk": "无封号风险",
    "ban risk": "封号风险",
    "already created": "已创建",
    "can create": "可创建",
    "can spend": "可消费",
    "first day": "第一天",
    "create": "创建",
    "spend": "消费",
    "change": "更改",
    "manage": "管理",
    "access": "访问",
    "control": "控制",
}

_ZH_CLEANUP: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(\d+)\s*accounts", re.I), r"\1个账户"),
    (re.compile(r"\baccounts\b", re.I), "个账户"),
    (re.compile(r"\baccount\b", re.I), "账户"),
    (re.compile(r"unlimited", re.I), "无限制"),
    (re.compile(r"\s+"), " "),
]


class LocalizedProduct(BaseModel):
    """Display copy of a product; the base ``price`` stays untouched."""

    id: str
    name: str
    description: str
    platform_category: str
    price: float
    stock: int
    display_price: float
    formatted_price: str


def _fill(template: str, replacements: dict[str, object]) -> str:
    for placeholder, value in replacements.items():
        template = template.replace(f"{{{placeholder}}}", str(value))
    return template


class LanguageManager:
    """Per-user language preference and string lookup."""

    def __init__(self, default_language: str = DEFAULT_LANGUAGE) -> None:
        self.default_language = default_language
        self._user_languages: dict[str, str] = {}

    @staticmethod
    def available_languages() -> list[str]:
        return list(LANGUAGES)

    @staticmethod
    def is_valid_language(code: str) -> bool:
        return code in LANGUAGES

    def language_of(self, user_id: str | int | None) -> str:
        if user_id is None:
            return self.default_language
        return self._user_languages.get(str(user_id), self.default_language)

    def set_language(self, user_id: str | int, code: str) -> bool:
        if code not in LANGUAGES:
            logger.debug("Ignoring unknown language code %s", code)
            return False
        self._user_languages[str(user_id)] = code
        return True

    def message(self, user_id: str | int | None, key: str, **replacements: object) -> str:
        return _fill(self._lookup("messages", user_id, key), replacements)

    def button(self, user_id: str | int | None, key: str, **replacements: object) -> str:
        return _fill(self._lookup("buttons", user_id, key), replacements)

    def _lookup(self, table: str, user_id: str | int | None, key: str) -> str:
        language = LANGUAGES[self.language_of(user_id)]
        fallback = LANGUAGES[self.default_language]
        return language[table].get(key) or fallback[table].get(key) or key

    def localized_price(self, user_id: str | int | None, price: float) -> float:
        return price * PRICE_MARKUP.get(self.language_of(user_id), 1.0)

    def format_price(self, user_id: str | int | None, price: float) -> str:
        """Marked-up price, always shown in USD."""
        return f"${self.localized_price(user_id, price):.2f}"

    def translate_text(self, user_id: str | int | None, text: str | None) -> str | None:
        """Rule-based fallback used when a product has no pre-translated text."""

        if not text or self.language_of(user_id) != "zh":
            return text
        return translate_to_chinese(text)

    def localize_product(self, user_id: str | int | None, product: Product) -> LocalizedProduct:
        if self.language_of(user_id) == "zh":
            name = product.name_zh or self.translate_text(user_id, product.name)
            description = product.description_zh or self.translate_text(
                user_id, product.description
            )
            category = product.category_zh or self.translate_text(
                user_id, product.platform_category
            )
        else:
            name, description, category = (
                product.name,
                product.description,
                product.platform_category,
            )

        return LocalizedProduct(
            id=product.id,
            name=name or "",
            description=description or "",
            platform_category=category or "",
            price=product.price,
            stock=product.stock,
            display_price=self.localized_price(user_id, product.price),
            formatted_price=self.format_price(user_id, product.price),
        )


def translate_to_chinese(text: str) -> str:
    for pattern, replacement in _ZH_PATTERNS:
        text = pattern.sub(replacement, text)
    for term, chinese in _ZH_TERMS.items():
        text = re.sub(rf"\b{re.escape(term)}\b", chinese, text, flags=re.I)
    for pattern, replacement in _ZH_CLEANUP:
        text = pattern.sub(replacement, text)
    return text.strip()
