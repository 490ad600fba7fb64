"""Callback-data encoding for inline keyboard buttons.

Data is ``action[:arg...]``. Telegram caps callback data at 64 bytes, so
categories travel as their index within the platform's category stats and
listing state (filters, page) lives in the user's session rather than here.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_CALLBACK_BYTES = 64

LANG = "lang"
MENU = "menu"
BROWSE = "browse"
PLATFORM = "plat"
CATEGORY = "cat"
PRICE = "price"
IN_STOCK = "instock"
SEARCH = "search"
PAGE = "page"
BACK_TO_LIST = "list"
VIEW = "view"
ADD = "add"
CART = "cart"
CHECKOUT = "checkout"
SETTINGS = "settings"
REFRESH = "refresh"
STATS = "stats"
HELP = "help"
NOOP = "noop"

CART_VIEW = "view"
CART_INC = "inc"
CART_DEC = "dec"
CART_REMOVE = "rm"
CART_ITEM = "item"
CART_QTY = "qty"
CART_CLEAR = "clear"
CART_CLEAR_CONFIRM = "clear_ok"


@dataclass(frozen=True)
class CallbackAction:
    action: str
    args: tuple[str, ...] = ()

    def arg(self, index: int, default: str | None = None) -> str | None:
        return self.args[index] if index < len(self.args) else default


def parse_callback(data: str | None) -> CallbackAction:
    action, _, rest = (data or "").partition(":")
    if not rest:
        return CallbackAction(action)
    if action in (CATEGORY, CART):
        # cat:<index>:<platform>  /  cart:<op>[:<entry id>]
        head, _, tail = rest.partition(":")
        return CallbackAction(action, (head, tail) if tail else (head,))
    return CallbackAction(action, (rest,))


def encode(action: str, *args: object) -> str:
    data = ":".join([action, *(str(arg) for arg in args)])
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"Callback data exceeds {MAX_CALLBACK_BYTES} bytes: {data!r}")
    return data


def language(code: str) -> str:
    return encode(LANG, code)


def platform(name: str) -> str:
    return encode(PLATFORM, name)


def category(platform_name: str, index: int) -> str:
    return encode(CATEGORY, index, platform_name)


def price(bracket_index: int) -> str:
    return encode(PRICE, bracket_index)


def page(number: int) -> str:
    return encode(PAGE, number)


def view(product_id: str) -> str:
    return encode(VIEW, product_id)


def add(product_id: str) -> str:
    return encode(ADD, product_id)


def cart(op: str, entry_id: str | None = None) -> str:
    return encode(CART, op, entry_id) if entry_id else encode(CART, op)
