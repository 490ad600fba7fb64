"""Per-user shopping carts held in process memory."""

from __future__ import annotations

import itertools
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from src.models.cart import CartEntry, CartLine, CartView
from src.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

EntryIdFactory = Callable[[], str]


def uuid_entry_ids() -> str:
    return uuid.uuid4().hex


def counter_entry_ids(prefix: str = "cart-") -> EntryIdFactory:
    """Deterministic id factory yielding ``cart-1``, ``cart-2``, ..."""

    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CartStore:
    """Maps users to cart entries; product details are joined on read.

    At most one entry exists per (user, product) and every stored entry has a
    positive quantity.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        *,
        id_factory: EntryIdFactory = uuid_entry_ids,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._catalog = catalog
        self._new_id = id_factory
        self._clock = clock
        self._carts: dict[str, dict[str, CartEntry]] = {}
        self._owners: dict[str, str] = {}

    def add_item(self, user_id: str | int, product_id: str | int, quantity: int = 1) -> str:
        """Add ``quantity`` of a product, merging with an existing entry.

        Raises ``ValueError`` when ``quantity`` is less than 1, whether or not
        the product is already in the cart. Use ``set_quantity`` to lower or
        drop a line.
        """

        if quantity < 1:
            raise ValueError(f"Quantity to add must be at least 1, got {quantity}")

        user_key, product_key = str(user_id), str(product_id)
        cart = self._carts.setdefault(user_key, {})

        for entry in cart.values():
            if entry.product_id == product_key:
                self.set_quantity(entry.entry_id, entry.quantity + quantity)
                return entry.entry_id

        now = self._clock()
        entry = CartEntry(
            entry_id=self._new_id(),
            user_id=user_key,
            product_id=product_key,
            quantity=quantity,
            created_at=now,
            updated_at=now,
        )
        cart[entry.entry_id] = entry
        self._owners[entry.entry_id] = user_key
        logger.debug("Created cart entry %s for user %s", entry.entry_id, user_key)
        return entry.entry_id

    def get_entry(self, entry_id: str) -> CartEntry | None:
        owner = self._owners.get(entry_id)
        if owner is None:
            return None
        return self._carts[owner].get(entry_id)

    def get_cart(self, user_id: str | int) -> list[CartLine]:
        lines: list[CartLine] = []
        for entry in self._carts.get(str(user_id), {}).values():
            product = self._catalog.get_product(entry.product_id)
            if product is None:
                continue
            lines.append(
                CartLine(
                    entry_id=entry.entry_id,
                    product_id=entry.product_id,
                    quantity=entry.quantity,
                    name=product.name,
                    price=product.price,
                    stock=product.stock,
                )
            )
        return lines

    def set_quantity(self, entry_id: str, quantity: int) -> bool:
        """Set an absolute quantity; zero or less deletes the entry."""

        entry = self.get_entry(entry_id)
        if entry is None:
            return False
        if quantity <= 0:
            self.remove_item(entry_id)
            return True
        entry.quantity = quantity
        entry.updated_at = self._clock()
        return True

    def remove_item(self, entry_id: str) -> bool:
        owner = self._owners.pop(entry_id, None)
        if owner is None:
            return False
        self._carts[owner].pop(entry_id, None)
        return True

    def clear(self, user_id: str | int) -> None:
        for entry_id in self._carts.pop(str(user_id), {}):
            self._owners.pop(entry_id, None)

    def item_count(self, user_id: str | int) -> int:
        return sum(entry.quantity for entry in self._carts.get(str(user_id), {}).values())

    def total(self, user_id: str | int) -> float:
        return sum(line.line_total for line in self.get_cart(user_id))

    def view(self, user_id: str | int) -> CartView:
        lines = self.get_cart(user_id)
        return CartView(
            lines=lines,
            total=sum(line.line_total for line in lines),
            item_count=sum(line.quantity for line in lines),
        )

    def entry_count(self) -> int:
        return len(self._owners)

    def reset(self) -> None:
        self._carts.clear()
        self._owners.clear()
