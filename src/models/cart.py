"""Shopping cart models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class CartEntry(BaseModel):
    """One (user, product, quantity) record held by the cart store."""

    entry_id: str
    user_id: str
    product_id: str
    quantity: int = Field(..., gt=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CartLine(BaseModel):
    """Cart entry joined with the current catalog product at read time."""

    entry_id: str
    product_id: str
    quantity: int
    name: str
    price: float
    stock: int

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CartView(BaseModel):
    lines: list[CartLine] = Field(default_factory=list)
    total: float = 0
    item_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines
