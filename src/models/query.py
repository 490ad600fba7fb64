"""Schemas for catalog queries and paginated results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from src.models.product import Product


class ProductFilters(BaseModel):
    """Predicates narrowing a catalog query; all set fields must hold."""

    platform: str | None = None
    category: str | None = None
    price_min: float | None = None
    price_max: float | None = None
    in_stock: bool = False
    search: str | None = None

    def is_empty(self) -> bool:
        return self == ProductFilters()


class Pagination(BaseModel):
    page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool


class PageResult(BaseModel):
    """One page of matching products plus pagination metadata."""

    products: list[Product] = Field(default_factory=list)
    pagination: Pagination


class ListingContext(BaseModel):
    """The product list a user is paging through, kept between button presses."""

    kind: Literal["category", "price", "in_stock", "search"]
    filters: ProductFilters
    page: int = 1
    label: str | None = None
