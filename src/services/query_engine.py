"""Filtering and pagination over a catalog snapshot."""

from __future__ import annotations

import math
from collections.abc import Iterable

from src.config import PRODUCTS_PER_PAGE
from src.models.product import CatalogSnapshot, Product
from src.models.query import PageResult, Pagination, ProductFilters


def query(
    snapshot: CatalogSnapshot,
    filters: ProductFilters | None = None,
    page: int = 1,
    page_size: int = PRODUCTS_PER_PAGE,
) -> PageResult:
    """Return one page of products matching every filter, in catalog order.

    Pages are 1-based. A page outside ``1..total_pages`` yields no products but
    still carries pagination metadata computed from the full match count.
    """

    matches = filter_products(snapshot.products, filters or ProductFilters())
    total = len(matches)
    total_pages = math.ceil(total / page_size)

    if page < 1:
        products: list[Product] = []
    else:
        offset = (page - 1) * page_size
        products = matches[offset : offset + page_size]

    return PageResult(
        products=products,
        pagination=Pagination(
            page=page,
            total_pages=total_pages,
            total=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


def filter_products(
    products: Iterable[Product],
    filters: ProductFilters,
) -> list[Product]:
    result = list(products)

    if filters.platform:
        result = [p for p in result if p.platform == filters.platform]

    if filters.category:
        result = [p for p in result if p.platform_category == filters.category]

    if filters.price_min is not None:
        result = [p for p in result if p.price >= filters.price_min]
    if filters.price_max is not None:
        result = [p for p in result if p.price <= filters.price_max]

    if filters.in_stock:
        result = [p for p in result if p.in_stock]

    if filters.search:
        term = filters.search.lower()
        result = [p for p in result if matches_search(p, term)]

    return result


def matches_search(product: Product, term: str) -> bool:
    """Case-insensitive containment in name, description or category."""
    term = term.lower()
    return any(
        term in (field or "").lower()
        for field in (product.name, product.description, product.platform_category)
    )
