"""Tests for catalog loading and aggregate statistics."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.services.catalog_store import CatalogStore, LoadError


def test_load_builds_snapshot(catalog):
    snapshot = catalog.snapshot

    assert catalog.is_loaded
    assert snapshot.shop == "test-shop"
    assert [p.id for p in snapshot.products] == ["p1", "p2", "p3", "p4", "p5"]


def test_get_product_matches_ids_as_strings(catalog_writer):
    path = catalog_writer([{"id": 17, "name": "Numeric id", "price": 10, "stock": 1}])
    store = CatalogStore(path)
    store.load()

    assert store.get_product(17).name == "Numeric id"
    assert store.get_product("17").name == "Numeric id"
    assert store.get_product("missing") is None


def test_missing_fields_get_defaults(catalog_writer):
    path = catalog_writer([{"id": "x", "name": "Bare", "price": None}])
    store = CatalogStore(path)
    store.load()

    product = store.get_product("x")
    assert product.platform == "Unknown"
    assert product.platform_category == "Uncategorized"
    assert product.price == 0
    assert product.stock == 0
    assert product.description == ""


def test_platform_stats_preserve_first_appearance_order(catalog):
    result = catalog.platform_stats()

    assert result.status == "ok"
    assert [(s.platform, s.total, s.in_stock) for s in result.items] == [
        ("facebook", 4, 3),
        ("gmail", 1, 1),
    ]


def test_category_stats_sum_to_platform_totals(catalog):
    platforms = {s.platform: s for s in catalog.platform_stats().items}

    for name, stat in platforms.items():
        categories = catalog.category_stats(name).items
        assert sum(c.total for c in categories) == stat.total
        assert sum(c.in_stock for c in categories) == stat.in_stock


def test_category_stats_for_facebook(catalog):
    items = catalog.category_stats("facebook").items

    assert [(c.platform_category, c.total, c.in_stock) for c in items] == [
        ("Personal Accounts", 2, 1),
        ("Business Manager", 1, 1),
        ("Advertising Accounts", 1, 1),
    ]


def test_unknown_platform_has_no_categories(catalog):
    result = catalog.category_stats("myspace")

    assert result.status == "ok"
    assert result.items == []


def test_price_brackets_count_boundary_price_once(catalog):
    """A price of exactly 100 belongs to the first matching bracket only."""
    result = catalog.price_bracket_stats()

    assert [(s.label, s.total, s.in_stock) for s in result.items] == [
        ("Under $50", 3, 2),
        ("$50-$100", 1, 1),
        ("$200+", 1, 1),
    ]
    assert sum(s.total for s in result.items) == len(catalog.snapshot.products)


def test_price_in_bracket_gap_is_unbracketed(catalog_writer):
    path = catalog_writer(
        [
            {"id": "a", "name": "Gap", "price": 49.995, "stock": 1},
            {"id": "b", "name": "Cheap", "price": 10, "stock": 1},
        ]
    )
    store = CatalogStore(path)
    store.load()

    stats = store.price_bracket_stats().items
    assert sum(s.total for s in stats) == 1
    assert store.summary().unbracketed == 1


def test_summary_counts(catalog):
    summary = catalog.summary()

    assert summary.total_products == 5
    assert summary.in_stock == 4
    assert summary.out_of_stock == 1
    assert summary.unbracketed == 0


def test_snapshot_aggregates_cannot_be_modified(catalog):
    snapshot = catalog.snapshot

    with pytest.raises(ValidationError):
        snapshot.platform_stats[0].total = 999
    with pytest.raises(ValidationError):
        snapshot.category_stats["facebook"][0].in_stock = 0
    with pytest.raises(ValidationError):
        snapshot.price_bracket_stats[0].total = 0

    assert catalog.platform_stats().items[0].total == 4
    assert catalog.category_stats("facebook").items[0].in_stock == 1
    assert catalog.price_bracket_stats().items[0].total == 3


def test_stats_are_degraded_before_load(tmp_path):
    store = CatalogStore(tmp_path / "products.json")

    assert not store.is_loaded
    assert store.platform_stats().degraded
    assert store.category_stats("facebook").degraded
    assert store.price_bracket_stats().error == "Catalog has not been loaded"
    assert store.summary().total_products == 0


def test_missing_file_raises_load_error(tmp_path):
    store = CatalogStore(tmp_path / "absent.json")

    with pytest.raises(LoadError, match="not found"):
        store.load()


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"products": {"id": "x"}}',
        '{"items": []}',
        '[{"id": "x"}]',
    ],
)
def test_malformed_catalog_raises_load_error(tmp_path, content):
    path = tmp_path / "products.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(LoadError):
        CatalogStore(path).load()


def test_invalid_record_raises_load_error(catalog_writer):
    path = catalog_writer([{"id": "x", "name": "Negative", "price": -1}])

    with pytest.raises(LoadError, match="Invalid product record"):
        CatalogStore(path).load()


def test_duplicate_ids_raise_load_error(catalog_writer):
    path = catalog_writer(
        [
            {"id": "dup", "name": "One"},
            {"id": "dup", "name": "Two"},
        ]
    )

    with pytest.raises(LoadError, match="Duplicate product id"):
        CatalogStore(path).load()


def test_failed_refresh_keeps_previous_snapshot(catalog, catalog_path):
    # Arrange
    before = catalog.snapshot
    catalog_path.write_text("{broken", encoding="utf-8")

    # Act
    with pytest.raises(LoadError):
        catalog.refresh()

    # Assert
    assert catalog.snapshot is before
    assert catalog.get_product("p1") is not None


def test_refresh_swaps_in_new_products(catalog, catalog_writer):
    catalog_writer([{"id": "new", "name": "Fresh", "price": 1, "stock": 1}])

    snapshot = catalog.refresh()

    assert [p.id for p in snapshot.products] == ["new"]
    assert catalog.get_product("p1") is None


def test_every_product_is_found_by_its_id(catalog):
    for product in catalog.snapshot.products:
        assert catalog.get_product(product.id) is product


def test_extra_product_fields_are_kept(catalog_writer):
    path = catalog_writer([{"id": "x", "name": "Extra", "product_url": "https://example.com/x"}])
    store = CatalogStore(path)
    store.load()

    assert store.get_product("x").model_extra["product_url"] == "https://example.com/x"
