"""Tests for the in-memory cart store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from src.services.cart_store import CartStore, counter_entry_ids, uuid_entry_ids


def test_adding_same_product_merges_quantities(carts):
    first = carts.add_item(1, "p1", 2)
    second = carts.add_item(1, "p1", 3)

    lines = carts.get_cart(1)
    assert first == second
    assert len(lines) == 1
    assert lines[0].quantity == 5


def test_entry_ids_come_from_factory(carts):
    assert carts.add_item(1, "p1") == "cart-1"
    assert carts.add_item(1, "p3") == "cart-2"
    assert carts.add_item(2, "p1") == "cart-3"


def test_uuid_ids_are_unique():
    assert uuid_entry_ids() != uuid_entry_ids()


def test_counter_factory_accepts_prefix():
    new_id = counter_entry_ids("entry-")
    assert [new_id(), new_id()] == ["entry-1", "entry-2"]


def test_carts_are_per_user(carts):
    carts.add_item(1, "p1")
    carts.add_item(2, "p3", 4)

    assert [line.product_id for line in carts.get_cart(1)] == ["p1"]
    assert carts.item_count(2) == 4


def test_set_quantity_zero_removes_entry(carts):
    entry_id = carts.add_item(1, "p1", 2)

    assert carts.set_quantity(entry_id, 0) is True
    assert carts.get_cart(1) == []
    assert carts.get_entry(entry_id) is None


def test_decreasing_quantity_lowers_total_by_price(carts):
    entry_id = carts.add_item(1, "p3", 3)
    before = carts.total(1)

    carts.set_quantity(entry_id, 2)

    assert before - carts.total(1) == 100


def test_total_uses_current_catalog_price(carts):
    carts.add_item(1, "p1", 2)
    carts.add_item(1, "p4", 3)

    assert carts.total(1) == 2 * 30 + 3 * 5


def test_unknown_entry_operations_return_false(carts):
    assert carts.set_quantity("nope", 3) is False
    assert carts.remove_item("nope") is False


def test_remove_is_idempotent(carts):
    entry_id = carts.add_item(1, "p1")

    assert carts.remove_item(entry_id) is True
    assert carts.remove_item(entry_id) is False
    assert carts.get_cart(1) == []


def test_unresolvable_products_are_dropped_from_views(carts, catalog, catalog_writer):
    carts.add_item(1, "p1", 1)
    carts.add_item(1, "p3", 2)

    catalog_writer([{"id": "p3", "name": "Business Manager", "price": 120, "stock": 1}])
    catalog.refresh()

    view = carts.view(1)
    assert [line.product_id for line in view.lines] == ["p3"]
    assert view.total == 240
    assert view.item_count == 2
    # the stored entry survives and still counts toward the raw item count
    assert carts.item_count(1) == 3


def test_clear_empties_one_user(carts):
    carts.add_item(1, "p1")
    other = carts.add_item(2, "p1")

    carts.clear(1)

    assert carts.get_cart(1) == []
    assert carts.get_entry(other) is not None
    assert carts.entry_count() == 1


def test_view_of_empty_cart(catalog):
    store = CartStore(catalog)

    view = store.view(99)
    assert view.is_empty
    assert view.total == 0
    assert view.item_count == 0


def test_set_quantity_updates_timestamp(catalog):
    ticks = iter(range(100))
    base = datetime(2026, 1, 1, tzinfo=UTC)
    store = CartStore(
        catalog,
        id_factory=counter_entry_ids(),
        clock=lambda: base + timedelta(seconds=next(ticks)),
    )
    entry_id = store.add_item(1, "p1")
    store.set_quantity(entry_id, 4)

    entry = store.get_entry(entry_id)
    assert entry.quantity == 4
    assert entry.updated_at > entry.created_at


def test_removing_entry_lowers_total_by_its_line_total(carts):
    carts.add_item(1, "p1", 2)
    entry_id = carts.add_item(1, "p3", 3)
    before = carts.total(1)

    carts.remove_item(entry_id)

    assert before - carts.total(1) == 100 * 3


@pytest.mark.parametrize("quantity", [0, -3])
def test_add_rejects_non_positive_quantity_for_new_line(carts, quantity):
    with pytest.raises(ValueError):
        carts.add_item(1, "p1", quantity)

    assert carts.get_cart(1) == []


@pytest.mark.parametrize("quantity", [0, -5])
def test_add_rejects_non_positive_quantity_for_existing_line(carts, quantity):
    entry_id = carts.add_item(1, "p1", 2)

    with pytest.raises(ValueError):
        carts.add_item(1, "p1", quantity)

    assert carts.get_entry(entry_id).quantity == 2
