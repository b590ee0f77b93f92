"""
Tests for Cart Store
"""

import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from core.cart import CartLineItem, CartStore
from core.exceptions import InvalidProductError, InvalidQuantityError, StorageError
from core.storage import InMemoryStorage


class TestCartLineItem:
    """Tests for CartLineItem dataclass."""

    def test_from_product_copies_fields(self, sample_product):
        """Test that pass-through product fields are kept."""
        item = CartLineItem.from_product(sample_product, 2, "https://example.com/none.png")

        assert item.id == "665f1c2ab7e4a1d9c0a1b2c3"
        assert item.name == "Hydrating Face Serum"
        assert item.quantity == 2
        assert item.extra["category"] == "Skincare"
        assert item.extra["brand"] == "Glow Lab"
        assert item.extra["countInStock"] == 12

    @pytest.mark.parametrize("quantity", [2.7, True, "3"])
    def test_from_dict_rejects_non_integer_quantity(self, quantity):
        """Test stored quantities are never truncated or coerced."""
        with pytest.raises(TypeError):
            CartLineItem.from_dict({"id": "A", "quantity": quantity})

    def test_from_dict_defaults_missing_quantity(self):
        assert CartLineItem.from_dict({"_id": "A"}).quantity == 1

    def test_image_resolution_order(self):
        """Test images[0], then image, then placeholder."""
        placeholder = "https://example.com/none.png"

        with_list = CartLineItem.from_product({"id": "a", "images": ["first.jpg"], "image": "single.jpg"}, 1, placeholder)
        with_single = CartLineItem.from_product({"id": "b", "images": [], "image": "single.jpg"}, 1, placeholder)
        without = CartLineItem.from_product({"id": "c"}, 1, placeholder)

        assert with_list.image == "first.jpg"
        assert with_single.image == "single.jpg"
        assert without.image == placeholder

    def test_primary_id_preferred(self):
        """Test that `id` wins over `_id`."""
        item = CartLineItem.from_product({"id": 42, "_id": "mongo-id"}, 1, "")
        assert item.id == "42"

    def test_to_dict_writes_both_id_fields(self):
        """Test serialization carries id and _id."""
        item = CartLineItem(id="A", name="Lip Balm", price="$4.00", image="x.jpg", quantity=3)
        data = item.to_dict()

        assert data["id"] == "A"
        assert data["_id"] == "A"
        assert data["quantity"] == 3

    def test_from_dict_defaults_quantity(self):
        """Test that a record without quantity reads as 1."""
        item = CartLineItem.from_dict({"_id": "A", "name": "Toner", "price": 12})
        assert item.quantity == 1

    def test_line_total_with_bad_price(self):
        """Test unreadable price contributes zero."""
        item = CartLineItem(id="A", price="call for price", quantity=4)
        assert item.unit_price is None
        assert item.line_total == Decimal("0")


class TestCartStoreAdd:
    """Tests for add_item."""

    def test_add_new_item(self, cart_store, sample_product):
        """Test adding a product creates one line item."""
        result = cart_store.add_item(sample_product)

        assert result.quantity == 1
        assert len(cart_store) == 1
        assert sample_product["_id"] in cart_store

    def test_add_same_product_accumulates(self, cart_store):
        """Test repeated adds merge into a single line item."""
        cart_store.add_item({"id": "A", "price": "$10.00"})
        cart_store.add_item({"id": "A", "price": "$10.00"}, 2)

        assert len(cart_store) == 1
        assert cart_store.get_item("A").quantity == 3
        assert cart_store.get_total() == 30
        assert cart_store.get_item_count() == 3

    def test_add_merges_across_id_fields(self, cart_store):
        """Test a product given by `_id` merges with the same value given by `id`."""
        cart_store.add_item({"_id": "A", "price": 5})
        cart_store.add_item({"id": "A", "price": 5})

        assert len(cart_store) == 1
        assert cart_store.get_item("A").quantity == 2

    def test_add_keeps_insertion_order(self, cart_store):
        """Test items stay in the order they were first added."""
        for product_id in ("c", "a", "b"):
            cart_store.add_item({"id": product_id, "price": 1})
        cart_store.add_item({"id": "a", "price": 1})

        assert [item.id for item in cart_store.items] == ["c", "a", "b"]

    def test_add_without_id_rejected(self, cart_store):
        """Test products without identifier raise and leave the cart alone."""
        with pytest.raises(InvalidProductError):
            cart_store.add_item({"name": "Mystery", "price": 3})
        with pytest.raises(InvalidProductError):
            cart_store.add_item({"id": "", "_id": None})

        assert cart_store.is_empty

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_add_invalid_quantity_rejected(self, cart_store, quantity):
        """Test non-positive or non-integer quantities raise."""
        with pytest.raises(InvalidQuantityError):
            cart_store.add_item({"id": "A"}, quantity)

    def test_add_returns_snapshot(self, cart_store):
        """Test mutating the returned item does not touch the store."""
        result = cart_store.add_item({"id": "A", "price": 1, "tags": ["new"]})
        result.quantity = 99
        result.extra["tags"].append("mutated")

        stored = cart_store.get_item("A")
        assert stored.quantity == 1
        assert stored.extra["tags"] == ["new"]


class TestCartStoreQuantities:
    """Tests for quantity commands."""

    def test_remove_item(self, cart_store):
        cart_store.add_item({"id": "A"})
        cart_store.add_item({"id": "B"})

        cart_store.remove_item("A")

        assert "A" not in cart_store
        assert "B" in cart_store

    def test_remove_missing_is_noop(self, cart_store):
        cart_store.add_item({"id": "A"})
        cart_store.remove_item("Z")
        assert len(cart_store) == 1

    def test_set_quantity(self, cart_store):
        cart_store.add_item({"id": "A"})
        cart_store.set_quantity("A", 7)
        assert cart_store.get_item("A").quantity == 7

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_set_quantity_non_positive_removes(self, cart_store, quantity):
        """Test set_quantity(id, 0) and negatives remove the item."""
        cart_store.add_item({"id": "A"})
        cart_store.set_quantity("A", quantity)
        assert "A" not in cart_store

    def test_set_quantity_rejects_non_integer(self, cart_store):
        cart_store.add_item({"id": "A"})
        with pytest.raises(InvalidQuantityError):
            cart_store.set_quantity("A", "3")

    def test_increment(self, cart_store):
        cart_store.add_item({"id": "A"})
        cart_store.increment_quantity("A")
        cart_store.increment_quantity("A")
        assert cart_store.get_item("A").quantity == 3

    def test_decrement_above_one(self, cart_store):
        """Test decrement reduces by exactly one."""
        cart_store.add_item({"id": "A"}, 3)
        cart_store.decrement_quantity("A")
        assert cart_store.get_item("A").quantity == 2

    def test_decrement_at_one_removes(self, cart_store):
        """Test decrement of a single unit drops the line item."""
        cart_store.add_item({"id": "A"})
        cart_store.decrement_quantity("A")
        assert "A" not in cart_store
        assert cart_store.is_empty

    def test_commands_accept_non_string_ids(self, cart_store):
        """Test numeric ids match their canonical string form."""
        cart_store.add_item({"id": 7})
        cart_store.increment_quantity(7)
        assert cart_store.get_item("7").quantity == 2


class TestCartStoreTotals:
    """Tests for get_total and get_item_count."""

    def test_empty_cart(self, cart_store):
        assert cart_store.get_total() == 0
        assert cart_store.get_item_count() == 0

    def test_total_ignores_currency_formatting(self, cart_store):
        """Test formatted and numeric prices sum the same way."""
        cart_store.add_item({"id": "A", "price": "$1,299.99"})
        cart_store.add_item({"id": "B", "price": 0.01}, 2)
        cart_store.add_item({"id": "C", "price": "USD 10"}, 3)

        assert cart_store.get_total() == Decimal("1330.01")
        assert cart_store.get_item_count() == 6

    def test_total_skips_unreadable_price(self, cart_store):
        cart_store.add_item({"id": "A", "price": "free!"})
        cart_store.add_item({"id": "B"})
        cart_store.add_item({"id": "C", "price": "$5"}, 2)

        assert cart_store.get_total() == 10

    def test_total_is_decimal(self, cart_store, sample_product, second_product):
        cart_store.add_item(sample_product)
        cart_store.add_item(second_product, 2)

        total = cart_store.get_total()
        assert isinstance(total, Decimal)
        assert total == Decimal("66.99")

    @pytest.mark.parametrize("price", [1e30, "$" + "9" * 30])
    def test_total_of_large_prices_is_exact(self, cart_store, price):
        """Test totals beyond 28 significant digits still round to cents."""
        cart_store.add_item({"id": "A", "price": price}, 2)

        expected = 2 * 10**30 if isinstance(price, float) else 2 * (10**30 - 1)
        assert cart_store.get_total() == Decimal(expected)
        assert cart_store.get_item_count() == 2

    def test_total_beyond_float_range(self, cart_store):
        """Test summing near-maximum prices keeps an exact Decimal total."""
        cart_store.add_item({"id": "A", "price": 1e308}, 3)

        assert cart_store.get_total() == Decimal("3e308")


class TestCartStorePersistence:
    """Tests for storage synchronisation."""

    def test_each_mutation_persists(self, memory_storage, cart_store):
        """Test storage always holds the current serialized collection."""
        cart_store.add_item({"id": "A", "price": "$2"})
        assert json.loads(memory_storage.get("cart")) == cart_store.to_list()

        cart_store.increment_quantity("A")
        assert json.loads(memory_storage.get("cart"))[0]["quantity"] == 2

        cart_store.remove_item("A")
        assert json.loads(memory_storage.get("cart")) == []

    def test_clear_deletes_key(self, memory_storage, cart_store):
        """Test clear removes the persisted representation entirely."""
        cart_store.add_item({"id": "A"})
        cart_store.clear()

        assert cart_store.is_empty
        assert "cart" not in memory_storage
        assert memory_storage.get("cart") is None

    def test_reload_round_trip(self, memory_storage, sample_product, second_product):
        """Test a fresh store reproduces the same collection."""
        store = CartStore(memory_storage, key="cart")
        store.add_item(sample_product, 2)
        store.add_item(second_product)

        reloaded = CartStore(memory_storage, key="cart")

        assert reloaded.to_list() == store.to_list()
        assert reloaded.get_total() == store.get_total()
        assert reloaded.get_item_count() == 3

    def test_hydrates_legacy_records(self):
        """Test records with only `_id` and no quantity load."""
        storage = InMemoryStorage({
            "cart": json.dumps([{"_id": "A", "name": "Mask", "price": "$8.00"}]),
        })
        store = CartStore(storage, key="cart")

        assert store.get_item("A").quantity == 1
        assert store.get_total() == 8

    @pytest.mark.parametrize("raw", [
        "not json",
        json.dumps({"id": "A"}),
        json.dumps([{"name": "no id"}]),
        json.dumps([{"id": "A", "quantity": "many"}]),
        json.dumps([{"id": "A", "quantity": 0}]),
        json.dumps([{"id": "A", "quantity": 2.7}]),
        json.dumps([{"id": "A", "quantity": True}]),
        json.dumps([42]),
    ])
    def test_malformed_storage_starts_empty(self, raw):
        """Test unreadable persisted data yields an empty cart."""
        store = CartStore(InMemoryStorage({"cart": raw}), key="cart")
        assert store.is_empty
        assert store.get_total() == 0

    def test_storage_read_failure_starts_empty(self):
        storage = Mock()
        storage.get.side_effect = StorageError("get", "cart")

        store = CartStore(storage, key="cart")

        assert store.is_empty

    def test_storage_write_failure_keeps_state(self):
        """Test a failed write does not raise or lose the in-memory cart."""
        storage = Mock()
        storage.get.return_value = None
        storage.set.side_effect = StorageError("set", "cart", ConnectionError("down"))

        store = CartStore(storage, key="cart")
        store.add_item({"id": "A", "price": 3}, 2)

        assert store.get_item_count() == 2
        assert storage.set.called

    def test_separate_keys_are_independent(self, memory_storage):
        first = CartStore(memory_storage, key="cart:one")
        second = CartStore(memory_storage, key="cart:two")

        first.add_item({"id": "A"})

        assert CartStore(memory_storage, key="cart:two").is_empty
        assert second.is_empty


class TestCartStoreSubscribe:
    """Tests for change notification."""

    def test_listener_receives_snapshot(self, cart_store):
        received = []
        cart_store.subscribe(received.append)

        cart_store.add_item({"id": "A"})
        cart_store.increment_quantity("A")
        cart_store.clear()

        assert len(received) == 3
        assert received[0][0].quantity == 1
        assert received[1][0].quantity == 2
        assert received[2] == []

    def test_unsubscribe_stops_notifications(self, cart_store):
        listener = Mock()
        unsubscribe = cart_store.subscribe(listener)

        cart_store.add_item({"id": "A"})
        unsubscribe()
        unsubscribe()
        cart_store.add_item({"id": "A"})

        assert listener.call_count == 1

    def test_failing_listener_does_not_break_store(self, cart_store):
        good = Mock()
        cart_store.subscribe(Mock(side_effect=RuntimeError("boom")))
        cart_store.subscribe(good)

        cart_store.add_item({"id": "A"})

        assert good.call_count == 1
        assert "A" in cart_store
