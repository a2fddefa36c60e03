"""
Name: Cart Value Object Unit Tests

Responsibilities:
  - Verify 4h expiration pruning with an explicit clock
  - Verify add / remove / update never mutate the original cart
  - Verify totals and payment item translation
"""

from datetime import datetime, timedelta, timezone

import pytest
from tienda.domain.cart import (
    CART_ITEM_TTL,
    Cart,
    CartItem,
    add_item,
    cart_count,
    cart_total,
    hours_until_expiration,
    prune_expired,
    remove_item,
    to_payment_items,
    update_quantity,
)

pytestmark = pytest.mark.unit

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _item(product_id: str = "p1", *, price: float = 10.0, quantity: int = 1, added_at=NOW):
    return CartItem(
        id=product_id,
        name=f"Producto {product_id}",
        price=price,
        quantity=quantity,
        added_at=added_at,
    )


class TestPruneExpired:
    def test_drops_items_older_than_ttl(self):
        cart = Cart(
            items=(
                _item("fresh", added_at=NOW - timedelta(hours=1)),
                _item("stale", added_at=NOW - timedelta(hours=5)),
            )
        )

        pruned = prune_expired(cart, NOW)

        assert [i.id for i in pruned.items] == ["fresh"]

    def test_item_expires_exactly_at_ttl(self):
        cart = Cart(items=(_item(added_at=NOW - CART_ITEM_TTL),))

        assert prune_expired(cart, NOW).items == ()

    def test_items_without_timestamp_are_stamped_and_kept(self):
        cart = Cart(items=(_item(added_at=None),))

        pruned = prune_expired(cart, NOW)

        assert pruned.items[0].added_at == NOW
        assert cart.items[0].added_at is None


class TestMutations:
    def test_add_new_item_starts_at_quantity_one(self):
        cart = add_item(Cart(), _item(quantity=7, added_at=None), NOW)

        assert cart.items[0].quantity == 1
        assert cart.items[0].added_at == NOW

    def test_re_adding_increments_and_renews_timestamp(self):
        earlier = NOW - timedelta(hours=3)
        cart = Cart(items=(_item(added_at=earlier),))

        updated = add_item(cart, _item(), NOW)

        assert updated.items[0].quantity == 2
        assert updated.items[0].added_at == NOW
        assert cart.items[0].quantity == 1

    def test_remove_item(self):
        cart = Cart(items=(_item("a"), _item("b")))

        assert [i.id for i in remove_item(cart, "a").items] == ["b"]

    def test_update_quantity_to_zero_removes(self):
        cart = Cart(items=(_item("a"),))

        assert update_quantity(cart, "a", 0).items == ()

    def test_update_quantity_for_missing_product_keeps_cart(self):
        cart = Cart(items=(_item("a"),))

        assert update_quantity(cart, "zzz", 3) == cart


class TestTotals:
    def test_count_and_total(self):
        cart = Cart(items=(_item("a", price=10, quantity=2), _item("b", price=5.5)))

        assert cart_count(cart) == 3
        assert cart_total(cart) == pytest.approx(25.5)

    def test_hours_until_expiration(self):
        item = _item(added_at=NOW - timedelta(minutes=90))

        assert hours_until_expiration(item, NOW) == 2
        assert hours_until_expiration(_item(added_at=NOW - timedelta(hours=6)), NOW) == 0
        assert hours_until_expiration(_item(added_at=None), NOW) is None

    def test_to_payment_items(self):
        cart = Cart(items=(_item("a", price=12.5, quantity=2),))

        assert to_payment_items(cart) == [
            {"title": "Producto a", "unit_price": 12.5, "quantity": 2}
        ]
