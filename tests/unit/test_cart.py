"""
Unit tests for the in-memory cart.
"""

import pytest
from decimal import Decimal

from pos.models import Product
from pos.services.cart_service import Cart


def make_product(product_id, price='10.00'):
    return Product(id=product_id, name=f'Product {product_id}', price=Decimal(price), category='food', stock=10)


class TestAddToCart:
    """Tests for merge-on-duplicate semantics."""

    @pytest.mark.parametrize('times', [1, 2, 5])
    def test_repeated_adds_merge_into_one_line(self, times):
        cart = Cart()
        product = make_product('p1')
        for _ in range(times):
            cart.add(product)

        items = cart.items()
        assert len(items) == 1
        assert items[0].quantity == times

    def test_distinct_products_keep_insertion_order(self):
        cart = Cart()
        cart.add(make_product('b'))
        cart.add(make_product('a'))
        cart.add(make_product('b'))

        assert [item.product.id for item in cart.items()] == ['b', 'a']
        assert [item.quantity for item in cart.items()] == [2, 1]

    def test_add_does_not_check_stock(self):
        cart = Cart()
        product = Product(id='p1', name='Last one', price=Decimal('1'), category='food', stock=0)
        cart.add(product)
        cart.add(product)
        assert cart.items()[0].quantity == 2


class TestUpdateQuantity:
    """Tests for quantity updates."""

    def test_sets_quantity_directly(self):
        cart = Cart()
        cart.add(make_product('p1'))
        cart.update_quantity('p1', 7)
        assert cart.items()[0].quantity == 7

    @pytest.mark.parametrize('quantity', [0, -1, -25])
    def test_non_positive_quantity_removes_item(self, quantity):
        cart = Cart()
        cart.add(make_product('p1'))
        cart.add(make_product('p2'))

        other = Cart()
        other.add(make_product('p1'))
        other.add(make_product('p2'))

        cart.update_quantity('p1', quantity)
        other.remove('p1')

        assert cart.items() == other.items()
        assert [item.product.id for item in cart.items()] == ['p2']

    def test_unknown_product_is_ignored(self):
        cart = Cart()
        cart.add(make_product('p1'))
        cart.update_quantity('missing', 3)
        assert len(cart) == 1
        assert cart.items()[0].quantity == 1


class TestRemoveAndClear:

    def test_remove_absent_product_is_noop(self):
        cart = Cart()
        cart.add(make_product('p1'))
        cart.remove('nope')
        assert len(cart) == 1

    def test_clear_empties_cart(self):
        cart = Cart()
        cart.add(make_product('p1'))
        cart.add(make_product('p2'))
        cart.clear()
        assert cart.is_empty()
        assert cart.items() == []

    def test_items_returns_snapshot(self):
        cart = Cart()
        cart.add(make_product('p1'))
        snapshot = cart.items()
        cart.clear()
        assert len(snapshot) == 1
