"""
Unit tests for checkout and sale history.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from pos.exceptions import ValidationError, PersistenceError
from pos.models import PaymentMethod, Sale
from pos.services.storage_service import SALES_KEY, PRODUCTS_KEY


def stock_of(pos, product_id):
    return next(p.stock for p in pos.list_products() if p.id == product_id)


class TestCompleteSale:
    """Tests for the sale committer."""

    def test_sale_decrements_stock_and_clears_cart(self, pos, burger):
        pos.add_to_cart(burger)
        pos.update_quantity(burger.id, 3)

        sale = pos.complete_sale('cash')

        assert sale is not None
        assert stock_of(pos, burger.id) == 7
        assert pos.list_sales() == [sale]
        assert pos.cart_items() == []
        assert sale.payment_method == PaymentMethod.CASH

    def test_empty_cart_is_noop(self, memory_pos, backend):
        memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        writes_before = list(backend.writes)

        assert memory_pos.complete_sale('card') is None
        assert backend.writes == writes_before
        assert memory_pos.list_sales() == []

    def test_empty_cart_checked_before_payment_method(self, pos):
        assert pos.complete_sale(None) is None

    @pytest.mark.parametrize('method', [None, '', 'cheque', 42])
    def test_invalid_payment_method_rejected_without_side_effects(self, pos, burger, method):
        pos.add_to_cart(burger)
        with pytest.raises(ValidationError):
            pos.complete_sale(method)
        assert len(pos.cart_items()) == 1
        assert stock_of(pos, burger.id) == 10
        assert pos.list_sales() == []

    def test_payment_method_is_case_insensitive(self, pos, burger):
        pos.add_to_cart(burger)
        assert pos.complete_sale(' Mobile ').payment_method == PaymentMethod.MOBILE

    def test_each_distinct_product_decremented_by_its_quantity(self, pos, burger, soda):
        pos.add_to_cart(burger)
        pos.add_to_cart(soda)
        pos.add_to_cart(burger)
        untouched = pos.add_product({'name': 'Water', 'price': '1', 'stock': 9})

        sale = pos.complete_sale('card')

        assert stock_of(pos, burger.id) == 8
        assert stock_of(pos, soda.id) == 19
        assert stock_of(pos, untouched.id) == 9
        assert sale.item_count == 3
        assert [(i.product.id, i.quantity) for i in sale.items] == [(burger.id, 2), (soda.id, 1)]

    def test_oversold_stock_goes_negative(self, pos, burger):
        pos.add_to_cart(burger)
        pos.update_quantity(burger.id, 12)
        pos.complete_sale('cash')
        assert stock_of(pos, burger.id) == -2

    def test_totals_use_current_tax_settings(self, pos, burger, soda):
        pos.add_to_cart(burger)
        pos.add_to_cart(burger)
        pos.add_to_cart(soda)
        assert pos.get_summary().total == Decimal('30.00')

        pos.update_tax_settings({'enabled': False})
        sale = pos.complete_sale('cash')

        assert sale.subtotal == Decimal('25')
        assert sale.tax == 0
        assert sale.total == Decimal('25')

    def test_sale_keeps_price_snapshot(self, pos, burger):
        pos.add_to_cart(burger)
        sale = pos.complete_sale('cash')
        pos.update_product(burger.id, {'price': '99.00'})

        stored = pos.get_sale(sale.id)
        assert stored.items[0].product.price == Decimal('10.00')

    def test_history_is_newest_first_with_unique_ids(self, pos, burger):
        sales = []
        for _ in range(3):
            pos.add_to_cart(burger)
            sales.append(pos.complete_sale('cash'))

        history = pos.list_sales()
        assert [s.id for s in history] == [s.id for s in reversed(sales)]
        assert len({s.id for s in history}) == 3
        assert len({s.receipt_number for s in history}) == 3

    def test_receipt_number_format(self, pos, burger):
        pos.add_to_cart(burger)
        sale = pos.complete_sale('cash')
        assert sale.receipt_number.startswith('RCP')
        assert len(sale.receipt_number) == 11
        assert sale.receipt_number[3:] == sale.id[-8:]

    def test_sales_survive_reload(self, pos, burger):
        pos.add_to_cart(burger)
        sale = pos.complete_sale('card')
        reloaded = Sale.from_dict(sale.to_dict())
        assert reloaded == sale
        assert isinstance(pos.get_sale(sale.id).timestamp, datetime)

    def test_get_unknown_sale(self, pos):
        assert pos.get_sale('missing') is None


class TestPersistenceFailures:
    """The cart is only cleared once stock and sale were both saved."""

    def test_catalog_write_failure_keeps_cart_and_history(self, memory_pos, backend):
        product = memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        memory_pos.add_to_cart(product)
        backend.fail_keys = {PRODUCTS_KEY}

        with pytest.raises(PersistenceError):
            memory_pos.complete_sale('cash')

        assert len(memory_pos.cart_items()) == 1
        assert memory_pos.list_sales() == []
        assert memory_pos.list_products()[0].stock == 5

    def test_sale_write_failure_restores_stock_and_keeps_cart(self, memory_pos, backend):
        product = memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        memory_pos.add_to_cart(product)
        backend.fail_keys = {SALES_KEY}
        backend.writes.clear()

        with pytest.raises(PersistenceError):
            memory_pos.complete_sale('cash')

        assert backend.writes == [PRODUCTS_KEY, PRODUCTS_KEY]
        assert len(memory_pos.cart_items()) == 1
        assert memory_pos.list_sales() == []
        assert memory_pos.list_products()[0].stock == 5

    def test_retry_after_sale_write_failure_decrements_once(self, memory_pos, backend):
        product = memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        memory_pos.add_to_cart(product)
        backend.fail_keys = {SALES_KEY}
        with pytest.raises(PersistenceError):
            memory_pos.complete_sale('cash')

        backend.fail_keys = set()
        sale = memory_pos.complete_sale('cash')

        assert memory_pos.list_sales() == [sale]
        assert sale.items[0].quantity == 1
        assert memory_pos.list_products()[0].stock == 4
        assert memory_pos.cart_items() == []

    def test_catalog_is_written_before_sale(self, memory_pos, backend):
        product = memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        memory_pos.add_to_cart(product)
        backend.writes.clear()

        memory_pos.complete_sale('cash')

        assert backend.writes == [PRODUCTS_KEY, SALES_KEY]

    def test_failed_product_write_leaves_catalog_unchanged(self, memory_pos, backend):
        memory_pos.add_product({'name': 'Tea', 'price': '2', 'stock': 5})
        backend.fail_keys = {PRODUCTS_KEY}
        with pytest.raises(PersistenceError):
            memory_pos.add_product({'name': 'Coffee', 'price': '3'})
        assert [p.name for p in memory_pos.list_products()] == ['Tea']


class TestTodaySales:

    def test_today_sales_and_total(self, memory_pos, clock):
        product = memory_pos.add_product({'name': 'Tea', 'price': '2.50', 'stock': 50})

        clock.now = datetime(2026, 10, 18, 23, 59)
        memory_pos.add_to_cart(product)
        memory_pos.complete_sale('cash')

        clock.now = datetime(2026, 10, 19, 8, 0)
        memory_pos.add_to_cart(product)
        morning = memory_pos.complete_sale('cash')

        clock.now = datetime(2026, 10, 19, 18, 30)
        memory_pos.add_to_cart(product)
        memory_pos.add_to_cart(product)
        evening = memory_pos.complete_sale('card')

        today = memory_pos.today_sales()
        assert [s.id for s in today] == [evening.id, morning.id]
        assert memory_pos.today_total() == morning.total + evening.total
        assert memory_pos.today_total() == Decimal('9.00')

    def test_today_total_without_sales(self, memory_pos):
        assert memory_pos.today_total() == 0

    def test_sale_timestamp_comes_from_clock(self, memory_pos, clock):
        product = memory_pos.add_product({'name': 'Tea', 'price': '1', 'stock': 5})
        clock.now = clock.now + timedelta(hours=3)
        memory_pos.add_to_cart(product)
        assert memory_pos.complete_sale('cash').timestamp == clock.now
