"""
Unit tests for cart pricing.
"""

from decimal import Decimal

from pos.models import Product, CartItem, TaxSettings
from pos.services.pricing_service import compute_summary, compute_tax


def item(product_id, price, quantity):
    product = Product(id=product_id, name=product_id, price=Decimal(price), category='food', stock=100)
    return CartItem(product=product, quantity=quantity)


CART = [item('a', '10', 2), item('b', '5', 1)]


class TestComputeSummary:

    def test_tax_disabled(self):
        summary = compute_summary(CART, TaxSettings(enabled=False, rate=Decimal('20')))

        assert summary.subtotal == Decimal('25')
        assert summary.tax == Decimal('0')
        assert summary.total == Decimal('25')
        assert summary.item_count == 3

    def test_tax_enabled_rate_is_percentage(self):
        summary = compute_summary(CART, TaxSettings(enabled=True, rate=Decimal('20')))

        assert summary.subtotal == Decimal('25')
        assert summary.tax == Decimal('5.00')
        assert summary.total == Decimal('30.00')
        assert summary.item_count == 3

    def test_disabled_tax_ignores_rate(self):
        for rate in ('0', '7.5', '100'):
            summary = compute_summary(CART, TaxSettings(enabled=False, rate=Decimal(rate)))
            assert summary.tax == 0

    def test_is_pure(self):
        settings = TaxSettings(enabled=True, rate=Decimal('8.25'))
        assert compute_summary(CART, settings) == compute_summary(CART, settings)

    def test_empty_cart(self):
        summary = compute_summary([], TaxSettings(enabled=True, rate=Decimal('20')))
        assert summary.subtotal == 0
        assert summary.tax == 0
        assert summary.total == 0
        assert summary.item_count == 0

    def test_tax_rounds_half_up_to_cents(self):
        settings = TaxSettings(enabled=True, rate=Decimal('7.5'))
        # 0.07 * 7.5% = 0.00525 -> 0.01
        assert compute_tax(Decimal('0.07'), settings) == Decimal('0.01')
        summary = compute_summary([item('c', '3.33', 3)], settings)
        assert summary.subtotal == Decimal('9.99')
        assert summary.tax == Decimal('0.75')
        assert summary.total == Decimal('10.74')
