"""Pricing - cart totals and tax."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from pos.models import CartItem, CartSummary, TaxSettings

CENT = Decimal('0.01')


def compute_tax(subtotal: Decimal, tax_settings: TaxSettings) -> Decimal:
    """Tax on ``subtotal``. The rate is a percentage; disabled tax is always 0."""
    if not tax_settings.enabled:
        return Decimal('0.00')
    return (subtotal * tax_settings.rate / Decimal('100')).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_summary(cart_items: Iterable[CartItem], tax_settings: TaxSettings) -> CartSummary:
    """
    Derive subtotal, tax, total and item count from cart items.

    Pure: no state is read besides the arguments and nothing is cached.
    """
    items = list(cart_items)
    subtotal = sum((item.product.price * item.quantity for item in items), Decimal('0'))
    tax = compute_tax(subtotal, tax_settings)
    return CartSummary(
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        item_count=sum(item.quantity for item in items),
    )
