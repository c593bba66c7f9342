"""Cart item and cart summary models."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any

from pos.models.product import Product


@dataclass(frozen=True)
class CartItem:
    """A product snapshot and the quantity being bought (always >= 1)."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {'product': self.product.to_dict(), 'quantity': self.quantity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartItem':
        return cls(product=Product.from_dict(data['product']), quantity=int(data['quantity']))


@dataclass(frozen=True)
class CartSummary:
    """Derived totals of a cart."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subtotal': str(self.subtotal),
            'tax': str(self.tax),
            'total': str(self.total),
            'item_count': self.item_count,
        }
