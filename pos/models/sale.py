"""Sale model."""
import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Tuple, Dict, Any

from pos.models.cart_item import CartItem
from pos.utils.number_format import parse_money


class PaymentMethod(str, enum.Enum):
    """Payment method label. No payment is actually processed."""
    CASH = 'cash'
    CARD = 'card'
    MOBILE = 'mobile'

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Sale:
    """Completed checkout. Never modified once recorded."""

    id: str
    items: Tuple[CartItem, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: PaymentMethod
    timestamp: datetime
    receipt_number: str

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'items': [item.to_dict() for item in self.items],
            'subtotal': str(self.subtotal),
            'tax': str(self.tax),
            'total': str(self.total),
            'payment_method': self.payment_method.value,
            'timestamp': self.timestamp.isoformat(),
            'receipt_number': self.receipt_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        return cls(
            id=str(data['id']),
            items=tuple(CartItem.from_dict(item) for item in data.get('items', [])),
            subtotal=parse_money(data['subtotal']),
            tax=parse_money(data['tax']),
            total=parse_money(data['total']),
            payment_method=PaymentMethod(data['payment_method']),
            timestamp=datetime.fromisoformat(data['timestamp']),
            receipt_number=data['receipt_number'],
        )

    def __repr__(self):
        return f"<Sale(id={self.id}, receipt='{self.receipt_number}', total={self.total})>"
