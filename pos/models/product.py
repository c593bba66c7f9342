"""Product model."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Dict, Any

from pos.utils.number_format import parse_money


@dataclass(frozen=True)
class Product:
    """Product available for sale.

    Records are immutable; the catalog replaces a product with an updated copy
    instead of mutating it, so cart items and sales can keep the instance they
    were given as a snapshot.
    """

    id: str
    name: str
    price: Decimal
    category: str
    stock: int = 0
    image: str = ''
    barcode: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': str(self.price),
            'category': self.category,
            'stock': self.stock,
            'image': self.image,
            'barcode': self.barcode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=str(data['id']),
            name=data['name'],
            price=parse_money(data['price']),
            category=data.get('category', ''),
            stock=int(data.get('stock', 0)),
            image=data.get('image') or '',
            barcode=data.get('barcode') or None,
        )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
