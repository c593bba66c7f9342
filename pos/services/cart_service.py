"""Cart service - the in-memory cart of the running terminal."""

import logging
import threading
from typing import List

from pos.models import CartItem, Product

logger = logging.getLogger(__name__)


class Cart:
    """
    Ordered cart keyed by product id.

    Holds at most one item per product, and every item has a quantity of at
    least 1. Nothing here is persisted: a restart starts with an empty cart.
    """

    def __init__(self):
        self._items: List[CartItem] = []
        # Re-entrant so checkout can hold it while calling clear()
        self.lock = threading.RLock()

    def items(self) -> List[CartItem]:
        """Snapshot of the current items."""
        with self.lock:
            return list(self._items)

    def is_empty(self) -> bool:
        with self.lock:
            return not self._items

    def __len__(self):
        with self.lock:
            return len(self._items)

    def add(self, product: Product) -> CartItem:
        """Add one unit; repeated products are merged into the existing line."""
        with self.lock:
            for index, item in enumerate(self._items):
                if item.product.id == product.id:
                    merged = CartItem(product=item.product, quantity=item.quantity + 1)
                    self._items[index] = merged
                    return merged
            item = CartItem(product=product, quantity=1)
            self._items.append(item)
            return item

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set the quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(product_id)
            return
        with self.lock:
            for index, item in enumerate(self._items):
                if item.product.id == product_id:
                    self._items[index] = CartItem(product=item.product, quantity=quantity)
                    return

    def remove(self, product_id: str) -> None:
        with self.lock:
            self._items = [item for item in self._items if item.product.id != product_id]

    def clear(self) -> None:
        with self.lock:
            if self._items:
                logger.debug(f"[CART] Cleared {len(self._items)} line(s)")
            self._items = []
