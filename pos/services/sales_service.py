"""
Sales service - checkout and sale history.

Turns the live cart into an immutable Sale, decrements stock and keeps the
append-only history (newest first).
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union, Callable

from pos.exceptions import ValidationError, PersistenceError
from pos.models import Sale, PaymentMethod
from pos.services.cart_service import Cart
from pos.services.catalog_service import CatalogStore
from pos.services.pricing_service import compute_summary
from pos.services.settings_service import SettingsStore
from pos.services.storage_service import DocumentStore, SALES_KEY, PRODUCTS_KEY
from pos.utils.identifiers import TimestampIdGenerator, receipt_number_for

logger = logging.getLogger(__name__)


def normalize_payment_method(method: Union[str, PaymentMethod, None]) -> PaymentMethod:
    """Map user input to a PaymentMethod, rejecting anything unknown."""
    if isinstance(method, PaymentMethod):
        return method
    if not method or not isinstance(method, str):
        raise ValidationError('Select a payment method')
    try:
        return PaymentMethod(method.strip().lower())
    except ValueError:
        valid = ', '.join(m.value for m in PaymentMethod)
        raise ValidationError(f'Invalid payment method: {method}. Use one of: {valid}')


class SalesLedger:
    """Sale committer and read access to sale history."""

    def __init__(
        self,
        documents: DocumentStore,
        catalog: CatalogStore,
        cart: Cart,
        settings: SettingsStore,
        receipt_prefix: str = 'RCP',
        id_generator: Optional[TimestampIdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._documents = documents
        self._catalog = catalog
        self._cart = cart
        self._settings = settings
        self._receipt_prefix = receipt_prefix
        self._ids = id_generator or TimestampIdGenerator()
        self._clock = clock or datetime.now

    # =====================================================
    # HISTORY
    # =====================================================

    def list_sales(self) -> List[Sale]:
        return [Sale.from_dict(doc) for doc in self._documents.load(SALES_KEY, list)]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return next((s for s in self.list_sales() if s.id == sale_id), None)

    def today_sales(self, now: Optional[datetime] = None) -> List[Sale]:
        """Sales recorded on the current local calendar day."""
        today = (now or self._clock()).date()
        return [s for s in self.list_sales() if s.timestamp.date() == today]

    def today_total(self, now: Optional[datetime] = None) -> Decimal:
        return sum((s.total for s in self.today_sales(now)), Decimal('0'))

    # =====================================================
    # CHECKOUT
    # =====================================================

    def _restore_products(self, documents: List[dict], sale_id: str) -> None:
        """Write back the catalog as it was before the sale's stock decrement."""
        with self._documents.lock(PRODUCTS_KEY):
            try:
                self._documents.save(PRODUCTS_KEY, documents)
            except PersistenceError:
                logger.critical(
                    f"[SALE] Stock for unsaved sale {sale_id} could not be restored",
                    exc_info=True
                )

    def complete_sale(self, payment_method: Union[str, PaymentMethod, None]) -> Optional[Sale]:
        """
        Commit the current cart as a sale.

        Steps, in order:
        1. Empty cart: return None without touching anything.
        2. Recompute totals from the live cart and current tax settings.
        3. Decrement stock and persist the catalog.
        4. Prepend the sale to history and persist it.
        5. Clear the cart.

        The cart is only cleared once both writes succeeded. If the sale cannot
        be saved the catalog is written back as it was before step 3, so a
        failed write raises PersistenceError with cart and stock unchanged and
        the user can retry.
        """
        with self._cart.lock:
            items = self._cart.items()
            if not items:
                logger.debug("[SALE] Checkout with empty cart ignored")
                return None

            method = normalize_payment_method(payment_method)
            summary = compute_summary(items, self._settings.get_tax_settings())

            timestamp = self._clock()
            sale_id = self._ids.next_id()
            sale = Sale(
                id=sale_id,
                items=tuple(items),
                subtotal=summary.subtotal,
                tax=summary.tax,
                total=summary.total,
                payment_method=method,
                timestamp=timestamp,
                receipt_number=receipt_number_for(sale_id, self._receipt_prefix),
            )

            with self._documents.lock(PRODUCTS_KEY), self._documents.lock(SALES_KEY):
                previous_products = self._documents.load(PRODUCTS_KEY, list)
                try:
                    self._catalog.decrement_stock(items)
                except PersistenceError:
                    logger.error(f"[SALE] Stock update failed, sale {sale_id} not recorded", exc_info=True)
                    raise
                try:
                    history = self._documents.load(SALES_KEY, list)
                    self._documents.save(SALES_KEY, [sale.to_dict()] + history)
                except PersistenceError:
                    logger.error(f"[SALE] Sale {sale_id} could not be saved, restoring stock", exc_info=True)
                    self._restore_products(previous_products, sale_id)
                    raise

            self._cart.clear()

        logger.info(
            f"[SALE] Completed {sale.receipt_number}: {sale.item_count} item(s), "
            f"total {sale.total} ({method.value})"
        )
        return sale
