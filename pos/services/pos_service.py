"""
Point-of-sale application state.

One PointOfSale instance exists per running application. It owns the cart
and wires the catalog, pricing, sales, settings and reporting services
together; HTTP handlers and CLI commands only talk to it.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union, Callable

from flask import Flask, current_app

from pos.exceptions import NotFoundError, ValidationError
from pos.models import (
    Product, Category, CartItem, CartSummary, Sale, PaymentMethod,
    TaxSettings, BusinessInfo, ReceiptSettings
)
from pos.services.cart_service import Cart
from pos.services.catalog_service import CatalogStore
from pos.services.pricing_service import compute_summary
from pos.services.receipt_service import render_receipt_text
from pos.services.report_service import BusinessReport, Period, build_report
from pos.services.sales_service import SalesLedger
from pos.services.settings_service import SettingsStore
from pos.services.storage_service import DocumentStore, KeyValueStore, SqlAlchemyKeyValueStore
from pos.utils.identifiers import TimestampIdGenerator
from pos.utils.number_format import parse_quantity

logger = logging.getLogger(__name__)


class PointOfSale:
    """Transaction and inventory manager for a single terminal."""

    def __init__(
        self,
        backend: KeyValueStore,
        config: Optional[Mapping[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        config = config or {}
        self.config = config
        self.documents = DocumentStore(backend)
        ids = TimestampIdGenerator()

        self.catalog = CatalogStore(self.documents, ids)
        self.cart = Cart()
        self.settings = SettingsStore(self.documents, config)
        self.sales = SalesLedger(
            self.documents,
            self.catalog,
            self.cart,
            self.settings,
            receipt_prefix=config.get('RECEIPT_PREFIX', 'RCP'),
            id_generator=ids,
            clock=clock,
        )
        self._clock = clock or datetime.now

    # =====================================================
    # CATALOG
    # =====================================================

    def list_products(self) -> List[Product]:
        return self.catalog.list_products()

    def add_product(self, data: Dict[str, Any]) -> Product:
        return self.catalog.add_product(data)

    def update_product(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        return self.catalog.update_product(product_id, fields)

    def delete_product(self, product_id: str) -> bool:
        return self.catalog.delete_product(product_id)

    def list_categories(self) -> List[Category]:
        return self.catalog.list_categories()

    def add_category(self, data: Dict[str, Any]) -> Category:
        return self.catalog.add_category(data)

    def update_category(self, category_id: str, fields: Dict[str, Any]) -> Optional[Category]:
        return self.catalog.update_category(category_id, fields)

    def delete_category(self, category_id: str) -> bool:
        return self.catalog.delete_category(category_id)

    def select_category(self, category_id: str) -> str:
        return self.catalog.select_category(category_id)

    @property
    def selected_category(self) -> str:
        return self.catalog.selected_category

    def filtered_products(self, category_id: Optional[str] = None, query: Optional[str] = None,
                          include_barcode: bool = False) -> List[Product]:
        return self.catalog.filtered_products(category_id, query, include_barcode)

    # =====================================================
    # CART
    # =====================================================

    def add_to_cart(self, product: Union[Product, str]) -> CartItem:
        """Add one unit of a product (instance or catalog id) to the cart."""
        if not isinstance(product, Product):
            found = self.catalog.get_product(str(product))
            if found is None:
                raise NotFoundError(f'Product {product} not found')
            product = found
        return self.cart.add(product)

    def update_quantity(self, product_id: str, quantity: Union[int, str]) -> None:
        try:
            quantity = parse_quantity(quantity)
        except ValueError as e:
            raise ValidationError(str(e))
        self.cart.update_quantity(product_id, quantity)

    def remove_from_cart(self, product_id: str) -> None:
        self.cart.remove(product_id)

    def clear_cart(self) -> None:
        self.cart.clear()

    def cart_items(self) -> List[CartItem]:
        return self.cart.items()

    def get_summary(self) -> CartSummary:
        return compute_summary(self.cart.items(), self.settings.get_tax_settings())

    def scan_barcode(self, barcode: str) -> Optional[Product]:
        """Add the product with this exact barcode to the cart; None if unknown."""
        product = self.catalog.find_by_barcode(barcode)
        if product is None:
            logger.info(f"[CART] No product found with barcode: {barcode}")
            return None
        self.cart.add(product)
        return product

    # =====================================================
    # SALES
    # =====================================================

    def complete_sale(self, payment_method: Union[str, PaymentMethod, None]) -> Optional[Sale]:
        return self.sales.complete_sale(payment_method)

    def list_sales(self) -> List[Sale]:
        return self.sales.list_sales()

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return self.sales.get_sale(sale_id)

    def today_sales(self) -> List[Sale]:
        return self.sales.today_sales(self._clock())

    def today_total(self) -> Decimal:
        return self.sales.today_total(self._clock())

    def render_receipt(self, sale_id: str) -> str:
        sale = self.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(f'Sale {sale_id} not found')
        return render_receipt_text(
            sale,
            self.settings.get_tax_settings(),
            self.settings.get_business_info(),
            self.settings.get_receipt_settings(),
        )

    # =====================================================
    # REPORTS
    # =====================================================

    def report(self, period: Union[str, Period] = Period.TODAY) -> BusinessReport:
        return build_report(
            self.list_sales(),
            self.list_products(),
            period,
            now=self._clock(),
            low_stock_threshold=int(self.config.get('LOW_STOCK_THRESHOLD', 10)),
            top_limit=int(self.config.get('TOP_PRODUCTS_LIMIT', 5)),
        )

    # =====================================================
    # SETTINGS
    # =====================================================

    def get_tax_settings(self) -> TaxSettings:
        return self.settings.get_tax_settings()

    def update_tax_settings(self, updates: Dict[str, Any]) -> TaxSettings:
        return self.settings.update_tax_settings(updates)

    def get_business_info(self) -> BusinessInfo:
        return self.settings.get_business_info()

    def update_business_info(self, updates: Dict[str, Any]) -> BusinessInfo:
        return self.settings.update_business_info(updates)

    def get_receipt_settings(self) -> ReceiptSettings:
        return self.settings.get_receipt_settings()

    def update_receipt_settings(self, updates: Dict[str, Any]) -> ReceiptSettings:
        return self.settings.update_receipt_settings(updates)


def init_pos(app: Flask, session_factory) -> PointOfSale:
    """Create the application's PointOfSale and register it on the app."""
    pos = PointOfSale(SqlAlchemyKeyValueStore(session_factory), app.config)
    if not hasattr(app, 'extensions'):
        app.extensions = {}
    app.extensions['pos'] = pos
    return pos


def get_pos() -> PointOfSale:
    """Get the PointOfSale of the current application."""
    pos = current_app.extensions.get('pos')
    if pos is None:
        raise RuntimeError("Point of sale not initialized.")
    return pos
