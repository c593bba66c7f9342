"""
Catalog service - products and categories.

Both collections are persisted as whole documents. Every mutation reads the
latest stored collection, changes it and writes it back under the
collection's lock before returning.
"""

import logging
import threading
from dataclasses import replace
from typing import List, Dict, Any, Optional, Iterable

from pos.exceptions import ValidationError
from pos.models import Product, Category, CartItem, ALL_CATEGORY_ID, DEFAULT_CATEGORIES
from pos.services.storage_service import DocumentStore, PRODUCTS_KEY, CATEGORIES_KEY
from pos.utils.identifiers import TimestampIdGenerator
from pos.utils.number_format import parse_money, parse_quantity

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = {'name', 'price', 'category', 'stock', 'image', 'barcode'}
CATEGORY_FIELDS = {'name', 'icon'}


def _clean_text(value: Any, field: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be text')
    return value.strip()


def _reject_unknown(data: Dict[str, Any], allowed: set, kind: str) -> None:
    # ``id`` is assigned by the store and silently ignored when sent back
    unknown = set(data) - allowed - {'id'}
    if unknown:
        raise ValidationError(f'Unknown {kind} field(s): {", ".join(sorted(unknown))}')


def validate_product_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalize product fields.

    With ``partial`` only the supplied fields are checked (updates); otherwise
    name and price are required (creation).

    Raises:
        ValidationError: on the first invalid field. Nothing is modified.
    """
    if not isinstance(data, dict):
        raise ValidationError('Product data must be an object')
    _reject_unknown(data, PRODUCT_FIELDS, 'product')

    values: Dict[str, Any] = {}

    if 'name' in data or not partial:
        name = _clean_text(data.get('name'), 'name')
        if not name:
            raise ValidationError('Product name is required')
        values['name'] = name

    if 'price' in data or not partial:
        try:
            price = parse_money(data.get('price'))
        except ValueError as e:
            raise ValidationError(f'Invalid price: {e}')
        if price <= 0:
            raise ValidationError('Price must be greater than 0')
        values['price'] = price

    if 'stock' in data or not partial:
        try:
            stock = parse_quantity(data.get('stock', 0))
        except ValueError as e:
            raise ValidationError(f'Invalid stock: {e}')
        if stock < 0:
            raise ValidationError('Stock cannot be negative')
        values['stock'] = stock

    if 'category' in data or not partial:
        values['category'] = _clean_text(data.get('category'), 'category')

    if 'image' in data or not partial:
        values['image'] = _clean_text(data.get('image'), 'image')

    if 'barcode' in data or not partial:
        values['barcode'] = _clean_text(data.get('barcode'), 'barcode') or None

    return values


def validate_category_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate and normalize category fields."""
    if not isinstance(data, dict):
        raise ValidationError('Category data must be an object')
    _reject_unknown(data, CATEGORY_FIELDS, 'category')

    values: Dict[str, Any] = {}
    if 'name' in data or not partial:
        name = _clean_text(data.get('name'), 'name')
        if not name:
            raise ValidationError('Category name is required')
        values['name'] = name
    if 'icon' in data or not partial:
        values['icon'] = _clean_text(data.get('icon'), 'icon') or 'Package'
    return values


class CatalogStore:
    """Single source of truth for products and categories."""

    def __init__(self, documents: DocumentStore, id_generator: Optional[TimestampIdGenerator] = None):
        self._documents = documents
        self._ids = id_generator or TimestampIdGenerator()
        self._selected_category = ALL_CATEGORY_ID
        self._selection_lock = threading.Lock()

    def _new_id(self, taken: Iterable[str]) -> str:
        taken = set(taken)
        new_id = self._ids.next_id()
        while new_id in taken:
            new_id = self._ids.next_id()
        return new_id

    # =====================================================
    # PRODUCTS
    # =====================================================

    def list_products(self) -> List[Product]:
        return [Product.from_dict(doc) for doc in self._documents.load(PRODUCTS_KEY, list)]

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.list_products() if p.id == product_id), None)

    def _save_products(self, products: List[Product]) -> None:
        self._documents.save(PRODUCTS_KEY, [p.to_dict() for p in products])

    def add_product(self, data: Dict[str, Any]) -> Product:
        values = validate_product_data(data)
        with self._documents.lock(PRODUCTS_KEY):
            products = self.list_products()
            product = Product(id=self._new_id(p.id for p in products), **values)
            self._save_products(products + [product])
        logger.info(f"[CATALOG] Product created: {product.id} '{product.name}'")
        return product

    def update_product(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        """Merge ``fields`` into the product. Unknown ids are ignored."""
        values = validate_product_data(fields, partial=True)
        with self._documents.lock(PRODUCTS_KEY):
            products = self.list_products()
            for index, product in enumerate(products):
                if product.id == product_id:
                    updated = replace(product, **values)
                    products[index] = updated
                    self._save_products(products)
                    logger.info(f"[CATALOG] Product updated: {product_id} {sorted(values)}")
                    return updated
        logger.debug(f"[CATALOG] Update skipped, product {product_id} not found")
        return None

    def delete_product(self, product_id: str) -> bool:
        with self._documents.lock(PRODUCTS_KEY):
            products = self.list_products()
            remaining = [p for p in products if p.id != product_id]
            if len(remaining) == len(products):
                logger.debug(f"[CATALOG] Delete skipped, product {product_id} not found")
                return False
            self._save_products(remaining)
        logger.info(f"[CATALOG] Product deleted: {product_id}")
        return True

    def find_by_barcode(self, barcode: str) -> Optional[Product]:
        """Exact barcode lookup across the whole catalog."""
        code = (barcode or '').strip()
        if not code:
            return None
        return next((p for p in self.list_products() if p.barcode == code), None)

    def decrement_stock(self, items: Iterable[CartItem]) -> List[Product]:
        """
        Subtract sold quantities from stock and rewrite the whole catalog.

        Products not in ``items`` are written back unchanged. Stock is allowed
        to go below zero when more units were sold than recorded.
        """
        sold: Dict[str, int] = {}
        for item in items:
            sold[item.product.id] = sold.get(item.product.id, 0) + item.quantity

        with self._documents.lock(PRODUCTS_KEY):
            products = [
                replace(p, stock=p.stock - sold[p.id]) if p.id in sold else p
                for p in self.list_products()
            ]
            self._save_products(products)

        for product in products:
            if product.id in sold and product.stock < 0:
                logger.warning(f"[CATALOG] Product {product.id} oversold, stock is now {product.stock}")
        return products

    # =====================================================
    # CATEGORIES
    # =====================================================

    def list_categories(self) -> List[Category]:
        categories = [
            Category.from_dict(doc)
            for doc in self._documents.load(CATEGORIES_KEY, lambda: [c.to_dict() for c in DEFAULT_CATEGORIES])
        ]
        if not any(c.is_sentinel for c in categories):
            categories.insert(0, DEFAULT_CATEGORIES[0])
        return categories

    def _save_categories(self, categories: List[Category]) -> None:
        self._documents.save(CATEGORIES_KEY, [c.to_dict() for c in categories])

    def add_category(self, data: Dict[str, Any]) -> Category:
        values = validate_category_data(data)
        with self._documents.lock(CATEGORIES_KEY):
            categories = self.list_categories()
            category = Category(id=self._new_id([c.id for c in categories] + [ALL_CATEGORY_ID]), **values)
            self._save_categories(categories + [category])
        logger.info(f"[CATALOG] Category created: {category.id} '{category.name}'")
        return category

    def update_category(self, category_id: str, fields: Dict[str, Any]) -> Optional[Category]:
        values = validate_category_data(fields, partial=True)
        if category_id == ALL_CATEGORY_ID:
            logger.warning("[CATALOG] The 'all' category cannot be modified")
            return None
        with self._documents.lock(CATEGORIES_KEY):
            categories = self.list_categories()
            for index, category in enumerate(categories):
                if category.id == category_id:
                    updated = replace(category, **values)
                    categories[index] = updated
                    self._save_categories(categories)
                    logger.info(f"[CATALOG] Category updated: {category_id}")
                    return updated
        return None

    def delete_category(self, category_id: str) -> bool:
        """Delete a category; the reserved 'all' category is never removed."""
        if category_id == ALL_CATEGORY_ID:
            logger.warning("[CATALOG] The 'all' category cannot be deleted")
            return False
        with self._documents.lock(CATEGORIES_KEY):
            categories = self.list_categories()
            remaining = [c for c in categories if c.id != category_id]
            if len(remaining) == len(categories):
                return False
            self._save_categories(remaining)

        with self._selection_lock:
            if self._selected_category == category_id:
                self._selected_category = ALL_CATEGORY_ID
        logger.info(f"[CATALOG] Category deleted: {category_id}")
        return True

    # =====================================================
    # FILTERING
    # =====================================================

    @property
    def selected_category(self) -> str:
        return self._selected_category

    def select_category(self, category_id: str) -> str:
        if not any(c.id == category_id for c in self.list_categories()):
            raise ValidationError(f'Unknown category: {category_id}')
        with self._selection_lock:
            self._selected_category = category_id
        return category_id

    def filtered_products(
        self,
        category_id: Optional[str] = None,
        query: Optional[str] = None,
        include_barcode: bool = False
    ) -> List[Product]:
        """
        Products in a category, optionally narrowed by a search query.

        Args:
            category_id: Category to show; None uses the selected filter and
                'all' disables category filtering.
            query: Case-insensitive substring matched against the name.
            include_barcode: Also match the query against barcodes, as the
                product-management view does.
        """
        if category_id is None:
            category_id = self._selected_category

        products = self.list_products()
        if category_id != ALL_CATEGORY_ID:
            products = [p for p in products if p.category == category_id]

        needle = (query or '').lower()
        if needle:
            products = [
                p for p in products
                if needle in p.name.lower()
                or (include_barcode and p.barcode and needle in p.barcode.lower())
            ]
        return products
