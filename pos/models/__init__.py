"""Models package - exports the storage model and the domain records."""
# Storage
from pos.models.storage_entry import StorageEntry

# Domain records
from pos.models.product import Product
from pos.models.category import Category, ALL_CATEGORY_ID, DEFAULT_CATEGORIES
from pos.models.cart_item import CartItem, CartSummary
from pos.models.sale import Sale, PaymentMethod
from pos.models.settings import TaxSettings, BusinessInfo, ReceiptSettings

__all__ = [
    'StorageEntry',
    'Product', 'Category', 'ALL_CATEGORY_ID', 'DEFAULT_CATEGORIES',
    'CartItem', 'CartSummary', 'Sale', 'PaymentMethod',
    'TaxSettings', 'BusinessInfo', 'ReceiptSettings',
]
