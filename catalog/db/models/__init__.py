"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .collection import Collection
from .currency import Currency
from .mega_menu import MegaMenuCollection
from .order import Order, OrderItem
from .payment import Payment
from .product import Product
from .product_collection import ProductCollection
from .product_image import ProductImage
from .product_variant import ProductVariant
from .schema_migration import SchemaMigration
from .user import User

__all__ = [
    "Base",
    "Collection",
    "Currency",
    "MegaMenuCollection",
    "Order",
    "OrderItem",
    "Payment",
    "Product",
    "ProductCollection",
    "ProductImage",
    "ProductVariant",
    "SchemaMigration",
    "User",
]
