"""Database models package."""

from .product import Product
from .cart import CartItem
from .order import STATUS_NEW, Order, OrderItem

__all__ = [
    'Product',
    'CartItem',
    'Order',
    'OrderItem',
    'STATUS_NEW',
]
