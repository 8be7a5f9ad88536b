"""Session carts and the stores that keep them."""

from .cart import Cart, CartLine
from .store import CartStore, MemoryCartStore, DatabaseCartStore, create_cart_store

__all__ = [
    'Cart',
    'CartLine',
    'CartStore',
    'MemoryCartStore',
    'DatabaseCartStore',
    'create_cart_store',
]
