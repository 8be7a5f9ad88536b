"""Cart stores.

A cart store maps session identifiers to carts and is the only code that
reads or writes cart contents. Every operation on a session runs under that
session's own re-entrant lock, so concurrent requests for one session are
linearized while different sessions never wait on each other. The lock table
itself is guarded by a short-lived mutex that is only held while looking up
or creating a session's lock. A lock is dropped from the table once no
thread holds or waits on it.

Two storage strategies share the same contract: ``MemoryCartStore`` keeps
carts for the lifetime of the process, ``DatabaseCartStore`` keeps lines in
the ``cart_items`` table so they survive restarts.
"""

import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from storefront.cart.cart import Cart, CartLine
from storefront.errors import (CartBusy, InsufficientStock, InvalidQuantity,
                               ItemNotInCart, PersistenceError, ProductNotFound)
from storefront.extensions import db
from storefront.models import CartItem
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_USE_DEFAULT = object()


def _require_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity()


class _SessionLock:
    __slots__ = ('lock', 'users')

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class CartStore:
    """Base store: locking and cart operations. Subclasses provide storage."""

    def __init__(self, catalog, lock_timeout=None):
        self.catalog = catalog
        self.lock_timeout = lock_timeout
        self._locks = {}
        self._guard = threading.Lock()

    # -------------------------------------------------------------------
    # Storage hooks
    # -------------------------------------------------------------------
    def _load(self, session_id):
        raise NotImplementedError

    def _save(self, cart):
        raise NotImplementedError

    # -------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------
    def _claim_lock(self, session_id):
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _SessionLock()
            entry.users += 1
            return entry

    def _return_lock(self, session_id, entry):
        with self._guard:
            entry.users -= 1
            if not entry.users:
                self._locks.pop(session_id, None)

    @contextmanager
    def locked(self, session_id, timeout=_USE_DEFAULT):
        """Hold the session's lock and yield its live cart.

        The yielded cart is the stored one; code outside the store treats it
        as read-only. ``timeout=None`` waits indefinitely.
        """
        if timeout is _USE_DEFAULT:
            timeout = self.lock_timeout
        entry = self._claim_lock(session_id)
        try:
            if not entry.lock.acquire(timeout=-1 if timeout is None else timeout):
                logger.warning('cart.lock_timeout', session_id=session_id, timeout=timeout)
                raise CartBusy()
            try:
                yield self._load(session_id)
            finally:
                entry.lock.release()
        finally:
            self._return_lock(session_id, entry)

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def get(self, session_id):
        """Return a copy of the session's cart, empty if it has none."""
        with self.locked(session_id, timeout=None) as cart:
            return cart.copy()

    def add_item(self, session_id, product_id, quantity=1):
        """Add a product, merging with an existing line for the same product."""
        _require_quantity(quantity)
        product = self.catalog.lookup(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        with self.locked(session_id) as cart:
            existing = cart.get_line(product.id)
            requested = quantity + (existing.quantity if existing else 0)
            if requested > product.stock:
                raise InsufficientStock(product.id, requested=requested, available=product.stock)
            line = cart.merge(product, quantity)
            self._save(cart)
            logger.info('cart.item_added', session_id=session_id,
                        product_id=product.id, quantity=line.quantity)
            return cart.copy()

    def update_item_quantity(self, session_id, product_id, quantity):
        """Replace the quantity of an existing line."""
        _require_quantity(quantity)
        with self.locked(session_id) as cart:
            if product_id not in cart:
                raise ItemNotInCart(product_id)
            cart.set_quantity(product_id, quantity)
            self._save(cart)
            logger.info('cart.item_updated', session_id=session_id,
                        product_id=product_id, quantity=quantity)
            return cart.copy()

    def remove_item(self, session_id, product_id):
        with self.locked(session_id) as cart:
            if product_id not in cart:
                raise ItemNotInCart(product_id)
            cart.remove(product_id)
            self._save(cart)
            logger.info('cart.item_removed', session_id=session_id, product_id=product_id)
            return cart.copy()

    def clear(self, session_id):
        """Empty the cart. Idempotent."""
        with self.locked(session_id, timeout=None) as cart:
            if len(cart):
                cart.clear()
                self._save(cart)
                logger.info('cart.cleared', session_id=session_id)
            return cart.copy()


class MemoryCartStore(CartStore):
    """Carts kept in process memory for the lifetime of the process.

    Only non-empty carts are stored; reading an unknown session keeps nothing.
    """

    def __init__(self, catalog, lock_timeout=None):
        super().__init__(catalog, lock_timeout=lock_timeout)
        self._carts = {}

    def _load(self, session_id):
        with self._guard:
            cart = self._carts.get(session_id)
        if cart is None:
            cart = Cart(session_id)
        return cart

    def _save(self, cart):
        with self._guard:
            if len(cart):
                self._carts[cart.session_id] = cart
            else:
                self._carts.pop(cart.session_id, None)


class DatabaseCartStore(CartStore):
    """Carts kept as ``cart_items`` rows, one per session and product."""

    def _load(self, session_id):
        try:
            rows = (CartItem.query
                    .filter_by(session_id=session_id)
                    .order_by(CartItem.id)
                    .all())
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('cart.load_failed', session_id=session_id, error=str(exc))
            raise PersistenceError('Could not load the cart') from exc

        return Cart(session_id, [
            CartLine(
                product_id=row.product_id,
                quantity=row.quantity,
                name=row.product_name,
                price=row.price,
                sku=row.sku,
                image=row.image,
            )
            for row in rows
        ])

    def _save(self, cart):
        try:
            rows = {row.product_id: row
                    for row in CartItem.query.filter_by(session_id=cart.session_id)}
            for line in cart.lines:
                row = rows.pop(line.product_id, None)
                if row is None:
                    row = CartItem(session_id=cart.session_id, product_id=line.product_id)
                    db.session.add(row)
                row.quantity = line.quantity
                row.product_name = line.name
                row.price = line.price
                row.sku = line.sku
                row.image = line.image
            for row in rows.values():
                db.session.delete(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('cart.save_failed', session_id=cart.session_id, error=str(exc))
            raise PersistenceError('Could not save the cart') from exc


def create_cart_store(backend, catalog, lock_timeout=None):
    """Build the cart store named by the ``CART_BACKEND`` setting."""
    stores = {
        'memory': MemoryCartStore,
        'database': DatabaseCartStore,
    }
    try:
        store_class = stores[backend]
    except KeyError:
        raise ValueError(f'Unknown cart backend: {backend!r}') from None
    return store_class(catalog, lock_timeout=lock_timeout)
