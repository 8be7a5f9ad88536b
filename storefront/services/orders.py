"""Order storage and checkout.

Checkout turns a non-empty session cart plus an approved checkout form into
an ``Order`` with one ``OrderItem`` per cart line, then empties the cart.
The whole attempt runs under the session's cart lock, so it cannot race
with cart mutations or with a second checkout of the same session.

The order and its items are written in one database transaction. The cart
is cleared from a commit hook of that transaction: nothing is cleared if the
transaction rolls back, and once it commits the clear always runs. A cart
that could not be cleared is logged and left alone; the committed order is
the source of truth and is never written twice.
"""

import secrets
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.errors import (CheckoutValidationError, EmptyCart, InsufficientStock,
                               MissingSession, OrderNotFound, OrderNumberTaken,
                               PersistenceError, ProductNotFound)
from storefront.extensions import db
from storefront.forms.checkout import validate_checkout
from storefront.models import STATUS_NEW, Order, OrderItem
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderNumberGenerator:
    """Human-facing order numbers such as ``ORD-2026-004217``.

    The suffix is random; uniqueness is enforced by the database and a
    collision is retried with a fresh number.
    """

    def __init__(self, prefix='ORD', digits=6):
        self.prefix = prefix
        self.digits = digits

    def __call__(self):
        year = datetime.now(timezone.utc).year
        suffix = secrets.randbelow(10 ** self.digits)
        return f'{self.prefix}-{year}-{suffix:0{self.digits}d}'


class Transaction:
    """Handle yielded by ``OrderStore.transaction``."""

    def __init__(self):
        self._commit_hooks = []

    def on_commit(self, func):
        """Run ``func`` once the transaction has committed."""
        self._commit_hooks.append(func)

    def run_commit_hooks(self):
        hooks, self._commit_hooks = self._commit_hooks, []
        for func in hooks:
            func()


class OrderStore:
    """Writes orders and their items through the SQLAlchemy session."""

    @contextmanager
    def transaction(self):
        """Commit on success, roll back on any error.

        Integrity errors on the order number surface as ``OrderNumberTaken``,
        every other database error as ``PersistenceError``.
        """
        tx = Transaction()
        try:
            yield tx
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if 'order_number' in str(exc.orig):
                raise OrderNumberTaken() from exc
            logger.error('order.transaction_failed', error=str(exc))
            raise PersistenceError() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('order.transaction_failed', error=str(exc))
            raise PersistenceError() from exc
        except BaseException:
            db.session.rollback()
            raise
        tx.run_commit_hooks()

    def insert_order(self, order_id, order_number, checkout, total):
        order = Order(
            id=order_id,
            order_number=order_number,
            customer_type=checkout.customer_type,
            customer_name=checkout.name,
            customer_phone=checkout.phone,
            customer_email=checkout.email,
            address=checkout.address,
            company_name=checkout.company_name,
            bin=checkout.bin,
            comment=checkout.comment,
            total=total,
            status=STATUS_NEW,
        )
        db.session.add(order)
        db.session.flush()
        return order

    def insert_order_item(self, order, line, position=0):
        item = OrderItem(
            id=str(uuid.uuid4()),
            order_id=order.id,
            product_id=line.product_id,
            product_name=line.name,
            position=position,
            quantity=line.quantity,
            price=line.price,
        )
        db.session.add(item)
        return item

    def get_order(self, order_id):
        try:
            return db.session.get(Order, order_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceError('Could not load the order') from exc

    def delete_order(self, order_id):
        """Delete an order and its items. Returns the number of orders removed."""
        with self.transaction():
            order = db.session.get(Order, order_id)
            if order is None:
                return 0
            db.session.delete(order)
        return 1


@dataclass
class PlacedOrder:
    order_id: str
    order_number: str
    total: int
    items: list = field(default_factory=list)

    def to_dict(self):
        return {
            'success': True,
            'orderId': self.order_id,
            'orderNumber': self.order_number,
            'total': self.total,
        }


class OrderPlacement:
    """Coordinates checkout: cart -> validation -> stock check -> order -> empty cart."""

    def __init__(self, carts, catalog, orders, numbers=None, notifier=None, max_attempts=5):
        self.carts = carts
        self.catalog = catalog
        self.orders = orders
        self.numbers = numbers or OrderNumberGenerator()
        self.notifier = notifier
        self.max_attempts = max_attempts

    def place_order(self, session_id, payload):
        """Check out the session's cart. Returns a ``PlacedOrder``."""
        if not session_id:
            raise MissingSession()
        log = logger.bind(session_id=session_id)

        with self.carts.locked(session_id) as live_cart:
            if not len(live_cart):
                log.info('checkout.rejected', reason='empty_cart')
                raise EmptyCart()
            cart = live_cart.copy()

            try:
                checkout = validate_checkout(payload)
            except CheckoutValidationError as exc:
                log.info('checkout.rejected', reason='validation',
                         fields=[name for name, _ in exc.details])
                raise

            self._check_stock(cart, log)
            placed = self._persist(session_id, cart, checkout, log)

        if self.notifier is not None:
            self.notifier.order_placed(placed, checkout)
        return placed

    def delete_order(self, order_id):
        if not self.orders.delete_order(order_id):
            raise OrderNotFound(order_id)
        logger.info('order.deleted', order_id=order_id)

    def _check_stock(self, cart, log):
        for line in cart.lines:
            product = self.catalog.lookup(line.product_id)
            if product is None:
                log.info('checkout.failed', reason='product_not_found', product_id=line.product_id)
                raise ProductNotFound(line.product_id)
            if line.quantity > product.stock:
                log.info('checkout.failed', reason='insufficient_stock',
                         product_id=line.product_id, requested=line.quantity,
                         available=product.stock)
                raise InsufficientStock(line.product_id, requested=line.quantity,
                                        available=product.stock)

    def _persist(self, session_id, cart, checkout, log):
        order_id = str(uuid.uuid4())
        for attempt in range(1, self.max_attempts + 1):
            order_number = self.numbers()
            try:
                with self.orders.transaction() as tx:
                    order = self.orders.insert_order(order_id, order_number, checkout,
                                                     total=cart.final_total)
                    for position, line in enumerate(cart.lines):
                        self.orders.insert_order_item(order, line, position)
                    tx.on_commit(partial(self._clear_cart, session_id, log))
            except OrderNumberTaken:
                log.warning('checkout.order_number_taken', order_number=order_number, attempt=attempt)
                continue
            except PersistenceError:
                log.error('checkout.failed', reason='persistence')
                raise

            log.info('checkout.committed', order_id=order_id, order_number=order_number,
                     total=cart.final_total, lines=len(cart))
            return PlacedOrder(order_id=order_id, order_number=order_number,
                               total=cart.final_total, items=cart.lines)

        log.error('checkout.failed', reason='order_number_exhausted', attempts=self.max_attempts)
        raise PersistenceError('Could not allocate a unique order number')

    def _clear_cart(self, session_id, log):
        try:
            self.carts.clear(session_id)
        except PersistenceError:
            log.error('checkout.cart_clear_failed')
