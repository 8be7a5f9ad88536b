"""Cart and checkout services wired for one application."""

from dataclasses import dataclass

from storefront.cart import CartStore, create_cart_store
from storefront.services.catalog import CatalogReader
from storefront.services.notifications import OrderNotifier
from storefront.services.orders import OrderNumberGenerator, OrderPlacement, OrderStore


@dataclass
class Services:
    catalog: CatalogReader
    carts: CartStore
    orders: OrderStore
    checkout: OrderPlacement


def build_services(config):
    """Create the process-wide cart store and the checkout coordinator."""
    catalog = CatalogReader()
    carts = create_cart_store(
        config['CART_BACKEND'],
        catalog,
        lock_timeout=config['CART_LOCK_TIMEOUT'],
    )
    orders = OrderStore()
    checkout = OrderPlacement(
        carts=carts,
        catalog=catalog,
        orders=orders,
        numbers=OrderNumberGenerator(
            prefix=config['ORDER_NUMBER_PREFIX'],
            digits=config['ORDER_NUMBER_DIGITS'],
        ),
        notifier=OrderNotifier(
            enabled=config['ORDER_NOTIFICATIONS_ENABLED'],
            bcc=config['ORDER_NOTIFY_BCC'],
        ),
        max_attempts=config['ORDER_NUMBER_ATTEMPTS'],
    )
    return Services(catalog=catalog, carts=carts, orders=orders, checkout=checkout)
