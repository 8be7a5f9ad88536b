"""Error taxonomy for cart and checkout operations.

Every error carries a machine readable ``code`` and the HTTP status the
boundary layer answers with. None of them are fatal to the process; the
error handler registered in the application factory turns them into JSON.
"""


class StorefrontError(Exception):
    """Base class for all caller-visible cart and order errors."""
    code = 'ERROR'
    status_code = 400
    message = 'Request failed'

    def __init__(self, message=None, **context):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)

    def to_dict(self):
        payload = {'error': self.code, 'message': self.message}
        payload.update(self.context)
        return payload


class InvalidRequest(StorefrontError):
    code = 'INVALID_REQUEST'
    message = 'Invalid request body'


class MissingSession(StorefrontError):
    code = 'MISSING_SESSION'
    message = 'X-Session-ID header is required'


class EmptyCart(StorefrontError):
    code = 'EMPTY_CART'
    message = 'Cart is empty'


class CheckoutValidationError(StorefrontError):
    """Checkout form rejected; ``details`` lists every violated rule."""
    code = 'VALIDATION_ERROR'
    message = 'Checkout form is invalid'

    def __init__(self, details):
        self.details = list(details)
        super().__init__()

    def to_dict(self):
        return {
            'error': self.code,
            'details': [{'field': field, 'message': message}
                        for field, message in self.details],
        }


class ProductNotFound(StorefrontError):
    code = 'PRODUCT_NOT_FOUND'
    status_code = 404

    def __init__(self, product_id):
        super().__init__(f'Product {product_id} not found', productId=product_id)


class InsufficientStock(StorefrontError):
    code = 'INSUFFICIENT_STOCK'

    def __init__(self, product_id, requested, available):
        super().__init__(
            f'Not enough stock for product {product_id}',
            productId=product_id,
            requested=requested,
            available=available,
        )


class ItemNotInCart(StorefrontError):
    code = 'ITEM_NOT_IN_CART'
    status_code = 404

    def __init__(self, product_id):
        super().__init__('Item not in cart', productId=product_id)


class InvalidQuantity(StorefrontError):
    code = 'INVALID_QUANTITY'
    message = 'Quantity must be a positive integer'


class CartBusy(StorefrontError):
    """The session's cart lock could not be taken in time."""
    code = 'CART_BUSY'
    status_code = 409
    message = 'Cart is being modified by another request, retry shortly'


class PersistenceError(StorefrontError):
    """A storage write failed and was rolled back; safe to retry."""
    code = 'PERSISTENCE_ERROR'
    status_code = 500
    message = 'Could not save the order, nothing was committed'


class OrderNumberTaken(PersistenceError):
    """The generated order number collided with an existing order."""


class CatalogUnavailable(StorefrontError):
    code = 'CATALOG_UNAVAILABLE'
    status_code = 503
    message = 'Product catalog is unavailable'


class OrderNotFound(StorefrontError):
    code = 'ORDER_NOT_FOUND'
    status_code = 404

    def __init__(self, order_id):
        super().__init__(f'Order {order_id} not found', orderId=order_id)
