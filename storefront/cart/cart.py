"""Session cart aggregate.

A cart holds at most one line per product, in the order the products were
first added. Subtotal, discount, final total and item count are cached on
the cart and recomputed after every mutation, so readers never see stale
totals.
"""

from dataclasses import dataclass, replace


@dataclass
class CartLine:
    product_id: str
    quantity: int
    name: str
    price: int
    sku: str = None
    image: str = None

    @property
    def subtotal(self):
        return self.price * self.quantity

    def to_dict(self):
        return {
            'id': self.product_id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
            'sku': self.sku,
            'image': self.image,
            'subtotal': self.subtotal,
        }


class Cart:
    """Lines for one session plus their derived totals."""

    def __init__(self, session_id, lines=None):
        self.session_id = session_id
        self._lines = {}
        for line in lines or ():
            self._lines[line.product_id] = line
        self._recalculate()

    @property
    def lines(self):
        return list(self._lines.values())

    def __len__(self):
        return len(self._lines)

    def __contains__(self, product_id):
        return product_id in self._lines

    def get_line(self, product_id):
        return self._lines.get(product_id)

    def merge(self, product, quantity):
        """Add ``quantity`` of ``product``, refreshing the line's snapshot."""
        existing = self._lines.get(product.id)
        if existing is not None:
            quantity += existing.quantity
        self._lines[product.id] = CartLine(
            product_id=product.id,
            quantity=quantity,
            name=product.name,
            price=product.price,
            sku=product.sku,
            image=product.image,
        )
        self._recalculate()
        return self._lines[product.id]

    def set_quantity(self, product_id, quantity):
        line = self._lines[product_id]
        line.quantity = quantity
        self._recalculate()
        return line

    def remove(self, product_id):
        del self._lines[product_id]
        self._recalculate()

    def clear(self):
        self._lines.clear()
        self._recalculate()

    def _recalculate(self):
        self.subtotal = sum(line.subtotal for line in self._lines.values())
        self.count = sum(line.quantity for line in self._lines.values())
        # No promotions yet
        self.discount = 0
        self.final_total = self.subtotal - self.discount

    def copy(self):
        """Detached snapshot, safe to hand out after the session lock is released."""
        return Cart(self.session_id, [replace(line) for line in self._lines.values()])

    def to_dict(self):
        return {
            'items': [line.to_dict() for line in self._lines.values()],
            'subtotal': self.subtotal,
            'discount': self.discount,
            'total': self.final_total,
            'count': self.count,
        }

    def __repr__(self):
        return f'<Cart {self.session_id} lines={len(self._lines)} total={self.final_total}>'
