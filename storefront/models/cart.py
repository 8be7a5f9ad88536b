"""Cart model."""

from datetime import datetime, timezone
from storefront.extensions import db


class CartItem(db.Model):
    """Durable cart line, used when carts are kept in the database."""
    __tablename__ = 'cart_items'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'product_id', name='uq_cart_items_session_product'),
    )
    
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(64), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, default=1, nullable=False)
    
    # Snapshot of the product when the line was added or last merged
    product_name = db.Column(db.String(150), nullable=False)
    price = db.Column(db.Integer, nullable=False)
    sku = db.Column(db.String(64))
    image = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    
    @property
    def subtotal(self):
        """Calculate subtotal for this cart item."""
        return self.price * self.quantity
    
    def __repr__(self):
        return f'<CartItem {self.product_id} x {self.quantity}>'
