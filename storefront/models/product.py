"""Product model."""

from datetime import datetime, timezone
import uuid
from storefront.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Product(db.Model):
    """Catalog product. Owned by the catalog service; read-only for carts and orders."""
    __tablename__ = 'products'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(160), index=True)
    sku = db.Column(db.String(64))
    description = db.Column(db.Text)
    price = db.Column(db.Integer, nullable=False)
    old_price = db.Column(db.Integer)
    image = db.Column(db.String(255))
    stock = db.Column(db.Integer, default=0, nullable=False)
    availability = db.Column(db.String(20), default='in-stock')  # in-stock, pre-order, out-of-stock
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)
    
    def __repr__(self):
        return f'<Product {self.name}>'
