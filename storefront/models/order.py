"""Order models."""

from datetime import datetime, timezone
import uuid
from storefront.extensions import db


STATUS_NEW = 'new'


class Order(db.Model):
    """Order placed from a session cart."""
    __tablename__ = 'orders'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    
    # Customer details, copied from the checkout form
    customer_type = db.Column(db.String(20), nullable=False)  # individual, legal
    customer_name = db.Column(db.Text, nullable=False)
    customer_phone = db.Column(db.Text, nullable=False)
    customer_email = db.Column(db.Text, nullable=False)
    address = db.Column(db.Text, nullable=False)
    company_name = db.Column(db.Text)
    bin = db.Column(db.String(20))
    comment = db.Column(db.Text)
    
    total = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_NEW)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    
    # Relationships
    items = db.relationship('OrderItem', backref='order', lazy='select',
                            cascade='all, delete-orphan', order_by='OrderItem.position')
    
    def to_dict(self):
        return {
            'id': self.id,
            'orderNumber': self.order_number,
            'customerType': self.customer_type,
            'name': self.customer_name,
            'phone': self.customer_phone,
            'email': self.customer_email,
            'address': self.address,
            'companyName': self.company_name,
            'bin': self.bin,
            'comment': self.comment,
            'total': self.total,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'items': [item.to_dict() for item in self.items],
        }
    
    def __repr__(self):
        return f'<Order {self.order_number}>'


class OrderItem(db.Model):
    """Order line; price is the price at purchase, never re-read from the catalog."""
    __tablename__ = 'order_items'
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = db.Column(db.String(36), db.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id'), nullable=False)
    product_name = db.Column(db.String(150), nullable=False)  # Snapshot of product name
    position = db.Column(db.Integer, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Integer, nullable=False)
    
    @property
    def subtotal(self):
        return self.price * self.quantity
    
    def to_dict(self):
        return {
            'productId': self.product_id,
            'name': self.product_name,
            'quantity': self.quantity,
            'price': self.price,
            'subtotal': self.subtotal,
        }
    
    def __repr__(self):
        return f'<OrderItem {self.product_name} x {self.quantity}>'
