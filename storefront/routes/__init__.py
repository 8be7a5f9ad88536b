"""Routes package - register all blueprints."""

from flask import Flask


def register_blueprints(app: Flask):
    """Register all blueprints with the application."""
    from .cart import cart_bp
    from .orders import orders_bp
    
    app.register_blueprint(cart_bp, url_prefix='/api/v1/cart')
    app.register_blueprint(orders_bp, url_prefix='/api/v1/orders')
