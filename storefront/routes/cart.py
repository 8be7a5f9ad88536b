"""Cart routes."""

from flask import Blueprint, jsonify, request, current_app
from storefront.errors import InvalidRequest
from storefront.utils.decorators import current_session_id, session_required, with_session

cart_bp = Blueprint('cart', __name__)


def _carts():
    return current_app.extensions['storefront'].carts


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest('Invalid JSON')
    return data


@cart_bp.route('', methods=['GET'])
@with_session
def view_cart():
    """View the session's cart."""
    cart = _carts().get(current_session_id())
    return jsonify(cart.to_dict())


@cart_bp.route('', methods=['POST'])
@with_session
def add_to_cart():
    """Add product to cart."""
    data = _json_body()
    product_id = data.get('productId')
    if not product_id:
        raise InvalidRequest('productId is required')
    
    quantity = data.get('quantity')
    if quantity is None:
        quantity = 1
    
    cart = _carts().add_item(current_session_id(), str(product_id), quantity)
    return jsonify(cart.to_dict())


@cart_bp.route('', methods=['DELETE'])
@with_session
def clear_cart():
    """Clear all items from cart."""
    cart = _carts().clear(current_session_id())
    return jsonify(cart.to_dict())


@cart_bp.route('/<product_id>', methods=['PATCH'])
@session_required
def update_cart(product_id):
    """Update cart item quantity."""
    data = _json_body()
    cart = _carts().update_item_quantity(current_session_id(), product_id, data.get('quantity'))
    return jsonify(cart.to_dict())


@cart_bp.route('/<product_id>', methods=['DELETE'])
@session_required
def remove_from_cart(product_id):
    """Remove item from cart."""
    cart = _carts().remove_item(current_session_id(), product_id)
    return jsonify(cart.to_dict())
