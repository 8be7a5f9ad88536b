"""Order routes."""

from flask import Blueprint, jsonify, request, current_app
from storefront.errors import InvalidRequest, MissingSession, OrderNotFound

orders_bp = Blueprint('orders', __name__)


def _services():
    return current_app.extensions['storefront']


@orders_bp.route('', methods=['POST'])
def checkout():
    """Place an order from the session's cart."""
    session_id = request.headers.get(current_app.config['SESSION_HEADER'], '').strip()
    if not session_id:
        raise MissingSession()
    
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequest()
    
    placed = _services().checkout.place_order(session_id, payload)
    return jsonify(placed.to_dict()), 201


@orders_bp.route('/<order_id>')
def order_detail(order_id):
    """Order detail with its items."""
    order = _services().orders.get_order(order_id)
    if order is None:
        raise OrderNotFound(order_id)
    return jsonify(order.to_dict())


@orders_bp.route('/<order_id>', methods=['DELETE'])
def delete_order(order_id):
    """Delete an order and its items."""
    _services().checkout.delete_order(order_id)
    return jsonify({'success': True, 'orderId': order_id})
