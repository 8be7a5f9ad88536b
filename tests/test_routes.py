"""HTTP tests for the cart and order endpoints."""

import pytest

from storefront.models import Order

CART_URL = '/api/v1/cart'
ORDERS_URL = '/api/v1/orders'


@pytest.fixture
def headers(session_id):
    return {'X-Session-ID': session_id}


@pytest.fixture
def product(make_product):
    return make_product(name='Respirator 3M 7502', price=12500, stock=5)


class TestCartRoutes:
    def test_get_without_session_issues_one(self, client):
        response = client.get(CART_URL)
        assert response.status_code == 200
        assert response.headers.get('X-Session-ID')
        assert response.get_json() == {'items': [], 'subtotal': 0, 'discount': 0, 'total': 0, 'count': 0}

    def test_get_with_session_keeps_it(self, client, headers):
        response = client.get(CART_URL, headers=headers)
        assert response.status_code == 200
        assert 'X-Session-ID' not in response.headers

    def test_issued_session_can_be_reused(self, client, product):
        response = client.post(CART_URL, json={'productId': product.id})
        session_id = response.headers['X-Session-ID']

        cart = client.get(CART_URL, headers={'X-Session-ID': session_id}).get_json()
        assert cart['count'] == 1
        assert cart['items'][0]['id'] == product.id

    def test_add_item(self, client, headers, product):
        response = client.post(CART_URL, json={'productId': product.id, 'quantity': 2}, headers=headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data['total'] == 25000
        assert data['count'] == 2
        assert data['items'][0]['quantity'] == 2

    def test_add_requires_product_id(self, client, headers):
        response = client.post(CART_URL, json={'quantity': 1}, headers=headers)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'INVALID_REQUEST'

    def test_add_rejects_invalid_json(self, client, headers):
        response = client.post(CART_URL, data='not json', content_type='application/json', headers=headers)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'INVALID_REQUEST'

    def test_add_unknown_product(self, client, headers):
        response = client.post(CART_URL, json={'productId': 'missing'}, headers=headers)
        assert response.status_code == 404
        assert response.get_json()['error'] == 'PRODUCT_NOT_FOUND'

    def test_add_over_stock(self, client, headers, product):
        response = client.post(CART_URL, json={'productId': product.id, 'quantity': 6}, headers=headers)
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'INSUFFICIENT_STOCK'
        assert body['available'] == 5

    def test_update_item(self, client, headers, product):
        client.post(CART_URL, json={'productId': product.id, 'quantity': 1}, headers=headers)
        response = client.patch(f'{CART_URL}/{product.id}', json={'quantity': 3}, headers=headers)
        assert response.status_code == 200
        assert response.get_json()['count'] == 3

    def test_update_requires_session(self, client, product):
        response = client.patch(f'{CART_URL}/{product.id}', json={'quantity': 3})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'MISSING_SESSION'

    def test_update_item_not_in_cart(self, client, headers, product):
        response = client.patch(f'{CART_URL}/{product.id}', json={'quantity': 3}, headers=headers)
        assert response.status_code == 404
        assert response.get_json()['error'] == 'ITEM_NOT_IN_CART'

    def test_update_invalid_quantity(self, client, headers, product):
        client.post(CART_URL, json={'productId': product.id}, headers=headers)
        response = client.patch(f'{CART_URL}/{product.id}', json={'quantity': 0}, headers=headers)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'INVALID_QUANTITY'

    def test_remove_item(self, client, headers, product):
        client.post(CART_URL, json={'productId': product.id}, headers=headers)
        response = client.delete(f'{CART_URL}/{product.id}', headers=headers)
        assert response.status_code == 200
        assert response.get_json()['items'] == []

    def test_remove_item_not_in_cart(self, client, headers, product):
        response = client.delete(f'{CART_URL}/{product.id}', headers=headers)
        assert response.status_code == 404

    def test_clear_cart(self, client, headers, product):
        client.post(CART_URL, json={'productId': product.id, 'quantity': 2}, headers=headers)
        response = client.delete(CART_URL, headers=headers)
        assert response.status_code == 200
        assert response.get_json()['count'] == 0


class TestOrderRoutes:
    def test_checkout_requires_session(self, client, checkout_payload):
        response = client.post(ORDERS_URL, json=checkout_payload)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'MISSING_SESSION'

    def test_checkout_empty_cart(self, client, headers, checkout_payload):
        response = client.post(ORDERS_URL, json=checkout_payload, headers=headers)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'EMPTY_CART'

    def test_checkout_validation_errors(self, client, headers, product):
        client.post(CART_URL, json={'productId': product.id}, headers=headers)
        response = client.post(ORDERS_URL, headers=headers, json={
            'customerType': 'legal',
            'name': 'Ivan Petrov',
            'phone': '+7 701 123 45 67',
            'email': 'ivan@example.kz',
            'address': 'Astana, Mangilik El 55',
            'companyName': 'Noble Group LLP',
            'bin': '1234',
        })
        assert response.status_code == 400
        assert response.get_json() == {
            'error': 'VALIDATION_ERROR',
            'details': [{'field': 'bin', 'message': 'BIN must contain exactly 12 digits'}],
        }
        assert Order.query.count() == 0

    def test_checkout_success(self, client, headers, product, checkout_payload):
        client.post(CART_URL, json={'productId': product.id}, headers=headers)

        response = client.post(ORDERS_URL, json=checkout_payload, headers=headers)

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['total'] == 12500
        assert body['orderNumber'].startswith('ORD-')
        assert Order.query.filter_by(id=body['orderId']).count() == 1
        assert client.get(CART_URL, headers=headers).get_json()['items'] == []

    def test_delete_order(self, client, headers, product, checkout_payload):
        client.post(CART_URL, json={'productId': product.id}, headers=headers)
        order_id = client.post(ORDERS_URL, json=checkout_payload, headers=headers).get_json()['orderId']

        response = client.delete(f'{ORDERS_URL}/{order_id}')
        assert response.status_code == 200
        assert Order.query.count() == 0

        response = client.delete(f'{ORDERS_URL}/{order_id}')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'ORDER_NOT_FOUND'

    def test_order_detail(self, client, headers, product, checkout_payload):
        client.post(CART_URL, json={'productId': product.id, 'quantity': 2}, headers=headers)
        placed = client.post(ORDERS_URL, json=checkout_payload, headers=headers).get_json()

        response = client.get(f'{ORDERS_URL}/{placed["orderId"]}')
        assert response.status_code == 200
        order = response.get_json()
        assert order['orderNumber'] == placed['orderNumber']
        assert order['status'] == 'new'
        assert order['total'] == 25000
        assert order['items'] == [{
            'productId': product.id,
            'name': 'Respirator 3M 7502',
            'quantity': 2,
            'price': 12500,
            'subtotal': 25000,
        }]

    def test_order_detail_not_found(self, client):
        response = client.get(f'{ORDERS_URL}/missing')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'ORDER_NOT_FOUND'
