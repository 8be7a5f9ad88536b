import uuid
from dataclasses import replace

import pytest

from storefront import create_app
from storefront.extensions import db as _db
from storefront.models import Product
from storefront.services.catalog import ProductSnapshot

VALID_CHECKOUT = {
    'customerType': 'individual',
    'name': 'Aigerim Nurlanovna',
    'phone': '+7 (701) 123-45-67',
    'email': 'aigerim@example.kz',
    'address': 'Almaty, Abay avenue 150, apt 12',
    'comment': 'Call before delivery',
}

VALID_LEGAL_CHECKOUT = dict(
    VALID_CHECKOUT,
    customerType='legal',
    companyName='Noble Group LLP',
    bin='123456789012',
)


class StaticCatalog:
    """In-memory catalog double for store-level tests."""

    def __init__(self, *products):
        self.products = {p.id: p for p in products}
        self.lookups = 0

    def lookup(self, product_id):
        self.lookups += 1
        return self.products.get(product_id)

    def set_stock(self, product_id, stock):
        self.products[product_id] = replace(self.products[product_id], stock=stock)

    def set_price(self, product_id, price):
        self.products[product_id] = replace(self.products[product_id], price=price)


@pytest.fixture
def catalog():
    return StaticCatalog(
        ProductSnapshot(id='p-resp', name='Respirator 3M 7502', price=12500, stock=100, sku='3M-7502'),
        ProductSnapshot(id='p-glove', name='Gloves Ansell HyFlex', price=5000, stock=200, sku='AN-11-800'),
        ProductSnapshot(id='p-helmet', name='Helmet MSA V-Gard', price=8000, stock=3, sku='MSA-VGARD'),
        ProductSnapshot(id='p-none', name='Suit Tyvek Classic', price=15000, stock=0, sku='TY-CLASSIC'),
    )


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['storefront']


@pytest.fixture
def make_product(app):
    def _make(price=12500, stock=100, name='Respirator 3M 7502', sku=None):
        product = Product(
            id=str(uuid.uuid4()),
            name=name,
            slug=name.lower().replace(' ', '-'),
            sku=sku,
            price=price,
            stock=stock,
        )
        _db.session.add(product)
        _db.session.commit()
        return product
    return _make


@pytest.fixture
def session_id():
    return str(uuid.uuid4())


@pytest.fixture
def checkout_payload():
    return dict(VALID_CHECKOUT)


@pytest.fixture
def legal_checkout_payload():
    return dict(VALID_LEGAL_CHECKOUT)
