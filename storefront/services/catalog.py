"""Catalog reader.

Carts and orders only ever read the catalog: price, stock and the
attributes snapshotted onto cart lines.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import CatalogUnavailable
from storefront.extensions import db
from storefront.models import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: int
    stock: int
    sku: str = None
    image: str = None

    @classmethod
    def from_model(cls, product):
        return cls(
            id=str(product.id),
            name=product.name,
            price=product.price,
            stock=product.stock or 0,
            sku=product.sku,
            image=product.image,
        )


class CatalogReader:
    """Looks products up in the ``products`` table."""

    def lookup(self, product_id):
        """Return a ``ProductSnapshot`` or ``None`` if the product does not exist."""
        if not product_id:
            return None
        try:
            product = db.session.get(Product, str(product_id))
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('catalog.lookup_failed', product_id=product_id, error=str(exc))
            raise CatalogUnavailable() from exc
        if product is None:
            return None
        return ProductSnapshot.from_model(product)
