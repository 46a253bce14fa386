"""
Product Formatter
Turns a catalog product row into the dict shape the GraphQL layer expects.
"""
from typing import Optional
from decimal import Decimal

from database import CatalogProduct
from schemas.bundle_product_schemas import ChildProductDict


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class ProductFormatter:
    """Formats child products loaded by the data provider"""

    def format(self, product: CatalogProduct) -> ChildProductDict:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "type_id": product.type_id,
            "price": _as_float(product.price),
            "status": "ENABLED" if product.is_enabled else "DISABLED",
            "url_key": product.url_key,
            "model": product,
        }
