"""
Product Resource
Category associations for catalog products.
"""
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from database import CatalogCategoryProduct, CatalogProduct, get_session
from utils import retry_sync

import settings

logger = logging.getLogger(__name__)


class ProductResource:
    """Reads category links for a product"""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    @retry_sync(max_retries=settings.PRODUCT_FETCH_MAX_RETRIES)
    def get_category_ids(self, product: CatalogProduct) -> List[int]:
        """Category ids assigned to ``product``, ordered by position then id."""
        query = (
            select(CatalogCategoryProduct.category_id)
            .where(CatalogCategoryProduct.product_id == product.id)
            .order_by(CatalogCategoryProduct.position, CatalogCategoryProduct.id)
        )
        with get_session(self.session_factory) as session:
            return list(session.execute(query).scalars().all())
