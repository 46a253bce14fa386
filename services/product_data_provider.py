"""
Product Data Provider
Loads catalog products matching a SearchCriteria in a single query.
"""
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from database import CatalogProduct, get_session
from schemas.bundle_product_schemas import Filter, SearchCriteria
from utils import retry_sync

import settings

logger = logging.getLogger(__name__)


class ProductDataProvider:
    """Batch product loader used for bundle children"""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def _clause(self, flt: Filter):
        column = getattr(CatalogProduct, flt.field, None)
        if column is None:
            raise ValueError(f"Unknown product filter field: {flt.field}")
        if flt.condition_type == "in":
            return column.in_(list(flt.value))
        return column == flt.value

    @retry_sync(max_retries=settings.PRODUCT_FETCH_MAX_RETRIES)
    def get_list(self, criteria: SearchCriteria, include_disabled: bool = False) -> List[CatalogProduct]:
        """
        Return products matching every filter in ``criteria``.

        Disabled products are skipped unless ``include_disabled`` is set.
        An ``in`` filter with no values matches nothing.
        """
        for flt in criteria.filters:
            if flt.condition_type == "in" and not flt.value:
                return []

        query = select(CatalogProduct)
        for flt in criteria.filters:
            query = query.where(self._clause(flt))
        if not include_disabled:
            query = query.where(CatalogProduct.is_enabled.is_(True))
        query = query.order_by(CatalogProduct.id)

        with get_session(self.session_factory) as session:
            products = list(session.execute(query).scalars().all())

        logger.debug(f"Product data provider returned {len(products)} rows for {len(criteria.filters)} filters")
        return products
