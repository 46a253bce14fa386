import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from database import CatalogCategoryProduct, CatalogProduct, build_engine, init_db, make_session_factory


@pytest.fixture
def session_factory():
    """Fresh in-memory catalog database per test"""
    engine = build_engine("sqlite:///:memory:")
    init_db(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def seeded_catalog(session_factory):
    """Three simple products (one disabled) and a few category links"""
    with session_factory() as session:
        shirt = CatalogProduct(sku="SIMPLE-SHIRT", name="Premium Shirt", type_id="simple",
                               price=Decimal("29.99"), url_key="premium-shirt")
        pants = CatalogProduct(sku="SIMPLE-PANTS", name="Designer Pants", type_id="simple",
                               price=Decimal("49.99"), url_key="designer-pants")
        hat = CatalogProduct(sku="SIMPLE-HAT", name="Clearance Hat", type_id="simple",
                             price=Decimal("19.99"), is_enabled=False)
        session.add_all([shirt, pants, hat])
        session.flush()
        session.add_all([
            CatalogCategoryProduct(category_id=12, product_id=shirt.id, position=2),
            CatalogCategoryProduct(category_id=5, product_id=shirt.id, position=0),
            CatalogCategoryProduct(category_id=7, product_id=pants.id, position=0),
        ])
        session.commit()
    return session_factory
