# --- catalog models read by the bundle post-processor collaborators ---

from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, Optional
import logging

from sqlalchemy import (
    Boolean, Integer, Numeric, String, Text,
    ForeignKey, Index, create_engine, text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

import settings

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Engine / Session
# -------------------------------------------------------------------
def build_engine(url: Optional[str] = None) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across sessions."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=1800,
        pool_timeout=15,
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, class_=Session, expire_on_commit=False)


def _redact_db_url(url: str) -> str:
    if "@" in url and "://" in url:
        head, tail = url.split("://", 1)
        creds, hostpart = tail.split("@", 1)
        if ":" in creds:
            user, _pwd = creds.split(":", 1)
            return f"{head}://{user}:******@{hostpart}"
        return url
    if url.startswith("sqlite"):
        return url
    return "******"


engine = build_engine()
SessionLocal = make_session_factory(engine)
logger.info(f"Creating SQL engine for {_redact_db_url(settings.DATABASE_URL)}")


# -------------------------------------------------------------------
# Base
# -------------------------------------------------------------------
class Base(DeclarativeBase):
    pass


# -------------------------------------------------------------------
# MODELS
# -------------------------------------------------------------------
class CatalogProduct(Base):
    __tablename__ = "catalog_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type_id: Mapped[str] = mapped_column(String, nullable=False, default="simple")
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    url_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Disabled children are filtered out of bundle lookups by default
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CatalogCategoryProduct(Base):
    __tablename__ = "catalog_category_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("catalog_products.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


Index('ix_catalog_products_type', CatalogProduct.type_id)
Index('uq_category_product', CatalogCategoryProduct.category_id, CatalogCategoryProduct.product_id, unique=True)


# -------------------------------------------------------------------
# Session + init helpers
# -------------------------------------------------------------------
@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    session = (factory or SessionLocal)()
    try:
        yield session
    finally:
        session.close()


def check_db_connection(bind: Optional[Engine] = None) -> None:
    with (bind or engine).connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("DB connectivity check: OK")


def init_db(bind: Optional[Engine] = None) -> None:
    """Ensure tables exist."""
    bind = bind or engine
    check_db_connection(bind)
    Base.metadata.create_all(bind)
    logger.info("DB init complete (tables ensured).")
