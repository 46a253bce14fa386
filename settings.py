"""
Centralized configuration for the bundle post-processor and its catalog collaborators.
"""
from __future__ import annotations

import os
from typing import Any, Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL: str = os.getenv("DATABASE_URL") or "sqlite:///:memory:"
LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()

# Type discriminator carried by bundle records in the product result set.
BUNDLE_TYPE_CODE: str = os.getenv("BUNDLE_TYPE_CODE") or "bundle"

# Label used for a link price type the enum lookup cannot resolve.
DEFAULT_LINK_PRICE_TYPE: str = os.getenv("DEFAULT_LINK_PRICE_TYPE") or "DYNAMIC"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


PRODUCT_FETCH_MAX_RETRIES: int = _int_env("PRODUCT_FETCH_MAX_RETRIES", 3)


def sanitize_sku(value: Optional[Any]) -> Optional[str]:
    """Normalize a raw SKU (strip whitespace); blank values become None."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    text = str(value).strip()
    if not text:
        return None
    return text


def unique_skus(values: Iterable[Optional[Any]]) -> List[str]:
    """
    Sanitize SKUs, dropping blanks and duplicates while keeping first-seen order.
    """
    seen = set()
    skus: List[str] = []
    for value in values:
        sku = sanitize_sku(value)
        if sku and sku not in seen:
            seen.add(sku)
            skus.append(sku)
    return skus
