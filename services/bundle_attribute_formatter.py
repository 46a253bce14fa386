"""
Bundle Attribute Formatter
Maps internal bundle attribute codes to their API representation.

Bundle level:
- price_view    → price_view          (PriceViewEnum)
- shipment_type → ship_bundle_items   (ShipBundleItemsEnum)
- price_type    → dynamic_price       (only when price_view is present)
- sku_type      → dynamic_sku
- weight_type   → dynamic_weight

Link level:
- price_type    → price_type          (PriceTypeEnum, falls back to DYNAMIC)
- qty           → int
- is_default    → bool

No I/O happens here; enum labels come from the injected lookup.
"""

from typing import Any, Dict, Mapping, Optional

import settings
from schemas.bundle_product_schemas import (
    BundleLinkDict,
    FormattedLinkDict,
    FormattedOptionDict,
    ProductNotFound,
)
from services.enum_lookup import EnumLookup


def _is_set(record: Mapping[str, Any], key: str) -> bool:
    return record.get(key) is not None


def _as_flag(value: Any) -> bool:
    """Truthiness of a stored attribute; only the strings "" and "0" are false."""
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def _as_qty(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, str):
        return int(float(value))
    return int(value)


def format_bundle_attributes(product: Mapping[str, Any], enum_lookup: EnumLookup) -> Dict[str, Any]:
    """
    Format bundle specific top level attributes.

    Returns a new dict; fields absent from ``product`` stay absent.
    ``dynamic_price`` follows ``price_type`` but is only written when
    ``price_view`` is set on the input record.
    """
    formatted = dict(product)

    if _is_set(product, "price_view"):
        formatted["price_view"] = enum_lookup.resolve("PriceViewEnum", product["price_view"])
    if _is_set(product, "shipment_type"):
        formatted["ship_bundle_items"] = enum_lookup.resolve("ShipBundleItemsEnum", product["shipment_type"])
    if _is_set(product, "price_view"):
        formatted["dynamic_price"] = not _as_flag(product.get("price_type"))
    if _is_set(product, "sku_type"):
        formatted["dynamic_sku"] = not _as_flag(product["sku_type"])
    if _is_set(product, "weight_type"):
        formatted["dynamic_weight"] = not _as_flag(product["weight_type"])

    return formatted


def format_link(link: BundleLinkDict, enum_lookup: EnumLookup, sku: Optional[str] = None) -> FormattedLinkDict:
    """
    Format one option link; the product slot starts as not found.

    ``sku`` is the normalized child SKU the slot is keyed by; defaults to the
    link's raw SKU.
    """
    price_type = enum_lookup.resolve("PriceTypeEnum", link.get("price_type"))

    return {
        "product": ProductNotFound(sku=sku if sku is not None else link["sku"]),
        "price": link.get("price"),
        "position": link.get("position"),
        "id": link.get("id"),
        "qty": _as_qty(link.get("qty")),
        "is_default": _as_flag(link.get("is_default")),
        "price_type": price_type or settings.DEFAULT_LINK_PRICE_TYPE,
        "can_change_quantity": link.get("can_change_quantity"),
    }


def format_option(option: Mapping[str, Any]) -> FormattedOptionDict:
    """Copy the option's own data and start an empty ``options`` map."""
    formatted: Dict[str, Any] = dict(option)
    formatted["options"] = {}
    return formatted
