"""
Bundle Product Schemas
======================

Data structures shared by the bundle post-processor and its collaborators.

INPUT (from the upstream product query):
----------------------------------------
Each result record is a plain dict keyed by field name. Bundle records carry
``type_id == "bundle"`` and, when options were loaded, ``bundle_product_options``:
a list of options, each holding its own data plus ``product_links``.

OUTPUT (for the GraphQL layer):
-------------------------------
Bundle records gain ``items``: one formatted option per input option, where
``options`` is keyed by child SKU. Every link slot carries a ``product`` that is
either the formatted child dict or a ``ProductNotFound`` marker.
"""

from typing import Any, Dict, List, Literal, Optional, Set, Tuple, TypedDict, Union
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from settings import unique_skus

BUNDLED_PRODUCT_NOT_FOUND = "Bundled product not found"


# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

class BundleLinkDict(TypedDict, total=False):
    """Raw link from a bundle option to one child product."""
    sku: str                    # Child SKU - key of the option slot
    id: int                     # Link id
    price: Optional[float]
    position: Optional[int]
    qty: Any                    # Often a decimal string, e.g. "1.0000"
    is_default: Any             # "0" / "1" / bool
    price_type: Any             # Internal code, see PriceTypeEnum
    can_change_quantity: Any


class BundleOptionDict(TypedDict, total=False):
    """Raw bundle option as loaded with the parent product."""
    option_id: int
    title: str
    required: bool
    type: str                   # "select" | "radio" | "checkbox" | "multi"
    position: int
    product_links: List[BundleLinkDict]


class CategoryLinkDict(TypedDict):
    position: int
    category_id: int


class ChildProductDict(TypedDict, total=False):
    """Formatted child product, as produced by the product formatter."""
    id: int
    sku: str
    name: str
    type_id: str
    price: Optional[float]
    status: str
    url_key: Optional[str]
    category_links: List[CategoryLinkDict]
    model: Any                  # ORM object for downstream field resolvers


class FormattedLinkDict(TypedDict, total=False):
    product: "LinkedProduct"
    label: str                  # Child display name, only once resolved
    price: Optional[float]
    position: Optional[int]
    id: Optional[int]
    qty: int
    is_default: bool
    price_type: str
    can_change_quantity: Any


class FormattedOptionDict(TypedDict, total=False):
    """Option data copied from input plus ``options`` keyed by child SKU."""
    option_id: int
    title: str
    required: bool
    type: str
    position: int
    options: Dict[str, FormattedLinkDict]


# =============================================================================
# LINKED PRODUCT RESULT
# =============================================================================

@dataclass(frozen=True)
class ProductNotFound:
    """Marker stored in a link slot whose child product could not be loaded.

    The child may be disabled, deleted or filtered out of the batch fetch.
    This is data, not an error: the rest of the bundle is still returned.
    """
    sku: str
    message: str = BUNDLED_PRODUCT_NOT_FOUND

    def to_error(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "extensions": {"category": "graphql-no-such-entity", "sku": self.sku},
        }


LinkedProduct = Union[ChildProductDict, ProductNotFound]


def is_found(product: LinkedProduct) -> bool:
    return not isinstance(product, ProductNotFound)


# =============================================================================
# SEARCH CRITERIA
# =============================================================================

class Filter(BaseModel):
    """Single field filter; ``in`` expects a tuple of values."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(..., min_length=1)
    value: Any
    condition_type: Literal["eq", "in"] = "eq"


class SearchCriteria(BaseModel):
    """Immutable set of filters for one data provider call.

    Built fresh for every processing pass so no filter leaks between calls.
    """
    model_config = ConfigDict(frozen=True)

    filters: Tuple[Filter, ...] = ()

    @classmethod
    def for_skus(cls, skus, field_name: str = "sku") -> "SearchCriteria":
        values = tuple(unique_skus(skus))
        return cls(filters=(Filter(field=field_name, value=values, condition_type="in"),))

    def with_filter(self, field_name: str, value: Any, condition_type: str = "eq") -> "SearchCriteria":
        """Return a new criteria with one more filter appended."""
        return SearchCriteria(
            filters=self.filters + (Filter(field=field_name, value=value, condition_type=condition_type),)
        )


# =============================================================================
# TRANSIENT PROCESSING STATE
# =============================================================================

@dataclass
class ChildReferences:
    """Output of the collection pass, consumed by fetch-and-merge."""
    result: Dict[Any, Any]
    skus: List[str] = field(default_factory=list)
    # parent SKU -> child SKUs it references
    membership: Dict[str, Set[str]] = field(default_factory=dict)
    # child SKU -> [(record key, option key)] slots waiting for it
    child_index: Dict[str, List[Tuple[Any, int]]] = field(default_factory=dict)
    # child SKUs merged after the fetch
    found: Set[str] = field(default_factory=set)
    bundle_count: int = 0
    link_count: int = 0
