"""
Bundle Product Schemas Package
Provides the data structures used when post-processing bundle products.
"""

from .bundle_product_schemas import (
    # Input records
    BundleLinkDict,
    BundleOptionDict,

    # Output records
    CategoryLinkDict,
    ChildProductDict,
    FormattedLinkDict,
    FormattedOptionDict,

    # Linked product result
    BUNDLED_PRODUCT_NOT_FOUND,
    LinkedProduct,
    ProductNotFound,
    is_found,

    # Search criteria
    Filter,
    SearchCriteria,

    # Processing state
    ChildReferences,
)
