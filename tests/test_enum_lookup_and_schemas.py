"""
Tests for enum lookup, search criteria and the not-found marker
"""

import pytest
from pydantic import ValidationError

from schemas.bundle_product_schemas import Filter, ProductNotFound, SearchCriteria, is_found
from services.enum_lookup import EnumLookup, EnumNotDefinedError


class TestEnumLookup:
    def test_default_definitions(self):
        lookup = EnumLookup()

        assert lookup.resolve("PriceViewEnum", "0") == "PRICE_RANGE"
        assert lookup.resolve("PriceViewEnum", 1) == "AS_LOW_AS"
        assert lookup.resolve("ShipBundleItemsEnum", "1") == "SEPARATELY"
        assert lookup.resolve("PriceTypeEnum", 0) == "FIXED"

    def test_unmatched_value_returns_none(self):
        lookup = EnumLookup()

        assert lookup.resolve("PriceTypeEnum", "42") is None
        assert lookup.resolve("PriceTypeEnum", None) is None

    def test_bool_values_compare_as_ints(self):
        lookup = EnumLookup()

        assert lookup.resolve("ShipBundleItemsEnum", True) == "SEPARATELY"

    def test_unknown_enum_raises(self):
        lookup = EnumLookup()

        with pytest.raises(EnumNotDefinedError):
            lookup.resolve("NoSuchEnum", "1")

    def test_custom_definitions(self):
        lookup = EnumLookup({"ColorEnum": {"RED": "r", "BLUE": 2}})

        assert lookup.resolve("ColorEnum", "r") == "RED"
        assert lookup.resolve("ColorEnum", 2) == "BLUE"
        with pytest.raises(EnumNotDefinedError):
            lookup.resolve("PriceViewEnum", "0")


class TestSearchCriteria:
    def test_for_skus_dedupes_and_drops_blanks(self):
        criteria = SearchCriteria.for_skus(["A", " B ", "A", "", None, "C"])

        assert criteria.filters == (Filter(field="sku", value=("A", "B", "C"), condition_type="in"),)

    def test_criteria_are_frozen(self):
        criteria = SearchCriteria.for_skus(["A"])

        with pytest.raises(ValidationError):
            criteria.filters = ()

    def test_with_filter_returns_new_value(self):
        base = SearchCriteria.for_skus(["A"])
        extended = base.with_filter("type_id", "simple")

        assert len(base.filters) == 1
        assert len(extended.filters) == 2
        assert extended.filters[1].condition_type == "eq"

    def test_unsupported_condition_rejected(self):
        with pytest.raises(ValidationError):
            Filter(field="sku", value="A", condition_type="like")


class TestProductNotFound:
    def test_to_error(self):
        marker = ProductNotFound(sku="SKU-GONE")

        assert marker.to_error() == {
            "message": "Bundled product not found",
            "extensions": {"category": "graphql-no-such-entity", "sku": "SKU-GONE"},
        }

    def test_is_found(self):
        assert is_found({"sku": "A"})
        assert not is_found(ProductNotFound(sku="A"))
