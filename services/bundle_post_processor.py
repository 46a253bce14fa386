"""
Bundle Product Post-Processor
Runs after the product query: formats bundle attributes, loads linked child
products in one batch and merges them into the bundle option slots.

Flow:
1. collect_child_references - format bundles, pre-fill every link slot with
   ProductNotFound, gather child SKUs and parent→child membership
2. fetch_and_merge_children - one data provider call for all child SKUs, then
   write each formatted child (with category links) into its waiting slots

The input mapping is never modified. Non-bundle records are passed through as
the same objects.
"""

from typing import Any, Dict, Mapping, Optional
import logging

import settings
from schemas.bundle_product_schemas import ChildReferences, SearchCriteria
from services.bundle_attribute_formatter import format_bundle_attributes, format_link, format_option
from services.enum_lookup import EnumLookup
from services.obs.metrics import MetricsCollector, metrics_collector
from services.product_data_provider import ProductDataProvider
from services.product_formatter import ProductFormatter
from services.product_resource import ProductResource

logger = logging.getLogger(__name__)


def is_bundle(product: Any) -> bool:
    return isinstance(product, Mapping) and product.get("type_id") == settings.BUNDLE_TYPE_CODE


class BundleProductPostProcessor:
    """Post-fetch processor for bundle products"""

    def __init__(
        self,
        data_provider,
        product_resource,
        formatter,
        enum_lookup: EnumLookup,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.data_provider = data_provider
        self.product_resource = product_resource
        self.formatter = formatter
        self.enum_lookup = enum_lookup
        self.metrics = metrics if metrics is not None else metrics_collector

    def process(self, result_data: Mapping[Any, Any]) -> Dict[Any, Any]:
        """
        Process all bundle product data, including adding child product data
        and formatting bundle attributes.

        Args:
            result_data: Ordered mapping of result key -> product record

        Returns:
            New mapping with bundle records reshaped
        """
        references = self.collect_child_references(result_data)
        result = self.fetch_and_merge_children(references)

        missing = [sku for sku in references.skus if sku not in references.found]
        summary = {
            "bundles": references.bundle_count,
            "links": references.link_count,
            "children_requested": len(references.skus),
            "children_found": len(references.found),
            "children_missing": len(missing),
            "missing_skus": missing,
        }
        self.metrics.record_post_process(summary)

        if references.bundle_count:
            logger.info(
                f"Bundle post-process: bundles={references.bundle_count} links={references.link_count} "
                f"children={len(references.skus)} found={len(references.found)} missing={len(missing)}"
            )
        if missing:
            logger.debug(f"Bundled products not found: {missing}")
        return result

    def collect_child_references(self, result_data: Mapping[Any, Any]) -> ChildReferences:
        """
        Format bundle records and record every child SKU they link to.

        Each link slot starts with a ProductNotFound marker so a child the
        fetch never returns stays explicitly missing.
        """
        references = ChildReferences(result=dict(result_data))

        for product_key, product in result_data.items():
            if not is_bundle(product):
                continue

            record = format_bundle_attributes(product, self.enum_lookup)
            references.bundle_count += 1

            options = product.get("bundle_product_options")
            if options is not None:
                members = references.membership.setdefault(product["sku"], set())
                items = []
                for option_key, option in enumerate(options):
                    formatted_option = format_option(option)
                    slots = formatted_option["options"]
                    for link in option.get("product_links") or ():
                        # Same normalization the fetch criteria apply, so merge keys match
                        child_sku = settings.sanitize_sku(link["sku"]) or link["sku"]
                        if child_sku not in slots:
                            references.child_index.setdefault(child_sku, []).append((product_key, option_key))
                        slots[child_sku] = format_link(link, self.enum_lookup, sku=child_sku)
                        members.add(child_sku)
                        references.link_count += 1
                    items.append(formatted_option)
                record["items"] = items

            references.result[product_key] = record

        # Ordered, de-duplicated child SKUs in first-seen order
        references.skus = list(references.child_index)
        return references

    def fetch_and_merge_children(self, references: ChildReferences) -> Dict[Any, Any]:
        """
        Load all referenced children with one data provider call and merge
        them into the bundle option slots.
        """
        result = references.result
        if not references.skus:
            return result

        # Fresh criteria per call; nothing carries over between runs
        criteria = SearchCriteria.for_skus(references.skus)
        children = self.data_provider.get_list(criteria)

        for child in children:
            child_data = dict(self.formatter.format(child))
            child_sku = child_data["sku"]
            waiting = references.child_index.get(child_sku)
            if not waiting:
                continue

            category_ids = self.product_resource.get_category_ids(child)
            child_data["category_links"] = [
                {"position": position, "category_id": category_id}
                for position, category_id in enumerate(category_ids)
            ]

            for product_key, option_key in waiting:
                record = result[product_key]
                if child_sku not in references.membership.get(record.get("sku"), ()):
                    continue
                slot = record["items"][option_key]["options"][child_sku]
                slot["product"] = dict(child_data)
                slot["label"] = child_data["name"]
            references.found.add(child_sku)

        return result


def create_bundle_post_processor(session_factory=None, metrics: Optional[MetricsCollector] = None) -> BundleProductPostProcessor:
    """Wire the processor to the catalog database collaborators."""
    return BundleProductPostProcessor(
        data_provider=ProductDataProvider(session_factory),
        product_resource=ProductResource(session_factory),
        formatter=ProductFormatter(),
        enum_lookup=EnumLookup(),
        metrics=metrics,
    )
