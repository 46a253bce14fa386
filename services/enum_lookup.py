"""
Enum Lookup
Translates internal attribute codes into public GraphQL enum labels.
"""
from typing import Any, Dict, Mapping, Optional
import logging

logger = logging.getLogger(__name__)

# enum name -> {label: internal value}
DEFAULT_ENUM_DEFINITIONS: Dict[str, Dict[str, str]] = {
    "PriceViewEnum": {
        "PRICE_RANGE": "0",
        "AS_LOW_AS": "1",
    },
    "ShipBundleItemsEnum": {
        "TOGETHER": "0",
        "SEPARATELY": "1",
    },
    "PriceTypeEnum": {
        "FIXED": "0",
        "PERCENT": "1",
        "DYNAMIC": "2",
    },
}


class EnumNotDefinedError(RuntimeError):
    """Raised when a lookup names an enum with no configured values."""


class EnumLookup:
    """Resolves raw field values against configured enum definitions"""

    def __init__(self, definitions: Optional[Mapping[str, Mapping[str, Any]]] = None):
        source = DEFAULT_ENUM_DEFINITIONS if definitions is None else definitions
        # Invert once: enum name -> {internal value: label}
        self._by_value: Dict[str, Dict[str, str]] = {
            enum_name: {str(value): label for label, value in values.items()}
            for enum_name, values in source.items()
        }

    def resolve(self, enum_name: str, raw_value: Any) -> Optional[str]:
        """
        Return the enum label for ``raw_value``, or None when nothing matches.

        Raises:
            EnumNotDefinedError: If ``enum_name`` is not configured
        """
        values = self._by_value.get(enum_name)
        if values is None:
            raise EnumNotDefinedError(f"Enum type \"{enum_name}\" not defined")
        if raw_value is None:
            return None
        if isinstance(raw_value, bool):
            raw_value = int(raw_value)
        label = values.get(str(raw_value))
        if label is None:
            logger.debug(f"No {enum_name} value for {raw_value!r}")
        return label
