# xts_interactive/enums.py
from typing import Any, Dict, Mapping, Optional

# per-segment descriptor list -> aggregated table name
AGGREGATED = (
    ("orderType", "orderTypes"),
    ("productType", "productTypes"),
    ("timeInForce", "timeInForce"),
)

CapabilityTables = Dict[str, Dict[str, str]]


def self_mapped(values) -> Dict[str, str]:
    return {v: v for v in values}


def build_capability_tables(enums: Optional[Mapping[str, Any]]) -> CapabilityTables:
    """
    Flatten the enumeration payload returned at login into lookup tables.

    A category holding a flat list becomes one self-mapped table. A category
    holding a mapping (e.g. exchangeSegment -> {orderType: [...], ...})
    becomes a table of its sub-keys plus the orderTypes, productTypes and
    timeInForce tables, unioned across every sub-key.
    """
    tables: CapabilityTables = {}
    if not enums:
        return tables

    for category, value in enums.items():
        if isinstance(value, Mapping):
            tables[category] = self_mapped(value.keys())
            aggregated = {name: {} for _, name in AGGREGATED}
            for descriptor in value.values():
                if not isinstance(descriptor, Mapping):
                    continue
                for field, name in AGGREGATED:
                    aggregated[name].update(self_mapped(descriptor.get(field) or ()))
            tables.update(aggregated)
        elif value is not None:
            tables[category] = self_mapped(value)
    return tables
