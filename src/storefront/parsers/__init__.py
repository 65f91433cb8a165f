from .catalog_parser import parse_attributes, read_option_descriptions, remember_option_description
from .order_parser import (
    build_name_cache,
    parse_order,
    parse_order_detail,
    parse_order_entries,
    parse_order_entry,
    parse_orders,
)

__all__ = [
    "parse_attributes",
    "read_option_descriptions",
    "remember_option_description",
    "parse_order",
    "parse_orders",
    "parse_order_detail",
    "parse_order_entry",
    "parse_order_entries",
    "build_name_cache",
]
