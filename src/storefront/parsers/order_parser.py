from __future__ import annotations

from decimal import Decimal
from typing import Any

from storefront.core.receipts import (
    Customer,
    HumanAttribute,
    Order,
    OrderEntry,
    OrderItem,
    OrderItemDetail,
)

from .utils import safe_decimal, safe_int, text_or_none


def parse_human_attribute(raw: dict[str, Any]) -> HumanAttribute:
    return HumanAttribute(
        attribute_name=str(raw.get("attribute_name") or ""),
        option_label=str(raw.get("option_label") or ""),
        attribute_id=text_or_none(raw.get("attribute_id")),
        option_id=text_or_none(raw.get("option_id")),
        price_delta=safe_decimal(raw.get("price_delta")),
        attribute_order=safe_int(raw.get("attribute_order")),
        option_order=safe_int(raw.get("option_order")),
    )


def parse_order_detail(raw: dict[str, Any]) -> OrderItemDetail:
    math = raw.get("math") if isinstance(raw.get("math"), dict) else {}
    raw_deltas = math.get("deltas") if isinstance(math.get("deltas"), list) else []
    deltas = [safe_decimal(delta) or Decimal("0") for delta in raw_deltas]

    human = raw.get("selected_attributes_human")
    human_entries = [parse_human_attribute(h) for h in human if isinstance(h, dict)] if isinstance(human, list) else []

    return OrderItemDetail(
        product_id=str(raw.get("product_id") or ""),
        product_name=str(raw.get("product_name") or ""),
        quantity=safe_int(raw.get("quantity"), default=1) or 1,
        unit_price=safe_decimal(raw.get("unit_price")),
        total_price=safe_decimal(raw.get("total_price")),
        selection=text_or_none(raw.get("selection")),
        math_base=safe_decimal(math.get("base")),
        math_deltas=deltas,
        variant_signature=text_or_none(raw.get("variant_signature")),
        selected_size=text_or_none(raw.get("selected_size")),
        selected_attributes_human=human_entries,
    )


def parse_order(raw: dict[str, Any]) -> Order:
    """One entry of the per-device order list."""
    items = [
        OrderItem(
            product_id=str(item.get("product_id") or ""),
            quantity=safe_int(item.get("quantity"), default=0) or 0,
            unit_price=safe_decimal(item.get("unit_price")) or Decimal("0"),
            total_price=safe_decimal(item.get("total_price")),
        )
        for item in raw.get("items") or []
        if isinstance(item, dict)
    ]
    return Order(
        order_id=str(raw.get("order_id") or ""),
        date=text_or_none(raw.get("date")),
        status=str(raw.get("status") or ""),
        total_price=safe_decimal(raw.get("total_price")) or Decimal("0"),
        items=items,
    )


def parse_orders(raw: Any) -> list[Order]:
    orders = raw.get("orders") if isinstance(raw, dict) else raw
    if not isinstance(orders, list):
        return []
    return [parse_order(order) for order in orders if isinstance(order, dict)]


def parse_order_entry(raw: dict[str, Any]) -> OrderEntry:
    address = raw.get("Address") if isinstance(raw.get("Address"), dict) else {}
    item_block = raw.get("item") if isinstance(raw.get("item"), dict) else {}
    details = [parse_order_detail(d) for d in item_block.get("detail") or [] if isinstance(d, dict)]

    return OrderEntry(
        order_id=str(raw.get("orderID") or ""),
        customer=Customer(
            name=text_or_none(raw.get("UserName")),
            email=text_or_none(raw.get("email")),
            street=text_or_none(address.get("street")),
            city=text_or_none(address.get("city")),
            zip_code=text_or_none(address.get("zip")),
        ),
        details=details,
    )


def parse_order_entries(raw: Any) -> dict[str, OrderEntry]:
    """Enriched order payload keyed by order id."""
    entries = raw.get("orders") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        return {}
    result: dict[str, OrderEntry] = {}
    for entry in entries:
        if isinstance(entry, dict):
            parsed = parse_order_entry(entry)
            result[parsed.order_id] = parsed
    return result


def build_name_cache(entries: dict[str, OrderEntry]) -> dict[str, str]:
    names: dict[str, str] = {}
    for entry in entries.values():
        for detail in entry.details:
            if detail.product_id and detail.product_name:
                names[detail.product_id] = detail.product_name
    return names
