from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(slots=True)
class HumanAttribute:
    attribute_name: str
    option_label: str
    attribute_id: str | None = None
    option_id: str | None = None
    price_delta: Decimal | None = None
    attribute_order: int | None = None
    option_order: int | None = None


@dataclass(slots=True)
class OrderItemDetail:
    """Server-confirmed record of one ordered configuration; never recomputed for display."""

    product_id: str
    product_name: str
    quantity: int = 1
    unit_price: Decimal | None = None
    total_price: Decimal | None = None
    selection: str | None = None
    math_base: Decimal | None = None
    math_deltas: list[Decimal] = field(default_factory=list)
    variant_signature: str | None = None
    selected_size: str | None = None
    selected_attributes_human: list[HumanAttribute] = field(default_factory=list)


@dataclass(slots=True)
class OrderItem:
    product_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal | None = None


@dataclass(slots=True)
class Customer:
    name: str | None = None
    email: str | None = None
    street: str | None = None
    city: str | None = None
    zip_code: str | None = None

    @property
    def address(self) -> str:
        return ", ".join(part.strip() for part in [self.street, self.city, self.zip_code] if part and part.strip())


@dataclass(slots=True)
class OrderEntry:
    """Enriched order record: customer block plus per-product detail records."""

    order_id: str
    customer: Customer
    details: list[OrderItemDetail] = field(default_factory=list)

    def detail_by_product_id(self) -> dict[str, OrderItemDetail]:
        mapping: dict[str, OrderItemDetail] = {}
        for detail in self.details:
            mapping.setdefault(detail.product_id, detail)
        return mapping


@dataclass(slots=True)
class Order:
    order_id: str
    date: str | None
    status: str
    total_price: Decimal
    items: list[OrderItem] = field(default_factory=list)
    customer: Customer | None = None
