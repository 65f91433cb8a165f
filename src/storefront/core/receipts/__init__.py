from .formatter import (
    build_detail_line,
    build_item_lines,
    build_receipt_document,
    render_for_download,
    render_for_print,
    user_facing_status,
)
from .models import Customer, HumanAttribute, Order, OrderEntry, OrderItem, OrderItemDetail

__all__ = [
    "Customer",
    "HumanAttribute",
    "Order",
    "OrderEntry",
    "OrderItem",
    "OrderItemDetail",
    "build_detail_line",
    "build_item_lines",
    "build_receipt_document",
    "render_for_print",
    "render_for_download",
    "user_facing_status",
]
