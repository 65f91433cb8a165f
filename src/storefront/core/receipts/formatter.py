"""
Receipt rendering for historical orders.

Everything here displays server-confirmed numbers. Local arithmetic is only
used to cross-check the stored ``math`` block and to fill a missing line
total; it never replaces a value the server sent.
"""
from __future__ import annotations

import html
import logging
from collections.abc import Mapping
from decimal import Decimal

from dateutil import parser as dt_parser

from storefront.core.pricing import check_pricing_mismatch, expected_total, format_amount, line_total, to_decimal

from .models import HumanAttribute, Order, OrderItem, OrderItemDetail

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"

STATUS_LABELS = {
    "pending": "In Processing",
    "processing": "In Processing",
    "shipped": "Shipped",
    "completed": "Completed",
    "cancelled": "Cancelled",
}

RECEIPT_CSS = """
    *{box-sizing:border-box}
    body{font-family:system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial,sans-serif; color:#111; margin:24px;}
    h1{font-size:28px;margin:0 0 12px}
    h2{font-size:20px;margin:20px 0 8px}
    p{margin:4px 0}
    ul{margin:8px 0 0 20px}
    li{margin:4px 0}
    .muted{color:#555}
    .total{font-weight:700;margin-top:16px;font-size:18px}
    .divider{height:1px;background:#e5e7eb;margin:16px 0}
    @page{margin:14mm}
"""


def user_facing_status(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return PLACEHOLDER
    return STATUS_LABELS.get(value.lower(), value)


def _ordered_human(entries: list[HumanAttribute]) -> list[HumanAttribute]:
    # Stable: entries without an order keep array order, after the ordered ones.
    return sorted(
        entries,
        key=lambda h: (
            h.attribute_order is None,
            h.attribute_order or 0,
            h.option_order is None,
            h.option_order or 0,
        ),
    )


def build_detail_line(
    product_name: str | None,
    detail: OrderItemDetail | None,
    quantity: int | None = None,
    unit_price: Decimal | float | str | None = None,
    total_price: Decimal | float | str | None = None,
) -> str:
    """
    ``Name (Size: L, Color: Blue): 2 x $(25.00 + 15.00) = $80.00``

    The qualifier list is omitted when there is neither a size nor a
    selection; zero deltas are hidden from the price expression only.
    """
    name = product_name or "Item"

    qty = quantity if quantity is not None else (detail.quantity if detail else None)
    qty = qty or 1

    parts: list[str] = []
    size = (detail.selected_size or "").strip() if detail else ""
    if size:
        parts.append(f"Size: {size}")
    for human in _ordered_human(detail.selected_attributes_human if detail else []):
        attribute_name = (human.attribute_name or "").strip()
        option_label = (human.option_label or "").strip()
        if attribute_name and option_label:
            parts.append(f"{attribute_name}: {option_label}")
    qualifiers = f" ({', '.join(parts)})" if parts else ""

    if detail is not None and detail.math_base is not None:
        base = detail.math_base
    else:
        base = to_decimal(unit_price)
    deltas = detail.math_deltas if detail else []
    pieces = [format_amount(base)] + [format_amount(d) for d in deltas if to_decimal(d) != 0]

    if total_price is not None:
        total = to_decimal(total_price)
    else:
        total = detail.total_price if detail and detail.total_price is not None else Decimal("0")

    return f"{name}{qualifiers}: {qty} x $({' + '.join(pieces)}) = ${format_amount(total)}"


def _format_order_date(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return PLACEHOLDER
    try:
        parsed = dt_parser.parse(value)
    except (ValueError, OverflowError):
        return value
    if ":" not in value:
        return parsed.strftime("%Y-%m-%d")
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def _item_total(item: OrderItem) -> Decimal:
    if item.total_price is not None:
        return item.total_price
    return line_total(item.unit_price, item.quantity or 1)


def build_item_lines(
    order: Order,
    detail_by_product_id: Mapping[str, OrderItemDetail],
    *,
    name_cache: Mapping[str, str] | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> list[str]:
    log = log or logger
    name_cache = name_cache or {}
    lines: list[str] = []

    for item in order.items:
        total = _item_total(item)
        detail = detail_by_product_id.get(item.product_id)

        if detail is None:
            log.info(
                "No detail record for product %s in order %s; rendering flat line",
                item.product_id,
                order.order_id,
                extra={"event": "MissingDetailRecord"},
            )
            name = name_cache.get(item.product_id) or item.product_id
            lines.append(build_detail_line(name, None, item.quantity, item.unit_price, total))
            continue

        if detail.math_base is not None and detail.total_price is not None:
            check_pricing_mismatch(
                expected_total(detail.math_base, detail.math_deltas, detail.quantity or 1),
                detail.total_price,
                product_id=detail.product_id,
                log=log,
            )
        lines.append(build_detail_line(detail.product_name, detail, item.quantity, item.unit_price, total))

    return lines


def build_receipt_document(
    order: Order,
    detail_by_product_id: Mapping[str, OrderItemDetail],
    *,
    currency: str = "AED",
    name_cache: Mapping[str, str] | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> str:
    """The one receipt template; print and download both render from here."""

    def esc(value: str | None) -> str:
        return html.escape(value or "", quote=True)

    def safe(value: str | None) -> str:
        return esc((value or "").strip() or PLACEHOLDER)

    customer = order.customer
    lines = build_item_lines(order, detail_by_product_id, name_cache=name_cache, log=log)
    items_html = "".join(f"<li>{esc(line)}</li>" for line in lines)

    return f"""<!doctype html>
<html>
<head>
<meta charset="utf-8" />
<title>Receipt {esc(order.order_id)}</title>
<style>{RECEIPT_CSS}</style>
</head>
<body>
  <h1>Order #{esc(order.order_id)}</h1>
  <p class="muted">Date: {esc(_format_order_date(order.date))}</p>
  <p class="muted">Status: {esc(user_facing_status(order.status))}</p>

  <div class="divider"></div>

  <h2>Customer</h2>
  <p>{safe(customer.name if customer else None)}</p>
  <p>{safe(customer.email if customer else None)}</p>
  <p>{safe(customer.address if customer else None)}</p>

  <div class="divider"></div>

  <h2>Items</h2>
  <ul>
    {items_html}
  </ul>
  <p class="total">Total: {esc(currency)} {format_amount(order.total_price)}</p>
</body>
</html>"""


def render_for_print(order: Order, detail_by_product_id: Mapping[str, OrderItemDetail], **kwargs) -> str:
    return build_receipt_document(order, detail_by_product_id, **kwargs)


def render_for_download(
    order: Order,
    detail_by_product_id: Mapping[str, OrderItemDetail],
    **kwargs,
) -> tuple[str, bytes]:
    document = build_receipt_document(order, detail_by_product_id, **kwargs)
    return f"receipt-{order.order_id}.html", document.encode("utf-8")
