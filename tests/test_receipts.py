from __future__ import annotations

import logging
from decimal import Decimal

from storefront.core.receipts import (
    Customer,
    HumanAttribute,
    Order,
    OrderItem,
    OrderItemDetail,
    build_detail_line,
    build_item_lines,
    build_receipt_document,
    render_for_download,
    render_for_print,
    user_facing_status,
)
from storefront.parsers import build_name_cache, parse_order_entries, parse_orders


def _mug_detail() -> OrderItemDetail:
    return OrderItemDetail(
        product_id="p1",
        product_name="Mug",
        quantity=2,
        unit_price=Decimal("40.00"),
        total_price=Decimal("80.00"),
        math_base=Decimal("25.00"),
        math_deltas=[Decimal("15.00"), Decimal("0")],
        selected_size="L",
        selected_attributes_human=[
            HumanAttribute(attribute_name="Color", option_label="Blue", attribute_order=2),
            HumanAttribute(attribute_name="Finish", option_label="Matte", attribute_order=1),
        ],
    )


def test_detail_line_with_size_attributes_and_math() -> None:
    line = build_detail_line("Mug", _mug_detail())
    assert line == "Mug (Size: L, Finish: Matte, Color: Blue): 2 x $(25.00 + 15.00) = $80.00"


def test_detail_line_without_detail_record() -> None:
    assert build_detail_line("Coaster", None, 3, "10.00", "30.00") == "Coaster: 3 x $(10.00) = $30.00"


def test_detail_line_defaults() -> None:
    assert build_detail_line(None, None) == "Item: 1 x $(0.00) = $0.00"


def test_detail_line_skips_blank_human_entries() -> None:
    detail = OrderItemDetail(
        product_id="p1",
        product_name="Mug",
        total_price=Decimal("5.00"),
        math_base=Decimal("5.00"),
        selected_attributes_human=[
            HumanAttribute(attribute_name="", option_label="Red"),
            HumanAttribute(attribute_name="Color", option_label="  "),
        ],
    )
    assert build_detail_line("Mug", detail) == "Mug: 1 x $(5.00) = $5.00"


def test_unordered_human_entries_keep_array_order_after_ordered_ones() -> None:
    detail = OrderItemDetail(
        product_id="p1",
        product_name="Mug",
        total_price=Decimal("5.00"),
        selected_attributes_human=[
            HumanAttribute(attribute_name="B", option_label="b"),
            HumanAttribute(attribute_name="A", option_label="a"),
            HumanAttribute(attribute_name="Z", option_label="z", attribute_order=0),
        ],
    )
    assert build_detail_line("Mug", detail, unit_price="5").startswith("Mug (Z: z, B: b, A: a)")


def test_user_facing_status() -> None:
    assert user_facing_status("pending") == "In Processing"
    assert user_facing_status("Processing") == "In Processing"
    assert user_facing_status("shipped") == "Shipped"
    assert user_facing_status("on-hold") == "on-hold"
    assert user_facing_status(None) == "—"


def test_item_lines_fall_back_to_flat_line(orders_payload, entries_payload, caplog) -> None:  # noqa: ANN001
    order = {o.order_id: o for o in parse_orders(orders_payload)}["1002"]
    entries = parse_order_entries(entries_payload)

    with caplog.at_level(logging.INFO):
        lines = build_item_lines(order, {}, name_cache=build_name_cache(entries))

    assert lines == ["Coaster: 3 x $(10.00) = $30.00"]
    assert [r for r in caplog.records if getattr(r, "event", None) == "MissingDetailRecord"]


def test_item_lines_use_product_id_without_name() -> None:
    order = Order(order_id="9", date=None, status="", total_price=Decimal("4"), items=[OrderItem("p7", 2, Decimal("2"))])
    assert build_item_lines(order, {}) == ["p7: 2 x $(2.00) = $4.00"]


def test_item_lines_flag_pricing_mismatch_but_show_server_total(caplog) -> None:  # noqa: ANN001
    detail = _mug_detail()
    detail.total_price = Decimal("85.00")
    order = Order(
        order_id="1",
        date=None,
        status="completed",
        total_price=Decimal("85.00"),
        items=[OrderItem("p1", 2, Decimal("42.50"), Decimal("85.00"))],
    )

    with caplog.at_level(logging.WARNING):
        lines = build_item_lines(order, {"p1": detail})

    assert lines[0].endswith("= $85.00")
    assert [r for r in caplog.records if getattr(r, "event", None) == "PricingMismatch"]


def test_receipt_document(orders_payload, entries_payload) -> None:  # noqa: ANN001
    order = {o.order_id: o for o in parse_orders(orders_payload)}["1001"]
    entry = parse_order_entries(entries_payload)["1001"]
    order.customer = entry.customer

    document = build_receipt_document(order, entry.detail_by_product_id())

    assert "<h1>Order #1001</h1>" in document
    assert "Date: 2025-03-04 10:15:00" in document
    assert "Status: In Processing" in document
    assert "<p>Ana Lee</p>" in document
    assert "<p>1 Palm Rd, Dubai, 00000</p>" in document
    assert "<li>Mug (Size: L, Finish: Matte, Color: Blue): 2 x $(25.00 + 15.00) = $80.00</li>" in document
    assert "Total: AED 80.00" in document


def test_receipt_document_escapes_and_uses_placeholders() -> None:
    order = Order(
        order_id="<7>",
        date="",
        status="",
        total_price=Decimal("0"),
        customer=Customer(name="<script>x</script>"),
    )
    document = build_receipt_document(order, {}, currency="USD")

    assert "<script>x</script>" not in document
    assert "&lt;script&gt;x&lt;/script&gt;" in document
    assert "Order #&lt;7&gt;" in document
    assert "Date: —" in document
    assert "Total: USD 0.00" in document


def test_date_only_and_unparseable_dates() -> None:
    order = Order(order_id="1", date="2025-03-05", status="shipped", total_price=Decimal("1"))
    assert "Date: 2025-03-05<" in build_receipt_document(order, {})

    order.date = "sometime soon"
    assert "Date: sometime soon<" in build_receipt_document(order, {})


def test_print_and_download_share_one_template(orders_payload) -> None:  # noqa: ANN001
    order = parse_orders(orders_payload)[0]

    printed = render_for_print(order, {})
    filename, payload = render_for_download(order, {})

    assert filename == "receipt-1001.html"
    assert payload.decode("utf-8") == printed


def test_detail_line_with_empty_deltas() -> None:
    detail = OrderItemDetail(
        product_id="p1",
        product_name="Mug",
        math_base=Decimal("25"),
        math_deltas=[],
        selected_size="Large",
        selected_attributes_human=[HumanAttribute(attribute_name="Color", option_label="Blue")],
    )
    line = build_detail_line("Mug", detail, 2, Decimal("25.00"), Decimal("50.00"))
    assert line == "Mug (Size: Large, Color: Blue): 2 x $(25.00) = $50.00"


def test_unknown_product_renders_raw_id() -> None:
    order = Order(
        order_id="5",
        date="2025-01-01",
        status="completed",
        total_price=Decimal("12.5"),
        items=[OrderItem("sku-77", 1, Decimal("12.5"), Decimal("12.5"))],
    )
    document = build_receipt_document(order, {"other": _mug_detail()})
    assert "<li>sku-77: 1 x $(12.50) = $12.50</li>" in document
    assert "Status: Completed" in document


def test_receipt_document_with_huge_total() -> None:
    order = parse_orders([{"order_id": "8", "status": "pending", "total_price": "1e27", "items": []}])[0]

    document = build_receipt_document(order, {})

    assert "Total: AED 1000000000000000000000000000.00" in document


def test_item_without_quantity_counts_as_one() -> None:
    order = Order(order_id="9", date=None, status="", total_price=Decimal("5"), items=[OrderItem("p7", 0, Decimal("5"))])
    assert build_item_lines(order, {}) == ["p7: 1 x $(5.00) = $5.00"]
