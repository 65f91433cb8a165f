from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from storefront.core.pricing import format_amount, line_total
from storefront.core.receipts import Order, OrderItemDetail, build_item_lines, render_for_download

SUPPORTED_FORMATS = {"html", "csv", "xlsx"}


def receipt_rows(
    order: Order,
    detail_by_product_id: Mapping[str, OrderItemDetail],
    *,
    name_cache: Mapping[str, str] | None = None,
) -> list[dict[str, str | int]]:
    lines = build_item_lines(order, detail_by_product_id, name_cache=name_cache)
    rows: list[dict[str, str | int]] = []
    for item, line in zip(order.items, lines):
        total = item.total_price if item.total_price is not None else line_total(item.unit_price, item.quantity or 1)
        rows.append(
            {
                "order_id": order.order_id,
                "product_id": item.product_id,
                "line": line,
                "quantity": item.quantity or 1,
                "unit_price": format_amount(item.unit_price),
                "total_price": format_amount(total),
            }
        )
    return rows


def export_receipt(
    order: Order,
    detail_by_product_id: Mapping[str, OrderItemDetail],
    formats: list[str],
    out_dir: Path,
    *,
    currency: str = "AED",
    name_cache: Mapping[str, str] | None = None,
) -> list[Path]:
    unknown = [fmt for fmt in formats if fmt not in SUPPORTED_FORMATS]
    if unknown:
        raise ValueError(f"Unsupported export formats: {unknown}")

    out_dir.mkdir(parents=True, exist_ok=True)
    created_files: list[Path] = []

    if "html" in formats:
        filename, payload = render_for_download(
            order,
            detail_by_product_id,
            currency=currency,
            name_cache=name_cache,
        )
        html_path = (out_dir / filename).resolve()
        html_path.write_bytes(payload)
        created_files.append(html_path)

    if "csv" not in formats and "xlsx" not in formats:
        return created_files

    df = pd.DataFrame(
        receipt_rows(order, detail_by_product_id, name_cache=name_cache),
        columns=["order_id", "product_id", "line", "quantity", "unit_price", "total_price"],
    )

    if "csv" in formats:
        csv_path = (out_dir / f"receipt-{order.order_id}.csv").resolve()
        df.to_csv(csv_path, index=False, encoding="utf-8-sig")
        created_files.append(csv_path)

    if "xlsx" in formats:
        xlsx_path = (out_dir / f"receipt-{order.order_id}.xlsx").resolve()
        with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="items")
        created_files.append(xlsx_path)

    return created_files
