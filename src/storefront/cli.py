from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any

import typer
from rich import print

from storefront.config import Settings
from storefront.core.catalog import Selection, resolve_defaults, select_option
from storefront.core.db import StorefrontRepository
from storefront.core.dedupe import generate_variant_signature
from storefront.core.logging import configure_logging, get_logger
from storefront.core.pricing import compute_price, format_amount
from storefront.core.receipts import Order, OrderItemDetail, render_for_print
from storefront.core.sanitize import ContentSanitizer
from storefront.parsers import build_name_cache, parse_attributes, parse_order_entries, parse_orders
from storefront.services import export_receipt, run_doctor_checks

app = typer.Typer(no_args_is_help=True, help="Storefront CLI: variant pricing, receipts and content checks")


def _load_settings(base_dir: Path | None = None) -> Settings:
    settings = Settings.load(base_dir=base_dir)
    settings.ensure_directories()
    return settings


def _read_json(path: Path) -> Any:
    # utf-8-sig: exported payloads sometimes carry a BOM
    with path.open("r", encoding="utf-8-sig") as fh:
        return json.load(fh)


def _parse_selections(values: list[str]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values:
        attribute_id, sep, option_id = value.partition("=")
        if not sep or not attribute_id.strip() or not option_id.strip():
            raise typer.BadParameter(f"Expected ATTRIBUTE=OPTION, got: {value}")
        pairs.append((attribute_id.strip(), option_id.strip()))
    return pairs


def _load_order(
    orders_file: Path,
    order_id: str,
    entries_file: Path | None,
) -> tuple[Order, dict[str, OrderItemDetail], dict[str, str]]:
    orders = {order.order_id: order for order in parse_orders(_read_json(orders_file))}
    order = orders.get(order_id)
    if order is None:
        raise typer.BadParameter(f"Order {order_id} not found in {orders_file}")

    details: dict[str, OrderItemDetail] = {}
    name_cache: dict[str, str] = {}
    if entries_file is not None:
        entries = parse_order_entries(_read_json(entries_file))
        name_cache = build_name_cache(entries)
        entry = entries.get(order_id)
        if entry is not None:
            order.customer = entry.customer
            details = entry.detail_by_product_id()
    return order, details, name_cache


@app.command("init")
def init_command(
    base_dir: Path | None = typer.Option(None, help="Project root (defaults to the current directory)"),
) -> None:
    settings = _load_settings(base_dir=base_dir)
    with StorefrontRepository(settings.db_path) as repository:
        executed = repository.migrate()
    print(f"[green]Initialised[/green]. DB: {settings.db_path}")
    print(f"Migrations: {executed if executed else 'none pending'}")


@app.command("price")
def price_command(
    catalog: Path = typer.Argument(..., exists=True, dir_okay=False, help="Attribute catalog JSON"),
    base: str = typer.Option(..., help="Product base price"),
    qty: int = typer.Option(1, help="Quantity"),
    select: list[str] = typer.Option([], "--select", "-s", help="ATTRIBUTE=OPTION, repeatable"),
) -> None:
    settings = _load_settings()
    with StorefrontRepository(settings.db_path) as repository:
        repository.migrate()
        attributes = parse_attributes(
            _read_json(catalog),
            api_base_url=settings.api_base_url,
            description_store=repository,
        )

    try:
        selection: Selection = resolve_defaults(attributes)
        for attribute_id, option_id in _parse_selections(select):
            selection = select_option(attributes, selection, attribute_id, option_id)
        breakdown = compute_price(base, attributes, selection, qty)
    except ValueError as exc:
        print(f"[red]Invalid configuration[/red]: {exc}")
        raise typer.Exit(1) from exc

    currency = settings.currency
    print(f"Base: {currency} {format_amount(breakdown.base)}")
    for delta in breakdown.deltas:
        print(f"- delta: {format_amount(delta)}")
    print(f"Unit: {currency} {format_amount(breakdown.unit_price)}")
    print(f"[bold]Total[/bold] ({breakdown.quantity}): {currency} {format_amount(breakdown.total_price)}")
    print(f"Signature: {generate_variant_signature(selection) or '-'}")


@app.command("receipt")
def receipt_command(
    orders: Path = typer.Argument(..., exists=True, dir_okay=False, help="Per-device orders JSON"),
    order_id: str = typer.Argument(..., help="Order id to render"),
    entries: Path | None = typer.Option(None, exists=True, dir_okay=False, help="Enriched order entries JSON"),
    out: Path | None = typer.Option(None, help="Write HTML to this file instead of stdout"),
) -> None:
    correlation_id = uuid.uuid4().hex
    settings = _load_settings()
    configure_logging(settings.logs_dir, correlation_id=correlation_id)
    logger = get_logger("storefront.receipt", correlation_id)

    order, details, name_cache = _load_order(orders, order_id, entries)
    document = render_for_print(order, details, currency=settings.currency, name_cache=name_cache, log=logger)

    if out is None:
        typer.echo(document)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(document, encoding="utf-8")
    print(f"[green]Receipt written[/green]: {out.resolve()}")


@app.command("export")
def export_command(
    orders: Path = typer.Argument(..., exists=True, dir_okay=False, help="Per-device orders JSON"),
    order_id: str = typer.Argument(..., help="Order id to export"),
    entries: Path | None = typer.Option(None, exists=True, dir_okay=False, help="Enriched order entries JSON"),
    format: str = typer.Option("html,csv,xlsx", help="Comma separated formats: html,csv,xlsx"),
    out: Path | None = typer.Option(None, help="Export directory"),
) -> None:
    formats = [item.strip().lower() for item in format.split(",") if item.strip()]
    supported = {"html", "csv", "xlsx"}
    unknown = [item for item in formats if item not in supported]
    if unknown:
        raise typer.BadParameter(f"Unsupported formats: {unknown}")

    correlation_id = uuid.uuid4().hex
    settings = _load_settings()
    configure_logging(settings.logs_dir, correlation_id=correlation_id)

    order, details, name_cache = _load_order(orders, order_id, entries)
    out_dir = (out or settings.exports_dir).resolve()
    files = export_receipt(order, details, formats, out_dir, currency=settings.currency, name_cache=name_cache)

    print("[green]Export finished[/green]")
    for file_path in files:
        print(f"- {file_path}")


@app.command("sanitize")
def sanitize_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML file"),
    preview: bool = typer.Option(False, "--preview/--html", help="Print plain-text preview instead of HTML"),
    max_len: int | None = typer.Option(None, help="Preview length (defaults to STOREFRONT_PREVIEW_MAX_LEN)"),
) -> None:
    settings = _load_settings()
    sanitizer = ContentSanitizer(settings.censor_words)
    raw = source.read_text(encoding="utf-8-sig")

    if preview:
        typer.echo(sanitizer.preview_text(raw, max_len or settings.preview_max_len))
    else:
        typer.echo(sanitizer.render_description(raw))


@app.command("doctor")
def doctor_command() -> None:
    settings = _load_settings()
    checks = run_doctor_checks(settings)

    print("Doctor results:")
    for check in checks:
        status = check["status"].upper()
        print(f"- [{status}] {check['check']}: {check['detail']}")


if __name__ == "__main__":
    app()
