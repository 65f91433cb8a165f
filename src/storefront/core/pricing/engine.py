"""
Variant pricing: resolves a product's selected attribute options into a
concrete unit and line price.

Rounding rule: deltas are summed unrounded, the unit price is floored at
zero, rounded to cents, and only then multiplied by the quantity.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from storefront.core.catalog import Attribute, Selection, selected_options, validate_selection
from storefront.core.errors import InvalidQuantity

from .money import ZERO, Amount, format_amount, round2, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    base: Decimal
    deltas: tuple[Decimal, ...]
    unit_price: Decimal
    total_price: Decimal
    quantity: int

    @property
    def unit_price_rounded(self) -> Decimal:
        return round2(self.unit_price)

    @property
    def math(self) -> dict[str, object]:
        """Same shape as the ``math`` block of a stored order item."""
        return {
            "base": format_amount(self.base),
            "deltas": [format_amount(delta) for delta in self.deltas],
        }


@dataclass(frozen=True, slots=True)
class PricingMismatch:
    local_total: Decimal
    server_total: Decimal
    product_id: str | None = None

    @property
    def difference(self) -> Decimal:
        return self.server_total - self.local_total


def _check_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(quantity)
    return quantity


def line_total(unit_price: Amount, quantity: int) -> Decimal:
    """Round the unit price first, then extend; never the other way round."""
    return round2(unit_price) * quantity


def compute_price(
    base: Amount,
    attributes: list[Attribute],
    selection: Selection,
    quantity: int,
) -> PriceBreakdown:
    validate_selection(attributes, selection)
    quantity = _check_quantity(quantity)

    base_amount = to_decimal(base)
    deltas = tuple(option.delta for _, option in selected_options(attributes, selection))
    unit_price = max(ZERO, base_amount + sum(deltas, ZERO))

    return PriceBreakdown(
        base=base_amount,
        deltas=deltas,
        unit_price=unit_price,
        total_price=line_total(unit_price, quantity),
        quantity=quantity,
    )


def expected_total(base: Amount, deltas: list[Amount] | tuple[Amount, ...], quantity: int) -> Decimal:
    """Total implied by a stored ``math`` record under the canonical rounding rule."""
    unit_price = max(ZERO, to_decimal(base) + sum((to_decimal(d) for d in deltas), ZERO))
    return line_total(unit_price, quantity)


def check_pricing_mismatch(
    local_total: Amount,
    server_total: Amount,
    *,
    product_id: str | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> PricingMismatch | None:
    """
    Compare a locally computed total with the server-confirmed one.

    Advisory only: a mismatch is logged and returned, the server value stays
    authoritative for display.
    """
    local_amount = round2(local_total)
    server_amount = round2(server_total)
    if local_amount == server_amount:
        return None

    mismatch = PricingMismatch(local_total=local_amount, server_total=server_amount, product_id=product_id)
    (log or logger).warning(
        "Local total %s differs from server total %s for product %s",
        format_amount(local_amount),
        format_amount(server_amount),
        product_id or "-",
        extra={"event": "PricingMismatch"},
    )
    return mismatch
