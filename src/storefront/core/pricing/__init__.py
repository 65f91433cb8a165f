from .engine import (
    PriceBreakdown,
    PricingMismatch,
    check_pricing_mismatch,
    compute_price,
    expected_total,
    line_total,
)
from .money import Amount, format_amount, round2, to_decimal

__all__ = [
    "Amount",
    "PriceBreakdown",
    "PricingMismatch",
    "compute_price",
    "check_pricing_mismatch",
    "expected_total",
    "line_total",
    "format_amount",
    "round2",
    "to_decimal",
]
