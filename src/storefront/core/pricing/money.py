from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

CENT = Decimal("0.01")
ZERO = Decimal("0")

Amount = Decimal | int | float | str


def to_decimal(value: Amount | None) -> Decimal:
    """Money input as Decimal; floats go through ``str`` so 0.1 stays 0.1."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not an amount")
    if isinstance(value, int):
        return Decimal(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return result


def round2(value: Amount) -> Decimal:
    amount = to_decimal(value)
    with localcontext() as ctx:
        # quantize fails once the cent digits exceed the context precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        return Decimal("0.00")
    return rounded


def format_amount(value: Amount | None) -> str:
    """Exactly two decimals, sign preserved, never ``-0.00``."""
    return format(round2(to_decimal(value)), "f")
