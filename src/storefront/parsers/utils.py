from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

from storefront.core.pricing import to_decimal

ABSOLUTE_URL_PATTERN = re.compile(r"^https?:", flags=re.IGNORECASE)
# Amounts beyond 10**MAX_AMOUNT_EXPONENT are treated as garbage.
MAX_AMOUNT_EXPONENT = 100


def to_abs_url(src: str | None, api_base_url: str) -> str | None:
    if not src:
        return None
    value = str(src).strip()
    if not value:
        return None
    if ABSOLUTE_URL_PATTERN.match(value):
        return value
    return f"{api_base_url.rstrip('/')}/{value.lstrip('/')}"


def safe_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(" ", "")
        if not value:
            return None
    try:
        amount = to_decimal(value)
    except (TypeError, ValueError):
        return None
    if amount.adjusted() > MAX_AMOUNT_EXPONENT:
        return None
    return amount


def safe_int(value: Any, default: int | None = None) -> int | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        number = safe_decimal(value)
        return int(number) if number is not None else default


def text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def first_present(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False
