from __future__ import annotations

from collections.abc import Mapping
from typing import Any

PAIR_SEPARATOR = ":"
SIGNATURE_SEPARATOR = "|"
OPTION_KEY_SEPARATOR = "::"

# Applied in order; "%" must come first.
SIGNATURE_ESCAPES = (("%", "%25"), (PAIR_SEPARATOR, "%3A"), (SIGNATURE_SEPARATOR, "%7C"))


def _normalize_part(part: Any) -> str:
    if part is None:
        return ""
    return str(part).strip()


def _escape_part(part: Any) -> str:
    text = _normalize_part(part)
    for raw, escaped in SIGNATURE_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def generate_variant_signature(selection: Mapping[str, str]) -> str:
    """
    Canonical string for a selection: ``attr:option`` pairs sorted by attribute id
    and joined with ``|``; separators inside ids are percent-escaped.
    Insertion order of the selection does not matter.
    """
    pairs = sorted((_escape_part(a), _escape_part(o)) for a, o in selection.items())
    return SIGNATURE_SEPARATOR.join(f"{attribute_id}{PAIR_SEPARATOR}{option_id}" for attribute_id, option_id in pairs)


def build_cart_row_key(
    product_id: str,
    variant_signature: str | None,
    cart_item_id: str | None = None,
) -> str:
    if cart_item_id:
        return _normalize_part(cart_item_id)
    product_part = _escape_part(product_id)
    signature = _normalize_part(variant_signature)
    if signature:
        return f"{product_part}{SIGNATURE_SEPARATOR}{signature}"
    return product_part


def build_option_key(attribute_id: str, option_id: str) -> str:
    return f"{_normalize_part(attribute_id)}{OPTION_KEY_SEPARATOR}{_normalize_part(option_id)}"


def build_option_name_key(attribute_id: str, option_label: str) -> str:
    return (
        f"{_normalize_part(attribute_id)}{OPTION_KEY_SEPARATOR}name"
        f"{OPTION_KEY_SEPARATOR}{_normalize_part(option_label).lower()}"
    )
