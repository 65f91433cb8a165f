from __future__ import annotations

import logging
from typing import Any

from storefront.core.catalog import Attribute, AttributeOption
from storefront.core.db import OPTION_DESCRIPTIONS_KEY, KeyValueStore
from storefront.core.dedupe import build_option_key, build_option_name_key
from storefront.core.sanitize import ContentSanitizer, default_sanitizer

from .utils import first_present, parse_flag, safe_decimal, text_or_none, to_abs_url

logger = logging.getLogger(__name__)


def read_option_descriptions(store: KeyValueStore | None) -> dict[str, dict[str, Any]]:
    if store is None:
        return {}
    raw = store.get(OPTION_DESCRIPTIONS_KEY)
    if not isinstance(raw, dict):
        return {}
    return {key: entry for key, entry in raw.items() if isinstance(entry, dict)}


def remember_option_description(
    store: KeyValueStore,
    attribute_id: str,
    option_id: str,
    option_label: str,
    description: str,
) -> None:
    """Keep a description locally, addressable by option id and by option label."""
    descriptions = read_option_descriptions(store)
    entry = {
        "description": description,
        "attrId": attribute_id,
        "optionId": option_id,
        "optionName": option_label,
    }
    descriptions[build_option_key(attribute_id, option_id)] = entry
    if option_label:
        descriptions[build_option_name_key(attribute_id, option_label)] = entry
    store.set(OPTION_DESCRIPTIONS_KEY, descriptions)


def _local_description(
    descriptions: dict[str, dict[str, Any]],
    attribute_id: str,
    option_id: str,
    option_label: str,
) -> str:
    by_id = descriptions.get(build_option_key(attribute_id, option_id), {})
    if by_id.get("description"):
        return str(by_id["description"])
    if option_label:
        by_name = descriptions.get(build_option_name_key(attribute_id, option_label), {})
        if by_name.get("description"):
            return str(by_name["description"])
    return ""


def _parse_option(
    raw: dict[str, Any],
    attribute_id: str,
    *,
    api_base_url: str,
    descriptions: dict[str, dict[str, Any]],
    sanitizer: ContentSanitizer,
) -> AttributeOption:
    option_id = str(first_present(raw, "id", "option_id", "value", "label", "name") or "")
    label = str(first_present(raw, "label", "name") or "Option")

    description = text_or_none(raw.get("description")) or _local_description(
        descriptions, attribute_id, option_id, label
    )
    description_html = sanitizer.render_safe(description) if description else ""

    return AttributeOption(
        id=option_id,
        label=label,
        image_url=to_abs_url(raw.get("image_url"), api_base_url),
        price_delta=safe_decimal(raw.get("price_delta")),
        is_default=parse_flag(raw.get("is_default")),
        description=description or None,
        description_html=description_html or None,
    )


def parse_attributes(
    raw: Any,
    *,
    api_base_url: str,
    description_store: KeyValueStore | None = None,
    sanitizer: ContentSanitizer | None = None,
) -> list[Attribute]:
    """Normalize an attribute list payload; attributes without options are dropped."""
    if not isinstance(raw, list):
        return []

    sanitizer = sanitizer or default_sanitizer
    descriptions = read_option_descriptions(description_store)
    attributes: list[Attribute] = []

    for raw_attribute in raw:
        if not isinstance(raw_attribute, dict):
            continue
        attribute_id = str(first_present(raw_attribute, "id", "attribute_id") or "")
        options = [
            _parse_option(
                raw_option,
                attribute_id,
                api_base_url=api_base_url,
                descriptions=descriptions,
                sanitizer=sanitizer,
            )
            for raw_option in raw_attribute.get("options") or []
            if isinstance(raw_option, dict)
        ]
        if not options:
            logger.debug("Attribute %s has no options; skipped", attribute_id)
            continue
        attributes.append(
            Attribute(
                id=attribute_id,
                name=str(raw_attribute.get("name") or attribute_id),
                options=options,
            )
        )

    return attributes
