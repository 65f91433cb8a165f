from __future__ import annotations

from storefront.core.errors import InvalidSelection

from .models import Attribute, AttributeOption, Selection


def _default_option(attribute: Attribute) -> AttributeOption | None:
    flagged = next((option for option in attribute.options if option.is_default), None)
    if flagged is not None:
        return flagged
    return attribute.options[0] if attribute.options else None


def resolve_defaults(attributes: list[Attribute]) -> Selection:
    """Option flagged ``is_default`` per attribute, else the first option in catalog order."""
    selection: Selection = {}
    for attribute in attributes:
        option = _default_option(attribute)
        if option is not None:
            selection[attribute.id] = option.id
    return selection


def validate_selection(attributes: list[Attribute], selection: Selection) -> None:
    by_id = {attribute.id: attribute for attribute in attributes}
    problems: list[str] = []

    for attribute_id, option_id in selection.items():
        attribute = by_id.get(attribute_id)
        if attribute is None:
            problems.append(f"unknown attribute {attribute_id!r}")
            continue
        if attribute.find_option(option_id) is None:
            problems.append(f"unknown option {option_id!r} for attribute {attribute.name!r}")

    for attribute in attributes:
        if attribute.options and attribute.id not in selection:
            problems.append(f"no option selected for attribute {attribute.name!r}")

    if problems:
        raise InvalidSelection(problems)


def select_option(
    attributes: list[Attribute],
    selection: Selection,
    attribute_id: str,
    option_id: str,
) -> Selection:
    """Swap the chosen option of one attribute; returns a new selection."""
    attribute = next((a for a in attributes if a.id == attribute_id), None)
    if attribute is None:
        raise InvalidSelection([f"unknown attribute {attribute_id!r}"])
    if attribute.find_option(option_id) is None:
        raise InvalidSelection([f"unknown option {option_id!r} for attribute {attribute.name!r}"])
    return {**selection, attribute_id: option_id}


def selected_options(attributes: list[Attribute], selection: Selection) -> list[tuple[Attribute, AttributeOption]]:
    """Chosen (attribute, option) pairs in catalog order; assumes a validated selection."""
    pairs: list[tuple[Attribute, AttributeOption]] = []
    for attribute in attributes:
        option = attribute.find_option(selection.get(attribute.id, ""))
        if option is not None:
            pairs.append((attribute, option))
    return pairs
