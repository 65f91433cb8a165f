from .catalog import resolve_defaults, select_option, selected_options, validate_selection
from .models import Attribute, AttributeOption, Selection

__all__ = [
    "Attribute",
    "AttributeOption",
    "Selection",
    "resolve_defaults",
    "validate_selection",
    "select_option",
    "selected_options",
]
