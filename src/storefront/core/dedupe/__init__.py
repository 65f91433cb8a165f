from .keys import (
    build_cart_row_key,
    build_option_key,
    build_option_name_key,
    generate_variant_signature,
)

__all__ = [
    "generate_variant_signature",
    "build_cart_row_key",
    "build_option_key",
    "build_option_name_key",
]
