from .sanitizer import (
    DEFAULT_DESCRIPTION_FALLBACK,
    ContentSanitizer,
    censor,
    default_sanitizer,
    preview_text,
    render_description,
    render_safe,
    sanitize,
    strip_to_text,
)

__all__ = [
    "DEFAULT_DESCRIPTION_FALLBACK",
    "ContentSanitizer",
    "default_sanitizer",
    "sanitize",
    "censor",
    "strip_to_text",
    "render_safe",
    "render_description",
    "preview_text",
]
