from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

from storefront.config import DEFAULT_CENSOR_WORDS

logger = logging.getLogger(__name__)

# Removed together with their content.
FORBIDDEN_TAGS = [
    "script",
    "style",
    "iframe",
    "object",
    "embed",
    "noscript",
    "template",
    "svg",
    "math",
    "link",
    "meta",
    "base",
]

ALLOWED_TAGS = {
    "b",
    "strong",
    "i",
    "em",
    "u",
    "p",
    "br",
    "ul",
    "ol",
    "li",
    "span",
    "a",
    "div",
    "img",
    "h1",
    "h2",
    "h3",
    "h4",
}

ALLOWED_ATTRIBUTES = {
    "a": {"href", "target", "rel"},
    "img": {"src", "alt"},
    "span": {"style"},
    "p": {"style"},
    "div": {"style"},
}

ANCHOR_REL = "nofollow noopener"
ANCHOR_TARGET = "_blank"

HREF_SCHEMES = {"http", "https", "mailto", "tel"}
SRC_SCHEMES = {"http", "https"}

DEFAULT_DESCRIPTION_FALLBACK = "<p>No description available.</p>"

SCHEME_PATTERN = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.IGNORECASE)
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x20\x7f]+")
UNSAFE_STYLE_PATTERN = re.compile(r"expression\(|url\(|javascript:|@import|behavior", re.IGNORECASE)
# Styles carrying CSS escapes, entities or comments are dropped whole.
STYLE_OBFUSCATION_MARKERS = ("\\", "&#", "/*")
TAG_SPLIT_PATTERN = re.compile(r"(<[^>]*>)")
TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")


def _attr_text(value: str | list[str]) -> str:
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _is_safe_url(value: str, schemes: set[str]) -> bool:
    compact = CONTROL_CHARS_PATTERN.sub("", value)
    match = SCHEME_PATTERN.match(compact)
    if match is None:
        return True
    return match.group(1).lower() in schemes


def _is_safe_style(value: str) -> bool:
    compact = CONTROL_CHARS_PATTERN.sub("", value)
    if any(marker in compact for marker in STYLE_OBFUSCATION_MARKERS):
        return False
    return UNSAFE_STYLE_PATTERN.search(compact) is None


def _mask_word(word: str) -> str:
    if len(word) <= 2:
        return "*" * len(word)
    return word[0] + "*" * (len(word) - 2) + word[-1]


class ContentSanitizer:
    """
    Cleans and masks rich text (product and option descriptions, comments)
    before it reaches any rendering surface.

    ``sanitize`` and ``censor`` never raise; a parser failure degrades to
    escaped plain text.
    """

    def __init__(self, censor_words: Iterable[str] | None = None):
        words = [w.strip() for w in (censor_words or DEFAULT_CENSOR_WORDS) if w and w.strip()]
        self.censor_words = words
        self._censor_pattern = (
            re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b", re.IGNORECASE)
            if words
            else None
        )

    def sanitize(self, dirty_html: str | None) -> str:
        if not dirty_html:
            return ""
        try:
            return self._clean(str(dirty_html))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Sanitizer fell back to plain text: %s",
                exc,
                extra={"event": "SanitizationDegraded"},
            )
            return self._degraded(str(dirty_html))

    def _clean(self, dirty_html: str) -> str:
        soup = BeautifulSoup(dirty_html, "html.parser")

        while (node := soup.find(FORBIDDEN_TAGS)) is not None:
            node.decompose()

        for special in soup.find_all(string=lambda s: isinstance(s, PreformattedString)):
            special.extract()

        for tag in soup.find_all(True):
            if tag.name not in ALLOWED_TAGS:
                tag.unwrap()
                continue

            allowed = ALLOWED_ATTRIBUTES.get(tag.name, set())
            cleaned: dict[str, str] = {}
            for name, raw_value in tag.attrs.items():
                name = name.lower()
                if name not in allowed:
                    continue
                value = _attr_text(raw_value)
                if name == "href" and not _is_safe_url(value, HREF_SCHEMES):
                    continue
                if name == "src" and not _is_safe_url(value, SRC_SCHEMES):
                    continue
                if name == "style" and not _is_safe_style(value):
                    continue
                cleaned[name] = value

            if tag.name == "a":
                cleaned["rel"] = ANCHOR_REL
                cleaned["target"] = ANCHOR_TARGET
            tag.attrs = cleaned

        return soup.decode(formatter="minimal")

    @staticmethod
    def _degraded(dirty_html: str) -> str:
        for tag in FORBIDDEN_TAGS[:2]:
            dirty_html = re.sub(
                rf"<{tag}\b.*?</{tag}\s*>", " ", dirty_html, flags=re.IGNORECASE | re.DOTALL
            )
        text = WHITESPACE_PATTERN.sub(" ", TAG_PATTERN.sub(" ", dirty_html)).strip()
        return html.escape(text, quote=True)

    def censor(self, html_text: str | None) -> str:
        if not html_text:
            return html_text or ""
        if self._censor_pattern is None:
            return html_text

        pattern = self._censor_pattern
        parts = TAG_SPLIT_PATTERN.split(html_text)
        for index, part in enumerate(parts):
            # Odd indexes are the captured tags.
            if index % 2 == 1 or not part:
                continue
            parts[index] = pattern.sub(lambda m: _mask_word(m.group(0)), part)
        return "".join(parts)

    def strip_to_text(self, html_text: str | None, max_len: int | None = None) -> str:
        if not html_text:
            return ""
        try:
            soup = BeautifulSoup(str(html_text), "html.parser")
            while (node := soup.find(FORBIDDEN_TAGS)) is not None:
                node.decompose()
            text = soup.get_text(" ")
        except Exception:  # noqa: BLE001
            text = TAG_PATTERN.sub(" ", str(html_text))

        text = WHITESPACE_PATTERN.sub(" ", text).strip()
        if max_len is not None and len(text) > max_len:
            if max_len <= 1:
                return text[:max_len]
            text = text[: max_len - 1].rstrip() + "…"
        return text

    def render_safe(self, raw: str | None) -> str:
        """Sanitize, then censor. The only path by which rich text reaches output."""
        return self.censor(self.sanitize(raw))

    def render_description(self, raw: str | None, fallback: str = DEFAULT_DESCRIPTION_FALLBACK) -> str:
        return self.render_safe(raw) or fallback

    def preview_text(self, raw: str | None, max_len: int) -> str:
        return self.strip_to_text(self.render_safe(raw), max_len)


default_sanitizer = ContentSanitizer()


def sanitize(dirty_html: str | None) -> str:
    return default_sanitizer.sanitize(dirty_html)


def censor(html_text: str | None) -> str:
    return default_sanitizer.censor(html_text)


def strip_to_text(html_text: str | None, max_len: int | None = None) -> str:
    return default_sanitizer.strip_to_text(html_text, max_len)


def render_safe(raw: str | None) -> str:
    return default_sanitizer.render_safe(raw)


def render_description(raw: str | None, fallback: str = DEFAULT_DESCRIPTION_FALLBACK) -> str:
    return default_sanitizer.render_description(raw, fallback)


def preview_text(raw: str | None, max_len: int) -> str:
    return default_sanitizer.preview_text(raw, max_len)
