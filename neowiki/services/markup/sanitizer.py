#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
HTML sanitizer
==============
Whitelist filter applied to the assembled document HTML and, separately, to
the body of every ``{{{#!html ...}}}`` block.  This is the only XSS gate in
the render pipeline: everything upstream may be optimistic about escaping.

Disallowed tags are stripped (their text content kept), comments removed,
``style`` values reduced to an allow-list of CSS properties and ``iframe``
sources limited to the YouTube embed endpoint.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import threading

import bleach
from bleach.css_sanitizer import CSSSanitizer


# -----------------------------------------------------------------------------

ALLOWED_TAGS = frozenset({
    # headings
    "h1", "h2", "h3", "h4", "h5", "h6",
    # text
    "p", "br", "hr", "div", "span",
    "strong", "em", "b", "i", "u", "s", "del", "ins",
    "sup", "sub", "mark", "small",
    # links and media
    "a", "img", "iframe",
    # lists
    "ul", "ol", "li",
    # quotes and code
    "blockquote", "pre", "code",
    # tables
    "table", "caption", "thead", "tbody", "tfoot", "tr", "th", "td",
    # disclosure widgets
    "details", "summary",
    # ruby annotations
    "ruby", "rt", "rp",
})

ALLOWED_CSS_PROPERTIES = frozenset({
    "background-color", "color", "float", "font-size", "font-weight",
    "height", "text-align", "vertical-align", "width",
})

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

YOUTUBE_EMBED_PREFIX = "https://www.youtube.com/embed/"

_GLOBAL_ATTRS = frozenset({"class", "id", "title", "style"})

_TAG_ATTRS: dict[str, frozenset[str]] = {
    "a":      frozenset({"href", "rel", "target"}),
    "img":    frozenset({"src", "alt", "width", "height", "loading"}),
    "td":     frozenset({"colspan", "rowspan"}),
    "th":     frozenset({"colspan", "rowspan"}),
    "iframe": frozenset({"width", "height", "frameborder", "allow", "allowfullscreen"}),
}


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    """bleach attribute filter: global attrs, per-tag attrs, restricted iframe src."""
    if name in _GLOBAL_ATTRS:
        return True
    if tag == "iframe" and name == "src":
        return value.startswith(YOUTUBE_EMBED_PREFIX)
    return name in _TAG_ATTRS.get(tag, ())


# -----------------------------------------------------------------------------

_local = threading.local()


def _get_cleaner() -> bleach.sanitizer.Cleaner:
    """Per-thread bleach Cleaner; Cleaner instances are not thread-safe."""
    cleaner = getattr(_local, "cleaner", None)
    if cleaner is None:
        cleaner = _local.cleaner = _build_cleaner()
    return cleaner


def _build_cleaner() -> bleach.sanitizer.Cleaner:
    return bleach.sanitizer.Cleaner(
        tags=ALLOWED_TAGS,
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
        css_sanitizer=CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES),
    )


def sanitize(html: str) -> str:
    """Return *html* with every tag/attribute outside the allow-list removed."""
    if not html:
        return ""
    return _get_cleaner().clean(html)


# -----------------------------------------------------------------------------
