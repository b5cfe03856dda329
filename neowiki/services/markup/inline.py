#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Inline formatter
================
Character-level markup applied once to the fully assembled block HTML.

The substitutions run in a fixed order and the order matters:

  1. inline code  {{{...}}}            -> placeholder (restored after sanitizing)
  2. links        [[target|display]] / [[target]]
  3. footnotes    [* text] / [*label text]
  4. toc macro    [목차] / [toc]
  5. formatting   ''' '' ~~ __ ^^ ,,
  6. sized text   {{{+N text}}} / {{{-N text}}}
  7. colour       {{{#hex text}}} / {{{#name text}}}
  8. macros       [br] [age(...)] [date] [datetime] [youtube(...)]

Links and footnotes are pulled out before bold/italic so that apostrophes in
link targets are never read as formatting delimiters.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import re
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import quote

from .model import Footnote, ParseOptions


# -----------------------------------------------------------------------------
# Inline code protection
# -----------------------------------------------------------------------------

# Single-line, non-nested {{{...}}}.  Sized ({{{+2 x}}}) and coloured
# ({{{#red x}}}) spans are markup, not code, and are left for steps 6-7.
INLINE_CODE_RE = re.compile(r"\{\{\{(?![+-][1-5]\s|#\w+\s)((?:(?!\{\{\{|\}\}\}).)*)\}\}\}")

_PLACEHOLDER = "\ue000{}\ue001"
_PLACEHOLDER_RE = re.compile("\ue000(\\d+)\ue001")

# A complete tag as serialized by the sanitizer; attribute values are always
# double-quoted and may contain ">".
_TAG_RE = re.compile(r'<[^<>"]*(?:"[^"]*"[^<>"]*)*>')


def escape(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for use as element text."""
    return _html.escape(text, quote=False)


def escape_attr(text: str) -> str:
    return _html.escape(text, quote=True)


def escape_text(text: str) -> str:
    """Escape *text* except inside inline code spans (escaped on restore)."""
    out: list[str] = []
    pos = 0
    for m in INLINE_CODE_RE.finditer(text):
        out.append(escape(text[pos:m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(escape(text[pos:]))
    return "".join(out)


# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------

FILE_PREFIXES     = ("파일:", "File:")
CATEGORY_PREFIXES = ("분류:", "Category:")

# encodeURIComponent-compatible safe set
_URI_SAFE = "-_.!~*'()"

_LINK_PIPED_RE = re.compile(r"\[\[((?:[^\[\]|\n]|\[(?!\[))+)\|((?:[^\[\]\n]|\[(?!\[))+)\]\]")
_LINK_RE       = re.compile(r"\[\[((?:[^\[\]\n]|\[(?!\[))+)\]\]")
_FOOTNOTE_RE   = re.compile(r"\[\*(\w*)[^\S\n]+((?:[^\[\]\n]|\[(?!\*))+)\]")
_TOC_RE        = re.compile(r"\[(목차|toc)(\([^)]*\))?\]", re.IGNORECASE)

_FORMAT_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"'''([^'\n]+)'''"),   r"<strong>\1</strong>"),
    (re.compile(r"''([^'\n]+)''"),     r"<em>\1</em>"),
    (re.compile(r"~~([^~\n]+)~~"),     r"<del>\1</del>"),
    (re.compile(r"__([^_\n]+)__"),     r"<u>\1</u>"),
    (re.compile(r"\^\^([^^\n]+)\^\^"), r"<sup>\1</sup>"),
    (re.compile(r",,([^,\n]+),,"),     r"<sub>\1</sub>"),
)

_SIZE_RE        = re.compile(r"\{\{\{([+-])([1-5])\s+([^}\n]+)\}\}\}")
_HEX_COLOR_RE   = re.compile(r"\{\{\{#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})\s+([^}\n]+)\}\}\}")
_NAMED_COLOR_RE = re.compile(r"\{\{\{#([A-Za-z]+)\s+([^}\n]+)\}\}\}")

_BR_RE       = re.compile(r"\[br\]", re.IGNORECASE)
_AGE_RE      = re.compile(r"\[age\((\d{4}-\d{2}-\d{2})\)\]", re.IGNORECASE)
_DATE_RE     = re.compile(r"\[date\]", re.IGNORECASE)
_DATETIME_RE = re.compile(r"\[datetime\]", re.IGNORECASE)
_YOUTUBE_RE  = re.compile(
    r"\[youtube\(([A-Za-z0-9_-]{11})(?:,\s*width=(\d+))?(?:,\s*height=(\d+))?\)\]",
    re.IGNORECASE,
)

_YOUTUBE_ALLOW = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"


# -----------------------------------------------------------------------------

class InlineFormatter:
    """One formatter per parse call; holds the footnote list and code spans."""

    def __init__(
        self,
        options: ParseOptions,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.options = options
        self._clock = clock or datetime.now
        self.footnotes: list[Footnote] = []
        self._code_spans: list[str] = []

    # ── public ───────────────────────────────────────────────────────────────

    def parse_inline(self, text: str) -> str:
        text = INLINE_CODE_RE.sub(self._protect_code, text)

        text = _LINK_PIPED_RE.sub(lambda m: self._render_link(m.group(1), m.group(2)), text)
        text = _LINK_RE.sub(lambda m: self._render_link(m.group(1)), text)

        text = _FOOTNOTE_RE.sub(self._footnote, text)
        text += self._render_footnotes()

        text = _TOC_RE.sub('<div class="wiki-toc" id="wiki-toc"></div>', text)

        for pattern, repl in _FORMAT_RULES:
            text = pattern.sub(repl, text)

        text = _SIZE_RE.sub(self._sized, text)
        text = _HEX_COLOR_RE.sub(r'<span style="color: #\1">\2</span>', text)
        text = _NAMED_COLOR_RE.sub(r'<span style="color: \1">\2</span>', text)

        now = self._clock()
        text = _BR_RE.sub("<br>", text)
        text = _AGE_RE.sub(lambda m: self._age(m, now), text)
        text = _DATE_RE.sub(lambda m: now.strftime(self.options.date_format), text)
        text = _DATETIME_RE.sub(lambda m: now.strftime(self.options.datetime_format), text)
        text = _YOUTUBE_RE.sub(self._youtube, text)
        return text

    def restore_code(self, html: str) -> str:
        """Put escaped inline code back.  Must run after sanitizing.

        Placeholders in text become ``<code>`` elements; any left inside a
        tag (an attribute value) become the escaped code text only.
        """
        def _restore(m: re.Match) -> str:
            code = self._code_spans[int(m.group(1))]
            return f'<code class="wiki-inline-code">{escape(code)}</code>'

        def _restore_in_tag(m: re.Match) -> str:
            return escape_attr(self._code_spans[int(m.group(1))])

        out: list[str] = []
        pos = 0
        for tag in _TAG_RE.finditer(html):
            out.append(_PLACEHOLDER_RE.sub(_restore, html[pos:tag.start()]))
            out.append(_PLACEHOLDER_RE.sub(_restore_in_tag, tag.group(0)))
            pos = tag.end()
        out.append(_PLACEHOLDER_RE.sub(_restore, html[pos:]))
        return "".join(out)

    def render_image(self, target: str, options: str = "") -> str:
        """``[[파일:name.png|width=100&align=left]]`` -> lazy-loaded ``<img>``."""
        if not self.options.enable_images:
            return ""

        filename = self._plain(_html.unescape(_strip_prefix(target, FILE_PREFIXES)))
        opts: dict[str, str] = {}
        for part in self._plain(_html.unescape(options)).split("&"):
            key, sep, value = part.partition("=")
            if sep and key.strip() and value.strip():
                opts[key.strip().lower()] = value.strip()

        style = ""
        if "width" in opts:
            style += f"width: {_px(opts['width'])}; "
        if "height" in opts:
            style += f"height: {_px(opts['height'])}; "
        if "align" in opts:
            style += f"float: {opts['align']}; "

        src = f"{self.options.file_api_url}{quote(filename, safe=_URI_SAFE)}"
        alt = opts.get("alt", filename)
        style_attr = f' style="{escape_attr(style.strip())}"' if style else ""
        return (
            f'<img src="{escape_attr(src)}" alt="{escape_attr(alt)}" '
            f'class="wiki-image"{style_attr} loading="lazy">'
        )

    # ── steps ────────────────────────────────────────────────────────────────

    def _protect_code(self, m: re.Match) -> str:
        self._code_spans.append(m.group(1))
        return _PLACEHOLDER.format(len(self._code_spans) - 1)

    def _plain(self, text: str) -> str:
        """Replace code placeholders with their source text, for attribute values."""
        return _PLACEHOLDER_RE.sub(lambda m: self._code_spans[int(m.group(1))], text)

    def _render_link(self, target: str, display: Optional[str] = None) -> str:
        target = target.strip()
        label = display.strip() if display is not None else target

        if target.startswith(("http://", "https://")):
            if not self.options.enable_external_links:
                return label
            href = escape_attr(self._plain(_html.unescape(target)))
            return (
                f'<a href="{href}" class="wiki-link-external" '
                f'target="_blank" rel="noopener noreferrer">{label}</a>'
            )

        if target.startswith(FILE_PREFIXES):
            return self.render_image(target, display or "")

        # Categories are listed separately (see extract_categories)
        if target.startswith(CATEGORY_PREFIXES):
            return ""

        if target.startswith("#"):
            href = escape_attr(self._plain(_html.unescape(target)))
            return f'<a href="{href}" class="wiki-link-anchor">{label}</a>'

        href = self.options.base_url + quote(self._plain(_html.unescape(target)), safe=_URI_SAFE)
        return f'<a href="{escape_attr(href)}" class="wiki-link">{label}</a>'

    def _footnote(self, m: re.Match) -> str:
        index = len(self.footnotes) + 1
        fn_id = m.group(1) or index
        self.footnotes.append(Footnote(id=fn_id, content=m.group(2), index=index))
        return (
            f'<sup class="wiki-footnote-ref">'
            f'<a href="#fn_{index}" id="rfn_{index}">[{fn_id}]</a></sup>'
        )

    def _render_footnotes(self) -> str:
        if not self.footnotes:
            return ""
        items = "".join(
            f'<li id="fn_{fn.index}"><a href="#rfn_{fn.index}">↑</a> {fn.content}</li>'
            for fn in self.footnotes
        )
        heading = escape(self.options.footnotes_heading)
        return f'\n<div class="wiki-footnotes"><h3>{heading}</h3><ol>{items}</ol></div>'

    @staticmethod
    def _sized(m: re.Match) -> str:
        direction = "up" if m.group(1) == "+" else "down"
        return f'<span class="wiki-size-{direction}-{m.group(2)}">{m.group(3)}</span>'

    @staticmethod
    def _age(m: re.Match, now: datetime) -> str:
        try:
            birth = datetime.strptime(m.group(1), "%Y-%m-%d").date()
        except ValueError:
            return m.group(0)
        today = now.date()
        age = today.year - birth.year
        if (today.month, today.day) < (birth.month, birth.day):
            age -= 1
        return f'<span class="wiki-age">{age}</span>'

    @staticmethod
    def _youtube(m: re.Match) -> str:
        video_id = m.group(1)
        width = m.group(2) or "560"
        height = m.group(3) or "315"
        return (
            f'<div class="wiki-youtube"><iframe width="{width}" height="{height}" '
            f'src="https://www.youtube.com/embed/{video_id}" frameborder="0" '
            f'allow="{_YOUTUBE_ALLOW}" allowfullscreen></iframe></div>'
        )


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _strip_prefix(text: str, prefixes: tuple[str, ...]) -> str:
    for prefix in prefixes:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def _px(value: str) -> str:
    return f"{value}px" if value.isdigit() else value


# -----------------------------------------------------------------------------
# Link extraction (backlinks / categories)
# -----------------------------------------------------------------------------

_ANY_LINK_RE = re.compile(r"\[\[((?:[^\[\]|\n]|\[(?!\[))+)(?:\|(?:[^\[\]\n]|\[(?!\[))+)?\]\]")


def extract_categories(text: str) -> list[str]:
    """Category names declared with ``[[분류:X]]`` / ``[[Category:X]]``, in order, deduplicated."""
    seen: set[str] = set()
    names: list[str] = []
    for m in _ANY_LINK_RE.finditer(text):
        target = m.group(1).strip()
        if target.startswith(CATEGORY_PREFIXES):
            name = _strip_prefix(target, CATEGORY_PREFIXES).strip()
            if name and name not in seen:
                seen.add(name)
                names.append(name)
    return names


def extract_links(text: str) -> list[str]:
    """Internal page titles linked from *text* (no external/file/category/anchor targets)."""
    seen: set[str] = set()
    links: list[str] = []
    for m in _ANY_LINK_RE.finditer(text):
        target = m.group(1).strip()
        if (
            target.startswith(("http://", "https://", "#"))
            or target.startswith(FILE_PREFIXES)
            or target.startswith(CATEGORY_PREFIXES)
        ):
            continue
        if target not in seen:
            seen.add(target)
            links.append(target)
    return links


# -----------------------------------------------------------------------------
