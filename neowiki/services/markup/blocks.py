#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Block scanner
=============
Line-oriented pass that turns wiki source into block-level HTML.  Inline
markup inside the emitted text is left untouched for the inline formatter.

Each line is tried against these rules, first match wins:

  1. ``{{{`` opener / closer   code, ``#!syntax``, ``#!folding``, ``#!html``
  2. ``----``                  horizontal rule
  3. ``= T =`` .. ``====== T ======``   heading (recorded in the TOC)
  4. ``>`` / ``&gt;``          quote
  5. ``*`` / ``1.``            list item
  6. ``||`` / ``|caption|``    table (a run of consecutive lines)
  7. blank                     line break
  8. anything else             paragraph

At most one multi-line block (list, quote or code) is open at a time; it is
flushed as soon as a line of another kind arrives, and at end of input.
Finished code blocks are swapped for opaque tokens so the inline pass never
sees their content; :meth:`BlockScanner.restore_raw` puts them back.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Union

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .inline import escape, escape_attr, escape_text
from .model import ParseOptions, TocEntry
from .sanitizer import sanitize
from .tables import is_table_line, render_table


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

_CODE_OPEN_RE = re.compile(r"^\{\{\{(?:#!(\w+)(?:\s+(.*?))?)?\s*$")
_HR_RE        = re.compile(r"^-{4,}\s*$")
_HEADING_RE   = re.compile(r"^(={1,6})(?!=)(.*?)(?<!=)\1$")
_QUOTE_RE     = re.compile(r"^(?:&gt;|>)\s?(.*)$")
_UL_RE        = re.compile(r"^(\s*)\*\s?(.*)$")
_OL_RE        = re.compile(r"^(\s*)(\d+)\.\s?(.*)$")

# Same-line {{{...}}} spans, which neither open nor close a block
_BALANCED_SPAN_RE = re.compile(r"\{\{\{(?:(?!\{\{\{|\}\}\}).)*\}\}\}")

_RAW_TOKEN = "\ue002{}\ue003"
_RAW_TOKEN_RE = re.compile("\ue002(\\d+)\ue003")

_LANG_CHARS_RE = re.compile(r"[^\w+#-]")


# -----------------------------------------------------------------------------
# Open block state
# -----------------------------------------------------------------------------

@dataclass
class _ListItem:
    content: str
    indent: int
    kind: str


@dataclass
class _OpenList:
    kind: str                                   # "ul" | "ol", fixed by the first item
    items: list[_ListItem] = field(default_factory=list)


@dataclass
class _OpenQuote:
    lines: list[str] = field(default_factory=list)


@dataclass
class _OpenCode:
    kind: str                                   # "" | "syntax" | "folding" | "html" | other
    arg: str
    buffer: list[str] = field(default_factory=list)
    depth: int = 1


_OpenBlock = Union[_OpenList, _OpenQuote, _OpenCode, None]


def _opens_code(stripped: str):
    if "}}}" in stripped:
        return None
    return _CODE_OPEN_RE.match(stripped)


def _closer_index(line: str) -> int:
    """Position of the first ``}}}`` that is not part of a same-line span, or -1."""
    masked = line
    previous = None
    while masked != previous:
        previous = masked
        masked = _BALANCED_SPAN_RE.sub(lambda m: "\0" * len(m.group(0)), masked)
    return masked.find("}}}")


# -----------------------------------------------------------------------------

class BlockScanner:
    """One scanner per parse call; owns the TOC and the raw block store."""

    def __init__(self, options: ParseOptions) -> None:
        self.options = options
        self.toc: list[TocEntry] = []
        self._raw_blocks: list[str] = []

    # ── public ───────────────────────────────────────────────────────────────

    def parse_blocks(self, text: str) -> str:
        out: list[str] = []
        current: _OpenBlock = None
        lines = text.split("\n")
        i = 0

        while i < len(lines):
            line = lines[i]
            stripped = line.strip()

            # 1. inside a code block: only nesting and the closer matter
            if isinstance(current, _OpenCode):
                current = self._feed_code(current, line, out)
                i += 1
                continue

            m = _opens_code(stripped)
            if m:
                self._flush(current, out)
                current = _OpenCode(kind=m.group(1) or "", arg=(m.group(2) or "").strip())
                i += 1
                continue

            # 2. horizontal rule
            if _HR_RE.match(stripped):
                self._flush(current, out)
                current = None
                out.append('<hr class="wiki-hr">')
                i += 1
                continue

            # 3. heading
            m = _HEADING_RE.match(line.rstrip())
            if m and m.group(2).strip():
                self._flush(current, out)
                current = None
                out.append(self._heading(len(m.group(1)), m.group(2).strip()))
                i += 1
                continue

            # 4. quote
            m = _QUOTE_RE.match(line)
            if m:
                if not isinstance(current, _OpenQuote):
                    self._flush(current, out)
                    current = _OpenQuote()
                current.lines.append(escape_text(m.group(1)))
                i += 1
                continue

            # 5. list item
            item = self._list_item(line)
            if item is not None:
                if not isinstance(current, _OpenList):
                    self._flush(current, out)
                    current = _OpenList(kind=item.kind)
                current.items.append(item)
                i += 1
                continue

            self._flush(current, out)
            current = None

            # 6. table run
            if is_table_line(line):
                end = i
                while end < len(lines) and is_table_line(lines[end]):
                    end += 1
                out.append(render_table(lines[i:end]))
                i = end
                continue

            # 7. blank line, 8. paragraph
            if not stripped:
                out.append("<br>")
            else:
                out.append(f"<p>{escape_text(line)}</p>")
            i += 1

        if isinstance(current, _OpenCode):
            log.debug("Unterminated %s block runs to end of input", current.kind or "code")
            out.append(self._render_code(current))
        else:
            self._flush(current, out)

        return "\n".join(out)

    def restore_raw(self, html: str) -> str:
        """Swap raw block tokens back for their rendered HTML."""
        return _RAW_TOKEN_RE.sub(lambda m: self._raw_blocks[int(m.group(1))], html)

    # ── rules ────────────────────────────────────────────────────────────────

    def _heading(self, level: int, title: str) -> str:
        anchor = f"toc_{len(self.toc) + 1}"
        self.toc.append(TocEntry(level=level, title=title, anchor_id=anchor))
        return (
            f'<h{level} id="{anchor}" class="wiki-heading wiki-heading-{level}">'
            f"{escape_text(title)}</h{level}>"
        )

    @staticmethod
    def _list_item(line: str) -> _ListItem | None:
        m = _UL_RE.match(line)
        if m:
            return _ListItem(content=m.group(2), indent=len(m.group(1)), kind="ul")
        m = _OL_RE.match(line)
        if m:
            return _ListItem(content=m.group(3), indent=len(m.group(1)), kind="ol")
        return None

    def _feed_code(self, block: _OpenCode, line: str, out: list[str]) -> _OpenCode | None:
        idx = _closer_index(line)
        if idx >= 0:
            block.depth -= 1
            if block.depth == 0:
                head = line[:idx]
                if head.strip():
                    block.buffer.append(head)
                out.append(self._render_code(block))
                return None
        elif _opens_code(line.strip()):
            block.depth += 1
        block.buffer.append(line)
        return block

    # ── flushing ─────────────────────────────────────────────────────────────

    def _flush(self, block: _OpenBlock, out: list[str]) -> None:
        if isinstance(block, _OpenList):
            tag = block.kind
            items = "".join(f"<li>{escape_text(item.content)}</li>" for item in block.items)
            out.append(f'<{tag} class="wiki-list">{items}</{tag}>')
        elif isinstance(block, _OpenQuote):
            out.append(f'<blockquote class="wiki-quote">{"<br>".join(block.lines)}</blockquote>')
        elif isinstance(block, _OpenCode):
            out.append(self._render_code(block))

    def _render_code(self, block: _OpenCode) -> str:
        content = "\n".join(block.buffer)

        if block.kind == "folding":
            # Folded content is ordinary markup; it shares this scanner's TOC
            label = escape_text(block.arg or self.options.folding_label)
            inner = self.parse_blocks(content)
            return (
                f'<details class="wiki-folding"><summary>{label}</summary>'
                f"<div>{inner}</div></details>"
            )

        if block.kind == "syntax":
            lang = block.arg.split()[0] if block.arg else ""
            html = _highlight_code(content.strip("\n"), lang)
        elif block.kind == "html":
            html = f'<div class="wiki-html">{sanitize(content)}</div>'
        else:
            code = escape(content.strip("\n"))
            html = f'<pre class="code-block"><code>{code}</code></pre>'

        self._raw_blocks.append(html)
        return _RAW_TOKEN.format(len(self._raw_blocks) - 1)


# -----------------------------------------------------------------------------

def _highlight_code(code: str, lang: str) -> str:
    """Highlight *code* using Pygments.  Unknown languages render as plain text."""
    lang = _LANG_CHARS_RE.sub("", lang)
    try:
        lexer = get_lexer_by_name(lang) if lang else TextLexer()
    except ClassNotFound:
        log.debug("No lexer for %r, using plain text", lang)
        lexer = TextLexer()
    body = highlight(code, lexer, HtmlFormatter(nowrap=True)).rstrip("\n")
    css_class = f"code-block syntax-{escape_attr(lang)}" if lang else "code-block"
    return f'<pre class="{css_class}"><code>{body}</code></pre>'


# -----------------------------------------------------------------------------
