#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Table layout
============
Turns a run of ``||``-delimited lines into one HTML table.

    |Caption|
    ||<-2> spans two columns ||
    ||<|2><bgcolor=#eee> spans two rows || b ||
    || c ||

Cell directives are leading ``<...>`` tags (or their ``&lt;...&gt;`` form),
consumed left to right:

    <-N>            colspan N
    <|N> <^|N> <v|N>   rowspan N (^ top / v bottom aligned)
    <(> <:> <)>     text-align left / center / right
    <#color>        background colour
    <key=value>     bgcolor, color, width, height (cell)
                    rowbgcolor, rowcolor (whole row)

Without an explicit alignment, padding decides it: `` x `` centres,
`` x`` right-aligns.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass

from .inline import escape_attr, escape_text


# -----------------------------------------------------------------------------

CAPTION_RE = re.compile(r"^\|[^|]+\|$")

_DIRECTIVE_RES = (
    re.compile(r"^&lt;(.+?)&gt;"),
    re.compile(r"^<([^>]+)>"),
)
_COLSPAN_RE = re.compile(r"^-(\d+)$")
_ROWSPAN_RE = re.compile(r"^([\^v]?)\|(\d+)$|^v(\d+)\|$")

_ALIGN = {"(": "left", ":": "center", ")": "right"}

_CELL_STYLE_KEYS = {
    "bgcolor": "background-color",
    "color":   "color",
    "width":   "width",
    "height":  "height",
}
_ROW_STYLE_KEYS = {
    "rowbgcolor": "background-color",
    "rowcolor":   "color",
}


def is_table_line(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("||") or bool(CAPTION_RE.match(stripped))


# -----------------------------------------------------------------------------

@dataclass
class TableCellParams:
    colspan: int = 1
    rowspan: int = 1
    style: str = ""
    row_style: str = ""
    css_class: str = ""
    content: str = ""


def parse_cell_params(text: str) -> TableCellParams:
    """Consume leading directive tags from a raw cell and return its layout."""
    params = TableCellParams()
    rest = text
    explicit_align = False

    while True:
        candidate = rest.lstrip()
        match = None
        for pattern in _DIRECTIVE_RES:
            match = pattern.match(candidate)
            if match:
                break
        if not match:
            break
        rest = candidate[match.end():]
        if _apply_directive(params, match.group(1).strip()):
            explicit_align = True

    if not explicit_align and rest.strip():
        if rest.startswith(" ") and rest.endswith(" "):
            params.style += "text-align: center; "
        elif rest.startswith(" "):
            params.style += "text-align: right; "

    params.content = rest.strip()
    return params


def _apply_directive(params: TableCellParams, directive: str) -> bool:
    """Apply one directive; returns True when it set the alignment."""
    m = _COLSPAN_RE.match(directive)
    if m:
        params.colspan = max(1, int(m.group(1)))
        return False

    m = _ROWSPAN_RE.match(directive)
    if m:
        params.rowspan = max(1, int(m.group(2) or m.group(3)))
        if directive.startswith("^"):
            params.style += "vertical-align: top; "
        elif directive.startswith("v"):
            params.style += "vertical-align: bottom; "
        return False

    if directive in _ALIGN:
        params.style += f"text-align: {_ALIGN[directive]}; "
        return True

    if directive.startswith("#"):
        params.style += f"background-color: {directive}; "
        return False

    key, _, value = directive.partition("=")
    key = key.strip().lower()
    value = value.strip()
    if not value:
        return False
    if key in _CELL_STYLE_KEYS:
        params.style += f"{_CELL_STYLE_KEYS[key]}: {value}; "
    elif key in _ROW_STYLE_KEYS:
        params.row_style += f"{_ROW_STYLE_KEYS[key]}: {value}; "
    return False


# -----------------------------------------------------------------------------

def _split_row(line: str) -> list[str]:
    cells = line.split("||")
    if cells and not cells[0].strip():
        cells.pop(0)
    if cells and not cells[-1].strip():
        cells.pop()
    return cells


def _render_cell(params: TableCellParams) -> str:
    attrs = []
    if params.colspan > 1:
        attrs.append(f'colspan="{params.colspan}"')
    if params.rowspan > 1:
        attrs.append(f'rowspan="{params.rowspan}"')
    if params.style:
        attrs.append(f'style="{escape_attr(params.style.strip())}"')
    if params.css_class:
        attrs.append(f'class="{escape_attr(params.css_class)}"')
    attr_str = (" " + " ".join(attrs)) if attrs else ""
    return f"<td{attr_str}>{escape_text(params.content)}</td>"


def render_table(lines: list[str]) -> str:
    """Render consecutive table lines (optional ``|caption|`` first) to HTML."""
    lines = list(lines)
    parts = ['<div class="wiki-table-wrap"><table class="wiki-table">']

    if lines and CAPTION_RE.match(lines[0].strip()):
        caption = lines.pop(0).strip()[1:-1]
        parts.append(f"<caption>{escape_text(caption)}</caption>")

    rows = [cells for cells in (_split_row(line) for line in lines) if cells]

    # column index -> number of further rows still covered by a rowspan
    covered: dict[int, int] = {}

    for cells in rows:
        row_style = ""
        row_html: list[str] = []
        col = 0

        for raw in cells:
            while covered.get(col, 0) > 0:
                covered[col] -= 1
                col += 1

            params = parse_cell_params(raw)
            row_style += params.row_style
            if params.rowspan > 1:
                for k in range(params.colspan):
                    covered[col + k] = params.rowspan - 1

            row_html.append(_render_cell(params))
            col += params.colspan

        # Spans to the right of the last cell still use up this row
        for c, remaining in covered.items():
            if c >= col and remaining > 0:
                covered[c] = remaining - 1

        style_attr = f' style="{escape_attr(row_style.strip())}"' if row_style else ""
        parts.append(f"<tr{style_attr}>{''.join(row_html)}</tr>")

    parts.append("</table></div>")
    return "".join(parts)


# -----------------------------------------------------------------------------
