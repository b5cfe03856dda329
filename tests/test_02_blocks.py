#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the line-level block scanner (headings, lists, quotes, code blocks)."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import time

from neowiki.services.markup import ParseOptions, TocEntry
from neowiki.services.markup.blocks import BlockScanner


# -----------------------------------------------------------------------------

def _blocks(text: str, **options) -> str:
    scanner = BlockScanner(ParseOptions(**options))
    return scanner.restore_raw(scanner.parse_blocks(text))


def _scanner(text: str) -> tuple[BlockScanner, str]:
    scanner = BlockScanner(ParseOptions())
    html = scanner.restore_raw(scanner.parse_blocks(text))
    return scanner, html


# ── Simple blocks ────────────────────────────────────────────────────────────

def test_paragraph_is_escaped():
    assert _blocks("a < b & c") == "<p>a &lt; b &amp; c</p>"


def test_paragraph_leaves_inline_code_for_inline_pass():
    assert _blocks("x {{{<b>}}} y") == "<p>x {{{<b>}}} y</p>"


def test_blank_line_is_line_break():
    assert _blocks("a\n\nb") == "<p>a</p>\n<br>\n<p>b</p>"


def test_horizontal_rule():
    assert _blocks("----") == '<hr class="wiki-hr">'
    assert _blocks("--------  ") == '<hr class="wiki-hr">'
    assert _blocks("---") == "<p>---</p>"


# ── Headings ─────────────────────────────────────────────────────────────────

def test_heading_and_toc_entry():
    scanner, html = _scanner("= Title =")
    assert html == '<h1 id="toc_1" class="wiki-heading wiki-heading-1">Title</h1>'
    assert scanner.toc == [TocEntry(level=1, title="Title", anchor_id="toc_1")]


def test_heading_levels_and_sequential_anchors():
    scanner, html = _scanner("== A ==\ntext\n=== B ===\n====== F ======")
    assert [(t.level, t.title, t.anchor_id) for t in scanner.toc] == [
        (2, "A", "toc_1"),
        (3, "B", "toc_2"),
        (6, "F", "toc_3"),
    ]
    assert '<h3 id="toc_2" class="wiki-heading wiki-heading-3">B</h3>' in html


def test_heading_mismatched_runs_fall_through():
    scanner, html = _scanner("== A =")
    assert scanner.toc == []
    assert html == "<p>== A =</p>"


def test_heading_more_than_six_is_paragraph():
    scanner, html = _scanner("======= X =======")
    assert scanner.toc == []
    assert html.startswith("<p>")


def test_heading_without_title_is_paragraph():
    scanner, html = _scanner("=   =")
    assert scanner.toc == []
    assert html == "<p>=   =</p>"


def test_heading_trailing_whitespace_ignored():
    scanner, _ = _scanner("==  Spaced  ==   ")
    assert scanner.toc == [TocEntry(level=2, title="Spaced", anchor_id="toc_1")]


def test_long_unclosed_heading_line_is_fast():
    line = "=" + " " * 100_000 + "x"
    start = time.monotonic()
    scanner, html = _scanner(line)
    assert time.monotonic() - start < 2
    assert scanner.toc == []
    assert html.startswith("<p>=")


def test_heading_text_is_escaped_but_toc_keeps_source():
    scanner, html = _scanner("== a<b ==")
    assert "a&lt;b</h2>" in html
    assert scanner.toc[0].title == "a<b"


# ── Quotes ───────────────────────────────────────────────────────────────────

def test_quote_lines_joined():
    assert _blocks("> a\n> b") == '<blockquote class="wiki-quote">a<br>b</blockquote>'


def test_quote_accepts_escaped_marker():
    assert _blocks("&gt; quoted") == '<blockquote class="wiki-quote">quoted</blockquote>'


def test_quote_ends_at_other_block():
    html = _blocks("> q\ntext")
    assert html == '<blockquote class="wiki-quote">q</blockquote>\n<p>text</p>'


# ── Lists ────────────────────────────────────────────────────────────────────

def test_unordered_list():
    assert _blocks("* a\n* b") == '<ul class="wiki-list"><li>a</li><li>b</li></ul>'


def test_ordered_list():
    assert _blocks("1. a\n2. b") == '<ol class="wiki-list"><li>a</li><li>b</li></ol>'


def test_list_type_fixed_by_first_item():
    assert _blocks("* a\n1. b") == '<ul class="wiki-list"><li>a</li><li>b</li></ul>'


def test_indented_items_render_flat():
    assert _blocks("* a\n  * b") == '<ul class="wiki-list"><li>a</li><li>b</li></ul>'


def test_list_then_quote_flushes_list_first():
    html = _blocks("* a\n> q")
    assert html == (
        '<ul class="wiki-list"><li>a</li></ul>\n'
        '<blockquote class="wiki-quote">q</blockquote>'
    )


# ── Tables ───────────────────────────────────────────────────────────────────

def test_table_run_is_one_table():
    html = _blocks("before\n||a||b||\n||c||d||\nafter")
    assert html.count("<table") == 1
    assert html.count("<tr>") == 2
    assert html.startswith("<p>before</p>\n")
    assert html.endswith("\n<p>after</p>")


def test_caption_line_starts_table():
    assert "<caption>Stats</caption>" in _blocks("|Stats|\n||a||")


# ── Code blocks ──────────────────────────────────────────────────────────────

def test_plain_code_block_is_escaped():
    html = _blocks("{{{\n<b>x</b>\n}}}")
    assert html == '<pre class="code-block"><code>&lt;b&gt;x&lt;/b&gt;</code></pre>'


def test_code_block_content_bypasses_other_rules():
    html = _blocks("{{{\n= not a heading =\n* not a list\n}}}")
    assert "<h1" not in html
    assert "<ul" not in html
    assert "= not a heading =\n* not a list" in html


def test_code_block_is_opaque_until_restored():
    scanner = BlockScanner(ParseOptions())
    tokenized = scanner.parse_blocks("{{{\n'''x'''\n}}}")
    assert "'''x'''" not in tokenized
    assert "'''x'''" in scanner.restore_raw(tokenized)


def test_code_block_text_before_closer_is_kept():
    assert _blocks("{{{\nabc\ndef}}}") == '<pre class="code-block"><code>abc\ndef</code></pre>'


def test_unterminated_code_block_runs_to_end():
    assert _blocks("{{{\nabc\n\nxyz") == '<pre class="code-block"><code>abc\n\nxyz</code></pre>'


def test_inline_code_inside_code_block_does_not_close_it():
    html = _blocks("{{{\ncode {{{x}}} here\n}}}\nafter")
    assert "code {{{x}}} here" in html
    assert html.endswith("\n<p>after</p>")


def test_syntax_block_highlighted():
    html = _blocks('{{{#!syntax python\nprint("<hi>")\n}}}')
    assert html.startswith('<pre class="code-block syntax-python"><code>')
    assert "<span" in html
    assert "&lt;hi&gt;" in html


def test_syntax_block_unknown_language_is_plain():
    html = _blocks("{{{#!syntax nosuchlang\na < b\n}}}")
    assert 'class="code-block syntax-nosuchlang"' in html
    assert "a &lt; b" in html


def test_folding_block():
    html = _blocks("{{{#!folding More\n'''inner'''\n}}}")
    assert html.startswith('<details class="wiki-folding"><summary>More</summary><div>')
    assert "<p>'''inner'''</p>" in html
    assert html.endswith("</div></details>")


def test_folding_default_label():
    assert "<summary>Expand</summary>" in _blocks("{{{#!folding\nx\n}}}")
    assert "<summary>열기</summary>" in _blocks("{{{#!folding\nx\n}}}", folding_label="열기")


def test_folding_headings_share_toc_counter():
    scanner, _ = _scanner("= A =\n{{{#!folding F\n= B =\n}}}\n= C =")
    assert [t.anchor_id for t in scanner.toc] == ["toc_1", "toc_2", "toc_3"]
    assert [t.title for t in scanner.toc] == ["A", "B", "C"]


def test_nested_block_inside_folding_keeps_its_closer():
    html = _blocks("{{{#!folding F\n{{{#!syntax python\nx = 1\n}}}\ntail\n}}}\nafter")
    assert 'class="code-block syntax-python"' in html
    assert "<p>tail</p>" in html
    assert html.index("<p>tail</p>") < html.index("</details>")
    assert html.endswith("</details>\n<p>after</p>")


def test_html_block_is_sanitized():
    html = _blocks("{{{#!html\n<b>ok</b><script>alert(1)</script>\n}}}")
    assert html.startswith('<div class="wiki-html">')
    assert "<b>ok</b>" in html
    assert "<script" not in html


def test_single_line_braces_are_not_a_block():
    assert _blocks("{{{#!html <i>x</i>}}}") == "<p>{{{#!html <i>x</i>}}}</p>"


# -----------------------------------------------------------------------------
