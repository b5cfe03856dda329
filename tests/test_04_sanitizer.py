#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the HTML allow-list sanitizer."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import threading

from neowiki.services.markup import sanitize


# -----------------------------------------------------------------------------

def test_empty_input():
    assert sanitize("") == ""


def test_script_tag_removed():
    html = sanitize("<p>hi</p><script>alert(1)</script>")
    assert "<script" not in html
    assert "<p>hi</p>" in html


def test_event_handler_removed():
    html = sanitize('<a href="/w/x" onclick="evil()">x</a>')
    assert "onclick" not in html
    assert 'href="/w/x"' in html


def test_javascript_url_removed():
    assert "javascript:" not in sanitize('<a href="javascript:alert(1)">x</a>')


def test_data_attributes_removed():
    html = sanitize('<div data-x="1" class="ok">y</div>')
    assert "data-x" not in html
    assert 'class="ok"' in html


def test_comments_removed():
    html = sanitize("a<!-- secret -->b")
    assert "<!--" not in html
    assert "secret" not in html


def test_disallowed_tag_stripped_keeps_text():
    html = sanitize("<marquee>moving</marquee>")
    assert "<marquee" not in html
    assert "moving" in html


def test_style_properties_filtered():
    html = sanitize('<span style="color: red; position: absolute">x</span>')
    assert "color" in html
    assert "red" in html
    assert "position" not in html


def test_youtube_iframe_kept():
    html = sanitize('<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" allowfullscreen></iframe>')
    assert "<iframe" in html
    assert 'src="https://www.youtube.com/embed/dQw4w9WgXcQ"' in html


def test_foreign_iframe_source_removed():
    html = sanitize('<iframe src="https://evil.example/x"></iframe>')
    assert "evil.example" not in html


def test_allowed_structures_kept():
    html = sanitize(
        '<details class="wiki-folding"><summary>s</summary><div>body</div></details>'
        '<table><tr><td colspan="2" rowspan="3">c</td></tr></table>'
        "<ruby>漢<rt>kan</rt></ruby>"
    )
    assert "<details" in html
    assert "<summary>s</summary>" in html
    assert 'colspan="2"' in html
    assert 'rowspan="3"' in html
    assert "<rt>kan</rt>" in html


def test_heading_anchor_ids_kept():
    html = sanitize('<h2 id="toc_1" class="wiki-heading wiki-heading-2">A</h2>')
    assert 'id="toc_1"' in html


def test_image_attributes_kept():
    html = sanitize('<img src="/api/upload/file/a.png" alt="a" loading="lazy" onerror="x()">')
    assert 'src="/api/upload/file/a.png"' in html
    assert 'loading="lazy"' in html
    assert "onerror" not in html


def test_sanitize_is_usable_from_threads():
    results: list[str] = []

    def work():
        results.append(sanitize("<b>x</b><script>y</script>"))

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all("<script" not in r and "<b>x</b>" in r for r in results)


# -----------------------------------------------------------------------------
