#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the in-memory title autocomplete index."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import threading

import pytest

from neowiki.services.title_index import TitleIndex, TitleIndexEntry


# -----------------------------------------------------------------------------

@pytest.fixture
def index():
    return TitleIndex(["Python tips", "Intro to Python", "Pythagoras", "나무위키", "위키백과", "Apple"])


# ── Maintenance ──────────────────────────────────────────────────────────────

def test_entry_fields():
    entry = TitleIndexEntry.from_title("Wiki 나무")
    assert entry.lower == "wiki 나무"
    assert entry.initials == "Wiki ㄴㅁ"


def test_rebuild_sorts_and_deduplicates():
    idx = TitleIndex(["b", "A", "c", "b", ""])
    assert idx.titles() == ["A", "b", "c"]
    assert len(idx) == 3


def test_rebuild_replaces_contents():
    idx = TitleIndex(["old"])
    idx.rebuild(["new"])
    assert idx.titles() == ["new"]


def test_add_keeps_collation_order():
    idx = TitleIndex(["A", "c"])
    assert idx.add("B") is True
    assert idx.titles() == ["A", "B", "c"]


def test_add_is_idempotent():
    idx = TitleIndex(["A"])
    assert idx.add("A") is False
    assert len(idx) == 1


def test_remove_is_idempotent():
    idx = TitleIndex(["A", "B"])
    assert idx.remove("A") is True
    assert idx.remove("A") is False
    assert idx.titles() == ["B"]
    assert "A" not in idx
    assert "B" in idx


# ── Search ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query(index, query):
    assert index.search(query) == []


def test_non_positive_limit(index):
    assert index.search("py", limit=0) == []


def test_prefix_before_contains(index):
    assert index.search("pyth") == ["Pythagoras", "Python tips", "Intro to Python"]


def test_case_insensitive(index):
    assert index.search("APP") == ["Apple"]


def test_contains_ordered_by_position():
    idx = TitleIndex(["xxab", "xab"])
    assert idx.search("ab") == ["xab", "xxab"]


def test_initials_search(index):
    assert index.search("ㅇㅋ") == ["위키백과", "나무위키"]


def test_partial_syllable_search(index):
    assert index.search("나뭉") == ["나무위키"]


def test_literal_match_beats_initials():
    idx = TitleIndex(["나무", "ㄴㅁ 목록"])
    assert idx.search("ㄴㅁ") == ["ㄴㅁ 목록", "나무"]


def test_prefix_match_not_crowded_out_by_earlier_substrings():
    idx = TitleIndex(["0abc", "1abc", "abc"])
    assert idx.search("abc", limit=1) == ["abc"]
    assert idx.search("abc", limit=2) == ["abc", "0abc"]


def test_limit_and_order():
    idx = TitleIndex([f"Page {i:02d}" for i in range(30)])
    assert idx.search("page", limit=5) == [f"Page {i:02d}" for i in range(5)]


def test_query_is_trimmed(index):
    assert index.search("  apple ") == ["Apple"]


def test_no_match(index):
    assert index.search("zzz") == []


def test_search_sees_added_and_removed_titles(index):
    index.add("Zebra")
    assert index.search("zeb") == ["Zebra"]
    index.remove("Zebra")
    assert index.search("zeb") == []


# ── Concurrency ──────────────────────────────────────────────────────────────

def test_concurrent_writers_and_readers():
    idx = TitleIndex()
    errors: list[Exception] = []

    def writer(n: int):
        for i in range(100):
            idx.add(f"T{n}-{i:03d}")

    def reader():
        try:
            for _ in range(100):
                idx.search("t")
        except Exception as exc:    # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(idx) == 400
    assert idx.titles() == sorted(idx.titles(), key=str.casefold)


# -----------------------------------------------------------------------------
