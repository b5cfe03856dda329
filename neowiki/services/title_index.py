#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Title index
===========
In-memory autocomplete index over every document title.

Loaded once at startup from the page table and kept in step with page
create/delete.  Search tiers, best first:

  0. prefix      case-insensitive
  1. contains    case-insensitive substring
  2. initials    query made only of lead consonants (``ㄴㅁ`` -> ``나무위키``)
  3. partial     jamo-level match of a half-typed syllable (``나뭉`` -> ``나무위키``)

Within a tier, earlier match position wins, then title order.

Writers take a lock and publish a new immutable tuple; readers work on
whichever tuple they grabbed and never see a half-applied update.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import bisect
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from . import hangul


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

_TIER_PREFIX   = 0
_TIER_CONTAINS = 1
_TIER_INITIALS = 2
_TIER_PARTIAL  = 3

# Stop scanning once this many times `limit` candidates were found
_SCAN_FACTOR = 2


@dataclass(frozen=True)
class TitleIndexEntry:
    title: str
    lower: str
    initials: str

    @classmethod
    def from_title(cls, title: str) -> "TitleIndexEntry":
        return cls(title=title, lower=title.casefold(), initials=hangul.initials(title))


def collation_key(title: str) -> tuple[str, str]:
    return (title.casefold(), title)


def _entry_key(entry: TitleIndexEntry) -> tuple[str, str]:
    return collation_key(entry.title)


def _lower_key(entry: TitleIndexEntry) -> str:
    return entry.lower


# -----------------------------------------------------------------------------

class TitleIndex:

    def __init__(self, titles: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._entries: tuple[TitleIndexEntry, ...] = ()
        if titles:
            self.rebuild(titles)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, title: object) -> bool:
        return any(e.title == title for e in self._entries)

    def titles(self) -> list[str]:
        return [e.title for e in self._entries]

    # ── writers ──────────────────────────────────────────────────────────────

    def rebuild(self, titles: Iterable[str]) -> None:
        """Replace the whole index, e.g. from the page table at startup."""
        unique = sorted({t for t in titles if t}, key=collation_key)
        entries = tuple(TitleIndexEntry.from_title(t) for t in unique)
        with self._lock:
            self._entries = entries
        log.info("Title index loaded: %d titles", len(entries))

    def add(self, title: str) -> bool:
        """Insert *title* in collation order.  Returns False if already present."""
        if not title:
            return False
        entry = TitleIndexEntry.from_title(title)
        with self._lock:
            if any(e.title == title for e in self._entries):
                return False
            entries = list(self._entries)
            bisect.insort(entries, entry, key=_entry_key)
            self._entries = tuple(entries)
        log.debug("Title index add: %s", title)
        return True

    def remove(self, title: str) -> bool:
        """Drop *title*.  Returns False if it was not indexed."""
        with self._lock:
            entries = tuple(e for e in self._entries if e.title != title)
            if len(entries) == len(self._entries):
                return False
            self._entries = entries
        log.debug("Title index remove: %s", title)
        return True

    # ── search ───────────────────────────────────────────────────────────────

    def search(self, query: str, limit: int = 10) -> list[str]:
        """Autocomplete candidates for *query*, best first, at most *limit*."""
        q = (query or "").strip()
        if not q or limit <= 0:
            return []

        q_lower = q.casefold()
        q_initials = hangul.initials(q)
        initials_only = hangul.is_all_initials(q)

        entries = self._entries

        # Prefix hits are one contiguous run in collation order
        start = bisect.bisect_left(entries, q_lower, key=_lower_key)
        end = start
        while end < len(entries) and entries[end].lower.startswith(q_lower):
            end += 1
        if end - start >= limit:
            return [e.title for e in entries[start:start + limit]]

        matches: list[tuple[int, int, int, str]] = [
            (_TIER_PREFIX, 0, order, entries[order].title) for order in range(start, end)
        ]
        for order, entry in enumerate(entries):
            if start <= order < end:
                continue
            hit = _classify(entry, q, q_lower, q_initials, initials_only)
            if hit is not None:
                tier, position = hit
                matches.append((tier, position, order, entry.title))
                if len(matches) >= limit * _SCAN_FACTOR:
                    break

        matches.sort()
        return [title for _, _, _, title in matches[:limit]]


def _classify(
    entry: TitleIndexEntry,
    q: str,
    q_lower: str,
    q_initials: str,
    initials_only: bool,
) -> tuple[int, int] | None:
    if entry.lower.startswith(q_lower):
        return _TIER_PREFIX, 0

    pos = entry.lower.find(q_lower)
    if pos >= 0:
        return _TIER_CONTAINS, pos

    if initials_only:
        pos = entry.initials.find(q_initials)
        if pos >= 0:
            return _TIER_INITIALS, pos

    pos = hangul.search(entry.title, q)
    if pos >= 0:
        return _TIER_PARTIAL, pos

    return None


# -----------------------------------------------------------------------------
