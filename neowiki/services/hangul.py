#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Hangul jamo helpers
===================
Decomposition of precomposed Hangul syllables (U+AC00..U+D7A3) into
compatibility jamo, used by the title index for lead-consonant (초성) and
partially-typed syllable matching.

Complex vowels and consonant clusters are split into their parts
(``ㅘ`` -> ``ㅗㅏ``, ``ㄳ`` -> ``ㄱㅅ``) so a syllable still being composed in
an IME matches the finished title: ``"갑"`` -> ``ㄱㅏㅂ`` is found inside
``"값"`` -> ``ㄱㅏㅂㅅ``.  Double consonants (``ㄲ``, ``ㅆ``...) stay whole.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


# -----------------------------------------------------------------------------

_SYLLABLE_FIRST = 0xAC00
_SYLLABLE_LAST  = 0xD7A3
_JUNG_COUNT = 21
_JONG_COUNT = 28

CHOSUNG  = "ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
JUNGSUNG = "ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ"
JONGSUNG = (
    "", "ㄱ", "ㄲ", "ㄳ", "ㄴ", "ㄵ", "ㄶ", "ㄷ", "ㄹ", "ㄺ", "ㄻ", "ㄼ", "ㄽ", "ㄾ",
    "ㄿ", "ㅀ", "ㅁ", "ㅂ", "ㅄ", "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

_CHOSUNG_SET = frozenset(CHOSUNG)

_COMPOUND = {
    "ㅘ": "ㅗㅏ", "ㅙ": "ㅗㅐ", "ㅚ": "ㅗㅣ",
    "ㅝ": "ㅜㅓ", "ㅞ": "ㅜㅔ", "ㅟ": "ㅜㅣ",
    "ㅢ": "ㅡㅣ",
    "ㄳ": "ㄱㅅ", "ㄵ": "ㄴㅈ", "ㄶ": "ㄴㅎ",
    "ㄺ": "ㄹㄱ", "ㄻ": "ㄹㅁ", "ㄼ": "ㄹㅂ", "ㄽ": "ㄹㅅ",
    "ㄾ": "ㄹㅌ", "ㄿ": "ㄹㅍ", "ㅀ": "ㄹㅎ",
    "ㅄ": "ㅂㅅ",
}


def _split(jamo: str) -> str:
    return _COMPOUND.get(jamo, jamo)


# -----------------------------------------------------------------------------

def decompose(char: str) -> list[str]:
    """Jamo of a single character; non-Hangul characters come back as-is."""
    code = ord(char) - _SYLLABLE_FIRST
    if 0 <= code <= _SYLLABLE_LAST - _SYLLABLE_FIRST:
        cho, rest = divmod(code, _JUNG_COUNT * _JONG_COUNT)
        jung, jong = divmod(rest, _JONG_COUNT)
        parts = [CHOSUNG[cho]]
        parts.extend(_split(JUNGSUNG[jung]))
        if jong:
            parts.extend(_split(JONGSUNG[jong]))
        return parts
    return list(_split(char))


def disassemble(text: str) -> list[list[str]]:
    """Per-character jamo groups."""
    return [decompose(c) for c in text]


def disassemble_flat(text: str) -> str:
    return "".join("".join(group) for group in disassemble(text))


def initials(text: str) -> str:
    """Lead consonant of every syllable; other characters (first jamo) unchanged.

    >>> initials("나무위키")
    'ㄴㅁㅇㅋ'
    """
    return "".join(group[0] for group in disassemble(text) if group)


def is_all_initials(text: str) -> bool:
    return bool(text) and all(c in _CHOSUNG_SET for c in text)


def search(haystack: str, needle: str) -> int:
    """Jamo-level position of *needle* in *haystack*, or -1."""
    return disassemble_flat(haystack).find(disassemble_flat(needle))


# -----------------------------------------------------------------------------
