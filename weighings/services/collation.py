"""Spanish collation for animal identifiers.

Sorting by raw code points puts ``"Ñandú"`` after ``"Zeta"`` and ``"b"`` after
``"C"``. The keys built here follow the Spanish (``es``) collation used by the
browser version of the app: accent- and case-insensitive at the first level,
``ñ`` as its own letter between ``n`` and ``o``, then accents, then case.
"""

from __future__ import annotations

import unicodedata
from typing import Tuple

SPANISH_ALPHABET = "abcdefghijklmnñopqrstuvwxyz"

_LETTER_RANK = {letter: index for index, letter in enumerate(SPANISH_ALPHABET)}

_COMBINING_TILDE = "\u0303"

# Secondary (accent) order of the DUCET table; other marks sort after these.
_ACCENT_ORDER = (
    "\u0301",  # acute
    "\u0300",  # grave
    "\u0306",  # breve
    "\u0302",  # circumflex
    "\u030c",  # caron
    "\u030a",  # ring above
    "\u0308",  # diaeresis
    "\u030b",  # double acute
    "\u0303",  # tilde
    "\u0307",  # dot above
    "\u0327",  # cedilla
    "\u0328",  # ogonek
    "\u0304",  # macron
)
_ACCENT_RANK = {mark: index for index, mark in enumerate(_ACCENT_ORDER)}

# Character groups in ascending order.
_GROUP_SPACE = 0
_GROUP_PUNCTUATION = 1
_GROUP_SYMBOL = 2
_GROUP_DIGIT = 3
_GROUP_LATIN_LETTER = 4
_GROUP_OTHER_LETTER = 5
_GROUP_OTHER = 6

CollationKey = Tuple[tuple, tuple, tuple, str]


def _clusters(text: str) -> list[tuple[str, str]]:
    """Split ``text`` into (base character, combining marks) pairs."""
    decomposed = unicodedata.normalize("NFKD", text)
    clusters: list[tuple[str, str]] = []
    for char in decomposed:
        if unicodedata.combining(char) and clusters:
            base, marks = clusters[-1]
            clusters[-1] = (base, marks + char)
        else:
            clusters.append((char, ""))
    return clusters


def _primary_weight(base: str, is_enye: bool) -> tuple[int, int]:
    lowered = base.lower()
    if len(lowered) != 1:
        lowered = base
    if is_enye:
        return (_GROUP_LATIN_LETTER, _LETTER_RANK["ñ"])
    if lowered in _LETTER_RANK:
        return (_GROUP_LATIN_LETTER, _LETTER_RANK[lowered])
    if base.isspace():
        return (_GROUP_SPACE, ord(base))
    digit = unicodedata.digit(base, None)
    if digit is not None:
        return (_GROUP_DIGIT, digit)
    category = unicodedata.category(base)
    if category.startswith("P"):
        return (_GROUP_PUNCTUATION, ord(base))
    if category.startswith("S"):
        return (_GROUP_SYMBOL, ord(base))
    if category.startswith("L"):
        return (_GROUP_OTHER_LETTER, ord(lowered))
    return (_GROUP_OTHER, ord(base))


def _accent_weight(mark: str) -> int:
    return _ACCENT_RANK.get(mark, len(_ACCENT_ORDER) + ord(mark))


def collation_key(text: str) -> CollationKey:
    """Return a key that sorts strings in Spanish dictionary order.

    The key compares primary weights first (letters without accents or case),
    then the accents of each character, then the case (lowercase first). The
    raw string is the last component so two different identifiers that
    collate as equal still never interleave when used as a grouping key.
    """
    primary = []
    secondary = []
    tertiary = []
    for base, marks in _clusters(text or ""):
        is_enye = base.lower() == "n" and _COMBINING_TILDE in marks
        if is_enye:
            marks = marks.replace(_COMBINING_TILDE, "", 1)
        primary.append(_primary_weight(base, is_enye))
        secondary.append(tuple(_accent_weight(mark) for mark in marks))
        tertiary.append(1 if base.isupper() else 0)
    return (tuple(primary), tuple(secondary), tuple(tertiary), text or "")


def compare(left: str, right: str) -> int:
    """Three-way comparison of two strings using :func:`collation_key`."""
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0
