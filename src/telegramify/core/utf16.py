"""UTF-16 code-unit accounting.

Telegram measures entity offsets and lengths in UTF-16 code units, not in
Python string indices. Characters outside the Basic Multilingual Plane take
two code units (a surrogate pair); everything else takes one.
"""

from __future__ import annotations

from bisect import bisect_left
from itertools import accumulate


def utf16_len(text: str) -> int:
    """Return the length of ``text`` in UTF-16 code units."""
    if not text:
        return 0
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def char_utf16_width(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


def utf16_offsets(text: str) -> list[int]:
    """Cumulative UTF-16 offset for every string index, ``len(text) + 1`` long.

    ``offsets[i]`` is the UTF-16 offset of ``text[i]``; the last element is the
    UTF-16 length of the whole string.
    """
    return list(accumulate((char_utf16_width(ch) for ch in text), initial=0))


def index_for_utf16(offsets: list[int], utf16_offset: int) -> int:
    """Map a UTF-16 offset back to a string index using an offsets table.

    Offsets that fall inside a surrogate pair resolve to the index after it.
    """
    if utf16_offset <= 0:
        return 0
    if utf16_offset >= offsets[-1]:
        return len(offsets) - 1
    return bisect_left(offsets, utf16_offset)
