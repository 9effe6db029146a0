from __future__ import annotations

from .utf16 import utf16_len


class TextBuffer:
    """Accumulates output fragments and tracks UTF-16, byte and index offsets.

    Fragments are kept as written so the most recent one can be retracted;
    already written output is never re-scanned except for the trailing-newline
    probe, which walks backwards and stops at the first non-newline.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._utf16_offset = 0
        self._byte_offset = 0
        self._char_offset = 0

    def write(self, fragment: str) -> None:
        if not fragment:
            return
        self._parts.append(fragment)
        self._utf16_offset += utf16_len(fragment)
        self._byte_offset += len(fragment.encode("utf-8", "surrogatepass"))
        self._char_offset += len(fragment)

    def utf16_offset(self) -> int:
        return self._utf16_offset

    def byte_offset(self) -> int:
        """Current position in UTF-8 bytes."""
        return self._byte_offset

    def char_offset(self) -> int:
        """Current position as a Python string index."""
        return self._char_offset

    def pop_last(self) -> str:
        """Remove and return the most recently written fragment."""
        if not self._parts:
            return ""
        last = self._parts.pop()
        self._utf16_offset -= utf16_len(last)
        self._byte_offset -= len(last.encode("utf-8", "surrogatepass"))
        self._char_offset -= len(last)
        return last

    def trailing_newline_count(self) -> int:
        count = 0
        for part in reversed(self._parts):
            stripped = part.rstrip("\n")
            count += len(part) - len(stripped)
            if stripped:
                break
        return count

    def is_empty(self) -> bool:
        return not self._parts

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        return self._char_offset
