from __future__ import annotations

from dataclasses import dataclass
from typing import Final

SEGMENT_CODE_BLOCK: Final = "code_block"
SEGMENT_MERMAID: Final = "mermaid"

MERMAID_LANGUAGE: Final = "mermaid"


@dataclass(frozen=True)
class Segment:
    """Location of a code block or diagram block inside the converted text.

    ``byte_*`` are UTF-8 byte offsets and ``utf16_*`` UTF-16 code-unit offsets
    into the plain text; ``raw_code`` is the block body without its final
    newline.
    """

    kind: str
    byte_start: int
    byte_end: int
    utf16_start: int
    utf16_end: int
    language: str
    raw_code: str

    @property
    def line_count(self) -> int:
        return self.raw_code.count("\n") + 1

    @property
    def is_diagram(self) -> bool:
        return self.kind == SEGMENT_MERMAID


def segment_kind_for_language(language: str) -> str:
    if language.lower() == MERMAID_LANGUAGE:
        return SEGMENT_MERMAID
    return SEGMENT_CODE_BLOCK
