from __future__ import annotations

from typing import Final

MERMAID_PAKO_PREFIX: Final[str] = "pako:"
MERMAID_ZLIB_LEVEL: Final[int] = 9
MERMAID_IMAGE_WIDTH: Final[int] = 500
MERMAID_IMAGE_SCALE: Final[int] = 2
MERMAID_IMAGE_TYPE: Final[str] = "webp"

MERMAID_USER_AGENT: Final[str] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
)
