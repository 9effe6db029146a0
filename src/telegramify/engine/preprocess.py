"""Textual rewrites applied to the markdown source before parsing."""

from __future__ import annotations

import re
from typing import Optional

from ..latex import LATEX_STYLES, LATEX_SYMBOLS, NOT_MAP, LatexConverter

SPOILER_OPEN_TAG = "<tg-spoiler>"
SPOILER_CLOSE_TAG = "</tg-spoiler>"

CUSTOM_EMOJI_URL_PREFIX = "tg://emoji?id="
CUSTOM_EMOJI_ID_LENGTH = 19

_CODE_REGION_RE = re.compile(r"(```[\s\S]*?```|`[^`\n]+`)")
_SPOILER_RE = re.compile(r"(?<!\\)\|\|(?=\S)(.+?)(?<=\S)(?<!\\)\|\|")
_LATEX_BLOCK_RE = re.compile(r"\\\[(.*?)\\\]")
_LATEX_INLINE_RE = re.compile(r"\\\((.*?)\\\)")

_LATEX_MIN_CONTENT_LENGTH = 5
_LATEX_KEYWORDS = ("\\frac", "\\sqrt", "\\begin")


def preprocess_spoilers(text: str) -> str:
    """Rewrite ``||hidden||`` into spoiler tags outside code spans and fences."""
    parts = _CODE_REGION_RE.split(text)
    # re.split keeps the captured code regions at odd indices.
    for index in range(0, len(parts), 2):
        parts[index] = _SPOILER_RE.sub(
            lambda match: f"{SPOILER_OPEN_TAG}{match.group(1)}{SPOILER_CLOSE_TAG}",
            parts[index],
        )
    return "".join(parts)


def contains_latex_symbols(content: str) -> bool:
    if len(content) < _LATEX_MIN_CONTENT_LENGTH:
        return False
    if any(keyword in content for keyword in _LATEX_KEYWORDS):
        return True
    for table in (LATEX_SYMBOLS, NOT_MAP, LATEX_STYLES):
        if any(key in content for key in table):
            return True
    return False


def escape_latex(text: str, converter: Optional[LatexConverter] = None) -> str:
    """Translate ``\\[...\\]`` and ``\\(...\\)`` math regions to Unicode.

    Regions are matched per paragraph and only rewritten when they look like
    real LaTeX; anything else is left verbatim.
    """
    latex = converter or LatexConverter()

    def _block(match: re.Match[str]) -> str:
        content = match.group(1)
        if not contains_latex_symbols(content):
            return match.group(0)
        return "$$" + latex.convert(content).strip() + "$$"

    def _inline(match: re.Match[str]) -> str:
        content = match.group(1)
        if not contains_latex_symbols(content):
            return match.group(0)
        return "$" + latex.convert(content).strip() + "$"

    paragraphs = text.split("\n\n")
    return "\n\n".join(
        _LATEX_INLINE_RE.sub(_inline, _LATEX_BLOCK_RE.sub(_block, paragraph))
        for paragraph in paragraphs
    )


def validate_custom_emoji(url: str) -> str:
    """Return the emoji id for a ``tg://emoji?id=<19 digits>`` URL, else ""."""
    if not url.startswith(CUSTOM_EMOJI_URL_PREFIX):
        return ""
    emoji_id = url[len(CUSTOM_EMOJI_URL_PREFIX) :]
    if len(emoji_id) == CUSTOM_EMOJI_ID_LENGTH and emoji_id.isascii() and emoji_id.isdigit():
        return emoji_id
    return ""
