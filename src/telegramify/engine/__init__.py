"""Markdown to Telegram text-and-entities conversion engine."""

from .converter import convert, convert_with_segments
from .preprocess import (
    contains_latex_symbols,
    escape_latex,
    preprocess_spoilers,
    validate_custom_emoji,
)
from .segments import SEGMENT_CODE_BLOCK, SEGMENT_MERMAID, Segment
from .splitting import TextChunk, clip_entities, slice_text_entities, split_entities
from .tables import format_table
from .trimming import strip_newlines_adjust, trim_whitespace
from .walker import MarkdownWalker

__all__ = [
    "SEGMENT_CODE_BLOCK",
    "SEGMENT_MERMAID",
    "MarkdownWalker",
    "Segment",
    "TextChunk",
    "clip_entities",
    "contains_latex_symbols",
    "convert",
    "convert_with_segments",
    "escape_latex",
    "format_table",
    "preprocess_spoilers",
    "slice_text_entities",
    "split_entities",
    "strip_newlines_adjust",
    "trim_whitespace",
    "validate_custom_emoji",
]
