"""Convert markdown into Telegram plain text with UTF-16 message entities."""

from .core.config import (
    MarkdownSymbols,
    MermaidConfig,
    RenderConfig,
    default_render_config,
    load_render_config,
)
from .core.entities import MessageEntity
from .core.exceptions import ConfigError, TelegramifyError
from .core.utf16 import utf16_len
from .engine import (
    Segment,
    TextChunk,
    convert,
    convert_with_segments,
    split_entities,
    strip_newlines_adjust,
    trim_whitespace,
)
from .pipeline import Content, ContentTrace, File, Photo, Text, telegramify


def count_text(text: str) -> int:
    """Length of ``text`` as Telegram counts it: UTF-16 code units."""
    return utf16_len(text)


__all__ = [
    "ConfigError",
    "Content",
    "ContentTrace",
    "File",
    "MarkdownSymbols",
    "MermaidConfig",
    "MessageEntity",
    "Photo",
    "RenderConfig",
    "Segment",
    "TelegramifyError",
    "Text",
    "TextChunk",
    "convert",
    "convert_with_segments",
    "count_text",
    "default_render_config",
    "load_render_config",
    "split_entities",
    "strip_newlines_adjust",
    "telegramify",
    "trim_whitespace",
    "utf16_len",
]
