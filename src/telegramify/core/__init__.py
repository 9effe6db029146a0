"""Shared primitives: UTF-16 accounting, buffers, entities, config and errors."""

from .buffer import TextBuffer
from .config import (
    CODE_BLOCK_EXTRACT_LINES,
    EXPANDABLE_BLOCKQUOTE_THRESHOLD,
    TELEGRAM_MAX_MESSAGE_LENGTH,
    MarkdownSymbols,
    MermaidConfig,
    RenderConfig,
    default_render_config,
    load_render_config,
)
from .entities import EntityScope, MessageEntity, ScopeStack
from .exceptions import ConfigError, PermanentError, TelegramifyError, TransientError
from .utf16 import index_for_utf16, utf16_len, utf16_offsets

__all__ = [
    "CODE_BLOCK_EXTRACT_LINES",
    "EXPANDABLE_BLOCKQUOTE_THRESHOLD",
    "TELEGRAM_MAX_MESSAGE_LENGTH",
    "ConfigError",
    "EntityScope",
    "MarkdownSymbols",
    "MermaidConfig",
    "MessageEntity",
    "PermanentError",
    "RenderConfig",
    "ScopeStack",
    "TelegramifyError",
    "TextBuffer",
    "TransientError",
    "default_render_config",
    "index_for_utf16",
    "load_render_config",
    "utf16_len",
    "utf16_offsets",
]
