from __future__ import annotations

from typing import Sequence

from ..core.entities import MessageEntity
from ..core.utf16 import utf16_len
from .splitting import clip_entities

WHITESPACE = " \t\r\n"


def _trim(
    text: str, entities: Sequence[MessageEntity], chars: str
) -> tuple[str, list[MessageEntity]]:
    stripped_left = text.lstrip(chars)
    trimmed = stripped_left.rstrip(chars)
    if not trimmed:
        return "", []
    if trimmed == text:
        return text, list(entities)
    shift = utf16_len(text[: len(text) - len(stripped_left)])
    new_length = utf16_len(trimmed)
    rebased = [entity.with_span(entity.offset - shift, entity.length) for entity in entities]
    return trimmed, clip_entities(rebased, 0, new_length)


def strip_newlines_adjust(
    text: str, entities: Sequence[MessageEntity]
) -> tuple[str, list[MessageEntity]]:
    """Strip leading and trailing ``\\n`` runs and re-anchor the entities."""
    return _trim(text, entities, "\n")


def trim_whitespace(
    text: str, entities: Sequence[MessageEntity]
) -> tuple[str, list[MessageEntity]]:
    """Like ``strip_newlines_adjust`` but for spaces, tabs, CR and LF."""
    return _trim(text, entities, WHITESPACE)
