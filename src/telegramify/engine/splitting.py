"""Entity-preserving message splitting.

Chunks are cut on UTF-16 budgets, preferring the position just after the
latest newline that fits. Entities are re-based onto each chunk and clipped to
its bounds so every chunk is independently valid.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.coercion import coerce_positive_int
from ..core.config import TELEGRAM_MAX_MESSAGE_LENGTH
from ..core.entities import MessageEntity
from ..core.utf16 import index_for_utf16, utf16_offsets


@dataclass(frozen=True)
class TextChunk:
    text: str
    entities: list[MessageEntity] = field(default_factory=list)


def clip_entities(
    entities: Sequence[MessageEntity], start: int, end: int
) -> list[MessageEntity]:
    """Re-base ``entities`` onto the UTF-16 window ``[start, end)``.

    Entities outside the window, or clipped to nothing, are dropped.
    """
    clipped: list[MessageEntity] = []
    for entity in entities:
        entity_start = max(entity.offset, start)
        entity_end = min(entity.end, end)
        if entity_end - entity_start <= 0:
            continue
        clipped.append(entity.with_span(entity_start - start, entity_end - entity_start))
    return clipped


def slice_text_entities(
    text: str,
    entities: Sequence[MessageEntity],
    utf16_start: int,
    utf16_end: int,
    offsets: Optional[list[int]] = None,
) -> tuple[str, list[MessageEntity]]:
    """Cut an arbitrary UTF-16 range out of ``text`` with its entities."""
    table = offsets if offsets is not None else utf16_offsets(text)
    start_index = index_for_utf16(table, utf16_start)
    end_index = index_for_utf16(table, utf16_end)
    if end_index <= start_index:
        return "", []
    return (
        text[start_index:end_index],
        clip_entities(entities, table[start_index], table[end_index]),
    )


def split_entities(
    text: str,
    entities: Sequence[MessageEntity],
    max_utf16_len: int = TELEGRAM_MAX_MESSAGE_LENGTH,
) -> list[TextChunk]:
    """Split ``(text, entities)`` into chunks of at most ``max_utf16_len`` units.

    The concatenation of the chunk texts always equals ``text``. A single
    character wider than the budget still forms its own chunk.
    """
    limit = coerce_positive_int(max_utf16_len, TELEGRAM_MAX_MESSAGE_LENGTH)
    offsets = utf16_offsets(text)
    total = offsets[-1]
    if total <= limit:
        return [TextChunk(text=text, entities=clip_entities(entities, 0, total))]

    newline_cuts = [index + 1 for index, char in enumerate(text) if char == "\n"]
    chunks: list[TextChunk] = []
    start = 0
    while start < len(text):
        budget = offsets[start] + limit
        if offsets[-1] <= budget:
            end = len(text)
        else:
            hard = bisect_right(offsets, budget) - 1
            position = bisect_right(newline_cuts, hard)
            candidate = newline_cuts[position - 1] if position else 0
            if candidate > start:
                end = candidate
            elif hard > start:
                end = hard
            else:
                end = start + 1
        chunks.append(
            TextChunk(
                text=text[start:end],
                entities=clip_entities(entities, offsets[start], offsets[end]),
            )
        )
        start = end
    return chunks

