"""Message entities and the scope stack that produces them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Final, Optional

ENTITY_BOLD: Final = "bold"
ENTITY_ITALIC: Final = "italic"
ENTITY_UNDERLINE: Final = "underline"
ENTITY_STRIKETHROUGH: Final = "strikethrough"
ENTITY_SPOILER: Final = "spoiler"
ENTITY_CODE: Final = "code"
ENTITY_PRE: Final = "pre"
ENTITY_TEXT_LINK: Final = "text_link"
ENTITY_CUSTOM_EMOJI: Final = "custom_emoji"
ENTITY_BLOCKQUOTE: Final = "blockquote"
ENTITY_EXPANDABLE_BLOCKQUOTE: Final = "expandable_blockquote"

ENTITY_TYPES: Final = frozenset(
    {
        ENTITY_BOLD,
        ENTITY_ITALIC,
        ENTITY_UNDERLINE,
        ENTITY_STRIKETHROUGH,
        ENTITY_SPOILER,
        ENTITY_CODE,
        ENTITY_PRE,
        ENTITY_TEXT_LINK,
        ENTITY_CUSTOM_EMOJI,
        ENTITY_BLOCKQUOTE,
        ENTITY_EXPANDABLE_BLOCKQUOTE,
    }
)


@dataclass(frozen=True)
class MessageEntity:
    """A formatting span over plain text, measured in UTF-16 code units."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    language: Optional[str] = None
    custom_emoji_id: Optional[str] = None

    @property
    def end(self) -> int:
        return self.offset + self.length

    def with_span(self, offset: int, length: int) -> "MessageEntity":
        return dataclasses.replace(self, offset=offset, length=length)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type,
            "offset": self.offset,
            "length": self.length,
        }
        if self.url:
            payload["url"] = self.url
        if self.language:
            payload["language"] = self.language
        if self.custom_emoji_id:
            payload["custom_emoji_id"] = self.custom_emoji_id
        return payload


@dataclass(frozen=True)
class EntityScope:
    """An entity that is still open during traversal."""

    type: str
    start_offset: int
    url: Optional[str] = None
    language: Optional[str] = None
    custom_emoji_id: Optional[str] = None

    def close(self, end_offset: int) -> Optional[MessageEntity]:
        length = end_offset - self.start_offset
        if length <= 0:
            return None
        return MessageEntity(
            type=self.type,
            offset=self.start_offset,
            length=length,
            url=self.url or None,
            language=self.language or None,
            custom_emoji_id=self.custom_emoji_id or None,
        )


class ScopeStack:
    """Open entity scopes.

    Scopes are not closed in strict LIFO order: ``pop`` removes the most recent
    scope of a given type wherever it sits, ``pop_any`` removes the most recent
    scope regardless of type.
    """

    def __init__(self) -> None:
        self._scopes: list[EntityScope] = []

    def push(
        self,
        entity_type: str,
        start_offset: int,
        *,
        url: Optional[str] = None,
        language: Optional[str] = None,
        custom_emoji_id: Optional[str] = None,
    ) -> EntityScope:
        scope = EntityScope(
            type=entity_type,
            start_offset=start_offset,
            url=url,
            language=language,
            custom_emoji_id=custom_emoji_id,
        )
        self._scopes.append(scope)
        return scope

    def pop(self, entity_type: str, end_offset: int) -> Optional[MessageEntity]:
        for index in range(len(self._scopes) - 1, -1, -1):
            if self._scopes[index].type == entity_type:
                scope = self._scopes.pop(index)
                return scope.close(end_offset)
        return None

    def pop_any(self, end_offset: int) -> Optional[MessageEntity]:
        if not self._scopes:
            return None
        return self._scopes.pop().close(end_offset)

    def open_types(self) -> tuple[str, ...]:
        return tuple(scope.type for scope in self._scopes)

    def __len__(self) -> int:
        return len(self._scopes)
