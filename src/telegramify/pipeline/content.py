"""Artifacts produced by the orchestrator, in source order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Union

from ..core.entities import MessageEntity

CONTENT_TYPE_TEXT: Final = "text"
CONTENT_TYPE_FILE: Final = "file"
CONTENT_TYPE_PHOTO: Final = "photo"

SOURCE_TEXT: Final = "text"
SOURCE_FILE: Final = "file"
SOURCE_MERMAID: Final = "mermaid"


@dataclass(frozen=True)
class ContentTrace:
    """Where an artifact came from; ``extra`` carries source-specific details."""

    source_type: str
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Text:
    text: str
    entities: list[MessageEntity] = field(default_factory=list)
    content_trace: ContentTrace = field(
        default_factory=lambda: ContentTrace(source_type=SOURCE_TEXT)
    )

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_TEXT


@dataclass(frozen=True)
class File:
    file_name: str
    file_data: bytes
    caption_text: str = ""
    caption_entities: list[MessageEntity] = field(default_factory=list)
    content_trace: ContentTrace = field(
        default_factory=lambda: ContentTrace(source_type=SOURCE_FILE)
    )

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_FILE


@dataclass(frozen=True)
class Photo:
    file_name: str
    file_data: bytes
    caption: str = ""
    caption_text: str = ""
    caption_entities: list[MessageEntity] = field(default_factory=list)
    content_trace: ContentTrace = field(
        default_factory=lambda: ContentTrace(source_type=SOURCE_MERMAID)
    )

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_PHOTO


Content = Union[Text, File, Photo]


def content_to_dict(item: Content) -> dict[str, Any]:
    """JSON-friendly summary of an artifact; binary payloads are reported by size."""
    payload: dict[str, Any] = {
        "type": item.content_type,
        "source": item.content_trace.source_type,
    }
    if item.content_trace.extra:
        payload["extra"] = dict(item.content_trace.extra)
    if isinstance(item, Text):
        payload["text"] = item.text
        payload["entities"] = [entity.to_dict() for entity in item.entities]
        return payload
    payload["file_name"] = item.file_name
    payload["size"] = len(item.file_data)
    if isinstance(item, Photo) and item.caption:
        payload["caption"] = item.caption
    if item.caption_text:
        payload["caption_text"] = item.caption_text
    return payload
