"""Artifact pipeline: text chunks, extracted code files and diagram images."""

from .content import (
    CONTENT_TYPE_FILE,
    CONTENT_TYPE_PHOTO,
    CONTENT_TYPE_TEXT,
    Content,
    ContentTrace,
    File,
    Photo,
    Text,
    content_to_dict,
)
from .filenames import get_ext, infer_filename
from .orchestrator import DiagramRenderer, telegramify

__all__ = [
    "CONTENT_TYPE_FILE",
    "CONTENT_TYPE_PHOTO",
    "CONTENT_TYPE_TEXT",
    "Content",
    "ContentTrace",
    "DiagramRenderer",
    "File",
    "Photo",
    "Text",
    "content_to_dict",
    "get_ext",
    "infer_filename",
    "telegramify",
]
