from __future__ import annotations

import logging
from typing import Optional

from ..core.config import RenderConfig, default_render_config
from ..core.entities import MessageEntity
from ..latex import LatexConverter
from .parser import parse_markdown
from .preprocess import escape_latex, preprocess_spoilers
from .segments import Segment
from .walker import MarkdownWalker

logger = logging.getLogger(__name__)


def convert_with_segments(
    markdown: str,
    *,
    latex_escape: Optional[bool] = None,
    config: Optional[RenderConfig] = None,
) -> tuple[str, list[MessageEntity], list[Segment]]:
    """Convert markdown to plain text, UTF-16 entities and code segments.

    Math regions are translated before spoiler markers are rewritten.
    ``latex_escape`` overrides ``config.latex_escape`` when given.
    """
    cfg = config or default_render_config()
    source = markdown
    if cfg.latex_escape if latex_escape is None else latex_escape:
        source = escape_latex(source, LatexConverter())
    source = preprocess_spoilers(source)
    text, entities, segments = MarkdownWalker(cfg).walk(parse_markdown(source))
    logger.debug(
        "Converted markdown: %d chars, %d entities, %d segments",
        len(text),
        len(entities),
        len(segments),
    )
    return text, entities, segments


def convert(
    markdown: str,
    *,
    latex_escape: Optional[bool] = None,
    config: Optional[RenderConfig] = None,
) -> tuple[str, list[MessageEntity]]:
    text, entities, _segments = convert_with_segments(
        markdown, latex_escape=latex_escape, config=config
    )
    return text, entities
