"""Turn a markdown document into an ordered list of sendable artifacts.

Mermaid blocks always become images (or a fallback source file); code blocks
longer than the configured line threshold become files. Everything between
them is split into message-sized ``Text`` chunks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, Sequence

from ..core.coercion import coerce_positive_int
from ..core.config import TELEGRAM_MAX_MESSAGE_LENGTH, RenderConfig, default_render_config
from ..core.entities import MessageEntity
from ..core.logging_utils import log_event
from ..core.utf16 import utf16_offsets
from ..engine.converter import convert_with_segments
from ..engine.segments import Segment
from ..engine.splitting import slice_text_entities, split_entities
from ..engine.trimming import strip_newlines_adjust, trim_whitespace
from ..integrations.mermaid import MermaidRenderer, RenderedDiagram
from .content import SOURCE_FILE, SOURCE_MERMAID, Content, ContentTrace, File, Photo, Text
from .filenames import DEFAULT_EXTENSION, infer_filename

logger = logging.getLogger(__name__)

MERMAID_IMAGE_FILENAME = "mermaid.webp"
MERMAID_FALLBACK_FILENAME = "invalid_mermaid.txt"


class DiagramRenderer(Protocol):
    async def render(self, source: str) -> RenderedDiagram: ...


class RenderCancelled(Exception):
    """Raised internally when the caller's cancel event fires mid-render."""


def extractable_segments(
    segments: Sequence[Segment], *, code_block_extract_lines: int
) -> list[Segment]:
    return [
        segment
        for segment in segments
        if segment.is_diagram or segment.line_count > code_block_extract_lines
    ]


def text_artifacts(
    text: str, entities: Sequence[MessageEntity], max_message_length: int
) -> list[Text]:
    """Split a text run into trimmed, non-empty ``Text`` artifacts."""
    artifacts: list[Text] = []
    for chunk in split_entities(text, entities, max_message_length):
        chunk_text, chunk_entities = strip_newlines_adjust(chunk.text, chunk.entities)
        if chunk_text:
            artifacts.append(Text(text=chunk_text, entities=chunk_entities))
    return artifacts


def code_file_artifact(segment: Segment) -> File:
    language = segment.language or DEFAULT_EXTENSION
    return File(
        file_name=infer_filename(segment.raw_code, language),
        file_data=segment.raw_code.encode("utf-8"),
        content_trace=ContentTrace(source_type=SOURCE_FILE, extra={"language": language}),
    )


def mermaid_fallback_artifact(segment: Segment) -> File:
    return File(
        file_name=MERMAID_FALLBACK_FILENAME,
        file_data=segment.raw_code.encode("utf-8"),
        content_trace=ContentTrace(source_type=SOURCE_MERMAID),
    )


async def _render_with_cancel(
    renderer: DiagramRenderer,
    source: str,
    *,
    timeout: float,
    cancel_event: Optional[asyncio.Event],
) -> RenderedDiagram:
    render_task = asyncio.ensure_future(asyncio.wait_for(renderer.render(source), timeout))
    if cancel_event is None:
        return await render_task
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _pending = await asyncio.wait(
            {render_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        cancel_task.cancel()
    if render_task not in done:
        render_task.cancel()
        await asyncio.gather(render_task, return_exceptions=True)
        raise RenderCancelled("diagram rendering cancelled by caller")
    return render_task.result()


async def _mermaid_artifact(
    segment: Segment,
    renderer: Optional[DiagramRenderer],
    *,
    timeout: float,
    cancel_event: Optional[asyncio.Event],
) -> Content:
    if renderer is None:
        log_event(
            logger,
            logging.DEBUG,
            "telegramify.pipeline.mermaid.disabled",
            source_chars=len(segment.raw_code),
        )
        return mermaid_fallback_artifact(segment)
    if cancel_event is not None and cancel_event.is_set():
        log_event(logger, logging.WARNING, "telegramify.pipeline.mermaid.cancelled")
        return mermaid_fallback_artifact(segment)
    try:
        rendered = await _render_with_cancel(
            renderer, segment.raw_code, timeout=timeout, cancel_event=cancel_event
        )
    except Exception as exc:
        log_event(
            logger,
            logging.WARNING,
            "telegramify.pipeline.mermaid.failed",
            exc=exc,
            fallback=MERMAID_FALLBACK_FILENAME,
        )
        return mermaid_fallback_artifact(segment)
    return Photo(
        file_name=MERMAID_IMAGE_FILENAME,
        file_data=rendered.image_bytes,
        caption=rendered.caption_url,
        content_trace=ContentTrace(source_type=SOURCE_MERMAID),
    )


async def telegramify(
    content: str,
    *,
    max_message_length: Any = None,
    latex_escape: Optional[bool] = None,
    config: Optional[RenderConfig] = None,
    renderer: Optional[DiagramRenderer] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> list[Content]:
    """Convert markdown into ``Text``, ``File`` and ``Photo`` artifacts.

    Args:
        content: Markdown source.
        max_message_length: UTF-16 budget per ``Text``. Omitted or invalid
            values fall back to ``config.max_message_length`` (4096 by default).
        latex_escape: Overrides ``config.latex_escape`` when given.
        config: Render configuration; defaults are used when omitted.
        renderer: Diagram renderer. When omitted and diagrams are enabled a
            ``MermaidRenderer`` is created for the call and closed afterwards.
        cancel_event: Once set, pending diagram renders fall back to the
            source file instead of waiting.

    Returns:
        Artifacts in source order. Rendering failures never raise; they
        produce an ``invalid_mermaid.txt`` file instead.
    """
    cfg = config or default_render_config()
    limit = coerce_positive_int(
        max_message_length,
        coerce_positive_int(cfg.max_message_length, TELEGRAM_MAX_MESSAGE_LENGTH),
    )
    text, entities, segments = convert_with_segments(
        content, latex_escape=latex_escape, config=cfg
    )
    targets = extractable_segments(
        segments, code_block_extract_lines=cfg.code_block_extract_lines
    )

    owned_renderer: Optional[MermaidRenderer] = None
    active_renderer = renderer
    if (
        active_renderer is None
        and cfg.mermaid.enabled
        and any(segment.is_diagram for segment in targets)
    ):
        owned_renderer = MermaidRenderer(cfg.mermaid)
        active_renderer = owned_renderer
    if not cfg.mermaid.enabled:
        active_renderer = None

    try:
        result = await _build_artifacts(
            text,
            entities,
            targets,
            limit=limit,
            renderer=active_renderer,
            timeout=cfg.mermaid.timeout_seconds,
            cancel_event=cancel_event,
        )
    finally:
        if owned_renderer is not None:
            await owned_renderer.close()

    if not result and text.strip():
        trimmed, trimmed_entities = trim_whitespace(text, entities)
        result.extend(text_artifacts(trimmed, trimmed_entities, limit))
    log_event(
        logger,
        logging.DEBUG,
        "telegramify.pipeline.done",
        artifacts=len(result),
        extracted=len(targets),
    )
    return result


async def _build_artifacts(
    text: str,
    entities: list[MessageEntity],
    targets: list[Segment],
    *,
    limit: int,
    renderer: Optional[DiagramRenderer],
    timeout: float,
    cancel_event: Optional[asyncio.Event],
) -> list[Content]:
    offsets = utf16_offsets(text)
    total = offsets[-1]
    result: list[Content] = []
    cursor = 0

    def _flush(end: int) -> None:
        if end <= cursor:
            return
        run_text, run_entities = slice_text_entities(text, entities, cursor, end, offsets)
        run_text, run_entities = strip_newlines_adjust(run_text, run_entities)
        if run_text:
            result.extend(text_artifacts(run_text, run_entities, limit))

    for segment in targets:
        _flush(segment.utf16_start)
        if segment.is_diagram:
            result.append(
                await _mermaid_artifact(
                    segment, renderer, timeout=timeout, cancel_event=cancel_event
                )
            )
        else:
            result.append(code_file_artifact(segment))
        cursor = segment.utf16_end
    _flush(total)
    return result
