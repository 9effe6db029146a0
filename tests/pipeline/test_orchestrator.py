from __future__ import annotations

import asyncio
import json
import logging

import pytest

from telegramify.core.config import MermaidConfig, RenderConfig
from telegramify.integrations.mermaid import MermaidPermanentError, RenderedDiagram
from telegramify.pipeline import File, Photo, Text, telegramify

MERMAID_SOURCE = "graph TD\nA-->B"
MERMAID_MARKDOWN = f"```mermaid\n{MERMAID_SOURCE}\n```"
LIVE_URL = "https://mermaid.live/edit/#pako:abc"


def _code_block(lines: int, language: str = "python") -> tuple[str, str]:
    code = "\n".join(f"x = {index}" for index in range(lines))
    return f"```{language}\n{code}\n```", code


class _FakeRenderer:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def render(self, source: str) -> RenderedDiagram:
        self.calls.append(source)
        return RenderedDiagram(image_bytes=b"\x89PNG\r\n\x1a\nimage", caption_url=LIVE_URL)


class _FailingRenderer:
    async def render(self, source: str) -> RenderedDiagram:
        raise MermaidPermanentError("renderer rejected the diagram", status_code=400)


class _BrokenRenderer:
    async def render(self, source: str) -> RenderedDiagram:
        raise RuntimeError("renderer blew up")


class _SlowRenderer:
    def __init__(self, started: asyncio.Event | None = None) -> None:
        self.started = started
        self.cancelled = False

    async def render(self, source: str) -> RenderedDiagram:
        if self.started is not None:
            self.started.set()
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        raise AssertionError("render should have been interrupted")


class TestCodeExtraction:
    @pytest.mark.anyio
    async def test_block_at_threshold_stays_inline(self) -> None:
        markdown, code = _code_block(50)
        result = await telegramify(markdown)
        assert len(result) == 1
        item = result[0]
        assert isinstance(item, Text)
        assert item.text == code
        assert [entity.type for entity in item.entities] == ["pre"]
        assert item.entities[0].language == "python"

    @pytest.mark.anyio
    async def test_block_over_threshold_becomes_file(self) -> None:
        markdown, code = _code_block(51)
        result = await telegramify(markdown)
        assert len(result) == 1
        item = result[0]
        assert isinstance(item, File)
        assert item.file_name == "readable.py"
        assert item.file_data == code.encode("utf-8")
        assert item.content_trace.source_type == "file"
        assert item.content_trace.extra == {"language": "python"}

    @pytest.mark.anyio
    async def test_surrounding_text_keeps_source_order(self) -> None:
        markdown, _code = _code_block(51)
        result = await telegramify(f"**Intro**\n\n{markdown}\n\nOutro")
        assert [type(item) for item in result] == [Text, File, Text]
        intro, _file, outro = result
        assert intro.text == "Intro"
        assert [(e.type, e.offset, e.length) for e in intro.entities] == [("bold", 0, 5)]
        assert outro.text == "Outro"
        assert outro.entities == []

    @pytest.mark.anyio
    async def test_file_name_comes_from_first_lines(self) -> None:
        code = "# main.py\n" + "\n".join(f"y = {index}" for index in range(60))
        result = await telegramify(f"```python\n{code}\n```")
        assert isinstance(result[0], File)
        assert result[0].file_name == "main.py"

    @pytest.mark.anyio
    async def test_unlabelled_block_is_a_text_file(self) -> None:
        markdown, _code = _code_block(51, language="")
        result = await telegramify(markdown)
        item = result[0]
        assert isinstance(item, File)
        assert item.file_name == "readable.txt"
        assert item.content_trace.extra == {"language": "txt"}

    @pytest.mark.anyio
    async def test_extract_threshold_is_configurable(self) -> None:
        markdown, _code = _code_block(3)
        config = RenderConfig(code_block_extract_lines=2)
        result = await telegramify(markdown, config=config)
        assert isinstance(result[0], File)


class TestMermaid:
    @pytest.mark.anyio
    async def test_rendered_diagram_becomes_photo(self) -> None:
        renderer = _FakeRenderer()
        result = await telegramify(f"Look:\n\n{MERMAID_MARKDOWN}", renderer=renderer)
        assert renderer.calls == [MERMAID_SOURCE]
        assert isinstance(result[0], Text)
        assert result[0].text == "Look:"
        photo = result[1]
        assert isinstance(photo, Photo)
        assert photo.file_name == "mermaid.webp"
        assert photo.caption == LIVE_URL
        assert photo.content_trace.source_type == "mermaid"

    @pytest.mark.anyio
    async def test_short_diagram_is_still_extracted(self) -> None:
        renderer = _FakeRenderer()
        result = await telegramify("```mermaid\ngraph LR\n```", renderer=renderer)
        assert [type(item) for item in result] == [Photo]

    @pytest.mark.anyio
    async def test_render_failure_falls_back_to_source_file(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="telegramify.pipeline.orchestrator"):
            result = await telegramify(MERMAID_MARKDOWN, renderer=_FailingRenderer())
        assert len(result) == 1
        item = result[0]
        assert isinstance(item, File)
        assert item.file_name == "invalid_mermaid.txt"
        assert item.file_data == MERMAID_SOURCE.encode("utf-8")
        events = [json.loads(record.getMessage()) for record in caplog.records]
        failed = [event for event in events if event["event"] == "telegramify.pipeline.mermaid.failed"]
        assert failed
        assert failed[0]["error_type"] == "MermaidPermanentError"

    @pytest.mark.anyio
    async def test_unexpected_renderer_error_falls_back(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="telegramify.pipeline.orchestrator"):
            result = await telegramify(
                f"Before\n\n{MERMAID_MARKDOWN}\n\nAfter", renderer=_BrokenRenderer()
            )
        assert [type(item) for item in result] == [Text, File, Text]
        fallback = result[1]
        assert fallback.file_name == "invalid_mermaid.txt"
        assert fallback.file_data == MERMAID_SOURCE.encode("utf-8")
        events = [json.loads(record.getMessage()) for record in caplog.records]
        assert any(
            event["event"] == "telegramify.pipeline.mermaid.failed"
            and event["error_type"] == "RuntimeError"
            for event in events
        )

    @pytest.mark.anyio
    async def test_render_timeout_falls_back(self) -> None:
        config = RenderConfig(mermaid=MermaidConfig(timeout_seconds=0.05))
        renderer = _SlowRenderer()
        result = await telegramify(MERMAID_MARKDOWN, config=config, renderer=renderer)
        assert isinstance(result[0], File)
        assert result[0].file_name == "invalid_mermaid.txt"
        assert renderer.cancelled

    @pytest.mark.anyio
    async def test_cancel_before_render_skips_renderer(self) -> None:
        renderer = _FakeRenderer()
        cancel_event = asyncio.Event()
        cancel_event.set()
        result = await telegramify(
            MERMAID_MARKDOWN, renderer=renderer, cancel_event=cancel_event
        )
        assert renderer.calls == []
        assert isinstance(result[0], File)
        assert result[0].file_name == "invalid_mermaid.txt"

    @pytest.mark.anyio
    async def test_cancel_during_render_interrupts_it(self) -> None:
        started = asyncio.Event()
        cancel_event = asyncio.Event()
        renderer = _SlowRenderer(started)

        async def _cancel_when_started() -> None:
            await started.wait()
            cancel_event.set()

        canceller = asyncio.ensure_future(_cancel_when_started())
        result = await telegramify(
            MERMAID_MARKDOWN, renderer=renderer, cancel_event=cancel_event
        )
        await canceller
        assert renderer.cancelled
        assert isinstance(result[0], File)
        assert result[0].file_name == "invalid_mermaid.txt"

    @pytest.mark.anyio
    async def test_disabled_diagrams_never_call_renderer(self) -> None:
        renderer = _FakeRenderer()
        config = RenderConfig(mermaid=MermaidConfig(enabled=False))
        result = await telegramify(MERMAID_MARKDOWN, config=config, renderer=renderer)
        assert renderer.calls == []
        assert isinstance(result[0], File)
        assert result[0].file_name == "invalid_mermaid.txt"


class TestTextArtifacts:
    @pytest.mark.anyio
    async def test_blank_input_yields_nothing(self) -> None:
        assert await telegramify("") == []
        assert await telegramify("   \n\n  ") == []

    @pytest.mark.anyio
    async def test_long_text_is_split_on_paragraphs(self) -> None:
        result = await telegramify("aaaa\n\nbbbb\n\ncccc", max_message_length=10)
        assert [item.text for item in result] == ["aaaa", "bbbb\n\ncccc"]

    @pytest.mark.anyio
    @pytest.mark.parametrize("bad_limit", [0, -5, "nope", None])
    async def test_invalid_length_falls_back_to_default(self, bad_limit: object) -> None:
        result = await telegramify("aaaa\n\nbbbb", max_message_length=bad_limit)
        assert [item.text for item in result] == ["aaaa\n\nbbbb"]

    @pytest.mark.anyio
    async def test_length_defaults_to_config_value(self) -> None:
        config = RenderConfig(max_message_length=10)
        result = await telegramify("aaaa\n\nbbbb\n\ncccc", config=config)
        assert [item.text for item in result] == ["aaaa", "bbbb\n\ncccc"]

    @pytest.mark.anyio
    async def test_chunks_keep_valid_entities(self) -> None:
        markdown = "\n\n".join(f"**bold {index}** and *more* text" for index in range(20))
        result = await telegramify(markdown, max_message_length=64)
        assert len(result) > 1
        for item in result:
            assert isinstance(item, Text)
            width = len(item.text.encode("utf-16-le")) // 2
            assert width <= 64
            assert item.text == item.text.strip("\n")
            for entity in item.entities:
                assert entity.length > 0
                assert entity.offset + entity.length <= width

    @pytest.mark.anyio
    async def test_latex_escape_can_be_disabled(self) -> None:
        converted = await telegramify(r"\(\alpha + \beta\)")
        raw = await telegramify(r"\(\alpha + \beta\)", latex_escape=False)
        assert "α" in converted[0].text
        assert "α" not in raw[0].text
