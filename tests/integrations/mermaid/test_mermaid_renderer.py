from __future__ import annotations

import base64
import json
import zlib

import httpx
import pytest

from telegramify.core.config import MermaidConfig
from telegramify.integrations.mermaid import (
    MermaidPermanentError,
    MermaidRenderer,
    MermaidTransientError,
    generate_pako,
    is_image,
    mermaid_ink_url,
    mermaid_live_url,
)
from telegramify.integrations.mermaid.constants import MERMAID_USER_AGENT

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 8


def _renderer(
    handler, *, max_attempts: int = 2, theme: str = "default"
) -> MermaidRenderer:
    config = MermaidConfig(theme=theme, max_attempts=max_attempts)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=5.0)
    return MermaidRenderer(config, client=client, retry_base_wait=0)


def test_generate_pako_round_trips() -> None:
    pako = generate_pako("graph TD\nA-->B", theme="dark")
    assert pako.startswith("pako:")
    raw = zlib.decompress(base64.urlsafe_b64decode(pako[len("pako:") :]))
    assert json.loads(raw) == {"code": "graph TD\nA-->B", "mermaid": {"theme": "dark"}}


def test_urls() -> None:
    config = MermaidConfig()
    pako = generate_pako("graph TD")
    assert mermaid_ink_url(pako, config) == (
        f"https://mermaid.ink/img/{pako}?theme=default&width=500&scale=2&type=webp"
    )
    assert mermaid_live_url(pako, config) == f"https://mermaid.live/edit/#{pako}"


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (PNG_BYTES, True),
        (b"\xff\xd8\xff\xe0rest", True),
        (b"GIF89a....", True),
        (WEBP_BYTES, True),
        (b"RIFF\x00\x00\x00\x00WAVE", False),
        (b"<html>error</html>", False),
        (b"", False),
    ],
)
def test_is_image(data: bytes, expected: bool) -> None:
    assert is_image(data) is expected


@pytest.mark.anyio
async def test_render_downloads_image() -> None:
    observed: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["path"] = request.url.path
        observed["user_agent"] = request.headers.get("User-Agent", "")
        observed["type"] = request.url.params.get("type", "")
        return httpx.Response(200, content=PNG_BYTES)

    async with _renderer(handler) as renderer:
        rendered = await renderer.render("graph TD\nA-->B")

    assert rendered.image_bytes == PNG_BYTES
    assert rendered.caption_url.startswith("https://mermaid.live/edit/#pako:")
    assert observed["path"].startswith("/img/pako:")
    assert observed["user_agent"] == MERMAID_USER_AGENT
    assert observed["type"] == "webp"


@pytest.mark.anyio
async def test_render_retries_server_errors() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(503, text="busy")
        return httpx.Response(200, content=WEBP_BYTES)

    async with _renderer(handler) as renderer:
        rendered = await renderer.render("graph TD")

    assert rendered.image_bytes == WEBP_BYTES
    assert calls == 2


@pytest.mark.anyio
async def test_render_gives_up_after_max_attempts() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(429, text="slow down")

    async with _renderer(handler, max_attempts=3) as renderer:
        with pytest.raises(MermaidTransientError) as excinfo:
            await renderer.render("graph TD")

    assert calls == 3
    assert excinfo.value.status_code == 429


@pytest.mark.anyio
async def test_network_errors_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _renderer(handler, max_attempts=1) as renderer:
        with pytest.raises(MermaidTransientError):
            await renderer.render("graph TD")


@pytest.mark.anyio
async def test_client_errors_are_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(400, text="bad diagram")

    async with _renderer(handler, max_attempts=3) as renderer:
        with pytest.raises(MermaidPermanentError) as excinfo:
            await renderer.render("graph ???")

    assert calls == 1
    assert excinfo.value.recoverable is False
    assert "bad diagram" in str(excinfo.value)


@pytest.mark.anyio
async def test_non_image_payload_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>Syntax error</html>")

    async with _renderer(handler) as renderer:
        with pytest.raises(MermaidPermanentError):
            await renderer.render("graph TD")


@pytest.mark.anyio
async def test_close_leaves_injected_client_open() -> None:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    renderer = MermaidRenderer(MermaidConfig(), client=client)
    await renderer.close()
    assert not client.is_closed
    await client.aclose()
