from __future__ import annotations

import base64
import json
import logging
import zlib
from dataclasses import dataclass
from typing import Optional

import httpx

from ...core.config import MermaidConfig
from ...core.logging_utils import log_event
from ...core.retry import retry_transient
from .constants import (
    MERMAID_IMAGE_SCALE,
    MERMAID_IMAGE_TYPE,
    MERMAID_IMAGE_WIDTH,
    MERMAID_PAKO_PREFIX,
    MERMAID_USER_AGENT,
    MERMAID_ZLIB_LEVEL,
)
from .errors import MermaidPermanentError, MermaidRenderError, MermaidTransientError

logger = logging.getLogger(__name__)

_IMAGE_SIGNATURES: tuple[bytes, ...] = (
    b"\x89PNG\r\n\x1a\n",
    b"\xff\xd8\xff",
    b"GIF87a",
    b"GIF89a",
)


@dataclass(frozen=True)
class RenderedDiagram:
    image_bytes: bytes
    caption_url: str


def generate_pako(source: str, *, theme: str = "default") -> str:
    """Encode a diagram the way mermaid.live and mermaid.ink expect it."""
    payload = json.dumps(
        {"code": source, "mermaid": {"theme": theme}},
        ensure_ascii=False,
        separators=(",", ":"),
    ).encode("utf-8")
    compressed = zlib.compress(payload, MERMAID_ZLIB_LEVEL)
    return MERMAID_PAKO_PREFIX + base64.urlsafe_b64encode(compressed).decode("ascii")


def mermaid_ink_url(pako: str, config: MermaidConfig) -> str:
    return (
        f"{config.ink_base_url}/img/{pako}"
        f"?theme={config.theme}&width={MERMAID_IMAGE_WIDTH}"
        f"&scale={MERMAID_IMAGE_SCALE}&type={MERMAID_IMAGE_TYPE}"
    )


def mermaid_live_url(pako: str, config: MermaidConfig) -> str:
    return f"{config.live_base_url}/edit/#{pako}"


def is_image(data: bytes) -> bool:
    """Sniff PNG, JPEG, GIF or WebP magic bytes."""
    if not data:
        return False
    if data.startswith(_IMAGE_SIGNATURES):
        return True
    return len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP"


class MermaidRenderer:
    """Render Mermaid sources to images via mermaid.ink.

    Transient failures are retried with backoff up to ``max_attempts``; any
    failure surfaces as a ``MermaidRenderError`` subclass.
    """

    def __init__(
        self,
        config: Optional[MermaidConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        retry_base_wait: float = 0.5,
    ) -> None:
        self._config = config or MermaidConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self._config.timeout_seconds, follow_redirects=True
        )
        self._download = retry_transient(
            max_attempts=self._config.max_attempts, base_wait=retry_base_wait
        )(self._download_once)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "MermaidRenderer":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def render(self, source: str) -> RenderedDiagram:
        pako = generate_pako(source, theme=self._config.theme)
        image_url = mermaid_ink_url(pako, self._config)
        image_bytes = await self._download(image_url)
        return RenderedDiagram(
            image_bytes=image_bytes, caption_url=mermaid_live_url(pako, self._config)
        )

    async def _download_once(self, url: str) -> bytes:
        try:
            response = await self._client.get(
                url, headers={"User-Agent": MERMAID_USER_AGENT}
            )
        except httpx.TransportError as exc:
            log_event(
                logger,
                logging.INFO,
                "telegramify.mermaid.download.network_error",
                exc=exc,
            )
            raise MermaidTransientError(f"Mermaid download failed: {exc}") from exc

        status_code = response.status_code
        if status_code == 429 or 500 <= status_code < 600:
            raise MermaidTransientError(
                f"Mermaid renderer returned HTTP {status_code}",
                status_code=status_code,
            )
        if status_code != 200:
            body_preview = (response.text or "").strip().replace("\n", " ")[:200]
            raise MermaidPermanentError(
                f"Mermaid renderer returned HTTP {status_code}: {body_preview}",
                status_code=status_code,
            )
        content = response.content
        if not is_image(content):
            raise MermaidPermanentError(
                "Mermaid renderer returned a non-image payload",
                status_code=status_code,
            )
        log_event(
            logger,
            logging.DEBUG,
            "telegramify.mermaid.download.ok",
            size=len(content),
        )
        return content


__all__ = [
    "MermaidRenderError",
    "MermaidRenderer",
    "RenderedDiagram",
    "generate_pako",
    "is_image",
    "mermaid_ink_url",
    "mermaid_live_url",
]
