"""Mermaid diagram rendering through mermaid.ink."""

from .errors import MermaidPermanentError, MermaidRenderError, MermaidTransientError
from .render import (
    MermaidRenderer,
    RenderedDiagram,
    generate_pako,
    is_image,
    mermaid_ink_url,
    mermaid_live_url,
)

__all__ = [
    "MermaidPermanentError",
    "MermaidRenderError",
    "MermaidRenderer",
    "MermaidTransientError",
    "RenderedDiagram",
    "generate_pako",
    "is_image",
    "mermaid_ink_url",
    "mermaid_live_url",
]
