"""Markdown parsing.

The walker consumes ``SyntaxTreeNode`` trees produced by markdown-it-py with
the GFM-like preset (tables, strikethrough, linkify, raw HTML) and task lists.
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.tasklists import tasklists_plugin


def build_markdown_parser() -> MarkdownIt:
    return MarkdownIt("gfm-like").use(tasklists_plugin)


def parse_markdown(markdown: str) -> SyntaxTreeNode:
    """Parse markdown into a syntax tree rooted at a ``root`` node."""
    tokens = build_markdown_parser().parse(markdown)
    return SyntaxTreeNode(tokens)
