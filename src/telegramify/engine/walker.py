"""Syntax-tree walker that produces plain text, entities and segments.

Every handler follows the same shape: open whatever the node opens, walk the
children, then close it. All mutable traversal state for one conversion lives
in a single ``WalkState`` so that block spacing, list nesting, table cells and
quote scopes are checked in one place.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Callable, Optional

from markdown_it.tree import SyntaxTreeNode

from ..core.buffer import TextBuffer
from ..core.config import MarkdownSymbols, RenderConfig
from ..core.entities import (
    ENTITY_BLOCKQUOTE,
    ENTITY_BOLD,
    ENTITY_CODE,
    ENTITY_CUSTOM_EMOJI,
    ENTITY_EXPANDABLE_BLOCKQUOTE,
    ENTITY_ITALIC,
    ENTITY_PRE,
    ENTITY_SPOILER,
    ENTITY_STRIKETHROUGH,
    ENTITY_TEXT_LINK,
    ENTITY_UNDERLINE,
    MessageEntity,
    ScopeStack,
)
from .preprocess import SPOILER_CLOSE_TAG, SPOILER_OPEN_TAG, validate_custom_emoji
from .segments import Segment, segment_kind_for_language
from .tables import format_table

BLOCK_SEPARATOR_NEWLINES = 2
LIST_INDENT = "  "
TASK_CHECKBOX_CLASS = "task-list-item-checkbox"
TASK_CHECKED_MARKER = 'checked="checked"'
AUTOLINK_MARKUPS = frozenset({"autolink", "linkify"})

HEADING_STYLES: dict[int, tuple[str, ...]] = {
    1: (ENTITY_BOLD, ENTITY_UNDERLINE),
    2: (ENTITY_BOLD, ENTITY_UNDERLINE),
    3: (ENTITY_BOLD,),
    4: (ENTITY_BOLD,),
    5: (ENTITY_ITALIC,),
    6: (ENTITY_ITALIC,),
}

INLINE_STYLES: dict[str, str] = {
    "strong": ENTITY_BOLD,
    "em": ENTITY_ITALIC,
    "s": ENTITY_STRIKETHROUGH,
}


@dataclass
class ListContext:
    ordered: bool
    next_number: int = 1

    @classmethod
    def for_node(cls, node: SyntaxTreeNode) -> "ListContext":
        if node.type == "ordered_list":
            return cls(ordered=True, next_number=int(node.attrs.get("start", 1)))
        return cls(ordered=False)


@dataclass
class TableState:
    rows: list[list[str]] = field(default_factory=list)
    current_row: list[str] = field(default_factory=list)
    cell_parts: Optional[list[str]] = None

    @property
    def in_cell(self) -> bool:
        return self.cell_parts is not None


@dataclass
class WalkState:
    """Traversal context owned by exactly one conversion call."""

    buffer: TextBuffer = field(default_factory=TextBuffer)
    scopes: ScopeStack = field(default_factory=ScopeStack)
    entities: list[MessageEntity] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    block_count: int = 0
    lists: list[ListContext] = field(default_factory=list)
    table: Optional[TableState] = None
    quote_starts: list[int] = field(default_factory=list)

    @property
    def in_list(self) -> bool:
        return bool(self.lists)

    @property
    def in_table_cell(self) -> bool:
        return self.table is not None and self.table.in_cell


class MarkdownWalker:
    """Convert a markdown-it syntax tree into text, entities and segments."""

    def __init__(self, config: RenderConfig) -> None:
        self._config = config
        self._symbols: MarkdownSymbols = config.symbols
        self._state = WalkState()
        self._handlers: dict[str, Callable[[SyntaxTreeNode], None]] = {
            "root": self._on_document,
            "text": self._on_text,
            "softbreak": self._on_softbreak,
            "hardbreak": self._on_hardbreak,
            "code_inline": self._on_inline_code,
            "strong": self._on_inline_style,
            "em": self._on_inline_style,
            "s": self._on_inline_style,
            "link": self._on_link,
            "image": self._on_image,
            "html_inline": self._on_inline_html,
            "html_block": self._skip,
            "paragraph": self._on_paragraph,
            "heading": self._on_heading,
            "blockquote": self._on_blockquote,
            "bullet_list": self._on_list,
            "ordered_list": self._on_list,
            "list_item": self._on_list_item,
            "fence": self._on_code_block,
            "code_block": self._on_code_block,
            "hr": self._on_rule,
            "table": self._on_table,
            "tr": self._on_table_row,
            "th": self._on_table_cell,
            "td": self._on_table_cell,
        }

    def walk(self, root: SyntaxTreeNode) -> tuple[str, list[MessageEntity], list[Segment]]:
        self._visit(root)
        state = self._state
        return state.buffer.getvalue(), list(state.entities), list(state.segments)

    # Dispatch

    def _visit(self, node: SyntaxTreeNode) -> None:
        handler = self._handlers.get(node.type)
        if handler is None:
            self._walk_children(node)
            return
        handler(node)

    def _walk_children(self, node: SyntaxTreeNode) -> None:
        for child in node.children:
            self._visit(child)

    def _skip(self, node: SyntaxTreeNode) -> None:
        return None

    # Output primitives

    def _emit(self, text: str) -> None:
        table = self._state.table
        if table is not None and table.cell_parts is not None:
            table.cell_parts.append(text)
            return
        self._state.buffer.write(text)

    def _offset(self) -> int:
        return self._state.buffer.utf16_offset()

    def _push(self, entity_type: str, **payload: Optional[str]) -> None:
        self._state.scopes.push(entity_type, self._offset(), **payload)

    def _pop(self, entity_type: str) -> None:
        self._record(self._state.scopes.pop(entity_type, self._offset()))

    def _pop_any(self) -> None:
        self._record(self._state.scopes.pop_any(self._offset()))

    def _record(self, entity: Optional[MessageEntity]) -> None:
        if entity is not None:
            self._state.entities.append(entity)

    def _add_entity(self, entity_type: str, start: int, **payload: Optional[str]) -> None:
        length = self._offset() - start
        if length > 0:
            self._state.entities.append(
                MessageEntity(type=entity_type, offset=start, length=length, **payload)
            )

    def _ensure_block_spacing(self) -> None:
        state = self._state
        if state.block_count <= 0:
            return
        needed = BLOCK_SEPARATOR_NEWLINES - state.buffer.trailing_newline_count()
        if needed > 0:
            state.buffer.write("\n" * needed)

    # Document

    def _on_document(self, node: SyntaxTreeNode) -> None:
        self._walk_children(node)
        if not self._config.cite_expandable:
            return
        threshold = self._config.expandable_blockquote_threshold
        self._state.entities = [
            dataclasses.replace(entity, type=ENTITY_EXPANDABLE_BLOCKQUOTE)
            if entity.type == ENTITY_BLOCKQUOTE and entity.length > threshold
            else entity
            for entity in self._state.entities
        ]

    # Inline

    def _on_text(self, node: SyntaxTreeNode) -> None:
        self._emit(node.content)

    def _on_softbreak(self, node: SyntaxTreeNode) -> None:
        # A soft break inside a table cell is a single space, never a newline.
        self._emit(" " if self._state.in_table_cell else "\n")

    def _on_hardbreak(self, node: SyntaxTreeNode) -> None:
        self._emit(" " if self._state.in_table_cell else "\n")

    def _on_inline_code(self, node: SyntaxTreeNode) -> None:
        if self._state.in_table_cell:
            self._emit(node.content)
            return
        start = self._offset()
        self._emit(node.content)
        self._add_entity(ENTITY_CODE, start)

    def _on_inline_style(self, node: SyntaxTreeNode) -> None:
        entity_type = INLINE_STYLES[node.type]
        self._push(entity_type)
        self._walk_children(node)
        self._pop(entity_type)

    def _on_link(self, node: SyntaxTreeNode) -> None:
        href = str(node.attrs.get("href", "") or "")
        if node.markup in AUTOLINK_MARKUPS:
            self._on_autolink(node, href)
            return
        emoji_id = validate_custom_emoji(href)
        if emoji_id:
            entity_type: Optional[str] = ENTITY_CUSTOM_EMOJI
            self._push(ENTITY_CUSTOM_EMOJI, custom_emoji_id=emoji_id)
        elif href:
            entity_type = ENTITY_TEXT_LINK
            self._push(ENTITY_TEXT_LINK, url=href)
        else:
            entity_type = None
        self._walk_children(node)
        if entity_type is not None:
            self._pop(entity_type)

    def _on_autolink(self, node: SyntaxTreeNode, href: str) -> None:
        label = "".join(child.content for child in node.children) or href
        if self._state.in_table_cell:
            self._emit(label)
            return
        start = self._offset()
        self._emit(label)
        self._add_entity(ENTITY_TEXT_LINK, start, url=href)

    def _on_image(self, node: SyntaxTreeNode) -> None:
        src = str(node.attrs.get("src", "") or "")
        emoji_id = validate_custom_emoji(src)
        if emoji_id:
            self._push(ENTITY_CUSTOM_EMOJI, custom_emoji_id=emoji_id)
        else:
            self._emit(self._symbols.image)
            self._push(ENTITY_TEXT_LINK, url=src)
        self._walk_children(node)
        self._pop_any()

    def _on_inline_html(self, node: SyntaxTreeNode) -> None:
        tag = node.content.strip().lower()
        if tag == SPOILER_OPEN_TAG:
            self._push(ENTITY_SPOILER)
        elif tag == SPOILER_CLOSE_TAG:
            self._pop(ENTITY_SPOILER)

    # Blocks

    def _on_paragraph(self, node: SyntaxTreeNode) -> None:
        state = self._state
        if not state.in_list:
            self._ensure_block_spacing()
        self._walk_children(node)
        if not state.in_list:
            state.block_count += 1
        elif state.buffer.trailing_newline_count() == 0:
            state.buffer.write("\n")

    def _on_heading(self, node: SyntaxTreeNode) -> None:
        level = int(node.tag[1:]) if node.tag[1:].isdigit() else 1
        self._ensure_block_spacing()
        symbol = self._symbols.heading(level)
        if symbol:
            self._emit(symbol + " ")
        styles = HEADING_STYLES.get(level, (ENTITY_BOLD,))
        for entity_type in styles:
            self._push(entity_type)
        self._walk_children(node)
        for entity_type in reversed(styles):
            self._pop(entity_type)
        self._state.block_count += 1

    def _on_blockquote(self, node: SyntaxTreeNode) -> None:
        state = self._state
        self._ensure_block_spacing()
        state.quote_starts.append(self._offset())
        self._walk_children(node)
        self._add_entity(ENTITY_BLOCKQUOTE, state.quote_starts.pop())
        state.block_count += 1

    def _on_list(self, node: SyntaxTreeNode) -> None:
        state = self._state
        if not state.in_list:
            self._ensure_block_spacing()
        state.lists.append(ListContext.for_node(node))
        self._walk_children(node)
        state.lists.pop()
        if not state.in_list:
            state.block_count += 1

    def _on_list_item(self, node: SyntaxTreeNode) -> None:
        state = self._state
        buffer = state.buffer
        if not buffer.is_empty() and buffer.trailing_newline_count() == 0:
            buffer.write("\n")
        indent = LIST_INDENT * (len(state.lists) - 1)
        context = state.lists[-1] if state.lists else ListContext(ordered=False)
        marker = self._list_marker(context)
        task = _task_checkbox(node)
        if task is not None:
            symbol = self._symbols.task_completed if task else self._symbols.task_uncompleted
            # The checkbox is followed by text that still carries its space.
            buffer.write(f"{indent}{symbol}")
        else:
            buffer.write(f"{indent}{marker}")
        self._walk_children(node)
        if buffer.trailing_newline_count() == 0:
            buffer.write("\n")

    def _list_marker(self, context: ListContext) -> str:
        if context.ordered:
            number = context.next_number
            context.next_number += 1
            return f"{number}. "
        return f"{self._symbols.bullet} "

    def _on_code_block(self, node: SyntaxTreeNode) -> None:
        state = self._state
        raw_code = node.content
        if raw_code.endswith("\n"):
            raw_code = raw_code[:-1]
        info = node.info.strip() if node.type == "fence" else ""
        language = info.split(maxsplit=1)[0] if info else ""
        language = language.split(",", 1)[0].strip()

        self._ensure_block_spacing()
        byte_start = state.buffer.byte_offset()
        start = self._offset()
        state.buffer.write(raw_code)
        if language:
            self._add_entity(ENTITY_PRE, start, language=language)
        else:
            self._add_entity(ENTITY_PRE, start)
        state.segments.append(
            Segment(
                kind=segment_kind_for_language(language),
                byte_start=byte_start,
                byte_end=state.buffer.byte_offset(),
                utf16_start=start,
                utf16_end=self._offset(),
                language=language,
                raw_code=raw_code,
            )
        )
        state.block_count += 1

    def _on_rule(self, node: SyntaxTreeNode) -> None:
        self._ensure_block_spacing()
        self._state.buffer.write(self._symbols.horizontal_rule)
        self._state.block_count += 1

    # Tables

    def _on_table(self, node: SyntaxTreeNode) -> None:
        state = self._state
        self._ensure_block_spacing()
        outer = state.table
        state.table = TableState()
        self._walk_children(node)
        rows = state.table.rows
        state.table = outer
        start = self._offset()
        self._emit(format_table(rows))
        self._add_entity(ENTITY_PRE, start)
        state.block_count += 1

    def _on_table_row(self, node: SyntaxTreeNode) -> None:
        table = self._state.table
        if table is None:
            self._walk_children(node)
            return
        table.current_row = []
        self._walk_children(node)
        table.rows.append(table.current_row)
        table.current_row = []

    def _on_table_cell(self, node: SyntaxTreeNode) -> None:
        table = self._state.table
        if table is None:
            self._walk_children(node)
            return
        table.cell_parts = []
        self._walk_children(node)
        table.current_row.append("".join(table.cell_parts))
        table.cell_parts = None


def _task_checkbox(item: SyntaxTreeNode) -> Optional[bool]:
    """Return the checkbox state when ``item`` is a task-list item, else None."""
    if not item.children or item.children[0].type != "paragraph":
        return None
    paragraph = item.children[0]
    if not paragraph.children or paragraph.children[0].type != "inline":
        return None
    inline = paragraph.children[0]
    if not inline.children or inline.children[0].type != "html_inline":
        return None
    checkbox = inline.children[0].content
    if TASK_CHECKBOX_CLASS not in checkbox:
        return None
    return TASK_CHECKED_MARKER in checkbox
