from __future__ import annotations

from telegramify.core.entities import (
    ENTITY_BOLD,
    ENTITY_ITALIC,
    ENTITY_TEXT_LINK,
    EntityScope,
    MessageEntity,
    ScopeStack,
)


class TestMessageEntity:
    def test_to_dict_omits_unset_optionals(self) -> None:
        entity = MessageEntity(type=ENTITY_BOLD, offset=1, length=3)
        assert entity.to_dict() == {"type": "bold", "offset": 1, "length": 3}

    def test_to_dict_includes_payload(self) -> None:
        entity = MessageEntity(
            type=ENTITY_TEXT_LINK, offset=0, length=4, url="https://example.com"
        )
        assert entity.to_dict()["url"] == "https://example.com"
        assert "language" not in entity.to_dict()

    def test_with_span_keeps_payload(self) -> None:
        entity = MessageEntity(type="pre", offset=5, length=10, language="go")
        moved = entity.with_span(0, 3)
        assert moved == MessageEntity(type="pre", offset=0, length=3, language="go")
        assert moved.end == 3


class TestEntityScope:
    def test_close_builds_entity(self) -> None:
        scope = EntityScope(type=ENTITY_ITALIC, start_offset=2)
        assert scope.close(5) == MessageEntity(type=ENTITY_ITALIC, offset=2, length=3)

    def test_close_drops_empty_spans(self) -> None:
        scope = EntityScope(type=ENTITY_ITALIC, start_offset=2)
        assert scope.close(2) is None
        assert scope.close(1) is None


class TestScopeStack:
    def test_pop_by_type_searches_from_top(self) -> None:
        stack = ScopeStack()
        stack.push(ENTITY_BOLD, 0)
        stack.push(ENTITY_ITALIC, 2)

        bold = stack.pop(ENTITY_BOLD, 5)
        assert bold == MessageEntity(type=ENTITY_BOLD, offset=0, length=5)
        assert stack.open_types() == (ENTITY_ITALIC,)

        italic = stack.pop(ENTITY_ITALIC, 7)
        assert italic == MessageEntity(type=ENTITY_ITALIC, offset=2, length=5)
        assert len(stack) == 0

    def test_pop_unknown_type_is_noop(self) -> None:
        stack = ScopeStack()
        stack.push(ENTITY_BOLD, 0)
        assert stack.pop(ENTITY_ITALIC, 3) is None
        assert len(stack) == 1

    def test_pop_any_closes_most_recent(self) -> None:
        stack = ScopeStack()
        stack.push(ENTITY_BOLD, 0)
        stack.push(ENTITY_TEXT_LINK, 1, url="https://example.com/a.png")
        entity = stack.pop_any(4)
        assert entity is not None
        assert entity.type == ENTITY_TEXT_LINK
        assert entity.url == "https://example.com/a.png"
        assert stack.open_types() == (ENTITY_BOLD,)

    def test_pop_any_on_empty_stack(self) -> None:
        assert ScopeStack().pop_any(3) is None
