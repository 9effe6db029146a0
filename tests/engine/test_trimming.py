from __future__ import annotations

from telegramify.core.entities import MessageEntity
from telegramify.engine import strip_newlines_adjust, trim_whitespace


def test_strips_newline_runs_and_rebases() -> None:
    text, entities = strip_newlines_adjust(
        "\n\nhello\n", [MessageEntity(type="bold", offset=2, length=5)]
    )
    assert text == "hello"
    assert entities == [MessageEntity(type="bold", offset=0, length=5)]


def test_entities_overlapping_removed_runs_are_clipped() -> None:
    text, entities = strip_newlines_adjust(
        "\n\nhello\n\n",
        [
            MessageEntity(type="bold", offset=0, length=4),
            MessageEntity(type="italic", offset=5, length=4),
        ],
    )
    assert text == "hello"
    assert entities == [
        MessageEntity(type="bold", offset=0, length=2),
        MessageEntity(type="italic", offset=3, length=2),
    ]


def test_entities_inside_removed_runs_are_dropped() -> None:
    _text, entities = strip_newlines_adjust(
        "\n\nhi\n\n",
        [
            MessageEntity(type="bold", offset=0, length=2),
            MessageEntity(type="italic", offset=4, length=2),
        ],
    )
    assert entities == []


def test_only_newlines_reduces_to_empty() -> None:
    assert strip_newlines_adjust("\n\n\n", [MessageEntity("bold", 0, 3)]) == ("", [])
    assert strip_newlines_adjust("", []) == ("", [])


def test_trim_is_idempotent() -> None:
    entities = [MessageEntity(type="bold", offset=1, length=2)]
    once = strip_newlines_adjust("\nhi\n", entities)
    twice = strip_newlines_adjust(*once)
    assert once == twice == ("hi", [MessageEntity(type="bold", offset=0, length=2)])


def test_surrogate_pairs_in_leading_run_are_not_involved() -> None:
    text, entities = strip_newlines_adjust(
        "\n😀x", [MessageEntity(type="bold", offset=1, length=3)]
    )
    assert text == "😀x"
    assert entities == [MessageEntity(type="bold", offset=0, length=3)]


def test_inner_whitespace_is_kept() -> None:
    text, _entities = strip_newlines_adjust("\n a \n", [])
    assert text == " a "


def test_trim_whitespace_strips_spaces_and_tabs() -> None:
    text, entities = trim_whitespace(
        "  hi \t\r\n", [MessageEntity(type="italic", offset=2, length=2)]
    )
    assert text == "hi"
    assert entities == [MessageEntity(type="italic", offset=0, length=2)]


def test_trim_whitespace_blank_input() -> None:
    assert trim_whitespace(" \t\n", []) == ("", [])
