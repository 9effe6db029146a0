from __future__ import annotations

from pathlib import Path

import pytest

from telegramify.core.config import (
    CODE_BLOCK_EXTRACT_LINES,
    EXPANDABLE_BLOCKQUOTE_THRESHOLD,
    TELEGRAM_MAX_MESSAGE_LENGTH,
    MarkdownSymbols,
    RenderConfig,
    default_render_config,
    load_render_config,
)
from telegramify.core.exceptions import ConfigError


def test_defaults() -> None:
    config = default_render_config()
    assert config == RenderConfig()
    assert config.max_message_length == TELEGRAM_MAX_MESSAGE_LENGTH
    assert config.expandable_blockquote_threshold == EXPANDABLE_BLOCKQUOTE_THRESHOLD
    assert config.code_block_extract_lines == CODE_BLOCK_EXTRACT_LINES
    assert config.cite_expandable is True
    assert config.mermaid.enabled is True
    assert config.symbols.heading(1) == "📌"
    assert config.symbols.heading(7) == ""


def test_default_config_is_a_fresh_value() -> None:
    assert default_render_config() is not default_render_config()


def test_from_raw_reads_nested_sections() -> None:
    config = RenderConfig.from_raw(
        {
            "cite_expandable": False,
            "code_block_extract_lines": 10,
            "symbols": {"bullet": "-", "unknown": "x"},
            "mermaid": {"theme": "dark", "ink_base_url": "https://ink.test/"},
        }
    )
    assert config.cite_expandable is False
    assert config.code_block_extract_lines == 10
    assert config.symbols == MarkdownSymbols(bullet="-")
    assert config.mermaid.theme == "dark"
    assert config.mermaid.ink_base_url == "https://ink.test"


def test_from_raw_non_positive_ints_fall_back() -> None:
    config = RenderConfig.from_raw({"max_message_length": 0})
    assert config.max_message_length == TELEGRAM_MAX_MESSAGE_LENGTH


@pytest.mark.parametrize(
    "raw",
    [
        {"cite_expandable": "yes"},
        {"max_message_length": "lots"},
        {"symbols": ["bullet"]},
        {"symbols": {"bullet": 3}},
        {"mermaid": {"timeout_seconds": "soon"}},
        {"mermaid": "off"},
    ],
)
def test_from_raw_rejects_wrong_types(raw: dict) -> None:
    with pytest.raises(ConfigError):
        RenderConfig.from_raw(raw)


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_render_config(tmp_path / "missing.yml") == RenderConfig()


def test_load_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "render.yml"
    path.write_text(
        "max_message_length: 1000\nmermaid:\n  enabled: false\n", encoding="utf-8"
    )
    config = load_render_config(path)
    assert config.max_message_length == 1000
    assert config.mermaid.enabled is False


def test_load_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "render.yml"
    path.write_text("mermaid: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_render_config(path)


def test_load_non_mapping_raises(tmp_path: Path) -> None:
    path = tmp_path / "render.yml"
    path.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_render_config(path)
