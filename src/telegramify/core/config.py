"""Render configuration.

Configuration is an explicit immutable value. Entry points accept an optional
``RenderConfig`` and build the defaults with ``default_render_config()`` when
none is given; nothing is cached at module level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

TELEGRAM_MAX_MESSAGE_LENGTH = 4096
EXPANDABLE_BLOCKQUOTE_THRESHOLD = 200
CODE_BLOCK_EXTRACT_LINES = 50
DEFAULT_MERMAID_TIMEOUT_SECONDS = 10.0
DEFAULT_MERMAID_MAX_ATTEMPTS = 2
DEFAULT_MERMAID_INK_BASE_URL = "https://mermaid.ink"
DEFAULT_MERMAID_LIVE_BASE_URL = "https://mermaid.live"


@dataclass(frozen=True)
class MarkdownSymbols:
    """Glyphs written in place of markup that has no entity equivalent."""

    heading_level_1: str = "📌"
    heading_level_2: str = "📝"
    heading_level_3: str = "📋"
    heading_level_4: str = "📄"
    heading_level_5: str = "📃"
    heading_level_6: str = "🔖"
    quote: str = "💬"
    image: str = "🖼"
    task_completed: str = "✅"
    task_uncompleted: str = "☑️"
    bullet: str = "⦁"
    horizontal_rule: str = "————————"

    def heading(self, level: int) -> str:
        return {
            1: self.heading_level_1,
            2: self.heading_level_2,
            3: self.heading_level_3,
            4: self.heading_level_4,
            5: self.heading_level_5,
            6: self.heading_level_6,
        }.get(level, "")


@dataclass(frozen=True)
class MermaidConfig:
    enabled: bool = True
    theme: str = "default"
    timeout_seconds: float = DEFAULT_MERMAID_TIMEOUT_SECONDS
    max_attempts: int = DEFAULT_MERMAID_MAX_ATTEMPTS
    ink_base_url: str = DEFAULT_MERMAID_INK_BASE_URL
    live_base_url: str = DEFAULT_MERMAID_LIVE_BASE_URL


@dataclass(frozen=True)
class RenderConfig:
    symbols: MarkdownSymbols = field(default_factory=MarkdownSymbols)
    cite_expandable: bool = True
    expandable_blockquote_threshold: int = EXPANDABLE_BLOCKQUOTE_THRESHOLD
    code_block_extract_lines: int = CODE_BLOCK_EXTRACT_LINES
    max_message_length: int = TELEGRAM_MAX_MESSAGE_LENGTH
    latex_escape: bool = True
    mermaid: MermaidConfig = field(default_factory=MermaidConfig)

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]]) -> "RenderConfig":
        cfg: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

        symbols_raw = cfg.get("symbols")
        if symbols_raw is not None and not isinstance(symbols_raw, Mapping):
            raise ConfigError("symbols must be a mapping")
        symbols = MarkdownSymbols(
            **{
                name: _parse_str(value, key=f"symbols.{name}")
                for name, value in (symbols_raw or {}).items()
                if name in MarkdownSymbols.__dataclass_fields__
            }
        )

        mermaid_raw = cfg.get("mermaid")
        if mermaid_raw is not None and not isinstance(mermaid_raw, Mapping):
            raise ConfigError("mermaid must be a mapping")
        mermaid_cfg: Mapping[str, Any] = mermaid_raw or {}
        timeout_seconds = mermaid_cfg.get(
            "timeout_seconds", DEFAULT_MERMAID_TIMEOUT_SECONDS
        )
        if isinstance(timeout_seconds, bool) or not isinstance(
            timeout_seconds, (int, float)
        ):
            raise ConfigError("mermaid.timeout_seconds must be a number")
        if timeout_seconds <= 0:
            timeout_seconds = DEFAULT_MERMAID_TIMEOUT_SECONDS
        mermaid = MermaidConfig(
            enabled=_parse_bool_or_default(
                mermaid_cfg.get("enabled"), default=True, key="mermaid.enabled"
            ),
            theme=_parse_str(mermaid_cfg.get("theme", "default"), key="mermaid.theme"),
            timeout_seconds=float(timeout_seconds),
            max_attempts=_parse_positive_int_or_default(
                mermaid_cfg.get("max_attempts"),
                default=DEFAULT_MERMAID_MAX_ATTEMPTS,
                key="mermaid.max_attempts",
            ),
            ink_base_url=_parse_str(
                mermaid_cfg.get("ink_base_url", DEFAULT_MERMAID_INK_BASE_URL),
                key="mermaid.ink_base_url",
            ).rstrip("/"),
            live_base_url=_parse_str(
                mermaid_cfg.get("live_base_url", DEFAULT_MERMAID_LIVE_BASE_URL),
                key="mermaid.live_base_url",
            ).rstrip("/"),
        )

        return cls(
            symbols=symbols,
            cite_expandable=_parse_bool_or_default(
                cfg.get("cite_expandable"), default=True, key="cite_expandable"
            ),
            expandable_blockquote_threshold=_parse_positive_int_or_default(
                cfg.get("expandable_blockquote_threshold"),
                default=EXPANDABLE_BLOCKQUOTE_THRESHOLD,
                key="expandable_blockquote_threshold",
            ),
            code_block_extract_lines=_parse_positive_int_or_default(
                cfg.get("code_block_extract_lines"),
                default=CODE_BLOCK_EXTRACT_LINES,
                key="code_block_extract_lines",
            ),
            max_message_length=_parse_positive_int_or_default(
                cfg.get("max_message_length"),
                default=TELEGRAM_MAX_MESSAGE_LENGTH,
                key="max_message_length",
            ),
            latex_escape=_parse_bool_or_default(
                cfg.get("latex_escape"), default=True, key="latex_escape"
            ),
            mermaid=mermaid,
        )


def default_render_config() -> RenderConfig:
    return RenderConfig()


def load_render_config(path: Union[str, Path]) -> RenderConfig:
    """Load a ``RenderConfig`` from a YAML file; a missing file yields defaults."""
    config_path = Path(path)
    if not config_path.exists():
        logger.debug("Render config %s not found; using defaults", config_path)
        return default_render_config()
    return RenderConfig.from_raw(_load_yaml_dict(config_path))


def _load_yaml_dict(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def _parse_str(value: Any, *, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _parse_positive_int_or_default(value: Any, *, default: int, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer") from exc
    if parsed <= 0:
        return default
    return parsed


def _parse_bool_or_default(value: Any, *, default: bool, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be a boolean")
