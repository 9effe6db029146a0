from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from ....core.config import RenderConfig, default_render_config, load_render_config
from ....core.exceptions import ConfigError

STDIN_MARKER = "-"


def get_telegramify_version() -> str:
    import importlib.metadata

    try:
        return importlib.metadata.version("telegramify")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def raise_exit(message: str, *, cause: Optional[BaseException] = None) -> NoReturn:
    typer.echo(message, err=True)
    if cause is not None:
        raise typer.Exit(code=1) from cause
    raise typer.Exit(code=1)


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise_exit(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def read_source(path: Optional[str]) -> str:
    if path is None or path == STDIN_MARKER:
        return sys.stdin.read()
    source_path = Path(path)
    try:
        return source_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise_exit(f"Failed to read {source_path}: {exc}", cause=exc)


def require_render_config(path: Optional[Path]) -> RenderConfig:
    if path is None:
        return default_render_config()
    if not path.exists():
        raise_exit(f"Config file not found: {path}")
    try:
        return load_render_config(path)
    except ConfigError as exc:
        raise_exit(f"Invalid config: {exc}", cause=exc)
