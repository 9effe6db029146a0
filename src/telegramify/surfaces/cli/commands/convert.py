import asyncio
import dataclasses
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from ....core.utf16 import utf16_len
from ....pipeline import content_to_dict, telegramify
from .utils import configure_logging, read_source, require_render_config

logger = logging.getLogger("telegramify.cli")


def register_convert_commands(app: typer.Typer) -> None:
    @app.command(name="convert")
    def convert_command(
        path: Optional[str] = typer.Argument(
            None, help="Markdown file to convert ('-' or omitted reads stdin)"
        ),
        max_length: Optional[int] = typer.Option(
            None,
            "--max-length",
            help="Maximum UTF-16 length of each text message (config value by default)",
        ),
        latex: Optional[bool] = typer.Option(
            None, "--latex/--no-latex", help="Translate \\(...\\) and \\[...\\] math"
        ),
        diagrams: bool = typer.Option(
            True,
            "--diagrams/--no-diagrams",
            help="Render mermaid blocks through mermaid.ink",
        ),
        config_path: Optional[Path] = typer.Option(
            None, "--config", help="YAML render configuration file"
        ),
        log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    ) -> None:
        """Convert markdown into Telegram messages and print them as JSON."""
        configure_logging(log_level)
        config = require_render_config(config_path)
        if not diagrams:
            config = dataclasses.replace(
                config, mermaid=dataclasses.replace(config.mermaid, enabled=False)
            )
        source = read_source(path)
        artifacts = asyncio.run(
            telegramify(
                source,
                max_message_length=max_length,
                latex_escape=latex,
                config=config,
            )
        )
        logger.debug("Produced %d artifacts", len(artifacts))
        typer.echo(
            json.dumps(
                [content_to_dict(item) for item in artifacts],
                ensure_ascii=False,
                indent=2,
            )
        )

    @app.command(name="count")
    def count_command(
        path: Optional[str] = typer.Argument(
            None, help="Text file to measure ('-' or omitted reads stdin)"
        ),
    ) -> None:
        """Print the UTF-16 length Telegram counts for the text."""
        typer.echo(str(utf16_len(read_source(path))))
