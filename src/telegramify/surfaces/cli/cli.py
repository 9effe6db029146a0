import logging

import typer

from .commands.convert import register_convert_commands
from .commands.utils import get_telegramify_version

logger = logging.getLogger("telegramify.cli")

app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"telegramify {get_telegramify_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    return


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


register_convert_commands(app)
