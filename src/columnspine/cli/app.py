"""
Root Typer application for the columnspine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from columnspine.cli.schema import app as schema_app
from columnspine.core.logging import configure_logging
from columnspine.core.settings import get_settings

app = Typer(
    name="columnspine",
    help="columnspine: persist extracted entities into Cassandra.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from columnspine import __version__

        typer.echo(f"columnspine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """columnspine CLI: inspect and provision entity schema."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


app.add_typer(schema_app, name="schema", help="Entity schema operations.")


if __name__ == "__main__":
    app()
