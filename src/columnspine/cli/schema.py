"""
CLI: ``columnspine schema`` -- inspect and provision entity schema.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable
from typing import Any

import typer
from rich.console import Console
from rich.syntax import Syntax

from columnspine.core.errors import ColumnSpineError
from columnspine.entities.types import EntityDefinition, PipelineMode
from columnspine.pipelines.cassandra import CassandraEntityPipeline
from columnspine.pipelines.cql import create_index_statements, create_table_statement

app = typer.Typer(no_args_is_help=True)

console = Console()
err_console = Console(stderr=True)


def load_entities(target: str) -> list[EntityDefinition | type]:
    """Resolve ``module:attr`` to a list of entity models or definitions."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected MODULE:ATTR, got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Can not import {module_name}: {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise typer.BadParameter(f"{module_name} has no attribute {attr}") from None

    if isinstance(obj, (EntityDefinition, type)):
        return [obj]
    if isinstance(obj, Iterable) and not isinstance(obj, (str, bytes)):
        return list(obj)
    raise typer.BadParameter(f"{target} is not an entity or a collection of entities")


def _register(pipeline: CassandraEntityPipeline, entities: list[EntityDefinition | type]) -> None:
    try:
        for entity in entities:
            pipeline.add_entity(entity)
    except ColumnSpineError as e:
        err_console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
        raise typer.Exit(code=1) from e


@app.command()
def show(
    target: str = typer.Argument(..., help="Entity model(s) as MODULE:ATTR"),
    default_mode: PipelineMode = typer.Option(
        PipelineMode.INSERT, "--default-mode", help="Default pipeline mode"
    ),
) -> None:
    """Print the CQL generated for entities without connecting."""
    try:
        pipeline = CassandraEntityPipeline(default_pipeline_mode=default_mode)
    except ColumnSpineError as e:
        err_console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
        raise typer.Exit(code=1) from e
    _register(pipeline, load_entities(target))

    for adapter in pipeline.registry:
        console.rule(f"{adapter.name} ({adapter.pipeline_mode.value})")
        try:
            statements = [create_table_statement(adapter), *create_index_statements(adapter)]
        except ColumnSpineError as e:
            err_console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
            raise typer.Exit(code=1) from e
        statements.append(adapter.insert_statement)
        console.print(Syntax("\n".join(statements), "sql", word_wrap=True))


@app.command()
def init(
    target: str = typer.Argument(..., help="Entity model(s) as MODULE:ATTR"),
    connection_string: str | None = typer.Option(
        None, "--connection-string", "-c", help="Host=...;Port=...; (defaults to settings)"
    ),
) -> None:
    """Create keyspaces, tables and indexes for entities."""
    if connection_string:
        pipeline = CassandraEntityPipeline(connection_string)
    else:
        pipeline = CassandraEntityPipeline.from_settings()
    _register(pipeline, load_entities(target))

    try:
        pipeline.init()
    except ColumnSpineError as e:
        err_console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
        raise typer.Exit(code=1) from e
    finally:
        names = pipeline.registry.names()
        pipeline.dispose()

    console.print(f"[green]Provisioned[/green] {', '.join(names) or 'no entities'}")
