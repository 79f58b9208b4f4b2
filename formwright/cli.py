# formwright/cli.py
"""
CLI interface for formwright.

Thin presentation layer over the tools/ service layer. Command output goes
to stdout; logs and errors go to stderr.
"""

import asyncio
import json
from pathlib import Path

import typer

from formwright.logging_config import configure_logging

app = typer.Typer(
    name="formwright",
    help="Manage dynamic form schemas: list, inspect, import, export and validate.",
    no_args_is_help=True,
)


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


async def _get_store(config):
    """Open the schema store selected by config.store.backend."""
    if config.store.backend == "memory":
        from formwright.models.memory_store import InMemorySchemaStore

        return InMemorySchemaStore()

    from formwright.config.loader import resolve_db_path
    from formwright.models.sqlite_store import SQLiteSchemaStore

    store = SQLiteSchemaStore(resolve_db_path(config))
    await store.initialize()
    return store


def _load_config(config_path: Path | None = None):
    from formwright.config.loader import load_config

    return load_config(config_path)


def _fail(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings and errors only"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
):
    """Dynamic form schema engine."""
    config = _load_config(config_path)

    verbosity = config.output.verbosity
    if verbose:
        verbosity = "verbose"
    elif quiet:
        verbosity = "quiet"
    configure_logging(verbosity, json_logs or config.output.json_logs)

    ctx.obj = config


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    entity_type: str = typer.Option(None, "--entity-type", "-e", help="Filter by entity type"),
):
    """List stored schemas."""
    from rich.console import Console
    from rich.table import Table

    from formwright.tools.list_schemas import list_schemas

    async def _list():
        store = await _get_store(ctx.obj)
        try:
            return await list_schemas(store, entity_type=entity_type)
        finally:
            await store.close()

    result = _run(_list())
    schemas = result["schemas"]

    if not schemas:
        typer.echo("No schemas found.")
        return

    table = Table(show_edge=False)
    table.add_column("KEY", style="cyan", no_wrap=True)
    table.add_column("ENTITY")
    table.add_column("FIELDS", justify="right")
    table.add_column("CASCADING", style="magenta")
    table.add_column("NAME")

    for s in schemas:
        table.add_row(
            s["key"],
            s["entity_type"],
            str(s["field_count"]),
            ", ".join(s["cascading_fields"]) or "-",
            s["name"],
        )

    Console().print(table)


@app.command()
def show(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Schema key (e.g. student_form)"),
    fallback: bool = typer.Option(
        True, "--fallback/--no-fallback", help="Use the entity default if nothing is stored"
    ),
):
    """Print a schema record as JSON."""
    from formwright.tools.get_schema import get_schema

    async def _show():
        store = await _get_store(ctx.obj)
        try:
            return await get_schema(key, store, fallback=fallback)
        finally:
            await store.close()

    try:
        result = _run(_show())
    except Exception as e:
        _fail(e)

    if result["from_default"]:
        typer.echo(f"'{key}' not stored; showing default schema {result['key']}", err=True)
    typer.echo(json.dumps(result["record"], indent=2, ensure_ascii=False))


@app.command()
def default(
    ctx: typer.Context,
    entity_type: str = typer.Argument(..., help="Entity type (student, teacher, class, ...)"),
):
    """Create (if missing) and print the default schema of an entity type."""
    from formwright.tools.get_schema import get_default_schema

    async def _default():
        store = await _get_store(ctx.obj)
        try:
            return await get_default_schema(entity_type, store)
        finally:
            await store.close()

    try:
        result = _run(_default())
    except Exception as e:
        _fail(e)

    typer.echo(json.dumps(result["record"], indent=2, ensure_ascii=False))


@app.command()
def export(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Schema key"),
    path: Path = typer.Argument(..., help="Destination JSON file"),
):
    """Export a stored schema to a JSON file."""
    from formwright.tools.export_schema import export_schema

    async def _export():
        store = await _get_store(ctx.obj)
        try:
            return await export_schema(key, path, store)
        finally:
            await store.close()

    try:
        result = _run(_export())
    except Exception as e:
        _fail(e)

    typer.echo(f"Exported {result['key']} ({result['field_count']} fields) to {result['path']}")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="JSON file holding a schema record"),
    key: str = typer.Option(None, "--key", "-k", help="Store under this key"),
    entity_type: str = typer.Option(None, "--entity-type", "-e", help="Override entity type"),
):
    """Import a schema record from a JSON file."""
    from formwright.tools.import_schema import import_schema

    async def _import():
        store = await _get_store(ctx.obj)
        try:
            return await import_schema(path, store, key=key, entity_type=entity_type)
        finally:
            await store.close()

    try:
        result = _run(_import())
    except Exception as e:
        _fail(e)

    field_count = len(result["record"].get("fields", []))
    typer.echo(f"Imported {result['key']} ({field_count} fields)")


@app.command()
def validate(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Schema key"),
    values_path: Path = typer.Argument(..., help="JSON file holding a value map"),
):
    """Validate a value map against a schema. Exits 1 if invalid."""
    from formwright.resolver.lookups import HttpOptionLookup
    from formwright.tools.validate_values import validate_values

    config = ctx.obj

    try:
        values = json.loads(values_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        _fail(e)
    if not isinstance(values, dict):
        _fail(ValueError(f"{values_path} must hold a JSON object"))

    async def _validate():
        store = await _get_store(config)
        try:
            if config.lookup.base_url:
                async with HttpOptionLookup.from_config(config.lookup) as lookup:
                    return await validate_values(key, values, store, lookup=lookup)
            return await validate_values(key, values, store)
        finally:
            await store.close()

    try:
        result = _run(_validate())
    except Exception as e:
        _fail(e)

    for name in result["cleared"]:
        typer.echo(typer.style(f"cleared  {name}", fg=typer.colors.YELLOW), err=True)

    if result["valid"]:
        typer.echo(typer.style(f"{result['key']}: valid", fg=typer.colors.GREEN))
        typer.echo(json.dumps(result["values"], indent=2, ensure_ascii=False, default=str))
        return

    typer.echo(typer.style(f"{result['key']}: {len(result['errors'])} error(s)", fg=typer.colors.RED))
    for name, message in result["errors"].items():
        typer.echo(f"  {name}: {message}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
