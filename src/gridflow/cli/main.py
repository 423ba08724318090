"""Main CLI application using Typer."""

import asyncio
import json
import re
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from gridflow.core.registry import ModuleRegistry, default_registry

app = typer.Typer(help="Gridflow: filter, sort and page tabular data")

_FILTER_PATTERN = re.compile(
    r"^\s*(?P<field>[^<>=!~\s]+)\s*(?P<op>>=|<=|!=|>|<|=|~)\s*(?P<value>.*)$"
)
_FILTER_OPERATORS = {
    "=": "equals",
    "~": "like",
    "!=": "!=",
    ">": ">",
    ">=": ">=",
    "<": "<",
    "<=": "<=",
}

# --------------------------------------------------------------------------- #
# Global registry (lazily populated via entry points on first access)
# --------------------------------------------------------------------------- #
_module_registry: ModuleRegistry | None = None


def get_module_registry() -> ModuleRegistry:
    """Return the global module registry, loading entry points on first call."""
    global _module_registry
    if _module_registry is None:
        _module_registry = default_registry()
    return _module_registry


def parse_filter(expression: str) -> tuple[str, str, str]:
    """
    Split ``FIELD OP VALUE`` into its parts.

    ``=`` means equals and ``~`` a case-insensitive substring match; the
    relational operators keep their usual meaning.

    Raises:
        ValueError: If the expression has no recognised operator
    """
    match = _FILTER_PATTERN.match(expression)
    if match is None:
        raise ValueError(f"Cannot parse filter {expression!r}; expected FIELD OP VALUE")
    return match["field"], _FILTER_OPERATORS[match["op"]], match["value"].strip()


def _read_config(config: str | None) -> dict[str, Any]:
    if config is None:
        return {}
    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: Config file not found: {config}", err=True)
        raise typer.Exit(code=1) from None

    with open(config_path) as f:
        config_dict = yaml.safe_load(f) or {}
    if not isinstance(config_dict, dict):
        typer.echo(f"Error: Config file must contain a mapping: {config}", err=True)
        raise typer.Exit(code=1) from None
    return config_dict


async def _render_page(
    options: dict[str, Any],
    filters: list[tuple[str, str, str]],
    sort: str | None,
    direction: str | None,
    page: int,
) -> dict[str, Any]:
    from gridflow.core.grid import DataGrid

    grid = DataGrid(options, registry=get_module_registry())
    try:
        # Filters and sort are staged before init so the first render applies them.
        for field, operator, value in filters:
            column = grid.context.columns.get(field)
            await grid.set_filter(field, value, operator, column.type)
        if sort:
            await grid.sort_by(sort, direction)

        await grid.init()
        current = 1
        total_pages = 1
        if "pager" in grid.context.modules:
            current = await grid.go_to_page(page)
            total_pages = grid.module("pager").engine.total_pages()

        return {
            "page": current,
            "total_pages": total_pages,
            "row_count": len(grid.rows),
            "rows": grid.context.renderer.rows,
        }
    finally:
        await grid.aclose()


@app.command()
def render(
    data: str = typer.Option(..., help="CSV, JSON, NDJSON or Parquet file with the rows"),
    config: str | None = typer.Option(None, help="Path to grid settings YAML"),
    filters: Annotated[
        list[str] | None,
        typer.Option("--filter", help="Filter as FIELD OP VALUE, e.g. 'amount>10' (repeatable)"),
    ] = None,
    sort: str | None = typer.Option(None, help="Column to sort by"),
    direction: str | None = typer.Option(None, help="Sort direction: asc or desc"),
    page: int = typer.Option(1, help="Page to show"),
) -> None:
    """
    Filter, sort and page a data file and print the page as JSON.

    Example:
        gridflow render --data orders.csv --filter 'amount>10' --sort amount --page 2
    """
    from gridflow.core.loaders import infer_column_types, read_frame

    options = _read_config(config)
    try:
        frame = read_frame(data)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    options["data"] = frame.to_dicts()
    if not options.get("columns"):
        options["columns"] = [
            {"field": name, "type": field_type}
            for name, field_type in infer_column_types(frame).items()
        ]

    try:
        parsed = [parse_filter(expression) for expression in filters or []]
        result = asyncio.run(_render_page(options, parsed, sort, direction, page))
    except (KeyError, ValueError, ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    typer.echo(json.dumps(result, indent=2, default=str))


@app.command()
def validate(
    config: str = typer.Option(..., help="Path to grid settings YAML to validate"),
) -> None:
    """Validate a grid settings file."""
    from gridflow.core.schema import merge_settings

    config_dict = _read_config(config)
    try:
        settings = merge_settings(config_dict)
    except ValidationError as e:
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1) from None

    mode = "remote" if settings.remote_processing else "local"
    typer.echo(f"✓ Valid grid configuration: {config}")
    typer.echo(f"  {len(settings.columns)} columns, {mode} processing")


@app.command()
def version() -> None:
    """Show gridflow version."""
    from gridflow import __version__

    typer.echo(f"gridflow version {__version__}")


# --------------------------------------------------------------------------- #
# Registry inspection commands
# --------------------------------------------------------------------------- #


@app.command()
def list_modules(
    tag: Annotated[str | None, typer.Option(help="Filter modules by tag")] = None,
) -> None:
    """List registered grid modules in render-stage order."""
    registry = get_module_registry()
    specs = registry.list(tag=tag)

    if not specs:
        typer.echo("No modules registered" + (f" with tag '{tag}'" if tag else ""))
        return

    typer.echo("Registered modules:")
    for spec in specs:
        tags_str = ", ".join(sorted(spec.tags)) if spec.tags else "none"
        desc = spec.description or ""
        typer.echo(f"  {spec.name}  [stage: {spec.stage.name.lower()}, tags: {tags_str}]")
        if desc:
            typer.echo(f"      {desc}")


if __name__ == "__main__":
    app()
