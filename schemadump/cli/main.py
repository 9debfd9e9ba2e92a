"""
schemadump CLI Main Module

Command-line interface for reordering, inspecting and generating schema dumps.
"""

from typing import Any, Literal

import typer

from schemadump.cli.commands import cmd_duckdb, cmd_inspect, cmd_reorder
from schemadump.parser.shared.constants import EXPORT_FORMATS

# Type aliases for better type safety and IDE support
OutputFormat = Literal["json", "yaml"]


class AlphabeticalOrderGroup(typer.core.TyperGroup):
    """Custom Typer Group that lists commands in alphabetical order."""

    def list_commands(self, ctx: typer.Context) -> list[str]:
        return sorted(self.commands.keys())


def validate_format(value: str) -> OutputFormat:
    """Validate format option (json or yaml)."""
    if value not in EXPORT_FORMATS:
        raise typer.BadParameter(
            typer.style("Error: ", fg=typer.colors.RED, bold=True)
            + f"Invalid format '{value}'. Must be 'json' or 'yaml'."
        )
    return value  # type: ignore[return-value]


app = typer.Typer(
    name="schemadump",
    help="schemadump - capture, inspect and reorder schema dumps",
    add_completion=False,
    rich_markup_mode="rich",
    cls=AlphabeticalOrderGroup,
    invoke_without_command=True,
)


@app.callback()
def main_callback(ctx: typer.Context) -> None:
    """Main CLI callback - shows help when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# Common option definitions to reduce duplication
SCHEMA_FILE_ARG = typer.Argument(None, help="Path to the schema file")
OUTPUT_OPTION = typer.Option(None, "-o", "--output", help="Write to this file instead of stdout")
VERBOSE_OPTION = typer.Option(False, "-v", "--verbose", help="Enable verbose output")


def _check_required_argument(ctx: typer.Context, arg_name: str, arg_value: Any) -> None:
    """Check if a required argument is provided, show help if not."""
    if arg_value is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def reorder(
    ctx: typer.Context,
    schema_file: str | None = SCHEMA_FILE_ARG,
    output: str | None = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Rewrite a schema file with tables in dependency order."""
    _check_required_argument(ctx, "schema_file", schema_file)
    cmd_reorder(schema_file=schema_file, output=output, verbose=verbose)


@app.command()
def inspect(
    ctx: typer.Context,
    schema_file: str | None = SCHEMA_FILE_ARG,
    format: str = typer.Option(
        "json", "-f", "--format", help="Output format: json or yaml", callback=validate_format
    ),
    output: str | None = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the parsed tables, columns and indexes of a schema file."""
    _check_required_argument(ctx, "schema_file", schema_file)
    cmd_inspect(schema_file=schema_file, format=format, output=output, verbose=verbose)  # type: ignore[arg-type]


@app.command()
def duckdb(
    ctx: typer.Context,
    database: str | None = typer.Argument(None, help="Path to the DuckDB database file"),
    schema: str | None = typer.Option(None, "--schema", help="Schema to dump (default: main)"),
    output: str | None = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Dump the schema of a DuckDB database."""
    _check_required_argument(ctx, "database", database)
    cmd_duckdb(database=database, schema=schema, output=output, verbose=verbose)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
