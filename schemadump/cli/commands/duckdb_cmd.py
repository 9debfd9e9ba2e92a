"""
DuckDB command implementation.
"""

from pathlib import Path

from schemadump.cli.context import CommandContext
from schemadump.cli.utils import write_output
from schemadump.dumper import DuckDBSchemaGenerator, SchemaDumper
from schemadump.parser.shared.exceptions import SchemaDumpError


def cmd_duckdb(
    database: str,
    schema: str | None = None,
    output: str | None = None,
    verbose: bool = False,
) -> None:
    """
    Dump the schema of a DuckDB database.

    Args:
        database: Path to the DuckDB database file
        schema: Schema to dump (defaults to the configured schema, then "main")
        output: Destination file (stdout when omitted)
        verbose: Enable verbose output
    """
    ctx = CommandContext(verbose=verbose, schema=schema)

    try:
        if database != ":memory:" and not Path(database).exists():
            raise FileNotFoundError(f"Database file not found: {database}")
        generator = DuckDBSchemaGenerator(database, config=ctx.config)
        write_output(SchemaDumper(generator).dumps(), output)
    except (SchemaDumpError, FileNotFoundError) as e:
        ctx.handle_error(e)
