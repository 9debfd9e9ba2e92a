"""
Reorder command implementation.
"""

from schemadump.cli.context import CommandContext
from schemadump.cli.utils import write_output
from schemadump.dumper import SchemaDumper, SchemaFileGenerator
from schemadump.parser.shared.exceptions import SchemaDumpError


def cmd_reorder(
    schema_file: str,
    output: str | None = None,
    verbose: bool = False,
) -> None:
    """
    Rewrite a schema file with its tables in dependency order.

    Args:
        schema_file: Path to the schema file
        output: Destination file (stdout when omitted)
        verbose: Enable verbose output
    """
    ctx = CommandContext(verbose=verbose)

    try:
        generator = SchemaFileGenerator.from_file(schema_file, config=ctx.config)
        write_output(SchemaDumper(generator).dumps(), output)
    except SchemaDumpError as e:
        ctx.handle_error(e)
