"""
Inspect command implementation.
"""

from typing import Literal

from schemadump.cli.context import CommandContext
from schemadump.cli.utils import write_output
from schemadump.dumper import SchemaDumper, SchemaFileGenerator
from schemadump.parser.output import DumpExporter
from schemadump.parser.shared.exceptions import SchemaDumpError

# Type alias for output format
OutputFormat = Literal["json", "yaml"]


def cmd_inspect(
    schema_file: str,
    format: OutputFormat = "json",
    output: str | None = None,
    verbose: bool = False,
) -> None:
    """
    Print the structured contents of a schema file.

    Args:
        schema_file: Path to the schema file
        format: Output format ("json" or "yaml")
        output: Destination file (stdout when omitted)
        verbose: Enable verbose output
    """
    ctx = CommandContext(verbose=verbose)

    try:
        generator = SchemaFileGenerator.from_file(schema_file, config=ctx.config)
        dump = SchemaDumper(generator).capture()
        write_output(DumpExporter().render(dump, format), output)
    except SchemaDumpError as e:
        ctx.handle_error(e)
