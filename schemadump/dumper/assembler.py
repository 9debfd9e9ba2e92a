"""
Assembly of a captured dump into the final schema text.
"""

import logging
from typing import TextIO

from schemadump.parser.analysis.dependency_graph import TableDependencyGraph
from schemadump.parser.output.table_serializer import TableSerializer
from schemadump.parser.shared.constants import DEFAULT_INDENT
from schemadump.typing.dump import SchemaDump


class DumpAssembler:
    """
    Writes a dump in phase order: header, initial statements, extensions,
    types, tables (dependencies first), foreign keys, trailer.
    """

    def __init__(
        self,
        indent: int = DEFAULT_INDENT,
        graph: TableDependencyGraph | None = None,
        serializer: TableSerializer | None = None,
    ):
        self.indent = " " * indent
        self.graph = graph or TableDependencyGraph()
        self.serializer = serializer or TableSerializer(indent=indent)
        self.logger = logging.getLogger(self.__class__.__name__)

    def assemble(self, dump: SchemaDump, stream: TextIO) -> None:
        """
        Write the dump to a stream.

        The whole text is rendered before anything is written, so a failure
        leaves the stream untouched.

        Raises:
            CircularDependencyError: If the tables cannot be ordered
        """
        stream.write(self.render(dump))

    def render(self, dump: SchemaDump) -> str:
        """Render the dump as text."""
        order = self.graph.table_order(dump)
        self.logger.debug(f"Table order: {' -> '.join(order)}")

        chunks: list[str] = []
        _puts(chunks, dump.header)
        for statement in dump.initial:
            _puts(chunks, f"{self.indent}{statement}")
        for extension in dump.extensions:
            _puts(chunks, extension)
        for type_block in dump.types:
            _puts(chunks, type_block)
        for name in order:
            chunks.append(self.serializer.serialize(dump.tables[name]))
        for statement in dump.final:
            _puts(chunks, f"{self.indent}{statement}")
        _puts(chunks, dump.trailer)
        return "".join(chunks)


def _puts(chunks: list[str], text: str) -> None:
    """Append non-empty text, adding a newline unless it already ends with one."""
    if not text:
        return
    chunks.append(text if text.endswith("\n") else text + "\n")
