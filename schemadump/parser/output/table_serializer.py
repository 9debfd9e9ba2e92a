"""
Rendering of structured tables back into statement blocks.

The output uses the same statement grammar the table parser reads, so a
serialized table parses back into equal columns and indexes.
"""

import re

from schemadump.typing.dump import Column, Index, Table

from ..parsers.literal_parser import render_options, render_value
from ..shared.constants import DEFAULT_INDENT

_PLAIN_COLUMN = re.compile(r"\w+\Z")


class TableSerializer:
    """Serializes ``Table`` records into ``create_table`` blocks."""

    def __init__(self, indent: int = DEFAULT_INDENT):
        self.indent = " " * indent
        self.body_indent = " " * (indent * 2)

    def serialize(self, table: Table) -> str:
        """
        Render a table definition followed by a blank line.

        Tables kept verbatim in ``alt`` are returned unchanged.
        """
        if not table.is_structured:
            return table.alt if table.alt.endswith("\n") or not table.alt else table.alt + "\n"

        header = f"create_table {render_value(table.pname)}"
        if table.options:
            header += f", {table.options}"
        lines = [f"{self.indent}{header} do |t|"]
        lines.extend(f"{self.body_indent}{self.render_column(column)}" for column in table.columns)
        lines.extend(f"{self.body_indent}{statement}" for statement in table.unmatched)
        lines.extend(f"{self.body_indent}{self.render_index(index)}" for index in table.indexes)
        lines.append(f"{self.indent}end")
        lines.extend(f"{self.indent}{statement}" for statement in table.trailer)
        return "\n".join(lines) + "\n\n"

    def render_column(self, column: Column) -> str:
        """Render one column statement, comments appended after ``#``."""
        statement = f"t.{column.type} {render_value(column.name)}"
        if column.options:
            statement += f", {render_options(column.options)}"
        if column.comments:
            statement += "  # " + ", ".join(column.comments)
        return statement

    def render_index(self, index: Index) -> str:
        """
        Render one index statement.

        Plain column lists use the bracketed form; anything containing an
        expression is written as one quoted composite string.
        """
        if all(_PLAIN_COLUMN.match(column) for column in index.columns):
            columns = render_value(list(index.columns))
        else:
            columns = render_value(", ".join(index.columns))
        statement = f"t.index {columns}, name: {render_value(index.name)}"
        if index.options:
            statement += f", {render_options(index.options)}"
        return statement
