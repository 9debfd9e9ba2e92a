"""
In-memory model of a captured schema dump.

A ``SchemaDump`` is created once per dump invocation, filled phase by phase
by the interceptor and read once by the assembler.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Column:
    """A single column statement of a table body."""

    name: str
    type: str
    options: dict[str, Any] = field(default_factory=dict)
    comments: list[str] = field(default_factory=list)


@dataclass
class Index:
    """An index statement of a table body."""

    name: str
    columns: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class Table:
    """
    One table definition.

    Either ``alt`` holds the verbatim text of a definition that could not be
    parsed, or the structured fields describe the table. Never both.
    """

    name: str
    pname: str | None = None
    options: str = ""
    trailer: list[str] = field(default_factory=list)
    columns: list[Column] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    alt: str = ""

    @property
    def is_structured(self) -> bool:
        """True when the definition was parsed into columns and indexes."""
        return self.pname is not None

    def column(self, name: str) -> Column | None:
        """Look up a column by name."""
        return next((column for column in self.columns if column.name == name), None)

    def option_values(self) -> dict[str, Any]:
        """Decode the raw ``create_table`` option fragment."""
        # Import here to avoid circular dependencies
        from schemadump.parser.parsers.literal_parser import LiteralParser

        return LiteralParser().parse(self.options)


@dataclass
class SchemaDump:
    """Accumulator for every phase of one schema dump."""

    header: str = ""
    extensions: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    tables: dict[str, Table] = field(default_factory=dict)
    final: list[str] = field(default_factory=list)
    trailer: str = ""
    initial: list[str] = field(default_factory=list)
    dependencies: dict[str, list[str]] = field(default_factory=dict)

    def depends(self, table_name: str, *dependencies: str) -> None:
        """
        Declare that ``table_name`` must be emitted after ``dependencies``.

        Args:
            table_name: The dependent table
            *dependencies: Tables that have to come first
        """
        existing = self.dependencies.setdefault(table_name, [])
        for dependency in dependencies:
            if dependency not in existing:
                existing.append(dependency)
