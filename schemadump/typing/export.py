"""
Type definitions for the exported (JSON / YAML) form of a schema dump.
"""

from typing import Any, NotRequired, TypedDict


class ColumnExport(TypedDict):
    """Exported column."""

    name: str
    type: str
    options: dict[str, Any]
    comments: list[str]


class IndexExport(TypedDict):
    """Exported index."""

    name: str
    columns: list[str]
    options: dict[str, Any]


class TableExport(TypedDict):
    """
    Exported table.

    Unparsed tables only carry ``name`` and ``alt``.
    """

    name: str
    pname: NotRequired[str]
    options: NotRequired[str]
    columns: NotRequired[list[ColumnExport]]
    indexes: NotRequired[list[IndexExport]]
    trailer: NotRequired[list[str]]
    unmatched: NotRequired[list[str]]
    alt: NotRequired[str]


class DumpExport(TypedDict):
    """Exported schema dump."""

    header: str
    initial: list[str]
    extensions: list[str]
    types: list[str]
    tables: list[TableExport]
    final: list[str]
    trailer: str
    table_order: list[str]
    cycles: list[list[str]]
