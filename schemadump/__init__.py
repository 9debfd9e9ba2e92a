"""
Schemadump Module

Captures schema dumps phase by phase, parses table definitions into
structured records and writes them back in dependency order.
"""

from .dumper import (
    DuckDBSchemaGenerator,
    DumperConfig,
    DumperConfigManager,
    MiddlewareStack,
    SchemaDumper,
    SchemaFileGenerator,
    SchemaGenerator,
)
from .parser import DumpExporter, TableDependencyGraph, TableStatementParser
from .typing import Column, Index, SchemaDump, Table

__all__ = [
    "SchemaDumper",
    "SchemaGenerator",
    "SchemaFileGenerator",
    "DuckDBSchemaGenerator",
    "DumperConfig",
    "DumperConfigManager",
    "MiddlewareStack",
    "TableStatementParser",
    "TableDependencyGraph",
    "DumpExporter",
    "SchemaDump",
    "Table",
    "Column",
    "Index",
]
