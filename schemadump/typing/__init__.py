"""
Type definitions for the schemadump project.
"""

from .dump import Column, Index, SchemaDump, Table
from .export import ColumnExport, DumpExport, IndexExport, TableExport

__all__ = [
    "SchemaDump",
    "Table",
    "Column",
    "Index",
    "DumpExport",
    "TableExport",
    "ColumnExport",
    "IndexExport",
]
