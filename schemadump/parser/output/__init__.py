"""
Output layer: table serialization and structured export.
"""

from .dump_exporter import DumpExporter
from .table_serializer import TableSerializer

__all__ = [
    "DumpExporter",
    "TableSerializer",
]
