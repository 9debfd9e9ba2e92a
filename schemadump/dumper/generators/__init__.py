"""
Concrete schema generators.
"""

from .duckdb_generator import DuckDBSchemaGenerator
from .schema_file import SchemaFileGenerator

__all__ = ["SchemaFileGenerator", "DuckDBSchemaGenerator"]
