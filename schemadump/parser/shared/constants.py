"""
Constants for statement parsing and assembly.
"""

# Indentation used by generators for top level statements inside the schema block
DEFAULT_INDENT = 2

# Statement keywords recognised when splitting a schema file into phases
EXTENSION_STATEMENTS = ("enable_extension",)
TYPE_STATEMENTS = ("create_enum", "create_type", "create_schema", "create_domain")
FOREIGN_KEY_STATEMENTS = ("add_foreign_key",)
TABLE_STATEMENT = "create_table"

# Output formats supported by the structured exporter
EXPORT_FORMATS = ("json", "yaml")

# Environment variable prefix for dumper configuration
ENV_PREFIX = "SCHEMADUMP_"
