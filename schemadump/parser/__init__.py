"""
Parser Module

Statement parsing, table ordering and rendering for captured schema dumps.
"""

from .analysis import TableDependencyGraph
from .output import DumpExporter, TableSerializer
from .parsers import (
    LiteralParser,
    PatternRegistry,
    StatementRule,
    TableStatementParser,
)
from .shared import (
    CircularDependencyError,
    ConfigurationError,
    DependencyError,
    GeneratorError,
    OptionDecodeError,
    OutputGenerationError,
    SchemaDumpError,
    StatementParsingError,
    UnmatchedStatementError,
)

__all__ = [
    "LiteralParser",
    "PatternRegistry",
    "StatementRule",
    "TableStatementParser",
    "TableDependencyGraph",
    "TableSerializer",
    "DumpExporter",
    "SchemaDumpError",
    "StatementParsingError",
    "OptionDecodeError",
    "UnmatchedStatementError",
    "DependencyError",
    "CircularDependencyError",
    "GeneratorError",
    "OutputGenerationError",
    "ConfigurationError",
]
