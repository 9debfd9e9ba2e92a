"""
Shared exceptions, constants and types for the parser module.
"""

from .constants import *
from .exceptions import *
from .types import *

__all__ = [
    # Types
    "OptionValues",
    "FilePath",
    "DependencyInfo",
    "TableOrder",
    "GraphCycles",
    # Exceptions
    "SchemaDumpError",
    "StatementParsingError",
    "OptionDecodeError",
    "UnmatchedStatementError",
    "DependencyError",
    "CircularDependencyError",
    "GeneratorError",
    "OutputGenerationError",
    "ConfigurationError",
    # Constants
    "DEFAULT_INDENT",
    "EXPORT_FORMATS",
]
