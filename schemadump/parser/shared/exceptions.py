"""
Custom exceptions for schema dumping and statement parsing.
"""


class SchemaDumpError(Exception):
    """Base exception for all schema dump errors."""

    pass


class StatementParsingError(SchemaDumpError):
    """Raised when a table statement block cannot be turned into records."""

    pass


class OptionDecodeError(StatementParsingError):
    """Raised when a trailing option fragment is not a valid literal."""

    def __init__(self, message: str, fragment: str = "", position: int | None = None):
        if position is not None:
            message = f"{message} at position {position} in {fragment!r}"
        elif fragment:
            message = f"{message} in {fragment!r}"
        super().__init__(message)
        self.fragment = fragment
        self.position = position


class UnmatchedStatementError(StatementParsingError):
    """Raised in strict mode when a body line matches no statement rule."""

    def __init__(self, table_name: str, lines: list[str]):
        super().__init__(
            f"Table '{table_name}' has {len(lines)} unrecognised statement(s): {lines}"
        )
        self.table_name = table_name
        self.lines = lines


class DependencyError(SchemaDumpError):
    """Raised when table dependency analysis fails."""

    pass


class CircularDependencyError(DependencyError):
    """Raised when tables depend on each other in a cycle."""

    def __init__(self, cycles: list[list[str]]):
        rendered = "; ".join(" -> ".join(cycle) for cycle in cycles)
        super().__init__(f"Circular table dependencies detected: {rendered}")
        self.cycles = cycles


class GeneratorError(SchemaDumpError):
    """Raised when a schema generator cannot produce its output."""

    pass


class OutputGenerationError(SchemaDumpError):
    """Raised when exporting a dump fails."""

    pass


class ConfigurationError(SchemaDumpError):
    """Raised when dumper configuration is invalid."""

    pass
