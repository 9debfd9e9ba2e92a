"""
Generator introspecting a DuckDB database.

Reads the DuckDB catalog functions (``duckdb_tables()``, ``duckdb_columns()``,
``duckdb_constraints()``, ``duckdb_indexes()``, ``duckdb_types()``) and writes
each phase in the schema statement grammar. Column types and defaults are
interpreted with sqlglot.
"""

import logging
import re
from typing import Any, TextIO

import duckdb
import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from schemadump.parser.output.table_serializer import TableSerializer
from schemadump.parser.parsers.literal_parser import Lambda, Symbol, render_options, render_value
from schemadump.parser.parsers.pattern_registry import split_index_expression
from schemadump.parser.shared.exceptions import GeneratorError
from schemadump.typing.dump import Column, Index, Table

from ..config import DumperConfig
from ..generator import DumpPhases, SchemaGenerator

# sqlglot type name -> (type tag, fixed options)
TYPE_MAP: dict[str, tuple[str, dict[str, Any]]] = {
    "TINYINT": ("integer", {"limit": 1}),
    "SMALLINT": ("integer", {"limit": 2}),
    "INT": ("integer", {}),
    "BIGINT": ("bigint", {}),
    "FLOAT": ("float", {}),
    "DOUBLE": ("float", {}),
    "DECIMAL": ("decimal", {}),
    "CHAR": ("string", {}),
    "VARCHAR": ("string", {}),
    "TEXT": ("text", {}),
    "BOOLEAN": ("boolean", {}),
    "DATE": ("date", {}),
    "TIME": ("time", {}),
    "TIMESTAMP": ("datetime", {}),
    "TIMESTAMPTZ": ("timestamptz", {}),
    "INTERVAL": ("interval", {}),
    "BINARY": ("binary", {}),
    "VARBINARY": ("binary", {}),
    "UUID": ("uuid", {}),
    "JSON": ("json", {}),
}

INDEX_COLUMNS_PATTERN = re.compile(r"\bON\s+[^(]+\((?P<columns>.*)\)\s*;?\s*\Z", re.I | re.S)
CHECK_TEXT_PATTERN = re.compile(r"^\s*CHECK\s*\((?P<expression>.*)\)\s*$", re.I | re.S)


def _unquote(identifier: str) -> str:
    identifier = identifier.strip()
    if len(identifier) >= 2 and identifier[0] == identifier[-1] == '"':
        return identifier[1:-1].replace('""', '"')
    return identifier


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _type_tag(type_name: str) -> str:
    """Turn an arbitrary type name into a statement type tag."""
    return re.sub(r"\W+", "_", type_name.lower()).strip("_") or "unknown"


class DuckDBSchemaGenerator(SchemaGenerator):
    """Writes the schema of a DuckDB database."""

    def __init__(
        self,
        database: str = ":memory:",
        config: DumperConfig | None = None,
        connection: Any = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            database: Path of the database file (or ":memory:")
            config: Dumper settings; ``config.schema`` selects the schema (default "main")
            connection: Existing DuckDB connection to read instead of opening ``database``
        """
        super().__init__(config)
        self.database = database
        self.schema = self.config.schema or "main"
        self.connection = connection
        self._owns_connection = connection is None
        self._serializer = TableSerializer(indent=self.config.indent)
        self._indent = " " * self.config.indent
        self._enum_types: set[str] = set()
        self.logger = logging.getLogger(self.__class__.__name__)

    def connect(self) -> None:
        """Open the database read-only unless a connection was supplied."""
        if self.connection is not None:
            return
        try:
            if self.database == ":memory:":
                self.connection = duckdb.connect(self.database)
            else:
                self.connection = duckdb.connect(self.database, read_only=True)
        except duckdb.Error as e:
            raise GeneratorError(f"Could not open DuckDB database {self.database}: {e}") from e
        self.logger.info(f"Connected to DuckDB database: {self.database}")

    def disconnect(self) -> None:
        """Close the connection if this generator opened it."""
        if self.connection is not None and self._owns_connection:
            self.connection.close()
            self.connection = None
            self.logger.info(f"Disconnected from DuckDB database: {self.database}")

    def dump(self, stream: TextIO, phases: DumpPhases) -> None:
        self.connect()
        try:
            super().dump(stream, phases)
        finally:
            self.disconnect()

    def list_tables(self) -> list[str]:
        rows = self._query(
            "SELECT table_name FROM duckdb_tables() "
            "WHERE database_name = current_database() AND schema_name = ? "
            "AND NOT internal AND NOT temporary ORDER BY table_name",
            [self.schema],
        )
        return [row[0] for row in rows]

    def header(self, stream: TextIO) -> None:
        stream.write(
            f"# This file is generated from the DuckDB database {render_value(self.database)} "
            f"(schema {render_value(self.schema)}).\n"
            "# Change the database, not this file, and regenerate it with `schemadump duckdb`.\n"
            "\n"
            "Schema.define do\n"
            "\n"
        )

    def extensions(self, stream: TextIO) -> None:
        rows = self._query(
            "SELECT extension_name FROM duckdb_extensions() "
            "WHERE loaded AND installed ORDER BY extension_name"
        )
        if not rows:
            return
        stream.write(f"{self._indent}# Extensions loaded in this database\n")
        for (name,) in rows:
            stream.write(f"{self._indent}enable_extension {render_value(name)}\n")
        stream.write("\n")

    def types(self, stream: TextIO) -> None:
        rows = self._query(
            "SELECT type_name FROM duckdb_types() "
            "WHERE database_name = current_database() AND schema_name = ? "
            "AND logical_type = 'ENUM' AND NOT internal ORDER BY type_name",
            [self.schema],
        )
        self._enum_types = {row[0] for row in rows}
        if not rows:
            return
        stream.write(f"{self._indent}# Custom types defined in this database\n")
        for (type_name,) in rows:
            qualified = _quote(type_name) if self.schema == "main" else f"{_quote(self.schema)}.{_quote(type_name)}"
            values = self._query(f"SELECT enum_range(NULL::{qualified})")[0][0]
            stream.write(f"{self._indent}create_enum {render_value(type_name)}, {render_value(list(values))}\n")
        stream.write("\n")

    def table(self, name: str, stream: TextIO) -> None:
        columns = self._query(
            "SELECT column_name, data_type, is_nullable, column_default FROM duckdb_columns() "
            "WHERE database_name = current_database() AND schema_name = ? AND table_name = ? "
            "ORDER BY column_index",
            [self.schema, name],
        )
        constraints = self._constraints(name)

        primary_key: list[str] = []
        unique_keys: list[list[str]] = []
        checks: list[str] = []
        for constraint_type, column_names, text, _, _ in constraints:
            if constraint_type == "PRIMARY KEY":
                primary_key = list(column_names)
            elif constraint_type == "UNIQUE":
                unique_keys.append(list(column_names))
            elif constraint_type == "CHECK":
                check = CHECK_TEXT_PATTERN.match(text or "")
                checks.append(check.group("expression").strip() if check else (text or ""))

        table = Table(name=name, pname=name)
        options: dict[str, Any] = {}
        if not primary_key:
            options["id"] = False
        elif len(primary_key) == 1:
            options["primary_key"] = primary_key[0]
        else:
            options["primary_key"] = primary_key
        options["force"] = Symbol("cascade")
        table.options = render_options(options)

        for column_name, data_type, is_nullable, column_default in columns:
            table.columns.append(self._column(column_name, data_type, is_nullable, column_default))

        for column_names in unique_keys:
            table.indexes.append(
                Index(name=f"{name}_{'_'.join(column_names)}_key", columns=column_names, options={"unique": True})
            )
        table.indexes.extend(self._indexes(name))

        # Checks follow the block so they are never read back as columns
        table.trailer = [
            f"add_check_constraint {render_value(name)}, {render_value(expression)}" for expression in checks
        ]
        stream.write(self._serializer.serialize(table))

    def foreign_keys(self, name: str, stream: TextIO) -> None:
        for constraint_type, columns, _, to_table, primary_key in self._constraints(name):
            if constraint_type != "FOREIGN KEY":
                continue
            if not to_table or not columns or not primary_key:
                raise GeneratorError(f"Foreign key of {name} on {columns!r} has no referenced table or columns")
            columns = list(columns)
            primary_key = list(primary_key)
            options = {
                "column": columns[0] if len(columns) == 1 else columns,
                "primary_key": primary_key[0] if len(primary_key) == 1 else primary_key,
            }
            stream.write(
                f"{self._indent}add_foreign_key {render_value(name)}, {render_value(to_table)}, "
                f"{render_options(options)}\n"
            )

    def trailer(self, stream: TextIO) -> None:
        stream.write("end\n")

    def _column(self, name: str, data_type: str, is_nullable: bool, column_default: str | None) -> Column:
        type_tag, options = self.column_type(data_type)
        if not is_nullable:
            options["null"] = False
        if column_default is not None:
            options["default"] = self.default_value(column_default)
        return Column(name=name, type=type_tag, options=options, comments=[])

    def column_type(self, data_type: str) -> tuple[str, dict[str, Any]]:
        """
        Map a DuckDB type to a type tag and column options.

        Args:
            data_type: Type as reported by ``duckdb_columns()``, e.g. ``DECIMAL(10,2)``

        Returns:
            Tuple of (type tag, options)
        """
        if data_type in self._enum_types:
            return "enum", {"enum_type": data_type}
        try:
            data_type_expression = exp.DataType.build(data_type, dialect="duckdb")
        except (SqlglotError, ValueError):
            self.logger.debug(f"Unknown DuckDB type {data_type!r}, keeping its name")
            return _type_tag(data_type), {}

        options: dict[str, Any] = {}
        if data_type_expression.this.name == "ARRAY" and data_type_expression.expressions:
            options["array"] = True
            data_type_expression = data_type_expression.expressions[0]

        type_name = data_type_expression.this.name
        type_tag, fixed = TYPE_MAP.get(type_name, (_type_tag(type_name), {}))
        options.update(fixed)

        params = [int(param.name) for param in data_type_expression.expressions if param.name.isdigit()]
        if type_tag == "decimal" and params:
            options["precision"] = params[0]
            if len(params) > 1:
                options["scale"] = params[1]
        elif type_tag == "string" and params:
            options["limit"] = params[0]
        return type_tag, options

    def default_value(self, expression: str) -> Any:
        """
        Interpret a column default.

        Literals become plain values; anything else becomes a lambda holding
        the SQL expression.
        """
        try:
            node = sqlglot.parse_one(expression, read="duckdb")
        except SqlglotError:
            return Lambda(render_value(expression))

        while isinstance(node, exp.Cast):
            node = node.this

        negative = isinstance(node, exp.Neg)
        if negative:
            node = node.this

        if isinstance(node, exp.Literal):
            if node.is_string:
                return node.this
            number = float(node.this) if re.search(r"[.eE]", node.this) else int(node.this)
            return -number if negative else number
        if isinstance(node, exp.Boolean) and not negative:
            return node.this
        if isinstance(node, exp.Null):
            return None
        return Lambda(render_value(expression.strip()))

    def _indexes(self, name: str) -> list[Index]:
        rows = self._query(
            "SELECT index_name, is_unique, sql FROM duckdb_indexes() "
            "WHERE database_name = current_database() AND schema_name = ? AND table_name = ? "
            "ORDER BY index_name",
            [self.schema, name],
        )
        indexes = []
        for index_name, is_unique, sql in rows:
            match = INDEX_COLUMNS_PATTERN.search(sql or "")
            if match is None:
                self.logger.warning(f"Could not read the columns of index {index_name}: {sql!r}")
                continue
            columns = [_unquote(column) for column in split_index_expression(match.group("columns"))]
            options = {"unique": True} if is_unique else {}
            indexes.append(Index(name=index_name, columns=columns, options=options))
        return indexes

    def _constraints(self, name: str) -> list[tuple[str, list[str], str, str | None, list[str] | None]]:
        return self._query(
            "SELECT constraint_type, constraint_column_names, constraint_text, "
            "referenced_table, referenced_column_names FROM duckdb_constraints() "
            "WHERE database_name = current_database() AND schema_name = ? AND table_name = ? "
            "ORDER BY constraint_index",
            [self.schema, name],
        )

    def _query(self, query: str, parameters: list[Any] | None = None) -> list[tuple]:
        if self.connection is None:
            raise GeneratorError("Not connected to database. Call connect() first.")
        try:
            result = self.connection.execute(query, parameters or []).fetchall()
            self.logger.debug(f"Executed query: {query[:100]}...")
            return result
        except duckdb.Error as e:
            raise GeneratorError(f"Error reading DuckDB catalog: {e}") from e
