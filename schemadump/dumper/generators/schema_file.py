"""
Generator replaying an existing schema file.

The file is split into the phases a live generator would have written:

* header: everything up to and including the ``...define(...) do`` line
* extensions: ``enable_extension`` statements
* types: ``create_enum`` / ``create_type`` / ``create_schema`` / ``create_domain``
* tables: each ``create_table`` block, followed by any other statements
  that come after it
* foreign keys: ``add_foreign_key`` statements, keyed by their source table
* trailer: the closing ``end``

Statements that cannot be attached to a table are written straight to the
dump stream during the ``tables`` phase.
"""

import logging
import re
from pathlib import Path
from typing import TextIO

from schemadump.parser.parsers.literal_parser import LiteralParser, plain_name
from schemadump.parser.parsers.pattern_registry import NAME_PATTERN
from schemadump.parser.shared.constants import (
    EXTENSION_STATEMENTS,
    FOREIGN_KEY_STATEMENTS,
    TABLE_STATEMENT,
    TYPE_STATEMENTS,
)
from schemadump.parser.shared.exceptions import GeneratorError, OptionDecodeError
from schemadump.parser.shared.types import FilePath

from ..config import DumperConfig
from ..generator import DumpPhases, SchemaGenerator

logger = logging.getLogger(__name__)

DEFINE_PATTERN = re.compile(r"^\s*[\w:]+(?:\[[\d.]+\])?\.define\b.*\bdo\s*$")
END_PATTERN = re.compile(r"^(?P<indent>\s*)end\s*$")
BLOCK_START_PATTERN = re.compile(r"\bdo(?:\s*\|[^|]*\|)?\s*$")
HEREDOC_PATTERN = re.compile(r"<<[-~]?(?P<quote>['\"]?)(?P<tag>[A-Z_][A-Z0-9_]*)(?P=quote)")
FIRST_ARGUMENT_PATTERN = re.compile(rf"^\w+\s*\(?\s*(?P<name>{NAME_PATTERN})")


class SchemaFileGenerator(SchemaGenerator):
    """Replays the phases of a schema file."""

    def __init__(self, content: str, config: DumperConfig | None = None, source: str = "<string>"):
        """
        Split schema text into phases.

        Args:
            content: Full schema file text
            config: Dumper settings
            source: Name of the input, used in messages

        Raises:
            GeneratorError: If the text has no ``define ... do`` block
        """
        super().__init__(config)
        self.source = source
        self._literals = LiteralParser()
        self._header = ""
        self._extensions: list[str] = []
        self._types: list[str] = []
        self._tables: dict[str, str] = {}
        self._foreign_keys: dict[str, list[str]] = {}
        self._leaks: list[str] = []
        self._trailer = ""
        self._split(content)

    @classmethod
    def from_file(cls, path: FilePath, config: DumperConfig | None = None) -> "SchemaFileGenerator":
        """
        Load a schema file.

        Raises:
            GeneratorError: If the file cannot be read or split
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise GeneratorError(f"Could not read schema file {path}: {e}") from e
        return cls(content, config=config, source=str(path))

    def list_tables(self) -> list[str]:
        return list(self._tables)

    def header(self, stream: TextIO) -> None:
        stream.write(self._header)

    def extensions(self, stream: TextIO) -> None:
        if self._extensions:
            stream.write("".join(self._extensions) + "\n")

    def types(self, stream: TextIO) -> None:
        if self._types:
            stream.write("".join(self._types) + "\n")

    def tables(self, stream: TextIO, phases: DumpPhases) -> None:
        for text in self._leaks:
            stream.write(text)
        super().tables(stream, phases)

        # Foreign keys declared for tables the file never defines
        for name in self._foreign_keys:
            if name not in self._tables and not self.ignored(name):
                phases.foreign_keys(name)

    def table(self, name: str, stream: TextIO) -> None:
        stream.write(self._tables[name])

    def foreign_keys(self, name: str, stream: TextIO) -> None:
        stream.write("".join(self._foreign_keys.get(name, [])))

    def trailer(self, stream: TextIO) -> None:
        stream.write(self._trailer)

    def _split(self, content: str) -> None:
        lines = content.splitlines(keepends=True)

        define_at = next((i for i, line in enumerate(lines) if DEFINE_PATTERN.match(line)), None)
        if define_at is None:
            raise GeneratorError(f"No schema definition block found in {self.source}")
        end_at = next(
            (i for i in range(len(lines) - 1, define_at, -1) if re.match(r"^end\s*$", lines[i])),
            None,
        )
        if end_at is None:
            raise GeneratorError(f"Schema definition block in {self.source} is never closed")

        self._header = "".join(lines[: define_at + 1])
        body = lines[define_at + 1 : end_at]

        pending: list[str] = []
        last_table: str | None = None
        position = 0
        while position < len(body):
            line = body[position]
            statement = line.strip()
            if not statement or statement.startswith("#"):
                pending.append(line)
                position += 1
                continue

            end = self._statement_end(body, position)
            text = "".join(body[position:end])
            keyword = statement.split(None, 1)[0].split("(", 1)[0]
            position = end

            # Blank separator lines are regenerated on output, comments are kept
            comments = "".join(item for item in pending if item.strip())
            if keyword == TABLE_STATEMENT:
                name = self._first_argument(statement)
                if comments:
                    self._attach(last_table, comments)
                if name in self._tables:
                    raise GeneratorError(f"Table '{name}' is defined twice in {self.source}")
                self._tables[name] = text
                last_table = name
            elif keyword in EXTENSION_STATEMENTS:
                self._extensions.append(comments + text)
            elif keyword in TYPE_STATEMENTS:
                self._types.append(comments + text)
            elif keyword in FOREIGN_KEY_STATEMENTS:
                name = self._first_argument(statement)
                self._foreign_keys.setdefault(name, []).append(comments + text)
            else:
                self._attach(last_table, "".join(pending) + text)
            pending = []

        comments = [item for item in pending if item.strip()]
        self._trailer = "".join(comments + lines[end_at:])
        logger.debug(
            f"Split {self.source}: {len(self._tables)} tables, {len(self._extensions)} extension(s), "
            f"{len(self._types)} type(s), {sum(len(v) for v in self._foreign_keys.values())} foreign key(s)"
        )

    def _statement_end(self, body: list[str], start: int) -> int:
        """Index one past the last line of the statement starting at ``start``."""
        line = body[start]
        heredoc = HEREDOC_PATTERN.search(line)
        if heredoc:
            tag = heredoc.group("tag")
            for index in range(start + 1, len(body)):
                if body[index].strip() == tag:
                    return index + 1
            raise GeneratorError(f"Unterminated heredoc '{tag}' in {self.source}")

        if BLOCK_START_PATTERN.search(line.rstrip()):
            indent = len(line) - len(line.lstrip())
            for index in range(start + 1, len(body)):
                closing = END_PATTERN.match(body[index])
                if closing and len(closing.group("indent")) == indent:
                    return index + 1
            raise GeneratorError(f"Unterminated block starting with {line.strip()!r} in {self.source}")

        return start + 1

    def _first_argument(self, statement: str) -> str:
        match = FIRST_ARGUMENT_PATTERN.match(statement)
        if match is None:
            raise GeneratorError(f"Could not find a table name in {statement!r}")
        try:
            return plain_name(self._literals.parse_value(match.group("name")))
        except OptionDecodeError as e:
            raise GeneratorError(f"Could not read the table name in {statement!r}: {e}") from e

    def _attach(self, table_name: str | None, text: str) -> None:
        """Keep a statement after the previous table, or leak it if there is none."""
        if table_name is None:
            self._leaks.append(text)
        else:
            self._tables[table_name] += text
