"""
Parser for the statement block that defines one table.

A block looks like::

    create_table "users", force: :cascade do |t|
      t.string "email", null: false
      t.index ["email"], name: "index_users_on_email", unique: true
    end

Blocks that do not have this outer shape are kept verbatim in ``Table.alt``.
"""

import logging
import re

from schemadump.typing.dump import Column, Index, Table

from ..shared.exceptions import UnmatchedStatementError
from .base import BaseParser
from .pattern_registry import PatternRegistry

logger = logging.getLogger(__name__)

TABLE_BLOCK_PATTERN = re.compile(
    r"""
    \A \s*
    create_table \s*
      [:'"](?P<name>[^'"\s,]+)['"]? \s*
      ,? \s*
      (?P<options>.*?) \s+
      do \s* \|t\| [ \t]* $
    (?P<columns>.*?)
    ^ \s* end [ \t]* $
    (?P<trailer>.*)
    \Z
    """,
    re.X | re.M | re.S,
)


class TableStatementParser(BaseParser):
    """Turns captured table text into structured ``Table`` records."""

    def __init__(self, registry: PatternRegistry | None = None, strict: bool = False):
        """
        Initialize the parser.

        Args:
            registry: Statement rules, defaults to the built-in rules
            strict: Raise instead of collecting body lines no rule matches
        """
        super().__init__()
        self.registry = registry or PatternRegistry.default()
        self.strict = strict

    def parse(self, content: str, table: Table | None = None) -> Table:
        """
        Parse a table statement block.

        Args:
            content: Text captured for one table
            table: Record to populate in place; a new one is created if omitted

        Returns:
            The populated table

        Raises:
            OptionDecodeError: If a statement carries an undecodable option fragment
            UnmatchedStatementError: In strict mode, if a body line matches no rule
        """
        match = TABLE_BLOCK_PATTERN.match(content)
        if table is None:
            table = Table(name=match.group("name") if match else "")

        if match is None:
            logger.debug(f"Table '{table.name}' does not have a create_table block, keeping it verbatim")
            table.alt = content
            return table

        columns: list[Column] = []
        indexes: list[Index] = []
        unmatched: list[str] = []
        for line in match.group("columns").strip().split("\n"):
            statement = line.strip()
            if not statement:
                continue
            found = self.registry.match(statement)
            if found is None:
                unmatched.append(statement)
            elif isinstance(found.record, Index):
                indexes.append(found.record)
            else:
                columns.append(found.record)

        if unmatched:
            if self.strict:
                raise UnmatchedStatementError(table.name, unmatched)
            logger.warning(
                f"Table '{table.name}': {len(unmatched)} statement(s) not recognised: {unmatched}"
            )

        table.pname = match.group("name")
        table.options = match.group("options").strip()
        table.trailer = [line.strip() for line in match.group("trailer").split("\n") if line.strip()]
        table.columns = columns
        table.indexes = indexes
        table.unmatched = unmatched
        return table
