"""
Ordered statement rules for table body lines.

Each rule pairs a regular expression with a transform that builds a
``Column`` or ``Index`` from the match. Rules are tried in order and the
first one that matches wins, so the more specific index shapes have to be
registered ahead of the generic column rule.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from schemadump.typing.dump import Column, Index

from ..shared.exceptions import StatementParsingError
from .literal_parser import LiteralParser, plain_name

logger = logging.getLogger(__name__)

StatementRecord = Column | Index
Transform = Callable[[re.Match, LiteralParser], StatementRecord]

# A quoted string or a bare symbol naming a column or an index
NAME_PATTERN = r"""(?:"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|:[A-Za-z_]\w*[?!]?)"""

INDEX_EXPRESSION_PATTERN = re.compile(
    rf"""
    ^
    t\.index \s*
      "(?P<index_cols>(?:[^"\\]|\\.)*?)" \s*
      , \s*
      name: \s* (?P<name>{NAME_PATTERN}) \s*
      ,? \s*
      (?P<options>.*)
    $
    """,
    re.X,
)

COLUMN_PATTERN = re.compile(
    rf"""
    ^
    t\.(?P<type>\w+) \s*
      (?P<name>{NAME_PATTERN}) \s*
      ,? \s*
      (?P<options>.*)
    $
    """,
    re.X,
)

INDEX_LIST_PATTERN = re.compile(
    rf"""
    ^
    t\.index \s*
      \[(?P<index_cols>.*?)\] \s*
      , \s*
      name: \s* (?P<name>{NAME_PATTERN}) \s*
      ,? \s*
      (?P<options>.*)
    $
    """,
    re.X,
)


def split_index_expression(expression: str) -> list[str]:
    """
    Split a composite index specifier on top level commas.

    Commas inside parentheses belong to an expression and are kept, so
    ``"a, b"`` gives two columns while ``"coalesce(a, b)"`` stays whole.
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def _name(token: str, literals: LiteralParser) -> str:
    return plain_name(literals.parse_value(token))


def _index_from_expression(match: re.Match, literals: LiteralParser) -> Index:
    index_cols = match.group("index_cols").replace('\\"', '"')
    return Index(
        name=_name(match.group("name"), literals),
        columns=split_index_expression(index_cols),
        options=literals.parse(match.group("options")),
    )


def _column(match: re.Match, literals: LiteralParser) -> Column:
    return Column(
        name=_name(match.group("name"), literals),
        type=match.group("type"),
        options=literals.parse(match.group("options")),
        comments=[],
    )


def _index_from_list(match: re.Match, literals: LiteralParser) -> Index:
    stripped = re.sub(r"""['":]""", "", match.group("index_cols")).strip()
    columns = re.split(r"\s*,\s*", stripped) if stripped else []
    return Index(
        name=_name(match.group("name"), literals),
        columns=columns,
        options=literals.parse(match.group("options")),
    )


@dataclass(frozen=True)
class StatementRule:
    """A named (pattern, transform) pair."""

    name: str
    pattern: re.Pattern
    transform: Transform


@dataclass
class RuleMatch:
    """Outcome of a successful rule lookup."""

    rule: StatementRule
    record: StatementRecord


DEFAULT_RULES = (
    StatementRule("index_expression", INDEX_EXPRESSION_PATTERN, _index_from_expression),
    StatementRule("column", COLUMN_PATTERN, _column),
    StatementRule("index_list", INDEX_LIST_PATTERN, _index_from_list),
)


class PatternRegistry:
    """Ordered registry of statement rules with first-match-wins lookup."""

    def __init__(
        self,
        rules: list[StatementRule] | None = None,
        literal_parser: LiteralParser | None = None,
    ):
        self._rules: list[StatementRule] = list(DEFAULT_RULES if rules is None else rules)
        self.literal_parser = literal_parser or LiteralParser()

    @classmethod
    def default(cls) -> "PatternRegistry":
        """Create a registry holding the built-in column and index rules."""
        return cls()

    def register(
        self,
        rule: StatementRule,
        before: str | None = None,
        after: str | None = None,
    ) -> None:
        """
        Register a rule.

        Args:
            rule: Rule to add
            before: Name of an existing rule to insert ahead of
            after: Name of an existing rule to insert behind

        Raises:
            StatementParsingError: If the name is taken or the anchor rule is unknown
        """
        if rule.name in self.list_all():
            raise StatementParsingError(f"Statement rule '{rule.name}' is already registered")
        if before is not None and after is not None:
            raise StatementParsingError("Use either 'before' or 'after', not both")

        if before is not None:
            self._rules.insert(self._position(before), rule)
        elif after is not None:
            self._rules.insert(self._position(after) + 1, rule)
        else:
            self._rules.append(rule)
        logger.debug(f"Registered statement rule '{rule.name}': {self.list_all()}")

    def unregister(self, name: str) -> None:
        """Remove a rule by name."""
        self._rules.pop(self._position(name))

    def list_all(self) -> list[str]:
        """
        List rule names in lookup order.

        Returns:
            List of rule names
        """
        return [rule.name for rule in self._rules]

    def match(self, line: str) -> RuleMatch | None:
        """
        Find the first rule matching a statement line.

        Args:
            line: A trimmed table body line

        Returns:
            The winning rule and the record it built, or None if no rule matched

        Raises:
            OptionDecodeError: If the matched line carries an undecodable option fragment
        """
        for rule in self._rules:
            found = rule.pattern.match(line)
            if found is not None:
                return RuleMatch(rule=rule, record=rule.transform(found, self.literal_parser))
        return None

    def _position(self, name: str) -> int:
        for position, rule in enumerate(self._rules):
            if rule.name == name:
                return position
        raise StatementParsingError(f"Unknown statement rule '{name}'")
