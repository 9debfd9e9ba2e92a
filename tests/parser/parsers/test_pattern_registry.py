"""
Tests for the ordered statement rules.
"""

import re

import pytest

from schemadump.parser.parsers.literal_parser import Symbol
from schemadump.parser.parsers.pattern_registry import (
    PatternRegistry,
    StatementRule,
    split_index_expression,
)
from schemadump.parser.shared.exceptions import OptionDecodeError, StatementParsingError
from schemadump.typing.dump import Column, Index


def _check_constraint(match, literals):
    return Index(name=match.group("name"), columns=[], options={"check": True})


CHECK_RULE = StatementRule(
    "check_constraint",
    re.compile(r'^t\.check_constraint\s*"(?P<name>[^"]*)"'),
    _check_constraint,
)


class TestDefaultRules:
    """Test cases for the built-in column and index rules."""

    def test_rule_order(self, registry):
        """Expression indexes are tried before columns, list indexes last."""
        assert registry.list_all() == ["index_expression", "column", "index_list"]

    def test_composite_string_index(self, registry):
        """A quoted column list is split into columns."""
        found = registry.match('t.index "a, b", name: "idx1", using: :btree')

        assert found.rule.name == "index_expression"
        assert found.record == Index(name="idx1", columns=["a", "b"], options={"using": "btree"})
        assert isinstance(found.record.options["using"], Symbol)

    def test_list_index(self, registry):
        """A bracketed column list gives an index without options."""
        found = registry.match('t.index ["a", "b"], name: "idx2"')

        assert found.rule.name == "index_list"
        assert found.record == Index(name="idx2", columns=["a", "b"], options={})

    def test_list_index_with_options(self, registry):
        """Options after the name are decoded."""
        found = registry.match('t.index ["email"], name: "index_users_on_email", unique: true')

        assert found.record.options == {"unique": True}

    def test_empty_list_index(self, registry):
        """An empty bracketed list gives no columns."""
        found = registry.match('t.index [], name: "idx_empty"')

        assert found.record.columns == []

    def test_column(self, registry):
        """A column statement gives name, type, options and no comments."""
        found = registry.match('t.string "email", null: false')

        assert found.rule.name == "column"
        assert found.record == Column(name="email", type="string", options={"null": False}, comments=[])

    def test_column_without_options(self, registry):
        """A bare column statement has empty options."""
        found = registry.match('t.text "body"')

        assert found.record == Column(name="body", type="text", options={}, comments=[])

    def test_expression_index_keeps_function_calls_whole(self, registry):
        """Commas inside parentheses do not split an expression."""
        found = registry.match(r't.index "lower((title)::text), coalesce(a, b)", name: "idx_expr"')

        assert found.record.columns == ["lower((title)::text)", "coalesce(a, b)"]

    def test_escaped_quotes_in_expression(self, registry):
        """Escaped quotes inside the composite string are unescaped."""
        found = registry.match(r't.index "lower(\"Name\")", name: "idx_q"')

        assert found.record.columns == ['lower("Name")']

    def test_no_match(self, registry):
        """Lines that are not statements give None."""
        assert registry.match("create_table foo") is None
        assert registry.match('t.timestamps null: false') is None

    def test_bad_options_raise(self, registry):
        """An undecodable fragment on a matched line propagates."""
        with pytest.raises(OptionDecodeError):
            registry.match('t.datetime "at", default: Time.now')


class TestRegistration:
    """Test cases for registering additional rules."""

    def test_register_appends(self, registry):
        """Rules without an anchor go last."""
        registry.register(CHECK_RULE)

        assert registry.list_all()[-1] == "check_constraint"

    def test_register_before(self, registry):
        """A rule inserted before the column rule wins over it."""
        registry.register(CHECK_RULE, before="column")

        found = registry.match('t.check_constraint "price > 0"')

        assert registry.list_all() == ["index_expression", "check_constraint", "column", "index_list"]
        assert found.rule.name == "check_constraint"
        assert found.record.options == {"check": True}

    def test_register_after(self, registry):
        """A rule inserted after the column rule never sees column shaped lines."""
        registry.register(CHECK_RULE, after="column")

        found = registry.match('t.check_constraint "price > 0"')

        assert found.rule.name == "column"
        assert found.record.type == "check_constraint"

    def test_duplicate_name_raises(self, registry):
        """Rule names are unique."""
        with pytest.raises(StatementParsingError, match="already registered"):
            registry.register(StatementRule("column", CHECK_RULE.pattern, _check_constraint))

    def test_unknown_anchor_raises(self, registry):
        """Anchors must name an existing rule."""
        with pytest.raises(StatementParsingError, match="Unknown statement rule"):
            registry.register(CHECK_RULE, before="missing")

    def test_both_anchors_raise(self, registry):
        """Only one anchor may be given."""
        with pytest.raises(StatementParsingError):
            registry.register(CHECK_RULE, before="column", after="column")

    def test_unregister(self, registry):
        """Removed rules no longer match."""
        registry.unregister("index_list")

        assert registry.match('t.index ["a"], name: "idx"') is None

    def test_registries_are_independent(self):
        """Registering on one registry leaves the defaults untouched."""
        PatternRegistry().register(CHECK_RULE)

        assert "check_constraint" not in PatternRegistry.default().list_all()


class TestSplitIndexExpression:
    """Test cases for split_index_expression."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("a, b", ["a", "b"]),
            ("a", ["a"]),
            ("coalesce(a, b), c", ["coalesce(a, b)", "c"]),
            ("  a ,b  ,", ["a", "b"]),
            ("", []),
        ],
    )
    def test_split(self, expression, expected):
        """Only top level commas separate columns."""
        assert split_index_expression(expression) == expected
