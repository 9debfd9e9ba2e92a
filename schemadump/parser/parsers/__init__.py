"""
Parsers layer for option fragments and table statement blocks.
"""

from .base import BaseParser
from .literal_parser import Lambda, LiteralParser, Symbol, render_options, render_value
from .pattern_registry import PatternRegistry, RuleMatch, StatementRule, split_index_expression
from .statement_parser import TableStatementParser

__all__ = [
    "BaseParser",
    "LiteralParser",
    "Symbol",
    "Lambda",
    "render_value",
    "render_options",
    "PatternRegistry",
    "StatementRule",
    "RuleMatch",
    "split_index_expression",
    "TableStatementParser",
]
