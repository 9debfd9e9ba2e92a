"""
Decoder for the literal option fragments that trail schema statements.

A fragment is the inside of a hash literal, as written by the schema
generator after a column or index statement:

    null: false, default: "draft", limit: 20, using: :btree

Only literal data is accepted: strings, numbers, booleans, nil, symbols,
arrays and nested hashes. Nothing is ever evaluated. A lambda default such
as ``-> { "now()" }`` is kept as its raw body text in a ``Lambda`` value.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from ..shared.exceptions import OptionDecodeError
from ..shared.types import OptionValues
from .base import BaseParser

logger = logging.getLogger(__name__)


class Symbol(str):
    """A symbol literal such as ``:btree``. Compares equal to its plain name."""

    def __repr__(self) -> str:
        return f"Symbol({plain_name(self)!r})"


@dataclass(frozen=True)
class Lambda:
    """An unevaluated lambda literal, ``-> { body }``."""

    body: str


def plain_name(value: Any) -> str:
    """
    Return the plain string behind a decoded name.

    Names are written either as strings or as symbols; both give the same
    plain ``str``.

    Raises:
        OptionDecodeError: If the value is not a string or symbol
    """
    if not isinstance(value, str):
        raise OptionDecodeError(f"Expected a name, got {render_value(value)}")
    return str.__str__(value)


_WHITESPACE = re.compile(r"(?:\s+|#[^\n]*)+")
_NUMBER = re.compile(r"[-+]?\d[\d_]*(?P<fraction>\.\d[\d_]*)?(?P<exponent>[eE][-+]?\d+)?")
_LABEL = re.compile(r"(?P<name>[A-Za-z_]\w*[?!]?):(?!:)")
_IDENT = re.compile(r"[A-Za-z_]\w*[?!]?")
_BARE_SYMBOL = re.compile(r":(?P<name>[A-Za-z_]\w*[?!=]?)")
_SYMBOL_NAME = re.compile(r"[A-Za-z_]\w*[?!=]?\Z")
_LABEL_NAME = re.compile(r"[A-Za-z_]\w*[?!]?\Z")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "e": "\x1b",
    "s": " ",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_KEYWORDS = {"true": True, "false": False, "nil": None}


class _Reader:
    """Recursive descent reader over a single fragment."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    # -- low level -----------------------------------------------------

    def error(self, message: str) -> OptionDecodeError:
        return OptionDecodeError(message, fragment=self.text, position=self.pos)

    def skip_whitespace(self) -> None:
        match = _WHITESPACE.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def at_end(self) -> bool:
        self.skip_whitespace()
        return self.pos >= len(self.text)

    def peek(self, literal: str) -> bool:
        self.skip_whitespace()
        return self.text.startswith(literal, self.pos)

    def accept(self, literal: str) -> bool:
        if self.peek(literal):
            self.pos += len(literal)
            return True
        return False

    def expect(self, literal: str) -> None:
        if not self.accept(literal):
            raise self.error(f"Expected '{literal}'")

    # -- grammar -------------------------------------------------------

    def read_pairs(self, closing: str | None) -> OptionValues:
        """Read ``key: value`` pairs up to ``closing`` (or end of text)."""
        values: OptionValues = {}
        while True:
            if closing is None and self.at_end():
                return values
            if closing is not None and self.accept(closing):
                return values
            key = self.read_key()
            values[key] = self.read_value()
            if self.accept(","):
                continue
            if closing is None:
                if not self.at_end():
                    raise self.error("Expected ',' between options")
                return values
            self.expect(closing)
            return values

    def read_key(self) -> Any:
        self.skip_whitespace()
        label = _LABEL.match(self.text, self.pos)
        if label:
            self.pos = label.end()
            return label.group("name")

        char = self.text[self.pos : self.pos + 1]
        if char in ('"', "'"):
            key = self.read_string()
            # "key": value
            if self.text.startswith(":", self.pos) and not self.text.startswith("::", self.pos):
                self.pos += 1
                return key
            self.expect("=>")
            return key

        if char == ":":
            key = str(self.read_symbol())
        elif _NUMBER.match(self.text, self.pos):
            key = self.read_number()
        else:
            raise self.error("Expected an option key")
        self.expect("=>")
        return key

    def read_value(self) -> Any:
        self.skip_whitespace()
        if self.pos >= len(self.text):
            raise self.error("Expected a value")

        char = self.text[self.pos]
        if char in ('"', "'"):
            return self.read_string()
        if char == ":":
            return self.read_symbol()
        if char == "[":
            self.pos += 1
            return self.read_array()
        if char == "{":
            self.pos += 1
            return self.read_pairs("}")
        if self.text.startswith("->", self.pos):
            return self.read_lambda()
        if _NUMBER.match(self.text, self.pos):
            return self.read_number()

        ident = _IDENT.match(self.text, self.pos)
        if ident and ident.group() in _KEYWORDS:
            self.pos = ident.end()
            return _KEYWORDS[ident.group()]
        raise self.error("Unsupported value")

    def read_array(self) -> list[Any]:
        items: list[Any] = []
        while True:
            if self.accept("]"):
                return items
            items.append(self.read_value())
            if self.accept(","):
                continue
            self.expect("]")
            return items

    def read_number(self) -> int | float:
        match = _NUMBER.match(self.text, self.pos)
        self.pos = match.end()
        literal = match.group().replace("_", "")
        if match.group("fraction") or match.group("exponent"):
            return float(literal)
        return int(literal)

    def read_symbol(self) -> Symbol:
        bare = _BARE_SYMBOL.match(self.text, self.pos)
        if bare:
            self.pos = bare.end()
            return Symbol(bare.group("name"))
        if self.text.startswith(':"', self.pos):
            self.pos += 1
            return Symbol(self.read_string())
        raise self.error("Malformed symbol")

    def read_string(self) -> str:
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chunks)
            if char == "\\" and self.pos + 1 < len(self.text):
                self.pos += 1
                try:
                    chunks.append(self._read_escape(quote))
                except ValueError as e:
                    raise self.error("Invalid escape sequence") from e
                continue
            chunks.append(char)
            self.pos += 1
        self.pos = start
        raise self.error("Unterminated string")

    def _read_escape(self, quote: str) -> str:
        char = self.text[self.pos]
        self.pos += 1
        if quote == "'":
            # single quoted strings only know \\ and \'
            return char if char in ("\\", "'") else "\\" + char
        if char in _ESCAPES:
            return _ESCAPES[char]
        if char == "u":
            if self.text.startswith("{", self.pos):
                end = self.text.index("}", self.pos)
                code_points = self.text[self.pos + 1 : end].split()
                self.pos = end + 1
                return "".join(chr(int(cp, 16)) for cp in code_points)
            code = self.text[self.pos : self.pos + 4]
            self.pos += 4
            return chr(int(code, 16))
        if char == "x":
            match = re.match(r"[0-9a-fA-F]{1,2}", self.text[self.pos :])
            if match:
                self.pos += match.end()
                return chr(int(match.group(), 16))
        return char

    def read_lambda(self) -> Lambda:
        self.pos += 2
        self.skip_whitespace()
        if self.text.startswith("(", self.pos):
            closing = self.text.find(")", self.pos)
            if closing < 0:
                raise self.error("Unterminated lambda parameters")
            self.pos = closing + 1
            self.skip_whitespace()
        if not self.text.startswith("{", self.pos):
            raise self.error("Expected '{' after '->'")
        body_start = self.pos + 1
        depth = 0
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char in ('"', "'"):
                self.read_string()
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    body = self.text[body_start : self.pos]
                    self.pos += 1
                    return Lambda(body.strip())
            self.pos += 1
        raise self.error("Unterminated lambda body")


class LiteralParser(BaseParser):
    """Decodes option fragments into plain Python values."""

    def parse(self, content: str) -> OptionValues:
        """
        Decode an option fragment.

        Args:
            content: Fragment such as ``null: false, limit: 8``. Surrounding
                braces are optional.

        Returns:
            Mapping of option names to decoded values (empty for a blank
            fragment)

        Raises:
            OptionDecodeError: If the fragment is not a literal hash body
        """
        cache_key = self._get_cache_key(content)
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        text = content.strip()
        if text.startswith("{") and text.endswith("}"):
            text = text[1:-1]

        values = _Reader(text).read_pairs(None)
        logger.debug(f"Decoded option fragment {content!r} into {len(values)} option(s)")
        self._set_cache(cache_key, values)
        return values

    def parse_value(self, content: str) -> Any:
        """Decode a single literal value, e.g. ``["a", "b"]`` or ``:btree``."""
        reader = _Reader(content)
        value = reader.read_value()
        if not reader.at_end():
            raise reader.error("Unexpected trailing text")
        return value


def render_value(value: Any) -> str:
    """Render a decoded value back into literal syntax."""
    if isinstance(value, Symbol):
        name = plain_name(value)
        if _SYMBOL_NAME.match(name):
            return f":{name}"
        return f":{render_value(name)}"
    if isinstance(value, Lambda):
        return f"-> {{ {value.body} }}"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "nil"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _render_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        return "{ " + render_options(value) + " }"
    raise TypeError(f"Cannot render value of type {type(value).__name__}")


def render_options(options: OptionValues) -> str:
    """Render a mapping as a fragment, ``key: value, other: value``."""
    parts = []
    for key, value in options.items():
        if isinstance(key, str) and _LABEL_NAME.match(key):
            parts.append(f"{key}: {render_value(value)}")
        else:
            parts.append(f"{render_value(key)} => {render_value(value)}")
    return ", ".join(parts)


def _render_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("#{", "\\#{")
    )
    return f'"{escaped}"'
