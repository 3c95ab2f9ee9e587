"""Parser for stylesheets and selector lists.

Supports type (`div`, `*`), id (`#main`) and class (`.note`) selectors joined
by descendant (whitespace) and child (`>`) combinators, plus a small value
grammar for declarations. Identifiers are ASCII only and escapes are not
supported. Names are interned into a `SymbolPool` as they are read, so the
resulting selectors are ready for the matching engine.
"""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from .errors import CssSyntaxError, ParseError, generate_error_message
from .rules import Declaration, Rule, Stylesheet, Value
from .selector import Combinator, ComplexSelector, CompoundSelector, TypeSelector
from .symbol import Symbol, SymbolPool

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_WHITESPACE = " \t\r\n"


class ParserOpts:
    __slots__ = ("lowercase_tags",)

    def __init__(self, lowercase_tags=True):
        self.lowercase_tags = bool(lowercase_tags)


class StylesheetParser:
    """Recursive-descent parser over a stylesheet string."""

    __slots__ = ("length", "opts", "pool", "pos", "text")

    text: str
    pos: int
    length: int
    pool: SymbolPool
    opts: ParserOpts

    def __init__(self, text: str, pool: SymbolPool | None = None, opts: ParserOpts | None = None) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.pool = pool if pool is not None else SymbolPool()
        self.opts = opts or ParserOpts()

    # Errors

    def _location(self, pos: int) -> tuple[int, int]:
        line = self.text.count("\n", 0, pos) + 1
        last_newline = self.text.rfind("\n", 0, pos)
        return line, pos - last_newline

    def _error(self, code: str, detail: str | None = None) -> NoReturn:
        line, column = self._location(self.pos)
        error = ParseError(code, line, column, generate_error_message(code, detail))
        raise CssSyntaxError(error, self.text)

    # Low-level scanning

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < self.length:
            return self.text[pos]
        return ""

    def _consume_comments(self) -> None:
        # Called at the start of most tokens.
        while self.text.startswith("/*", self.pos):
            end = self.text.find("*/", self.pos + 2)
            if end == -1:
                self._error("unclosed-comment")
            self.pos = end + 2

    def _raw_ch(self, ch: str) -> bool:
        if self._peek() == ch:
            self.pos += 1
            return True
        return False

    def _ch(self, ch: str) -> bool:
        self._consume_comments()
        return self._raw_ch(ch)

    def _ws_one(self) -> bool:
        self._consume_comments()
        start = self.pos
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1
        return self.pos > start

    def _ws(self) -> bool:
        """Skip whitespace and comments; True if any whitespace was consumed."""
        if not self._ws_one():
            return False
        while self._ws_one():
            pass
        return True

    def _at_eof(self) -> bool:
        return self.pos == self.length

    def _read_ident(self) -> str | None:
        # Letters, `_` and `-`, with digits allowed anywhere except where they
        # would make the token look like a number. Rejects "", "-" and names
        # starting with "--". Does not skip leading whitespace.
        text = self.text
        start = self.pos
        i = start
        while i < self.length:
            ch = text[i]
            if not ch.isascii():
                break
            if ch.isalpha() or ch in "_-":
                i += 1
            elif ch.isdigit() and (i - start >= 2 or (i - start == 1 and text[start] != "-")):
                i += 1
            else:
                break
        name = text[start:i]
        if not name or name == "-" or name.startswith("--"):
            return None
        self.pos = i
        return name

    def _ident(self) -> Symbol | None:
        name = self._read_ident()
        if name is None:
            return None
        return self.pool.intern(name)

    def _number(self) -> float | None:
        self._consume_comments()
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return float(match.group())

    def _string(self, quote: str) -> str:
        # The opening quote has already been consumed.
        parts: list[str] = []
        start = self.pos
        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch == quote:
                parts.append(self.text[start : self.pos])
                self.pos += 1
                return "".join(parts)
            if ch == "\n":
                self._error("unclosed-string-at-eol")
            if ch == "\\":
                if self._peek(1) != "\n":
                    self._error("unsupported-escape")
                # Escaped newline is a line continuation.
                parts.append(self.text[start : self.pos])
                self.pos += 2
                start = self.pos
                continue
            self.pos += 1
        self._error("unclosed-string-at-eof")

    def _color(self) -> int:
        start = self.pos
        while self.pos < self.length and self.text[self.pos] in _HEX_DIGITS:
            self.pos += 1
        digits = self.text[start : self.pos]
        if len(digits) not in (3, 6):
            self.pos = start
            self._error("invalid-color", digits)
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        return int(digits, 16)

    # Selectors

    def compound_selector(self) -> CompoundSelector | None:
        type_selector: TypeSelector | None = None
        if self._ch("*"):
            type_selector = TypeSelector.universal()
        else:
            name = self._read_ident()
            if name is not None:
                if self.opts.lowercase_tags:
                    name = name.lower()
                type_selector = TypeSelector.ident(self.pool.intern(name))

        id_selector: Symbol | None = None
        class_selectors: list[Symbol] = []
        while True:
            if self._ch("#"):
                id_token = self._ident()
                if id_token is None:
                    self._error("missing-id")
                id_selector = id_token
            elif self._ch("."):
                self._consume_comments()
                class_token = self._ident()
                if class_token is None:
                    self._error("missing-class")
                class_selectors.append(class_token)
            else:
                break

        ch = self._peek()
        if ch == "[":
            self._error("unsupported-attribute-selector")
        if ch == ":":
            self._error("unsupported-pseudo-class")

        compound = CompoundSelector(id_selector, type_selector, class_selectors)
        if compound.is_empty():
            return None
        return compound

    def complex_selector(self) -> ComplexSelector | None:
        first = self.compound_selector()
        if first is None:
            return None
        tail: list[tuple[Combinator, CompoundSelector]] = []
        while True:
            ws = self._ws()
            if self._peek() in ("+", "~"):
                self._error("unsupported-combinator", self._peek())
            child = self._ch(">")
            if child:
                self._ws()
            if not (ws or child):
                break
            combinator = Combinator.CHILD if child else Combinator.DESCENDANT
            compound = self.compound_selector()
            if compound is None:
                if child:
                    self._error("missing-child")
                break
            tail.append((combinator, compound))
        return ComplexSelector(first, tail)

    def selector_list(self) -> list[ComplexSelector] | None:
        selector = self.complex_selector()
        if selector is None:
            return None
        result = [selector]
        self._ws()
        while self._ch(","):
            self._ws()
            selector = self.complex_selector()
            if selector is None:
                self._error("expected-selector-after-comma")
            result.append(selector)
            self._ws()
        return result

    # Declarations

    def value(self) -> Value | None:
        if self._ch('"'):
            return Value(Value.STRING, self._string('"'))
        if self._ch("'"):
            return Value(Value.STRING, self._string("'"))

        number = self._number()
        if number is not None:
            if self._raw_ch("%"):
                return Value(Value.PERCENT, number)
            unit = self._ident()
            if unit is not None:
                return Value(Value.DIMENSION, number, unit=unit)
            return Value(Value.NUMBER, number)

        if self._ch("#"):
            return Value(Value.COLOR, self._color())

        ident = self._ident()
        if ident is None:
            return None
        if not self._raw_ch("("):
            return Value(Value.IDENT, ident)

        args: list[Value] = []
        self._ws()
        arg = self.value()
        if arg is not None:
            args.append(arg)
            self._ws()
        while self._ch(","):
            self._ws()
            arg = self.value()
            if arg is None:
                self._error("expected-function-arg")
            args.append(arg)
            self._ws()
        if not self._ch(")"):
            self._error("expected-close-paren")
        return Value(Value.FUNCTION, ident, args=args)

    def declaration(self) -> Declaration | None:
        self._consume_comments()
        name = self._ident()
        if name is None:
            return None
        self._ws()
        if not self._ch(":"):
            self._error("expected-colon")
        self._ws()
        values: list[Value] = []
        while True:
            value = self.value()
            if value is None:
                break
            values.append(value)
            self._ws()
        if not values:
            self._error("expected-value")
        return Declaration(name, values)

    def style_rule(self) -> Rule | None:
        selectors = self.selector_list()
        if selectors is None:
            return None
        if not self._ch("{"):
            self._error("expected-block")
        declarations: list[Declaration] = []
        while True:
            self._ws()
            if self._ch("}"):
                break
            if self._ch(";"):
                continue
            declaration = self.declaration()
            if declaration is None:
                self._error("expected-declaration")
            declarations.append(declaration)
        return Rule(selectors, declarations)

    def stylesheet(self) -> Stylesheet:
        rules: list[Rule] = []
        self._ws()
        while True:
            rule = self.style_rule()
            if rule is None:
                break
            rules.append(rule)
            self._ws()
        self._consume_comments()
        if not self._at_eof():
            self._error("trailing-content", self._peek())
        logger.debug("Parsed %d style rules", len(rules))
        return Stylesheet(rules, self.pool)


def parse_stylesheet(text: str, pool: SymbolPool | None = None, *, opts: ParserOpts | None = None) -> Stylesheet:
    """Parse a stylesheet, interning names into `pool` (a new pool if omitted)."""
    return StylesheetParser(text, pool, opts).stylesheet()


def parse_selector_list(
    text: str,
    pool: SymbolPool | None = None,
    *,
    opts: ParserOpts | None = None,
) -> list[ComplexSelector]:
    """Parse a comma-separated selector list such as `div.note, #main > p`."""
    parser = StylesheetParser(text, pool, opts)
    parser._ws()
    selectors = parser.selector_list()
    if selectors is None:
        parser._error("empty-selector" if parser._at_eof() else "unexpected-character", parser._peek() or None)
    parser._consume_comments()
    if not parser._at_eof():
        parser._error("unexpected-character", parser._peek())
    return selectors
