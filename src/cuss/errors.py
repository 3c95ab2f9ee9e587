"""Error codes, messages and exceptions for stylesheet parsing.

Parse errors are identified by a kebab-case code. `generate_error_message`
turns a code into the human-readable text carried by `ParseError` and by the
`CssSyntaxError` raised to callers.
"""

from __future__ import annotations


def generate_error_message(code: str, detail: str | None = None) -> str:
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        detail: Optional text (usually the offending character) to include

    Returns:
        Human-readable error message string
    """
    messages = {
        # Lexical errors
        "unclosed-comment": "Comment is not closed before end of stylesheet",
        "unclosed-string-at-eol": "String is not closed before end of line",
        "unclosed-string-at-eof": "String is not closed before end of stylesheet",
        "unsupported-escape": "Escape sequences in strings are not supported",
        "invalid-color": "Color must be 3 or 6 hex digits",
        # Selector errors
        "missing-id": "Expected identifier after #",
        "missing-class": "Expected identifier after .",
        "missing-child": "Expected selector after > combinator",
        "expected-selector-after-comma": "Expected selector after comma",
        "unsupported-combinator": "Sibling combinators are not supported",
        "unsupported-attribute-selector": "Attribute selectors are not supported",
        "unsupported-pseudo-class": "Pseudo-classes are not supported",
        "unexpected-character": "Unexpected character in selector",
        "empty-selector": "Empty selector",
        # Rule errors
        "expected-block": "Expected { after selectors",
        "expected-colon": "Expected : after property name",
        "expected-value": "Expected value in declaration",
        "expected-declaration": "Expected declaration",
        "expected-function-arg": "Expected value in function argument",
        "expected-close-paren": "Expected ) to close function",
        "trailing-content": "Unexpected content before end of stylesheet",
    }

    message = messages.get(code, code)
    if detail:
        return f"{message}: {detail!r}"
    return message


class ParseError:
    """A parse error with location information."""

    __slots__ = ("code", "column", "line", "message")

    code: str
    line: int
    column: int
    message: str

    def __init__(self, code: str, line: int, column: int, message: str | None = None) -> None:
        self.code = code
        self.line = line
        self.column = column
        self.message = message or generate_error_message(code)

    def __repr__(self) -> str:
        return f"ParseError({self.code!r}, line={self.line}, column={self.column})"

    def __str__(self) -> str:
        return f"({self.line},{self.column}): {self.code} - {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # type: ignore[assignment]


class CssSyntaxError(SyntaxError):
    """Raised when a stylesheet or selector cannot be parsed.

    Inherits from SyntaxError so Python 3.11+ shows the offending source line
    with the error position marked.
    """

    error: ParseError

    def __init__(self, error: ParseError, source: str | None = None) -> None:
        self.error = error
        super().__init__(error.message)
        self.filename = "<css>"
        self.lineno = error.line
        self.offset = error.column
        if source is not None:
            lines = source.split("\n")
            if 1 <= error.line <= len(lines):
                self.text = lines[error.line - 1]

    @property
    def code(self) -> str:
        return self.error.code

    def __str__(self) -> str:
        return str(self.error)
