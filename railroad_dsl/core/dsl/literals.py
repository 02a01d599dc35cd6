"""
Literal Decoder
===============

Turns the raw span of a quoted DSL literal (terminal, non-terminal or comment)
into the text shown in the diagram: the surrounding delimiters are dropped and
backslash escapes are resolved. A backslash takes the next character verbatim;
there are no named, unicode or octal escapes.
"""

from typing import Optional

from lark import Token


class LiteralDecodeError(ValueError):
    """Exception raised when a literal ends on an unterminated escape."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def unescape(span: str) -> str:
    """
    Strip the delimiters from a literal span and resolve its escapes.

    Args:
        span: Literal text including its opening and closing delimiter

    Returns:
        Decoded interior text

    Raises:
        LiteralDecodeError: If the interior ends with a lone backslash
    """
    decoded = []
    chars = iter(span[1:-1])
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise LiteralDecodeError(f"Unterminated escape at end of literal {span!r}")
            decoded.append(escaped)
        else:
            decoded.append(char)
    return "".join(decoded)


def decode_literal(token: Token) -> str:
    """Decode a literal token, attaching its source position to any error."""
    try:
        return unescape(str(token))
    except LiteralDecodeError as e:
        raise LiteralDecodeError(str(e), line=token.line, column=token.column) from e
