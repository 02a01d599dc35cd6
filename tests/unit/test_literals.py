"""
Unit Tests for Literal Decoding
===============================
"""

import pytest
from lark import Token

from railroad_dsl.core.dsl.literals import LiteralDecodeError, decode_literal, unescape


@pytest.mark.unit
class TestUnescape:
    """Test delimiter stripping and escape resolution."""

    @pytest.mark.parametrize(
        "span, expected",
        [
            ('"abc"', "abc"),
            ("'abc'", "abc"),
            ("<rule>", "rule"),
            ("`note`", "note"),
            ('""', ""),
            (r'"a\"b"', 'a"b'),
            (r"'it\'s'", "it's"),
            (r'"\\"', "\\"),
            (r"<a\>b>", "a>b"),
            (r"`x\`y`", "x`y"),
        ],
    )
    def test_unescape(self, span, expected):
        assert unescape(span) == expected

    def test_backslash_takes_next_character_verbatim(self):
        """There are no named escapes; \\n is just n."""
        assert unescape(r'"\n\t"') == "nt"

    def test_consecutive_escapes(self):
        assert unescape(r'"\\\\\""') == '\\\\"'

    def test_non_ascii_text_is_preserved(self):
        assert unescape('"héllo wörld"') == "héllo wörld"
        assert unescape(r'"\é"') == "é"

    def test_trailing_backslash_raises(self):
        with pytest.raises(LiteralDecodeError):
            unescape('"ab\\"')

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            unescape('"\\"')


@pytest.mark.unit
class TestDecodeLiteral:
    """Test decoding of grammar tokens."""

    def test_decode_token(self):
        token = Token("STRING", r'"x\"y"', line=1, column=1)
        assert decode_literal(token) == 'x"y'

    def test_error_carries_token_position(self):
        token = Token("STRING", '"bad\\"', line=3, column=7)

        with pytest.raises(LiteralDecodeError) as exc_info:
            decode_literal(token)

        assert exc_info.value.line == 3
        assert exc_info.value.column == 7
