# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Tyco lexical scanner."""

import pytest

from tyco.compiler.lexer import Token, TokenStream, TokenType, tokenize
from tyco.errors import LexError

# ###############
# Test Helpers
# ###############


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str) -> list[TokenType]:
    return [tok.type for tok in _tokens_no_eof(source)]


def _single(source: str) -> Token:
    """Tokenize *source*, which must contain exactly one token."""
    tokens = _tokens_no_eof(source)
    assert len(tokens) == 1, tokens
    return tokens[0]


# ###############
# EOF and Trivia
# ###############


class TestEofAndTrivia:
    def test_empty_string_produces_eof(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert (tokens[0].line, tokens[0].column) == (1, 1)

    def test_whitespace_only_produces_eof(self) -> None:
        assert _types("   \t\r\n  ") == []

    def test_comment_is_discarded(self) -> None:
        assert _types("# just a comment") == []

    def test_comment_ends_at_newline(self) -> None:
        tokens = _tokens_no_eof("# comment\nname")
        assert [t.type for t in tokens] == [TokenType.IDENTIFIER]
        assert tokens[0].line == 2

    def test_hash_inside_string_is_not_a_comment(self) -> None:
        assert _single('"a # b"').value == "a # b"


# ###############
# Keywords, Types, and Identifiers
# ###############


class TestWords:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("struct", TokenType.STRUCT),
            ("true", TokenType.TRUE),
            ("false", TokenType.FALSE),
            ("null", TokenType.NULL),
        ],
    )
    def test_keywords(self, source: str, expected_type: TokenType) -> None:
        assert _single(source).type == expected_type

    @pytest.mark.parametrize("name", ["str", "int", "float", "bool", "date", "time", "datetime", "array"])
    def test_type_names(self, name: str) -> None:
        tok = _single(name)
        assert tok.type == TokenType.TYPE_NAME
        assert tok.value == name

    @pytest.mark.parametrize("name", ["Person", "owner", "_private", "snake_case_2", "strings", "integer"])
    def test_identifiers(self, name: str) -> None:
        tok = _single(name)
        assert tok.type == TokenType.IDENTIFIER
        assert tok.value == name


# ###############
# Punctuation
# ###############


class TestPunctuation:
    def test_all_symbols(self) -> None:
        assert _types("* ? { } ( ) [ ] : , = < >") == [
            TokenType.STAR,
            TokenType.QUESTION,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.COLON,
            TokenType.COMMA,
            TokenType.EQUALS,
            TokenType.LANGLE,
            TokenType.RANGLE,
        ]

    def test_field_declaration_sequence(self) -> None:
        assert _types("*id: str") == [TokenType.STAR, TokenType.IDENTIFIER, TokenType.COLON, TokenType.TYPE_NAME]

    def test_illegal_character_raises(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("name: @")
        assert exc_info.value.line == 1
        assert exc_info.value.column == 7


# ###############
# Numbers
# ###############


class TestNumbers:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("0", 0),
            ("42", 42),
            ("-7", -7),
            ("+3", 3),
            ("0x1A", 26),
            ("0o12", 10),
            ("0b101", 5),
            ("0XfF", 255),
            ("-0x10", -16),
        ],
    )
    def test_integers(self, source: str, expected: int) -> None:
        tok = _single(source)
        assert tok.type == TokenType.INTEGER
        assert tok.value == expected

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("3.14", 3.14),
            ("-0.5", -0.5),
            ("1e3", 1000.0),
            ("2.5E-2", 0.025),
        ],
    )
    def test_floats(self, source: str, expected: float) -> None:
        tok = _single(source)
        assert tok.type == TokenType.FLOAT
        assert tok.value == pytest.approx(expected)

    @pytest.mark.parametrize("source", ["007", "12abc", "1_000", "0x", "1.", "0b102"])
    def test_malformed_numbers_raise(self, source: str) -> None:
        with pytest.raises(LexError):
            tokenize(source)


# ###############
# Dates and Times
# ###############


class TestTemporalLiterals:
    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("2024-01-15", TokenType.DATE),
            ("12:30", TokenType.TIME),
            ("12:30:45", TokenType.TIME),
            ("12:30:45.250", TokenType.TIME),
            ("09:30Z", TokenType.TIME),
            ("09:30:00+02:00", TokenType.TIME),
            ("09:30:00-05:30", TokenType.TIME),
            ("2024-01-15T12:30:00", TokenType.DATETIME),
            ("2024-01-15 12:30:00", TokenType.DATETIME),
            ("2024-01-15T12:30:00Z", TokenType.DATETIME),
            ("2024-01-15T12:30:00+02:00", TokenType.DATETIME),
        ],
    )
    def test_temporal_tokens(self, source: str, expected_type: TokenType) -> None:
        tok = _single(source)
        assert tok.type == expected_type
        assert tok.value == source

    def test_date_followed_by_comma(self) -> None:
        assert _types("2024-01-15, 2024-01-16") == [TokenType.DATE, TokenType.COMMA, TokenType.DATE]


# ###############
# Strings
# ###############


class TestStrings:
    def test_double_quoted(self) -> None:
        tok = _single('"hello"')
        assert tok.type == TokenType.STRING
        assert tok.value == "hello"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (r'"a\nb"', "a\nb"),
            (r'"tab\there"', "tab\there"),
            (r'"say \"hi\""', 'say "hi"'),
            (r'"back\\slash"', "back\\slash"),
            (r'"caf\u00e9"', "café"),
            (r'"\U0001F600"', "\U0001f600"),
        ],
    )
    def test_escape_sequences(self, source: str, expected: str) -> None:
        assert _single(source).value == expected

    def test_single_quoted_is_raw(self) -> None:
        tok = _single(r"'C:\path\{name}'")
        assert tok.type == TokenType.RAW_STRING
        assert tok.value == r"C:\path\{name}"

    def test_invalid_escape_raises(self) -> None:
        with pytest.raises(LexError, match="Invalid escape"):
            tokenize(r'"bad \q"')

    def test_short_unicode_escape_raises(self) -> None:
        with pytest.raises(LexError, match="unicode escape"):
            tokenize(r'"\u12"')

    def test_unterminated_string_raises_with_position(self) -> None:
        with pytest.raises(LexError, match="Unterminated") as exc_info:
            tokenize('name: "abc')
        assert exc_info.value.line == 1
        assert exc_info.value.column == 7

    def test_newline_inside_string_raises(self) -> None:
        with pytest.raises(LexError, match="Unterminated"):
            tokenize('"abc\ndef"')

    def test_error_carries_path(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize('"abc', path="conf.tyco")
        assert exc_info.value.path == "conf.tyco"
        assert str(exc_info.value).startswith('File "conf.tyco", line 1, column 1:')


class TestMultilineStrings:
    def test_first_and_last_newline_are_trimmed(self) -> None:
        tok = _single('"""\nline one\n  line two\n"""')
        assert tok.type == TokenType.STRING
        assert tok.value == "line one\n  line two"

    def test_closing_indentation_is_trimmed(self) -> None:
        assert _single('"""\n    indented\n    """').value == "    indented"

    def test_inline_content_is_kept(self) -> None:
        assert _single('"""one line"""').value == "one line"

    def test_escapes_are_decoded(self) -> None:
        assert _single('"""a\\tb"""').value == "a\tb"

    def test_line_continuation_joins_lines(self) -> None:
        assert _single('"""\nfoo \\\n      bar\n"""').value == "foo bar"

    def test_escaped_backslash_is_not_a_continuation(self) -> None:
        assert _single('"""a\\\\\nb"""').value == "a\\\nb"

    def test_extra_quotes_before_delimiter_are_content(self) -> None:
        assert _single('""""quoted""""').value == '"quoted"'

    def test_raw_multiline_keeps_backslashes(self) -> None:
        tok = _single("'''\nC:\\dir\\file\n'''")
        assert tok.type == TokenType.RAW_STRING
        assert tok.value == "C:\\dir\\file"

    def test_crlf_newlines_are_trimmed(self) -> None:
        assert _single('"""\r\nbody\r\n"""').value == "body"

    def test_unterminated_multiline_raises(self) -> None:
        with pytest.raises(LexError, match="Unterminated multiline"):
            tokenize('"""never closed')


# ###############
# Positions and Streams
# ###############


class TestPositions:
    def test_columns_on_one_line(self) -> None:
        tokens = _tokens_no_eof("port: 8080")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (1, 5), (1, 7)]

    def test_lines_advance_past_multiline_string(self) -> None:
        tokens = _tokens_no_eof('"""\na\nb\n"""\nnext')
        assert tokens[1].value == "next"
        assert tokens[1].line == 5


class TestTokenStream:
    def test_stream_is_restartable(self) -> None:
        stream = TokenStream('name: "value"')
        assert list(stream) == list(stream)

    def test_stream_is_lazy(self) -> None:
        iterator = iter(TokenStream("first @"))
        assert next(iterator).value == "first"
        with pytest.raises(LexError):
            next(iterator)
