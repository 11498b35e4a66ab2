# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for .tyco files.

Converts raw source text into a lazy sequence of tokens for subsequent parsing.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from tyco.errors import LexError

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the Tyco lexer."""

    # Keywords
    STRUCT = "struct"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    # Type names
    TYPE_NAME = "TYPE_NAME"

    # Symbols
    STAR = "*"
    QUESTION = "?"
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    EQUALS = "="
    LANGLE = "<"
    RANGLE = ">"

    # Literals
    STRING = "STRING"
    RAW_STRING = "RAW_STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"


TYPE_NAMES: frozenset[str] = frozenset({"str", "int", "float", "bool", "date", "time", "datetime", "array"})


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The decoded value: ``int`` for INTEGER, ``float`` for FLOAT,
            decoded text for strings, and raw source text for everything else.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: Any
    line: int
    column: int


class TokenStream:
    """A restartable, lazily scanned token sequence.

    Each iteration re-scans *source* from the start, so the stream can be
    consumed more than once. Scanning stops at the first error.
    """

    def __init__(self, source: str, path: str | None = None) -> None:
        self.source = source
        self.path = path

    def __iter__(self) -> Iterator[Token]:
        return _Lexer(self.source, self.path).scan()


def tokenize(source: str, path: str | None = None) -> list[Token]:
    """Tokenize Tyco source text into a list of tokens.

    Comments and whitespace are consumed and not included in the output.

    Args:
        source: The full text of a .tyco file.
        path: Optional file path used in error messages.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexError: On unexpected characters, invalid escapes, or unterminated
            string literals.
    """
    return list(TokenStream(source, path))


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "struct": TokenType.STRUCT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "*": TokenType.STAR,
    "?": TokenType.QUESTION,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
}

_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    '"': '"',
    "\\": "\\",
    "/": "/",
}

_TIME = r"\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:\d{2})?"
_DATETIME_RE = re.compile(rf"\d{{4}}-\d{{2}}-\d{{2}}[T ]{_TIME}")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(_TIME)
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_OCT_RE = re.compile(r"0[oO][0-7]+")
_BIN_RE = re.compile(r"0[bB][01]+")
_DECIMAL_RE = re.compile(r"\d+(\.\d+)?([eE][+-]?\d+)?")
_LINE_CONTINUATION_RE = re.compile(r"(?<!\\)((?:\\\\)*)\\\r?\n[ \t\r\n]*")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, path: str | None) -> None:
        self._source = source
        self._path = path
        self._pos = 0
        self._line = 1
        self._column = 1

    def scan(self) -> Iterator[Token]:
        """Yield all tokens including the terminal EOF."""
        while True:
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            yield self._scan_token()
        yield Token(TokenType.EOF, "", self._line, self._column)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past the end."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _advance(self, count: int = 1) -> str:
        """Consume *count* characters, update position tracking, and return them."""
        text = self._source[self._pos : self._pos + count]
        for ch in text:
            if ch == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._pos += len(text)
        return text

    def _error(self, message: str, line: int, column: int) -> LexError:
        return LexError(message, line, column, self._path)

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and '#' comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "#":
                while self._pos < len(self._source) and self._current() != "\n":
                    self._advance()
            else:
                break

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(_SINGLE_CHAR_TOKENS[ch], ch, line, col)
        if ch == '"' or ch == "'":
            if self._source.startswith(ch * 3, self._pos):
                return self._scan_multiline_string(ch, line, col)
            return self._scan_string(ch, line, col)
        if ch.isdigit() or (ch in "+-" and self._peek().isdigit()):
            return self._scan_number_or_temporal(line, col)
        if ch.isalpha() or ch == "_":
            return self._scan_identifier_or_keyword(line, col)
        raise self._error(f"Unexpected character: {ch!r}", line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, quote: str, line: int, col: int) -> Token:
        """Scan a single-line string; double quotes decode escapes, single quotes do not."""
        self._advance()  # opening quote
        start = self._pos
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                raw = self._source[start : self._pos]
                self._advance()  # closing quote
                if quote == "'":
                    return Token(TokenType.RAW_STRING, raw, line, col)
                return Token(TokenType.STRING, self._decode_escapes(raw, line, col + 1), line, col)
            if ch == "\n":
                break
            if ch == "\\" and quote == '"':
                self._advance()
                if self._pos >= len(self._source) or self._current() == "\n":
                    break
            self._advance()
        raise self._error("Unterminated string literal", line, col)

    def _scan_multiline_string(self, quote: str, line: int, col: int) -> Token:
        """Scan a triple-quoted string.

        A newline immediately after the opening delimiter is dropped, as is the
        final newline together with the indentation of the closing delimiter.
        """
        delimiter = quote * 3
        self._advance(3)
        start = self._pos
        end = self._source.find(delimiter, start)
        while end != -1 and quote == '"' and _is_escaped(self._source, end, start):
            end = self._source.find(delimiter, end + 1)
        if end == -1:
            raise self._error(f"Unterminated multiline string (missing closing {delimiter})", line, col)
        # Up to two extra quotes before the closing delimiter belong to the content.
        for _ in range(2):
            if not self._source.startswith(quote, end + 3):
                break
            end += 1
        raw = self._source[start:end]
        self._advance(end + 3 - self._pos)
        raw = _trim_multiline(raw)
        if quote == "'":
            return Token(TokenType.RAW_STRING, raw, line, col)
        raw = _LINE_CONTINUATION_RE.sub(r"\1", raw)
        return Token(TokenType.STRING, self._decode_escapes(raw, line, col + 3), line, col)

    def _decode_escapes(self, raw: str, line: int, col: int) -> str:
        """Replace backslash escape sequences in *raw*."""
        chars: list[str] = []
        i = 0
        while i < len(raw):
            ch = raw[i]
            if ch != "\\":
                chars.append(ch)
                i += 1
                continue
            esc = raw[i + 1 : i + 2]
            if esc in _SIMPLE_ESCAPES:
                chars.append(_SIMPLE_ESCAPES[esc])
                i += 2
            elif esc in ("u", "U"):
                width = 4 if esc == "u" else 8
                digits = raw[i + 2 : i + 2 + width]
                if len(digits) != width or not all(d in "0123456789abcdefABCDEF" for d in digits):
                    raise self._error(f"Invalid unicode escape: '\\{esc}{digits}'", line, col)
                code = int(digits, 16)
                if code > 0x10FFFF:
                    raise self._error(f"Unicode escape out of range: '\\{esc}{digits}'", line, col)
                chars.append(chr(code))
                i += 2 + width
            else:
                raise self._error(f"Invalid escape sequence: '\\{esc}'", line, col)
        return "".join(chars)

    def _scan_number_or_temporal(self, line: int, col: int) -> Token:
        """Scan a date, time, datetime, integer, or floating-point literal."""
        rest = self._source[self._pos :]
        if rest[0].isdigit():
            for pattern, token_type in (
                (_DATETIME_RE, TokenType.DATETIME),
                (_DATE_RE, TokenType.DATE),
                (_TIME_RE, TokenType.TIME),
            ):
                if match := pattern.match(rest):
                    self._advance(match.end())
                    return Token(token_type, match.group(), line, col)

        sign = ""
        if rest[0] in "+-":
            sign = self._advance()
            rest = rest[1:]
        for pattern, base in ((_HEX_RE, 16), (_OCT_RE, 8), (_BIN_RE, 2)):
            if match := pattern.match(rest):
                text = match.group()
                self._advance(len(text))
                self._check_number_end(text, line, col)
                value = int(text[2:], base)
                return Token(TokenType.INTEGER, -value if sign == "-" else value, line, col)

        match = _DECIMAL_RE.match(rest)
        if match is None:
            raise self._error(f"Malformed number literal: {sign + rest[:1]!r}", line, col)
        text = match.group()
        self._advance(len(text))
        self._check_number_end(text, line, col)
        if match.group(1) or match.group(2):
            return Token(TokenType.FLOAT, float(sign + text), line, col)
        if len(text) > 1 and text.startswith("0"):
            raise self._error(f"Leading zeros are not allowed in decimal integers: {text!r}", line, col)
        return Token(TokenType.INTEGER, int(sign + text), line, col)

    def _check_number_end(self, text: str, line: int, col: int) -> None:
        ch = self._current()
        if ch.isalnum() or ch == "_" or ch == ".":
            raise self._error(f"Malformed number literal: {text + ch!r}", line, col)

    def _scan_identifier_or_keyword(self, line: int, col: int) -> Token:
        """Scan an identifier and map it to a keyword or type-name token if applicable."""
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() == "_"):
            self._advance()
        value = self._source[start : self._pos]
        if value in TYPE_NAMES:
            return Token(TokenType.TYPE_NAME, value, line, col)
        return Token(_KEYWORDS.get(value, TokenType.IDENTIFIER), value, line, col)


def _is_escaped(source: str, index: int, floor: int) -> bool:
    """Return True if the character at *index* follows an odd run of backslashes."""
    count = 0
    i = index - 1
    while i >= floor and source[i] == "\\":
        count += 1
        i -= 1
    return count % 2 == 1


def _trim_multiline(raw: str) -> str:
    if raw.startswith("\r\n"):
        raw = raw[2:]
    elif raw.startswith("\n"):
        raw = raw[1:]
    return re.sub(r"\r?\n[ \t]*\Z", "", raw)
