# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for .tyco files.

Converts a token stream produced by the lexer into an untyped SyntaxTree.
Type checking of values against struct schemas is deferred to the resolver.
"""

from __future__ import annotations

from collections.abc import Iterable

from tyco.compiler.lexer import Token, TokenStream, TokenType
from tyco.compiler.syntax import (
    Argument,
    ArrayExpr,
    CallExpr,
    Expr,
    FieldAssignment,
    FieldDecl,
    GlobalDecl,
    InstanceDecl,
    Literal,
    LiteralKind,
    ObjectExpr,
    StructDecl,
    SyntaxTree,
    TypeExpr,
)
from tyco.errors import DuplicatePrimaryKeyMarker, ParseError

# ###############
# Public Interface
# ###############


def parse(source: str, path: str | None = None) -> SyntaxTree:
    """Parse Tyco source text into a SyntaxTree.

    Args:
        source: The full text of a .tyco file.
        path: Optional file path recorded on the tree and used in error messages.

    Returns:
        A SyntaxTree holding globals, struct definitions, and instances in
        declaration order.

    Raises:
        LexError: If the source contains invalid characters or unterminated literals.
        ParseError: If the source is syntactically invalid.
    """
    return _Parser(TokenStream(source, path), path).parse()


# ################
# Implementation
# ################

# Tokens accepted where a field or global name is expected.
_NAME_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.TYPE_NAME,
        TokenType.STRUCT,
        TokenType.TRUE,
        TokenType.FALSE,
        TokenType.NULL,
    }
)

_LITERAL_KINDS: dict[TokenType, LiteralKind] = {
    TokenType.STRING: LiteralKind.STRING,
    TokenType.RAW_STRING: LiteralKind.RAW_STRING,
    TokenType.INTEGER: LiteralKind.INTEGER,
    TokenType.FLOAT: LiteralKind.FLOAT,
    TokenType.DATE: LiteralKind.DATE,
    TokenType.TIME: LiteralKind.TIME,
    TokenType.DATETIME: LiteralKind.DATETIME,
}


class _Parser:
    """Recursive-descent parser for Tyco token streams."""

    def __init__(self, tokens: Iterable[Token], path: str | None) -> None:
        self._tokens = list(tokens)
        self._pos = 0
        self._path = path

    def parse(self) -> SyntaxTree:
        """Parse the full token stream and return a SyntaxTree."""
        tree = SyntaxTree(path=self._path)
        while not self._at_end():
            self._parse_top_level(tree)
        return tree

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the type of the token *offset* positions ahead, EOF past the end."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without
        consuming).
        """
        return self._peek_type() in types

    def _error(self, message: str, tok: Token) -> ParseError:
        return ParseError(message, tok.line, tok.column, self._path)

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise self._error(f"Expected {expected}, got {_describe(tok)}", tok)
        return self._advance()

    def _expect_name_token(self) -> Token:
        """Consume the current token as a name.

        Accepts identifiers and keywords used in name positions (e.g. a field
        named 'date').  Raises ParseError for structural tokens and EOF.
        """
        tok = self._current()
        if tok.type not in _NAME_TYPES:
            raise self._error(f"Expected identifier, got {_describe(tok)}", tok)
        return self._advance()

    def _skip_commas(self) -> None:
        while self._check(TokenType.COMMA):
            self._advance()

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def _parse_top_level(self, tree: SyntaxTree) -> None:
        """Parse one top-level declaration and append it to the tree."""
        tok = self._current()
        if tok.type == TokenType.STRUCT:
            tree.structs.append(self._parse_struct())
        elif tok.type == TokenType.QUESTION or self._starts_typed_global():
            tree.globals.append(self._parse_typed_global())
        elif tok.type == TokenType.IDENTIFIER:
            following = self._peek_type(1)
            if following == TokenType.LPAREN or following == TokenType.LBRACE:
                tree.instances.append(self._parse_instance())
            elif following == TokenType.COLON and self._peek_type(2) == TokenType.LBRACE:
                tree.instances.append(self._parse_instance())
            elif following == TokenType.COLON:
                tree.globals.append(self._parse_untyped_global())
            else:
                nxt = self._tokens[self._pos + 1]
                raise self._error(f"Unexpected token {_describe(nxt)} after {tok.value!r}", nxt)
        elif tok.type in _NAME_TYPES and self._peek_type(1) == TokenType.COLON:
            tree.globals.append(self._parse_untyped_global())
        else:
            raise self._error(f"Unexpected token {_describe(tok)} at top level", tok)

    def _starts_typed_global(self) -> bool:
        """Return True for ``type name:``, ``type[] name:`` and ``array<...> name:``."""
        if self._peek_type() == TokenType.TYPE_NAME:
            if self._current().value == "array":
                return self._peek_type(1) == TokenType.LANGLE
            return self._peek_type(1) != TokenType.COLON
        if self._peek_type() == TokenType.IDENTIFIER:
            if self._peek_type(1) == TokenType.LBRACKET and self._peek_type(2) == TokenType.RBRACKET:
                return True
            return self._peek_type(1) in _NAME_TYPES and self._peek_type(2) == TokenType.COLON
        return False

    # ------------------------------------------------------------------
    # Globals
    # ------------------------------------------------------------------

    def _parse_typed_global(self) -> GlobalDecl:
        """Parse: [?]<type> <name>: <value>"""
        start = self._current()
        nullable = False
        if self._check(TokenType.QUESTION):
            self._advance()
            nullable = True
        type_expr = self._parse_type()
        name_tok = self._expect_name_token()
        self._expect(TokenType.COLON)
        value = self._parse_value()
        return GlobalDecl(
            name=name_tok.value,
            value=value,
            line=start.line,
            column=start.column,
            type=type_expr,
            nullable=nullable,
        )

    def _parse_untyped_global(self) -> GlobalDecl:
        """Parse: <name>: <value>"""
        name_tok = self._expect_name_token()
        self._expect(TokenType.COLON)
        value = self._parse_value()
        return GlobalDecl(name=name_tok.value, value=value, line=name_tok.line, column=name_tok.column)

    # ------------------------------------------------------------------
    # Struct definitions
    # ------------------------------------------------------------------

    def _parse_struct(self) -> StructDecl:
        """Parse: struct <Name> { field_decl* }"""
        start = self._expect(TokenType.STRUCT)
        name_tok = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.LBRACE)
        fields: list[FieldDecl] = []
        seen: set[str] = set()
        primary_key: FieldDecl | None = None
        self._skip_commas()
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            field_decl = self._parse_field_decl()
            if field_decl.name in seen:
                raise ParseError(
                    f"Duplicate field '{field_decl.name}' in struct '{name_tok.value}'",
                    field_decl.line,
                    field_decl.column,
                    self._path,
                )
            if field_decl.is_primary_key:
                if primary_key is not None:
                    raise DuplicatePrimaryKeyMarker(
                        f"Struct '{name_tok.value}' already has primary key '{primary_key.name}'; "
                        f"'{field_decl.name}' cannot also be marked with '*'",
                        field_decl.line,
                        field_decl.column,
                        self._path,
                    )
                primary_key = field_decl
            seen.add(field_decl.name)
            fields.append(field_decl)
            self._skip_commas()
        self._expect(TokenType.RBRACE)
        return StructDecl(name=name_tok.value, fields=fields, line=start.line, column=start.column)

    def _parse_field_decl(self) -> FieldDecl:
        """Parse: [*|?]<name>: <type> [= <value>]"""
        start = self._current()
        is_primary_key = False
        nullable = False
        while self._check(TokenType.STAR, TokenType.QUESTION):
            marker = self._advance()
            if marker.type == TokenType.STAR:
                if is_primary_key:
                    raise DuplicatePrimaryKeyMarker(
                        "Field is marked with '*' more than once", marker.line, marker.column, self._path
                    )
                is_primary_key = True
            else:
                if nullable:
                    raise self._error("Field is marked with '?' more than once", marker)
                nullable = True
        if is_primary_key and nullable:
            raise self._error("A primary key field cannot be nullable", start)
        name_tok = self._expect_name_token()
        self._expect(TokenType.COLON)
        type_expr = self._parse_type()
        if is_primary_key and (type_expr.element is not None or type_expr.name not in _KEYABLE_TYPES):
            raise self._error(
                f"Primary key '{name_tok.value}' must have a primitive type, not '{type_expr}'",
                start,
            )
        default: Expr | None = None
        if self._check(TokenType.EQUALS):
            self._advance()
            default = self._parse_value()
        return FieldDecl(
            name=name_tok.value,
            type=type_expr,
            line=name_tok.line,
            column=name_tok.column,
            nullable=nullable,
            is_primary_key=is_primary_key,
            default=default,
        )

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def _parse_type(self) -> TypeExpr:
        """Parse a type: a primitive, a struct name, ``array<T>``, or ``T[]``."""
        tok = self._expect(TokenType.TYPE_NAME, TokenType.IDENTIFIER)
        if tok.value == "array" and tok.type == TokenType.TYPE_NAME:
            self._expect(TokenType.LANGLE)
            element = self._parse_type()
            self._expect(TokenType.RANGLE)
            type_expr = TypeExpr(name="array", line=tok.line, column=tok.column, element=element)
        else:
            type_expr = TypeExpr(name=tok.value, line=tok.line, column=tok.column)
        while self._check(TokenType.LBRACKET) and self._peek_type(1) == TokenType.RBRACKET:
            self._advance()
            self._advance()
            type_expr = TypeExpr(name="array", line=tok.line, column=tok.column, element=type_expr)
        return type_expr

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def _parse_instance(self) -> InstanceDecl:
        """Parse: <Name>[(args)][:] [{ field: value, ... }]"""
        name_tok = self._expect(TokenType.IDENTIFIER)
        args: list[Argument] = []
        has_args = False
        if self._check(TokenType.LPAREN):
            args = self._parse_arguments()
            has_args = True
        fields: list[FieldAssignment] = []
        if self._check(TokenType.COLON):
            self._advance()
            if not self._check(TokenType.LBRACE):
                tok = self._current()
                raise self._error(f"Expected '{{' to open the body of '{name_tok.value}', got {_describe(tok)}", tok)
        if self._check(TokenType.LBRACE):
            fields = self._parse_object_body()
        elif not has_args:
            raise self._error(f"Expected '(' or '{{' after '{name_tok.value}'", self._current())
        return InstanceDecl(
            type_name=name_tok.value,
            args=args,
            fields=fields,
            line=name_tok.line,
            column=name_tok.column,
        )

    def _parse_arguments(self) -> list[Argument]:
        """Parse: ( [arg (, arg)* [,]] ) where arg is <value> or <name>: <value>"""
        self._expect(TokenType.LPAREN)
        args: list[Argument] = []
        while not self._check(TokenType.RPAREN):
            if self._peek_type() in _NAME_TYPES and self._peek_type(1) == TokenType.COLON:
                name_tok = self._advance()
                self._advance()  # consume :
                args.append(Argument(value=self._parse_value(), name=name_tok.value))
            else:
                args.append(Argument(value=self._parse_value()))
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RPAREN)
        return args

    def _parse_object_body(self) -> list[FieldAssignment]:
        """Parse: { [name: value ([,] name: value)* [,]] }"""
        self._expect(TokenType.LBRACE)
        fields: list[FieldAssignment] = []
        self._skip_commas()
        while not self._check(TokenType.RBRACE):
            if self._at_end():
                raise self._error("Unterminated instance body; expected '}' before end of file", self._current())
            name_tok = self._expect_name_token()
            self._expect(TokenType.COLON)
            value = self._parse_value()
            fields.append(FieldAssignment(name=name_tok.value, value=value, line=name_tok.line, column=name_tok.column))
            self._skip_commas()
        self._expect(TokenType.RBRACE)
        return fields

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_value(self) -> Expr:
        """Parse a literal, array, reference/call, or inline object."""
        tok = self._current()
        if tok.type in _LITERAL_KINDS:
            self._advance()
            return Literal(kind=_LITERAL_KINDS[tok.type], value=tok.value, line=tok.line, column=tok.column)
        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return Literal(kind=LiteralKind.BOOL, value=tok.type == TokenType.TRUE, line=tok.line, column=tok.column)
        if tok.type == TokenType.NULL:
            self._advance()
            return Literal(kind=LiteralKind.NULL, value=None, line=tok.line, column=tok.column)
        if tok.type == TokenType.LBRACKET:
            return self._parse_array()
        if tok.type == TokenType.LBRACE:
            fields = self._parse_object_body()
            return ObjectExpr(type_name=None, fields=fields, line=tok.line, column=tok.column)
        if tok.type == TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                args = self._parse_arguments()
                return CallExpr(type_name=tok.value, args=args, line=tok.line, column=tok.column)
            if self._check(TokenType.LBRACE):
                fields = self._parse_object_body()
                return ObjectExpr(type_name=tok.value, fields=fields, line=tok.line, column=tok.column)
            raise self._error(
                f"Bare word {tok.value!r} is not a value; quote strings and write references as {tok.value}(key)",
                tok,
            )
        raise self._error(f"Expected a value, got {_describe(tok)}", tok)

    def _parse_array(self) -> ArrayExpr:
        """Parse: [ [value (, value)* [,]] ]"""
        start = self._expect(TokenType.LBRACKET)
        items: list[Expr] = []
        while not self._check(TokenType.RBRACKET):
            if self._at_end():
                raise self._error("Unterminated array; expected ']' before end of file", start)
            items.append(self._parse_value())
            if not self._check(TokenType.COMMA):
                break
            self._advance()
        self._expect(TokenType.RBRACKET)
        return ArrayExpr(items=items, line=start.line, column=start.column)


_KEYABLE_TYPES: frozenset[str] = frozenset({"str", "int", "float", "bool", "date", "time", "datetime"})


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of file"
    return repr(tok.value)
