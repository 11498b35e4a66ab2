# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Tyco recursive-descent parser."""

import pytest

from tyco.compiler.parser import parse
from tyco.compiler.syntax import (
    ArrayExpr,
    CallExpr,
    Literal,
    LiteralKind,
    ObjectExpr,
    SyntaxTree,
)
from tyco.errors import DuplicatePrimaryKeyMarker, LexError, ParseError

# ###############
# Test Helpers
# ###############


def _parse(source: str) -> SyntaxTree:
    return parse(source, path="test.tyco")


def _global_value(source: str):
    tree = _parse(source)
    assert len(tree.globals) == 1
    return tree.globals[0].value


# ###############
# Empty Input
# ###############


class TestEmptyInput:
    def test_empty_source(self) -> None:
        tree = _parse("")
        assert tree.globals == []
        assert tree.structs == []
        assert tree.instances == []

    def test_comments_only(self) -> None:
        tree = _parse("# nothing here\n# at all\n")
        assert tree.globals == [] and tree.structs == [] and tree.instances == []

    def test_path_is_recorded(self) -> None:
        assert _parse("").path == "test.tyco"


# ###############
# Global Attributes
# ###############


class TestGlobals:
    def test_untyped_global(self) -> None:
        tree = _parse('name: "World"')
        decl = tree.globals[0]
        assert decl.name == "name"
        assert decl.type is None
        assert decl.value == Literal(LiteralKind.STRING, "World", 1, 7)

    def test_typed_global(self) -> None:
        decl = _parse("int port: 8080").globals[0]
        assert decl.name == "port"
        assert decl.type is not None
        assert decl.type.name == "int"
        assert decl.value.value == 8080

    def test_nullable_typed_global(self) -> None:
        decl = _parse("?str note: null").globals[0]
        assert decl.nullable is True
        assert decl.value.kind == LiteralKind.NULL

    def test_array_suffix_type(self) -> None:
        decl = _parse("int[] ports: [80, 443]").globals[0]
        assert str(decl.type) == "array<int>"
        assert isinstance(decl.value, ArrayExpr)
        assert [item.value for item in decl.value.items] == [80, 443]

    def test_array_generic_type(self) -> None:
        decl = _parse("array<array<str>> grid: [['a'], []]").globals[0]
        assert str(decl.type) == "array<array<str>>"

    def test_struct_typed_global(self) -> None:
        decl = _parse('Person owner: Person("p1")').globals[0]
        assert decl.type.name == "Person"
        assert isinstance(decl.value, CallExpr)

    def test_type_name_used_as_global_name(self) -> None:
        decl = _parse("date: 2024-01-15").globals[0]
        assert decl.name == "date"
        assert decl.type is None
        assert decl.value.kind == LiteralKind.DATE

    @pytest.mark.parametrize(
        ("source", "kind", "value"),
        [
            ("x: true", LiteralKind.BOOL, True),
            ("x: false", LiteralKind.BOOL, False),
            ("x: null", LiteralKind.NULL, None),
            ("x: 1.5", LiteralKind.FLOAT, 1.5),
            ("x: 0x1A", LiteralKind.INTEGER, 26),
            ("x: 'raw'", LiteralKind.RAW_STRING, "raw"),
            ("x: 12:30", LiteralKind.TIME, "12:30"),
            ("x: 2024-01-15T08:00:00Z", LiteralKind.DATETIME, "2024-01-15T08:00:00Z"),
        ],
    )
    def test_literal_kinds(self, source: str, kind: LiteralKind, value: object) -> None:
        literal = _global_value(source)
        assert literal.kind == kind
        assert literal.value == value

    def test_nested_arrays_with_trailing_comma(self) -> None:
        value = _global_value("x: [[1, 2], [3,],]")
        assert isinstance(value, ArrayExpr)
        assert len(value.items) == 2
        assert [item.value for item in value.items[1].items] == [3]

    def test_anonymous_object_value(self) -> None:
        value = _global_value('x: [{ a: 1, b: "two" }]').items[0]
        assert isinstance(value, ObjectExpr)
        assert value.type_name is None
        assert [f.name for f in value.fields] == ["a", "b"]

    def test_typed_object_value(self) -> None:
        value = _global_value("origin: Point { x: 0, y: 0 }")
        assert isinstance(value, ObjectExpr)
        assert value.type_name == "Point"

    def test_bare_word_value_raises(self) -> None:
        with pytest.raises(ParseError, match="Bare word"):
            _parse("env: production")


# ###############
# Struct Definitions
# ###############


class TestStructs:
    def test_struct_with_primary_key(self) -> None:
        struct = _parse("struct Person { *id: str, name: str }").structs[0]
        assert struct.name == "Person"
        assert [f.name for f in struct.fields] == ["id", "name"]
        assert struct.fields[0].is_primary_key is True
        assert struct.fields[1].is_primary_key is False

    def test_fields_separated_by_newlines(self) -> None:
        struct = _parse("struct S {\n  a: int\n  b: str\n}").structs[0]
        assert [f.name for f in struct.fields] == ["a", "b"]

    def test_nullable_field(self) -> None:
        field = _parse("struct S { ?note: str }").structs[0].fields[0]
        assert field.nullable is True

    def test_default_value(self) -> None:
        field = _parse("struct S { port: int = 80 }").structs[0].fields[0]
        assert field.default == Literal(LiteralKind.INTEGER, 80, 1, 24)

    def test_struct_field_types(self) -> None:
        fields = _parse("struct S { owner: Person, tags: str[], grid: array<int[]> }").structs[0].fields
        assert [str(f.type) for f in fields] == ["Person", "array<str>", "array<array<int>>"]

    def test_keyword_named_field(self) -> None:
        fields = _parse("struct S { date: date, time: time }").structs[0].fields
        assert [f.name for f in fields] == ["date", "time"]

    def test_empty_struct(self) -> None:
        assert _parse("struct Empty {}").structs[0].fields == []

    def test_second_primary_key_raises(self) -> None:
        with pytest.raises(DuplicatePrimaryKeyMarker):
            _parse("struct S { *a: str, *b: str }")

    def test_double_star_raises(self) -> None:
        with pytest.raises(DuplicatePrimaryKeyMarker):
            _parse("struct S { **a: str }")

    def test_duplicate_primary_key_marker_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            _parse("struct S { *a: str, *b: str }")

    def test_nullable_primary_key_raises(self) -> None:
        with pytest.raises(ParseError, match="cannot be nullable"):
            _parse("struct S { *?a: str }")

    def test_array_primary_key_raises(self) -> None:
        with pytest.raises(ParseError, match="primitive type"):
            _parse("struct S { *a: int[] }")

    def test_duplicate_field_raises(self) -> None:
        with pytest.raises(ParseError, match="Duplicate field 'a'"):
            _parse("struct S { a: int, a: str }")

    def test_missing_closing_brace_raises(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _parse("struct S { a: int")
        assert "end of file" in exc_info.value.message

    def test_missing_type_raises(self) -> None:
        with pytest.raises(ParseError):
            _parse("struct S { a: }")


# ###############
# Instances
# ###############


class TestInstances:
    def test_keyed_instance_with_body(self) -> None:
        inst = _parse('Person("p1"): { name: "Ada" }').instances[0]
        assert inst.type_name == "Person"
        assert len(inst.args) == 1
        assert inst.args[0].value.value == "p1"
        assert [(f.name, f.value.value) for f in inst.fields] == [("name", "Ada")]

    def test_instance_without_colon(self) -> None:
        inst = _parse('Person("p1") { name: "Ada" }').instances[0]
        assert [f.name for f in inst.fields] == ["name"]

    def test_positional_only_instance(self) -> None:
        inst = _parse('Person("p1", "Ada")').instances[0]
        assert [a.value.value for a in inst.args] == ["p1", "Ada"]
        assert inst.fields == []

    def test_named_arguments(self) -> None:
        inst = _parse('Person(id: "p1", name: "Ada")').instances[0]
        assert [a.name for a in inst.args] == ["id", "name"]

    def test_body_only_instance(self) -> None:
        inst = _parse("Point: { x: 1, y: 2 }").instances[0]
        assert inst.args == []
        assert [f.name for f in inst.fields] == ["x", "y"]

    def test_reference_field_value(self) -> None:
        value = _parse('Pet("rex"): { owner: Person("p1") }').instances[0].fields[0].value
        assert isinstance(value, CallExpr)
        assert value.type_name == "Person"
        assert value.args[0].value.value == "p1"

    def test_inline_instance_field_value(self) -> None:
        value = _parse('Shape("s"): { origin: { x: 1, y: 2 } }').instances[0].fields[0].value
        assert isinstance(value, ObjectExpr)

    def test_declaration_order_is_kept(self) -> None:
        tree = _parse('a: 1\nstruct S { *k: int }\nS(1)\nb: 2\nS(2)')
        assert [g.name for g in tree.globals] == ["a", "b"]
        assert [i.args[0].value.value for i in tree.instances] == [1, 2]

    def test_unterminated_body_raises(self) -> None:
        with pytest.raises(ParseError, match="Unterminated instance body"):
            _parse('Person("p1"): { name: "Ada"')

    def test_colon_without_body_raises(self) -> None:
        with pytest.raises(ParseError, match="to open the body"):
            _parse('Person("p1"): "Ada"')

    def test_unclosed_argument_list_raises(self) -> None:
        with pytest.raises(ParseError):
            _parse('Person("p1"')

    def test_unterminated_array_raises(self) -> None:
        with pytest.raises(ParseError, match="Unterminated array"):
            _parse("x: [1, 2,")


# ###############
# Error Reporting
# ###############


class TestErrors:
    def test_stray_token_at_top_level(self) -> None:
        with pytest.raises(ParseError, match="at top level") as exc_info:
            _parse("a: 1\n}")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 1
        assert exc_info.value.path == "test.tyco"

    def test_identifier_followed_by_value(self) -> None:
        with pytest.raises(ParseError, match="Unexpected token"):
            _parse('name "value"')

    def test_lex_errors_propagate(self) -> None:
        with pytest.raises(LexError):
            _parse("x: $")
