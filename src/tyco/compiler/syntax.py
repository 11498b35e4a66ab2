# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Untyped syntax tree produced by the parser.

Literals are kept as tagged ``Literal`` nodes, distinct from the resolved
``Value`` models, so that type coercion happens in one explicit resolver step.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union

# ###############
# Public Interface
# ###############


class LiteralKind(enum.Enum):
    """The lexical kind of a literal, before any type coercion."""

    STRING = "string"
    RAW_STRING = "raw_string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOL = "bool"
    NULL = "null"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


@dataclass(frozen=True)
class Literal:
    """A scalar literal as written in the source."""

    kind: LiteralKind
    value: Any
    line: int
    column: int


@dataclass(frozen=True)
class ArrayExpr:
    """``[item, ...]`` with arbitrarily nested items."""

    items: list[Expr]
    line: int
    column: int


@dataclass(frozen=True)
class Argument:
    """A positional (``name`` is None) or named argument inside ``Name(...)``."""

    value: Expr
    name: str | None = None


@dataclass(frozen=True)
class CallExpr:
    """``Name(args)``: a reference to a keyed instance, or a positional inline instance."""

    type_name: str
    args: list[Argument]
    line: int
    column: int


@dataclass(frozen=True)
class FieldAssignment:
    """``name: value`` inside an instance body."""

    name: str
    value: Expr
    line: int
    column: int


@dataclass(frozen=True)
class ObjectExpr:
    """``Name { ... }`` or anonymous ``{ ... }`` inline instance."""

    type_name: str | None
    fields: list[FieldAssignment]
    line: int
    column: int


Expr = Union[Literal, ArrayExpr, CallExpr, ObjectExpr]


@dataclass(frozen=True)
class TypeExpr:
    """A declared type: a primitive name, a struct name, or ``array<T>``."""

    name: str
    line: int
    column: int
    element: TypeExpr | None = None

    def __str__(self) -> str:
        if self.element is not None:
            return f"array<{self.element}>"
        return self.name


@dataclass(frozen=True)
class FieldDecl:
    """One field of a struct definition."""

    name: str
    type: TypeExpr
    line: int
    column: int
    nullable: bool = False
    is_primary_key: bool = False
    default: Expr | None = None


@dataclass(frozen=True)
class StructDecl:
    """``struct Name { field... }``."""

    name: str
    fields: list[FieldDecl]
    line: int
    column: int


@dataclass(frozen=True)
class GlobalDecl:
    """A top-level ``[type] name: value`` binding."""

    name: str
    value: Expr
    line: int
    column: int
    type: TypeExpr | None = None
    nullable: bool = False


@dataclass(frozen=True)
class InstanceDecl:
    """A top-level ``Name(args) { fields }`` struct instance."""

    type_name: str
    args: list[Argument]
    fields: list[FieldAssignment]
    line: int
    column: int


@dataclass
class SyntaxTree:
    """Everything declared in one source, in declaration order."""

    path: str | None = None
    globals: list[GlobalDecl] = field(default_factory=list)
    structs: list[StructDecl] = field(default_factory=list)
    instances: list[InstanceDecl] = field(default_factory=list)
