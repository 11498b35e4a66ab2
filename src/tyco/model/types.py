# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type system representations for the Tyco document model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

from tyco.model.values import Value

# ###############
# Public Interface
# ###############


class PrimitiveType(Enum):
    """Primitive types supported by the Tyco type system."""

    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class PrimitiveTypeRef(BaseModel):
    """Reference to a primitive type."""

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveType

    def __str__(self) -> str:
        return self.primitive.value


class ArrayTypeRef(BaseModel):
    """Reference to a parameterized array<T> type."""

    kind: Literal["array"] = "array"
    element_type: TypeRef

    def __str__(self) -> str:
        return f"array<{self.element_type}>"


class StructTypeRef(BaseModel):
    """Reference to a user-defined struct type."""

    kind: Literal["struct"] = "struct"
    name: str

    def __str__(self) -> str:
        return self.name


# A field type reference: a primitive, an array, or a struct.
# The `kind` discriminator field enables fast, unambiguous deserialization.
TypeRef = Annotated[
    PrimitiveTypeRef | ArrayTypeRef | StructTypeRef,
    _Field(discriminator="kind"),
]


class FieldDef(BaseModel):
    """A named, typed field of a struct definition.

    ``default`` holds the coerced default value; templates inside it are
    expanded separately for every instance that falls back to it.
    """

    name: str
    type: TypeRef
    nullable: bool = False
    is_primary_key: bool = False
    default: Value | None = None


# Resolve forward references for models that use TypeRef.
ArrayTypeRef.model_rebuild()
FieldDef.model_rebuild()
