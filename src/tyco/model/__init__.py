# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolved document model for Tyco (struct schemas, instances, and values)."""

from tyco.model.entities import Document, StructDef
from tyco.model.objects import Struct
from tyco.model.types import (
    ArrayTypeRef,
    FieldDef,
    PrimitiveType,
    PrimitiveTypeRef,
    StructTypeRef,
    TypeRef,
)
from tyco.model.values import (
    ArrayValue,
    BoolValue,
    DateTimeValue,
    DateValue,
    FloatValue,
    InlineInstanceValue,
    Instance,
    IntegerValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimeValue,
    Value,
)

__all__ = [
    # Type system
    "PrimitiveType",
    "PrimitiveTypeRef",
    "ArrayTypeRef",
    "StructTypeRef",
    "TypeRef",
    "FieldDef",
    # Values
    "StringValue",
    "IntegerValue",
    "FloatValue",
    "BoolValue",
    "DateValue",
    "TimeValue",
    "DateTimeValue",
    "NullValue",
    "ArrayValue",
    "ReferenceValue",
    "InlineInstanceValue",
    "Value",
    "Instance",
    # Entities
    "StructDef",
    "Document",
    "Struct",
]
