# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolved values and struct instances of the Tyco document model."""

from __future__ import annotations

import datetime
from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class StringValue(BaseModel):
    """A string; ``raw`` marks single-quoted literals, which are never templated."""

    kind: Literal["str"] = "str"
    value: str
    raw: bool = False


class IntegerValue(BaseModel):
    """An integer."""

    kind: Literal["int"] = "int"
    value: int


class FloatValue(BaseModel):
    """A floating-point number."""

    kind: Literal["float"] = "float"
    value: float


class BoolValue(BaseModel):
    """A boolean."""

    kind: Literal["bool"] = "bool"
    value: bool


class DateValue(BaseModel):
    """A calendar date."""

    kind: Literal["date"] = "date"
    value: datetime.date


class TimeValue(BaseModel):
    """A time of day, optionally with an offset."""

    kind: Literal["time"] = "time"
    value: datetime.time


class DateTimeValue(BaseModel):
    """A date and time, optionally with an offset."""

    kind: Literal["datetime"] = "datetime"
    value: datetime.datetime


class NullValue(BaseModel):
    """The absence of a value in a nullable field."""

    kind: Literal["null"] = "null"


class ArrayValue(BaseModel):
    """A homogeneous sequence of values."""

    kind: Literal["array"] = "array"
    items: list[Value] = _Field(default_factory=list)


class ReferenceValue(BaseModel):
    """A link by identity to a keyed instance: struct name plus primary-key value.

    The target is looked up on demand through ``Document.dereference``.
    """

    kind: Literal["reference"] = "reference"
    struct_name: str
    key: Value


class InlineInstanceValue(BaseModel):
    """An instance embedded in place, owned by the enclosing value."""

    kind: Literal["instance"] = "instance"
    instance: Instance


# A resolved value. The `kind` discriminator field keeps the union unambiguous.
Value = Annotated[
    StringValue
    | IntegerValue
    | FloatValue
    | BoolValue
    | DateValue
    | TimeValue
    | DateTimeValue
    | NullValue
    | ArrayValue
    | ReferenceValue
    | InlineInstanceValue,
    _Field(discriminator="kind"),
]


class Instance(BaseModel):
    """A concrete value conforming to a struct schema, with fields in declaration order."""

    struct_name: str
    fields: dict[str, Value] = _Field(default_factory=dict)

    def __getitem__(self, name: str) -> Value:
        return self.fields[name]


# Resolve forward references in self-referential models.
ArrayValue.model_rebuild()
ReferenceValue.model_rebuild()
InlineInstanceValue.model_rebuild()
Instance.model_rebuild()
