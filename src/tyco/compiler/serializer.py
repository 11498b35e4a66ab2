# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical JSON rendering of a resolved Tyco document."""

from __future__ import annotations

import json
from typing import Any

from tyco.model.entities import Document
from tyco.model.values import (
    ArrayValue,
    DateTimeValue,
    DateValue,
    InlineInstanceValue,
    Instance,
    NullValue,
    ReferenceValue,
    TimeValue,
    Value,
)

# ###############
# Public Interface
# ###############


def to_json(document: Document) -> dict[str, Any]:
    """Return the JSON value tree of *document*.

    Globals come first, in declaration order, followed by one array per keyed
    struct holding its instances in declaration order. Unkeyed structs only
    appear inline. References expand to the full target object; a reference
    back into an instance that is already being expanded renders as
    ``{primary_key: key}`` instead.
    """
    return _Serializer(document).document()


def dumps(document: Document, indent: int | None = None) -> str:
    """Serialize *document* to JSON text."""
    return json.dumps(to_json(document), indent=indent, ensure_ascii=False)


# ################
# Implementation
# ################


class _Serializer:
    def __init__(self, document: Document) -> None:
        self._document = document
        self._path: set[int] = set()

    def document(self) -> dict[str, Any]:
        result: dict[str, Any] = {name: self.value(value) for name, value in self._document.globals.items()}
        for name, struct in self._document.structs.items():
            if struct.primary_key is None:
                continue
            result[name] = [self.instance(inst) for inst in self._document.instances.get(name, [])]
        return result

    def value(self, value: Value) -> Any:
        if isinstance(value, NullValue):
            return None
        if isinstance(value, (DateValue, TimeValue, DateTimeValue)):
            return value.value.isoformat()
        if isinstance(value, ArrayValue):
            return [self.value(item) for item in value.items]
        if isinstance(value, InlineInstanceValue):
            return self.instance(value.instance)
        if isinstance(value, ReferenceValue):
            target = self._document.dereference(value)
            if id(target) in self._path:
                primary_key = self._document.structs[value.struct_name].primary_key
                return {primary_key: self.value(value.key)}
            return self.instance(target)
        return value.value

    def instance(self, inst: Instance) -> dict[str, Any]:
        self._path.add(id(inst))
        try:
            return {name: self.value(value) for name, value in inst.fields.items()}
        finally:
            self._path.discard(id(inst))
