# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Struct definitions and the resolved Tyco document."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, PrivateAttr
from pydantic import Field as _Field

from tyco.model.types import FieldDef
from tyco.model.values import Instance, ReferenceValue, Value

# ###############
# Public Interface
# ###############


class StructDef(BaseModel):
    """A named schema of typed fields, with at most one primary-key field."""

    name: str
    fields: list[FieldDef] = _Field(default_factory=list)

    @property
    def primary_key(self) -> str | None:
        """Name of the primary-key field, or None for an unkeyed struct."""
        for field_def in self.fields:
            if field_def.is_primary_key:
                return field_def.name
        return None

    def field(self, name: str) -> FieldDef | None:
        """Return the field definition called *name*, if declared."""
        for field_def in self.fields:
            if field_def.name == name:
                return field_def
        return None


class Document(BaseModel):
    """The fully resolved result of loading one or more Tyco sources.

    Attributes:
        globals: Global attributes in declaration order.
        structs: Struct definitions by name, in declaration order.
        instances: Instances of each struct, in declaration order. Every
            struct in ``structs`` has an entry, possibly empty.
    """

    globals: dict[str, Value] = _Field(default_factory=dict)
    structs: dict[str, StructDef] = _Field(default_factory=dict)
    instances: dict[str, list[Instance]] = _Field(default_factory=dict)

    _index: dict[str, dict[Any, Instance]] | None = PrivateAttr(default=None)

    def dereference(self, ref: ReferenceValue) -> Instance:
        """Return the instance that *ref* points to.

        Raises:
            KeyError: If no such instance exists. A document returned by
                ``tyco.load`` never contains a dangling reference.
        """
        return self._key_index()[ref.struct_name][key_of(ref.key)]

    def find(self, struct_name: str, key: Any) -> Instance | None:
        """Return the instance of *struct_name* whose primary key equals *key*."""
        struct = self.structs.get(struct_name)
        if struct is None or struct.primary_key is None:
            return None
        key_type = struct.field(struct.primary_key).type
        return self._key_index()[struct_name].get((str(key_type), key))

    def as_json(self) -> dict[str, Any]:
        """Return the canonical JSON value tree of this document."""
        from tyco.compiler.serializer import to_json

        return to_json(self)

    def get_globals(self) -> Any:
        """Return the globals as a ``tyco.Struct`` namespace of Python values."""
        from tyco.model.objects import materialize_globals

        return materialize_globals(self)

    def get_objects(self) -> dict[str, list[Any]]:
        """Return every struct's instances as ``tyco.Struct`` objects, by struct name."""
        from tyco.model.objects import materialize_instances

        return materialize_instances(self)

    def _key_index(self) -> dict[str, dict[Any, Instance]]:
        if self._index is None:
            index: dict[str, dict[Any, Instance]] = {}
            for name, struct in self.structs.items():
                primary_key = struct.primary_key
                if primary_key is None:
                    continue
                index[name] = {key_of(inst.fields[primary_key]): inst for inst in self.instances.get(name, [])}
            self._index = index
        return self._index


def key_of(value: Value) -> Any:
    """Return the hashable identity of a scalar primary-key value."""
    return (value.kind, getattr(value, "value", None))
