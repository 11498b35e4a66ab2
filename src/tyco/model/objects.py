# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Materialization of a resolved document into plain Python objects.

Each struct type maps to a ``Struct`` subclass. Subclassing ``Struct`` with the
struct's name registers a custom class whose ``validate`` hook runs for every
object created from that struct.
"""

from __future__ import annotations

import types
from typing import TYPE_CHECKING, Any

from tyco.model.values import ArrayValue, InlineInstanceValue, Instance, NullValue, ReferenceValue, Value

if TYPE_CHECKING:
    from tyco.model.entities import Document

# ###############
# Public Interface
# ###############


class Struct(types.SimpleNamespace):
    """Base class for objects materialized from Tyco struct instances."""

    registry: dict[str, type[Struct]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        Struct.registry[cls.__name__] = cls

    @classmethod
    def class_for(cls, type_name: str) -> type[Struct]:
        """Return the class registered for *type_name*, creating a plain one if needed."""
        if type_name not in cls.registry:
            cls.registry[type_name] = type(type_name, (Struct,), {})
        return cls.registry[type_name]

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)

    def validate(self) -> None:
        """Hook for subclasses; raise to reject an object."""


def materialize_globals(document: Document) -> Struct:
    """Return the document's globals as a namespace of Python values."""
    builder = _Builder(document)
    return Struct(**{name: builder.build(value) for name, value in document.globals.items()})


def materialize_instances(document: Document) -> dict[str, list[Any]]:
    """Return the instances of every struct as validated Struct objects."""
    builder = _Builder(document)
    return {name: [builder.instance(inst) for inst in insts] for name, insts in document.instances.items()}


# ################
# Implementation
# ################


class _Builder:
    """Converts values to Python objects, sharing one object per keyed instance."""

    def __init__(self, document: Document) -> None:
        self._document = document
        self._built: dict[int, Struct] = {}

    def build(self, value: Value) -> Any:
        if isinstance(value, NullValue):
            return None
        if isinstance(value, ArrayValue):
            return [self.build(item) for item in value.items]
        if isinstance(value, ReferenceValue):
            return self.instance(self._document.dereference(value))
        if isinstance(value, InlineInstanceValue):
            return self.instance(value.instance)
        return value.value

    def instance(self, inst: Instance) -> Struct:
        built = self._built.get(id(inst))
        if built is None:
            # Register before filling so that reference cycles share the object.
            built = self._built[id(inst)] = Struct.class_for(inst.struct_name)()
            for name, value in inst.fields.items():
                setattr(built, name, self.build(value))
            # Fields may shadow the hook by name.
            type(built).validate(built)
        return built
