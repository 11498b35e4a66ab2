# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tyco: a typed configuration language with keyed structs, references, and templates."""

from tyco.compiler.loader import load, loads
from tyco.compiler.serializer import dumps
from tyco.config import ConfigError, LoaderConfig
from tyco.errors import (
    DuplicatePrimaryKey,
    DuplicatePrimaryKeyMarker,
    LexError,
    MissingRequiredField,
    ParseError,
    ResolutionError,
    TemplateCycleError,
    TycoError,
    TycoLoadError,
    TycoTypeError,
    UndefinedTemplateVariable,
    UnknownField,
    UnresolvedReference,
)
from tyco.model import Document, Struct

__all__ = [
    "load",
    "loads",
    "dumps",
    "Document",
    "Struct",
    "LoaderConfig",
    "ConfigError",
    "TycoError",
    "TycoLoadError",
    "LexError",
    "ParseError",
    "UnknownField",
    "DuplicatePrimaryKeyMarker",
    "ResolutionError",
    "TycoTypeError",
    "MissingRequiredField",
    "UnresolvedReference",
    "DuplicatePrimaryKey",
    "TemplateCycleError",
    "UndefinedTemplateVariable",
]
