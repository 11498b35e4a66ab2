# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy for the Tyco document processor.

Every error is fatal to the load that raised it. Each carries enough source
context (path, line, column) for a user-facing diagnostic, but callers should
rely on the exception class, not on the message text.
"""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class TycoError(Exception):
    """Base class for all errors raised while loading a Tyco document.

    Attributes:
        message: Human-readable description without location prefix.
        line: 1-based line number, if known.
        column: 1-based column number, if known.
        path: Source file path, or None for in-memory text.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.path = path

    def __str__(self) -> str:
        location = _format_location(self.path, self.line, self.column)
        if location:
            return f"{location}: {self.message}"
        return self.message


class TycoLoadError(TycoError):
    """Raised when a source path cannot be found or read."""


class LexError(TycoError):
    """Raised on an illegal character, bad escape, or unterminated literal."""


class ParseError(TycoError):
    """Raised when the token stream does not match the Tyco grammar."""


class UnknownField(ParseError):
    """Raised when an instance assigns a field its struct does not declare."""


class DuplicatePrimaryKeyMarker(ParseError):
    """Raised when a struct marks more than one field with ``*``."""


class ResolutionError(TycoError):
    """Base class for errors detected while resolving a syntax tree."""


class TycoTypeError(ResolutionError):
    """Raised when a literal does not match its declared field type."""


class MissingRequiredField(ResolutionError):
    """Raised when a non-nullable field without a default is omitted."""


class UnresolvedReference(ResolutionError):
    """Raised when a reference names a struct or key that does not exist."""


class DuplicatePrimaryKey(ResolutionError):
    """Raised when two instances of one struct share a primary key."""


class TemplateCycleError(ResolutionError):
    """Raised when template expansion revisits a field or exceeds the depth cap."""


class UndefinedTemplateVariable(ResolutionError):
    """Raised when a template placeholder names nothing in scope."""


# ################
# Implementation
# ################


def _format_location(path: str | None, line: int | None, column: int | None) -> str:
    parts: list[str] = []
    if path is not None:
        parts.append(f'File "{path}"')
    if line is not None:
        parts.append(f"line {line}")
        if column is not None:
            parts.append(f"column {column}")
    return ", ".join(parts)
