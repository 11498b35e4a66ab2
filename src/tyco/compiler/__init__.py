# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tyco processing pipeline: lexing, parsing, resolution, and serialization."""

from tyco.compiler.lexer import Token, TokenStream, TokenType, tokenize
from tyco.compiler.loader import discover_files, load, loads
from tyco.compiler.parser import parse
from tyco.compiler.resolver import resolve
from tyco.compiler.serializer import dumps, to_json
from tyco.compiler.syntax import SyntaxTree

__all__ = [
    "tokenize",
    "Token",
    "TokenType",
    "TokenStream",
    "parse",
    "SyntaxTree",
    "resolve",
    "to_json",
    "dumps",
    "load",
    "loads",
    "discover_files",
]
