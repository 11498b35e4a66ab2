# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of Tyco sources from files, directories, streams, and text.

All sources handed to one ``load`` call share a single namespace: a struct
declared in one file may be instantiated or referenced from another, and
every file's globals land in the same document.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Union

from tyco.compiler.parser import parse
from tyco.compiler.resolver import resolve
from tyco.compiler.syntax import SyntaxTree
from tyco.config import LoaderConfig, find_config, load_config
from tyco.errors import TycoLoadError
from tyco.model.entities import Document

logger = logging.getLogger("tyco.loader")

# ###############
# Public Interface
# ###############

Source = Union[str, "os.PathLike[str]", IO[str]]


def load(source: Source, *, config: LoaderConfig | None = None) -> Document:
    """Load a Tyco document.

    Args:
        source: A path to a ``.tyco`` file or to a directory of them, an open
            text stream, or Tyco source text. A string is taken as a path when
            it is a single line that names an existing file or directory, or
            ends in ``.tyco``; anything else is parsed as text.
        config: Loader options. When omitted and *source* is a directory, a
            ``.tyco.yaml`` file in that directory is used if present.

    Returns:
        The resolved Document.

    Raises:
        TycoLoadError: If a path does not exist or cannot be read.
        TycoError: Any lexing, parsing, or resolution failure.
        ConfigError: If the directory's configuration file is invalid.
    """
    if hasattr(source, "read"):
        name = getattr(source, "name", None)
        return _resolve([parse(source.read(), path=name if isinstance(name, str) else None)], config)
    if isinstance(source, str) and not _looks_like_path(source):
        return loads(source, config=config)

    path = Path(source)
    if path.is_dir():
        if config is None:
            config_file = find_config(path)
            config = load_config(config_file) if config_file is not None else LoaderConfig()
        return _resolve([parse(_read(f), path=str(f)) for f in discover_files(path, config)], config)
    return _resolve([parse(_read(path), path=str(path))], config)


def loads(text: str, *, config: LoaderConfig | None = None) -> Document:
    """Load a Tyco document from source text."""
    return _resolve([parse(text)], config)


def discover_files(directory: Path, config: LoaderConfig | None = None) -> list[Path]:
    """Return the source files under *directory*, sorted by path.

    Args:
        directory: Directory to search.
        config: Supplies the file pattern and whether to search recursively.
    """
    config = config or LoaderConfig()
    matches = directory.rglob(config.file_pattern) if config.recursive else directory.glob(config.file_pattern)
    files = sorted(f for f in matches if f.is_file())
    logger.debug("Discovered %d source file(s) under %s", len(files), directory)
    return files


# ################
# Implementation
# ################


def _looks_like_path(text: str) -> bool:
    if "\n" in text or not text.strip():
        return False
    if text.endswith(".tyco"):
        return True
    try:
        return Path(text).exists()
    except (OSError, ValueError):
        # Too long or otherwise not a valid file name on this platform.
        return False


def _read(path: Path) -> str:
    logger.debug("Reading %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TycoLoadError(f"No such file or directory: {path}", path=str(path)) from None
    except UnicodeDecodeError as exc:
        raise TycoLoadError(f"File is not valid UTF-8: {exc}", path=str(path)) from exc
    except OSError as exc:
        raise TycoLoadError(f"Cannot read file: {exc}", path=str(path)) from exc


def _resolve(trees: list[SyntaxTree], config: LoaderConfig | None) -> Document:
    document = resolve(trees, config)
    logger.debug(
        "Loaded %d global(s) and %d struct(s) from %d source(s)",
        len(document.globals),
        len(document.structs),
        len(trees),
    )
    return document
