# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loader configuration and its YAML file format."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".tyco.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass(frozen=True)
class LoaderConfig:
    """Options that control how Tyco sources are discovered and resolved.

    Attributes:
        max_template_depth: Maximum nesting of template expansions before the
            resolver gives up with a TemplateCycleError.
        numeric_widening: Accept integer literals in float fields.
        file_pattern: Glob pattern used to find sources when loading a directory.
        recursive: Search subdirectories when loading a directory.
    """

    max_template_depth: int = 64
    numeric_widening: bool = True
    file_pattern: str = "*.tyco"
    recursive: bool = True


def load_config(path: Path) -> LoaderConfig:
    """Load and parse a Tyco loader configuration file.

    Args:
        path: Path to a YAML configuration file.

    Returns:
        A LoaderConfig populated from the file; missing keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def find_config(directory: Path) -> Path | None:
    """Return the path of the configuration file in *directory*, if there is one."""
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def parse_config(text: str, source_label: str = "<string>") -> LoaderConfig:
    """Parse configuration YAML text into a LoaderConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        ConfigError: If the YAML is invalid, has unknown keys, or has wrongly typed values.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return LoaderConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - set(_KEYS))
    if unknown:
        raise ConfigError(f"{source_label}: unknown config key(s): {', '.join(map(str, unknown))}")

    options: dict[str, object] = {}
    for key, (attr, expected) in _KEYS.items():
        if key not in data:
            continue
        value = data[key]
        # Integer options reject booleans.
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"{source_label}: '{key}' must be of type {expected.__name__}")
        options[attr] = value

    depth = options.get("max_template_depth")
    if isinstance(depth, int) and depth < 1:
        raise ConfigError(f"{source_label}: 'max-template-depth' must be at least 1")

    return LoaderConfig(**options)  # type: ignore[arg-type]


# ################
# Implementation
# ################

_KEYS: dict[str, tuple[str, type]] = {
    "max-template-depth": ("max_template_depth", int),
    "numeric-widening": ("numeric_widening", bool),
    "file-pattern": ("file_pattern", str),
    "recursive": ("recursive", bool),
}
