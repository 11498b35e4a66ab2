# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Tyco command-line interface."""

import argparse
import json
import logging
import pprint
import sys
from pathlib import Path

from tyco.compiler.loader import load
from tyco.config import ConfigError, LoaderConfig, load_config
from tyco.errors import TycoError, TycoLoadError

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the Tyco CLI."""
    parser = argparse.ArgumentParser(
        prog="tyco",
        description="Tyco: typed configuration documents",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the loader's progress to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the resolved document",
        description="Load a Tyco file or directory and print its canonical JSON form.",
    )
    dump_parser.add_argument("path", help="A .tyco file or a directory of them")
    dump_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the output",
    )
    dump_parser.add_argument(
        "--format",
        choices=["json", "python"],
        default="json",
        help="Output as JSON text or as a Python literal (default: json)",
    )
    _add_config_argument(dump_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Validate Tyco sources",
        description="Load each path and report whether it resolves without errors.",
    )
    check_parser.add_argument("paths", nargs="+", metavar="path", help="A .tyco file or a directory of them")
    _add_config_argument(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_config_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        metavar="FILE",
        help="Loader configuration file (default: .tyco.yaml in a loaded directory)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "dump":
        return _cmd_dump(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    try:
        config = _load_config(args)
        document = load(_existing_path(args.path), config=config)
    except (TycoError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    data = document.as_json()
    if args.format == "python":
        print(pprint.pformat(data, sort_dicts=False) if args.pretty else repr(data))
    else:
        print(json.dumps(data, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        config = _load_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    failed = 0
    for path in args.paths:
        try:
            load(_existing_path(path), config=config)
        except (TycoError, ConfigError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            failed += 1
        else:
            print(f"{path}: ok")

    if failed:
        print(f"{failed} of {len(args.paths)} path(s) failed.", file=sys.stderr)
        return 1
    return 0


def _load_config(args: argparse.Namespace) -> LoaderConfig | None:
    if args.config is None:
        return None
    return load_config(Path(args.config))


def _existing_path(path: str) -> Path:
    resolved = Path(path)
    if not resolved.exists():
        raise TycoLoadError(f"No such file or directory: {path}", path=path)
    return resolved
