#!/usr/bin/env python3
# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the Tyco CI checks locally: formatting, lint, tests, conformance, and build.

Pass step names (case-insensitive prefixes) to run a subset, e.g.
``tools/ci.py lint tests``.
"""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=tyco", "--cov-report=term-missing"]),
    ("Conformance", ["uv", "run", "pytest", "-q", "tests/compiler/test_conformance.py"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Run the selected CI steps and print a summary table."""
    steps = _select(STEPS, sys.argv[1:] if argv is None else argv)
    if not steps:
        print(chalk.red("No CI step matches the given names."))
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in steps:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("Summary")
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        print(color(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _select(steps: list[tuple[str, list[str]]], names: list[str]) -> list[tuple[str, list[str]]]:
    if not names:
        return steps
    wanted = [n.lower() for n in names]
    return [step for step in steps if any(step[0].lower().startswith(w) for w in wanted)]


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
