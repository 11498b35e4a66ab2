# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Golden-file tests: every input under tests/data/inputs must load to its expected JSON."""

import json
from pathlib import Path

import pytest

from tyco import dumps, load

DATA_DIR = Path(__file__).parent.parent / "data"
INPUTS = sorted((DATA_DIR / "inputs").glob("*.tyco"))


def _expected(source: Path) -> dict:
    return json.loads((DATA_DIR / "expected" / f"{source.stem}.json").read_text(encoding="utf-8"))


def test_every_input_has_expected_output() -> None:
    assert INPUTS
    missing = [p.name for p in INPUTS if not (DATA_DIR / "expected" / f"{p.stem}.json").is_file()]
    assert missing == []


@pytest.mark.parametrize("source", INPUTS, ids=[p.stem for p in INPUTS])
def test_conformance(source: Path) -> None:
    assert load(source).as_json() == _expected(source)


@pytest.mark.parametrize("source", INPUTS, ids=[p.stem for p in INPUTS])
def test_key_order(source: Path) -> None:
    assert list(json.loads(dumps(load(source)))) == list(_expected(source))


def test_whole_directory_loads_as_one_document() -> None:
    data = load(DATA_DIR / "inputs").as_json()
    assert data["Person"][0] == {"id": "p1", "name": "Ada"}
    assert data["greeting"] == "Hello, World"
