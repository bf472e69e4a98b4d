"""Pytest tests for problem table validation and CSV loading.

Each CSV test creates a temporary file and asserts either successful parsing
or the correct exception.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager

import pytest

from gamus.parser import MalformedInputError, load_table, save_table, validate_table


@contextmanager
def temp_table(content: str):
    fd, path = tempfile.mkstemp(suffix=".csv", text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:  # pragma: no cover
            pass


def test_load_simple_table():
    with temp_table(",,M1,M2\nJ1,O1,3,0\n,O2, 2 ,4\n\nJ2,O1,1,1\n") as path:
        table = load_table(path)
    assert table[0] == ["", "", "M1", "M2"]
    assert table[1] == ["J1", "O1", 3, 0]
    assert table[2] == ["", "O2", 2, 4]
    assert table[3] == ["J2", "O1", 1, 1]


def test_load_semicolon_delimiter():
    with temp_table(";;A;B\nJ1;O1;1;2\n") as path:
        table = load_table(path, delimiter=";")
    assert table == [["", "", "A", "B"], ["J1", "O1", 1, 2]]


@pytest.mark.parametrize(
    "content",
    [
        "",  # no rows at all
        ",,M1\nJ1,O1,x\n",  # duration not an integer
        ",,M1\nJ1,O1,2.5\n",  # duration not an integer
        ",,M1,M2\nJ1,O1,2\n",  # ragged row
        ",,M1\n,O1,2\n",  # first row without job
        ",\nJ1,O1\n",  # no machine columns
        ",,M1\nJ1,O1,-1\n",  # negative duration
    ],
)
def test_load_errors(content: str):
    with temp_table(content) as path:
        with pytest.raises(MalformedInputError):
            load_table(path)


def test_malformed_input_is_value_error():
    with pytest.raises(ValueError):
        validate_table([])


@pytest.mark.parametrize(
    "table",
    [
        [["", "", "M1"], ["J1", "O1", "3"]],
        [["", "", "M1"], ["J1", "O1", True]],
        [["", "", "M1"], ["J1", "O1", None]],
        [["", "", ""], ["J1", "O1", 1]],
        [["", "", "M1"], ["J1", "", 1]],
    ],
)
def test_validate_errors(table):
    with pytest.raises(MalformedInputError):
        validate_table(table)


def test_validate_accepts_header_only_and_none_job_cells():
    validate_table([["", "", "M1"]])
    validate_table([["", "", "M1"], ["J1", "O1", 1], [None, "O2", 0]])


def test_save_and_load(tmp_path):
    table = [["", "", "M1", "M2"], ["J1", "O1", 3, 1], [None, "O2", 0, 2]]
    path = tmp_path / "table.csv"
    save_table(table, path)
    assert load_table(path) == [["", "", "M1", "M2"], ["J1", "O1", 3, 1], ["", "O2", 0, 2]]
