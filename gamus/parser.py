"""Problem table validation and CSV loading.

A problem table is a rectangular 2-D list:

    row 0        ["", "", "M1", "M2", ...]          machine names from column 2
    rows 1..N    [job, operation, d1, d2, ...]      durations per machine

A blank job cell continues the job of the previous row.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Sequence

Table = list[list[Any]]

FIRST_MACHINE_COLUMN = 2


class MalformedInputError(ValueError):
    """Problem table does not follow the expected layout."""


def is_blank(cell: Any) -> bool:
    return cell is None or str(cell).strip() == ""


def validate_table(table: Sequence[Sequence[Any]]) -> None:
    """Check the table contract consumed by ``WorkUnit.load``.

    Raises:
        MalformedInputError: On an empty table, a header without machines,
            blank machine or operation names, ragged rows, a first row
            without a job name, or a duration that is not a non-negative int.
    """
    if not table:
        raise MalformedInputError("Empty problem table")
    header = table[0]
    width = len(header)
    if width <= FIRST_MACHINE_COLUMN:
        raise MalformedInputError("Header row does not name any machine")
    for j in range(FIRST_MACHINE_COLUMN, width):
        if is_blank(header[j]):
            raise MalformedInputError(f"Blank machine name in header column {j}")

    for i in range(1, len(table)):
        row = table[i]
        if len(row) != width:
            raise MalformedInputError(f"Row {i} has {len(row)} cells, expected {width}")
        if i == 1 and is_blank(row[0]):
            raise MalformedInputError("First data row must name a job")
        if is_blank(row[1]):
            raise MalformedInputError(f"Row {i} has no operation name")
        for j in range(FIRST_MACHINE_COLUMN, width):
            cell = row[j]
            # bool is an int subclass; reject it explicitly
            if isinstance(cell, bool) or not isinstance(cell, int):
                raise MalformedInputError(
                    f"Duration at row {i}, column {j} is not an integer: {cell!r}"
                )
            if cell < 0:
                raise MalformedInputError(f"Negative duration at row {i}, column {j}: {cell}")


def load_table(file_path: str | Path, delimiter: str = ",") -> Table:
    """Read a CSV problem table and convert duration cells to ``int``.

    Empty lines are ignored. The result is validated before it is returned.
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        rows = [row for row in csv.reader(f, delimiter=delimiter) if any(c.strip() for c in row)]

    if not rows:
        raise MalformedInputError(f"No rows in {file_path}")

    table: Table = [[cell.strip() for cell in rows[0]]]
    for i, row in enumerate(rows[1:], start=1):
        converted: list[Any] = [cell.strip() for cell in row[:FIRST_MACHINE_COLUMN]]
        for j, cell in enumerate(row[FIRST_MACHINE_COLUMN:], start=FIRST_MACHINE_COLUMN):
            try:
                converted.append(int(cell.strip()))
            except ValueError as e:
                raise MalformedInputError(
                    f"Duration at row {i}, column {j} is not an integer: {cell!r}"
                ) from e
        table.append(converted)

    validate_table(table)
    return table


def save_table(table: Sequence[Sequence[Any]], file_path: str | Path) -> None:
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        for row in table:
            writer.writerow(["" if cell is None else cell for cell in row])
