import logging
import numbers
from dataclasses import dataclass
from typing import Iterable, Sequence

import pandas as pd

from cell_model import Cell, blank_cell, merge_attribute
from errors import OutOfBounds, ShapeViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Grid:
    """Canonical grid: rows of cells plus a parallel list of column names.

    Grids are values. Every operation in this module returns a new Grid and
    leaves its input untouched.
    """

    rows: tuple
    column_names: tuple

    __hash__ = None  # holds cells

    def __post_init__(self):
        rows = tuple(tuple(r) for r in self.rows)
        names = tuple(str(n) for n in self.column_names)
        if not rows:
            raise ShapeViolation("Grid needs at least one row")
        width = len(rows[0])
        if width == 0:
            raise ShapeViolation("Grid needs at least one column")
        for idx, row in enumerate(rows):
            if len(row) != width:
                raise ShapeViolation(
                    f"Row {idx} has {len(row)} cells, expected {width}"
                )
        if len(names) != width:
            raise ShapeViolation(
                f"{len(names)} column names for {width} columns"
            )
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "column_names", names)

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.rows[0])

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_rows, self.n_cols

    def cell(self, row: int, col: int) -> Cell:
        check_row(self, row)
        check_col(self, col)
        return self.rows[row][col]


# ---------- labels ----------
def column_label(index: int) -> str:
    """Spreadsheet-style label: 0 -> A, 25 -> Z, 26 -> AA."""
    if index < 0:
        raise ValueError("column index must be non-negative")
    label = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def default_column_names(count: int) -> tuple:
    return tuple(column_label(i) for i in range(count))


def next_free_label(names: Iterable[str]) -> str:
    used = set(names)
    i = 0
    while column_label(i) in used:
        i += 1
    return column_label(i)


# ---------- constructors / conversions ----------
def blank_row(width: int) -> tuple:
    return tuple(blank_cell() for _ in range(width))


def blank_grid(rows: int, cols: int, column_names: Sequence[str] | None = None) -> Grid:
    names = tuple(column_names) if column_names is not None else default_column_names(cols)
    return Grid(tuple(blank_row(cols) for _ in range(rows)), names)


def from_values(values: Sequence[Sequence], column_names: Sequence[str] | None = None) -> Grid:
    rows = tuple(
        tuple(Cell("" if v is None else str(v), {}) for v in row) for row in values
    )
    width = len(rows[0]) if rows else 0
    names = tuple(column_names) if column_names is not None else default_column_names(width)
    return Grid(rows, names)


def to_values(grid: Grid) -> list[list[str]]:
    return [[c.value for c in row] for row in grid.rows]


def to_frame(grid: Grid) -> pd.DataFrame:
    """Values as a string DataFrame with positional columns and row labels."""
    return pd.DataFrame(
        to_values(grid), columns=pd.RangeIndex(grid.n_cols), dtype=object
    )


def copy_grid(grid: Grid) -> Grid:
    return Grid(tuple(tuple(c.copy() for c in row) for row in grid.rows), grid.column_names)


# ---------- bounds ----------
def check_row(grid: Grid, row: int):
    if not isinstance(row, numbers.Integral) or row < 0 or row >= grid.n_rows:
        raise OutOfBounds("row", row, grid.n_rows)


def check_col(grid: Grid, col: int):
    if not isinstance(col, numbers.Integral) or col < 0 or col >= grid.n_cols:
        raise OutOfBounds("column", col, grid.n_cols)


def _replace_row(grid: Grid, row: int, new_row: tuple) -> Grid:
    rows = grid.rows[:row] + (new_row,) + grid.rows[row + 1:]
    return Grid(rows, grid.column_names)


# ---------- cell content ----------
def set_cell_value(grid: Grid, row: int, col: int, value) -> Grid:
    check_row(grid, row)
    check_col(grid, col)
    old = grid.rows[row]
    new_row = old[:col] + (old[col].with_value(value),) + old[col + 1:]
    return _replace_row(grid, row, new_row)


def set_cell_format(grid: Grid, row: int, col: int, attr: str, value=None) -> Grid:
    check_row(grid, row)
    check_col(grid, col)
    old = grid.rows[row]
    new_row = old[:col] + (merge_attribute(old[col], attr, value),) + old[col + 1:]
    return _replace_row(grid, row, new_row)


def set_cell(grid: Grid, row: int, col: int, cell: Cell) -> Grid:
    check_row(grid, row)
    check_col(grid, col)
    old = grid.rows[row]
    new_row = old[:col] + (cell.copy(),) + old[col + 1:]
    return _replace_row(grid, row, new_row)


# ---------- rows ----------
def insert_row(grid: Grid, at: int | None = None) -> Grid:
    if at is None:
        at = grid.n_rows
    if not isinstance(at, numbers.Integral) or at < 0 or at > grid.n_rows:
        raise OutOfBounds("row", at, grid.n_rows + 1)
    rows = grid.rows[:at] + (blank_row(grid.n_cols),) + grid.rows[at:]
    logger.debug("insert_row at=%s -> %s rows", at, len(rows))
    return Grid(rows, grid.column_names)


def delete_row(grid: Grid, index: int) -> Grid:
    check_row(grid, index)
    if grid.n_rows == 1:
        return grid
    rows = grid.rows[:index] + grid.rows[index + 1:]
    logger.debug("delete_row index=%s -> %s rows", index, len(rows))
    return Grid(rows, grid.column_names)


def delete_last_row(grid: Grid) -> Grid:
    return delete_row(grid, grid.n_rows - 1)


def duplicate_row(grid: Grid, index: int) -> Grid:
    check_row(grid, index)
    clone = tuple(c.copy() for c in grid.rows[index])
    rows = grid.rows[: index + 1] + (clone,) + grid.rows[index + 1:]
    return Grid(rows, grid.column_names)


# ---------- columns ----------
def insert_column(grid: Grid, at: int | None = None, name: str | None = None) -> Grid:
    if at is None:
        at = grid.n_cols
    if not isinstance(at, numbers.Integral) or at < 0 or at > grid.n_cols:
        raise OutOfBounds("column", at, grid.n_cols + 1)
    if name is None:
        name = next_free_label(grid.column_names)
    rows = tuple(row[:at] + (blank_cell(),) + row[at:] for row in grid.rows)
    names = grid.column_names[:at] + (str(name),) + grid.column_names[at:]
    logger.debug("insert_column at=%s name=%r", at, name)
    return Grid(rows, names)


def delete_column(grid: Grid, index: int) -> Grid:
    check_col(grid, index)
    if grid.n_cols == 1:
        return grid
    rows = tuple(row[:index] + row[index + 1:] for row in grid.rows)
    names = grid.column_names[:index] + grid.column_names[index + 1:]
    logger.debug("delete_column index=%s", index)
    return Grid(rows, names)


def delete_last_column(grid: Grid) -> Grid:
    return delete_column(grid, grid.n_cols - 1)


def rename_column(grid: Grid, index: int, name: str) -> Grid:
    check_col(grid, index)
    names = list(grid.column_names)
    names[index] = "" if name is None else str(name)
    return Grid(grid.rows, names)


# ---------- whole grid ----------
def clear_all(grid: Grid) -> Grid:
    """Blank every value and format, keeping the shape.

    Callers must confirm with the user first; this never prompts.
    """
    return blank_grid(grid.n_rows, grid.n_cols, grid.column_names)


def grid_stats(grid: Grid) -> dict:
    total = grid.n_rows * grid.n_cols
    filled = sum(1 for row in grid.rows for c in row if c.value.strip() != "")
    # round half up, not to even
    percentage = int(filled * 100 / total + 0.5) if total else 0
    return {"total": total, "filled": filled, "percentage": percentage}
