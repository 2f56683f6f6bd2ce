from dataclasses import dataclass, field
from typing import Callable, Iterable

from cell_model import BOOLEAN_ATTRIBUTES, COLOR_ATTRIBUTES, Cell, merge_attribute
from grid_model import Grid, set_cell


TEXT_COLORS = (
    "#111827",  # default
    "#ef4444",
    "#f59e42",
    "#eab308",
    "#22c55e",
    "#3b82f6",
    "#a21caf",
)
BACKGROUND_COLORS = (
    "#ffffff",  # default
    "#fee2e2",
    "#fef9c3",
    "#bbf7d0",
    "#dbeafe",
    "#ede9fe",
)


@dataclass(frozen=True)
class PaintState:
    """Format captured by the format painter, by value."""

    format: dict = field(default_factory=dict)


def toggle_attribute(cell: Cell, attr: str) -> Cell:
    if attr not in BOOLEAN_ATTRIBUTES:
        raise ValueError(f"'{attr}' is not a boolean attribute")
    return merge_attribute(cell, attr)


def set_color_attribute(cell: Cell, key: str, color_token: str) -> Cell:
    if key not in COLOR_ATTRIBUTES:
        raise ValueError(f"'{key}' is not a colour attribute")
    return merge_attribute(cell, key, color_token)


def clear_format(cell: Cell) -> Cell:
    return Cell(cell.value, {})


# ---------- format painter ----------
def copy_format(cell: Cell) -> PaintState:
    return PaintState(dict(cell.format))


def apply_format(cell: Cell, paint: PaintState | None) -> tuple[Cell, None]:
    """Overwrite ``cell``'s format with the captured one.

    Returns the painted cell and the new paint state, which is always None:
    a paint is consumed by one application.
    """
    if paint is None:
        return cell, None
    return Cell(cell.value, dict(paint.format)), None


# ---------- ranges ----------
def apply_to_range(
    grid: Grid, cells: Iterable[tuple[int, int]], fn: Callable[[Cell], Cell]
) -> Grid:
    for row, col in cells:
        grid = set_cell(grid, row, col, fn(grid.cell(row, col)))
    return grid


def set_boolean_attribute(cell: Cell, attr: str, value: bool) -> Cell:
    """Force a boolean attribute to ``value`` (used for whole-range toggles)."""
    if attr not in BOOLEAN_ATTRIBUTES:
        raise ValueError(f"'{attr}' is not a boolean attribute")
    fmt = dict(cell.format)
    fmt[attr] = bool(value)
    return Cell(cell.value, fmt)
