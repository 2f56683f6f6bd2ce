"""Derives the displayed grid from the canonical one.

The displayed grid is what the user sees: rows filtered by the free-text
search and the per-column filters, ordered by the sort column, with hidden
columns left out. Every displayed row and column remembers where it came
from, so edits made through the view land on the right canonical cell.
"""

from dataclasses import dataclass, field, replace

import numpy as np

from errors import OutOfBounds
from grid_model import Grid, to_frame


ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class SortConfig:
    column: int
    direction: str = ASC

    def __post_init__(self):
        if self.direction not in (ASC, DESC):
            raise ValueError(f"Sort direction must be '{ASC}' or '{DESC}'")


@dataclass(frozen=True)
class ViewState:
    """Filter/sort/hide settings. All column indices are canonical."""

    free_text: str = ""
    column_filters: tuple = ()
    sort: SortConfig | None = None
    hidden_columns: frozenset = field(default_factory=frozenset)

    @classmethod
    def for_width(cls, width: int) -> "ViewState":
        return cls(column_filters=("",) * width)

    def resized(self, width: int) -> "ViewState":
        """Fit to ``width`` columns: pad/truncate filters, drop stale indices."""
        filters = tuple(self.column_filters[:width]) + ("",) * max(
            0, width - len(self.column_filters)
        )
        hidden = frozenset(c for c in self.hidden_columns if 0 <= c < width)
        sort = self.sort if self.sort is not None and self.sort.column < width else None
        return replace(self, column_filters=filters, hidden_columns=hidden, sort=sort)

    # ---------- filters ----------
    def with_free_text(self, text: str) -> "ViewState":
        return replace(self, free_text=text or "")

    def with_column_filter(self, col: int, pattern: str) -> "ViewState":
        if col < 0 or col >= len(self.column_filters):
            raise OutOfBounds("column", col, len(self.column_filters))
        filters = list(self.column_filters)
        filters[col] = pattern or ""
        return replace(self, column_filters=tuple(filters))

    def clear_filters(self) -> "ViewState":
        return replace(
            self, free_text="", column_filters=("",) * len(self.column_filters)
        )

    @property
    def is_filtered(self) -> bool:
        return bool(self.free_text) or any(self.column_filters)

    # ---------- sort / hide ----------
    def toggle_sort(self, col: int) -> "ViewState":
        if self.sort is not None and self.sort.column == col:
            direction = DESC if self.sort.direction == ASC else ASC
            return replace(self, sort=SortConfig(col, direction))
        return replace(self, sort=SortConfig(col, ASC))

    def clear_sort(self) -> "ViewState":
        return replace(self, sort=None)

    def toggle_hidden(self, col: int) -> "ViewState":
        if col in self.hidden_columns:
            return replace(self, hidden_columns=self.hidden_columns - {col})
        return replace(self, hidden_columns=self.hidden_columns | {col})

    # ---------- structural lockstep ----------
    def on_column_inserted(self, at: int) -> "ViewState":
        filters = self.column_filters[:at] + ("",) + self.column_filters[at:]
        hidden = frozenset(c + 1 if c >= at else c for c in self.hidden_columns)
        sort = self.sort
        if sort is not None and sort.column >= at:
            sort = SortConfig(sort.column + 1, sort.direction)
        return replace(self, column_filters=filters, hidden_columns=hidden, sort=sort)

    def on_column_deleted(self, index: int) -> "ViewState":
        filters = self.column_filters[:index] + self.column_filters[index + 1:]
        hidden = frozenset(
            c - 1 if c > index else c for c in self.hidden_columns if c != index
        )
        sort = self.sort
        if sort is not None:
            if sort.column == index:
                sort = None
            elif sort.column > index:
                sort = SortConfig(sort.column - 1, sort.direction)
        return replace(self, column_filters=filters, hidden_columns=hidden, sort=sort)


@dataclass(frozen=True)
class DisplayedGrid:
    """Cells as displayed, plus the displayed -> canonical index maps."""

    rows: tuple
    row_map: tuple
    column_map: tuple
    column_names: tuple

    @property
    def n_rows(self) -> int:
        return len(self.row_map)

    @property
    def n_cols(self) -> int:
        return len(self.column_map)

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_rows, self.n_cols

    def cell(self, row: int, col: int):
        self.to_canonical(row, col)
        return self.rows[row][col]

    def values(self) -> list[list[str]]:
        return [[c.value for c in row] for row in self.rows]

    def to_canonical_row(self, row: int) -> int:
        if row < 0 or row >= self.n_rows:
            raise OutOfBounds("displayed row", row, self.n_rows)
        return self.row_map[row]

    def to_canonical_col(self, col: int) -> int:
        if col < 0 or col >= self.n_cols:
            raise OutOfBounds("displayed column", col, self.n_cols)
        return self.column_map[col]

    def to_canonical(self, row: int, col: int) -> tuple[int, int]:
        return self.to_canonical_row(row), self.to_canonical_col(col)

    def to_displayed_row(self, canonical_row: int) -> int | None:
        """Displayed position of a canonical row, or None if filtered out."""
        try:
            return self.row_map.index(canonical_row)
        except ValueError:
            return None

    def to_displayed_col(self, canonical_col: int) -> int | None:
        try:
            return self.column_map.index(canonical_col)
        except ValueError:
            return None


def derive_view(grid: Grid, view_state: ViewState | None = None) -> DisplayedGrid:
    """Filter, sort and hide, in that order. Pure; the grid is not touched."""
    state = (view_state or ViewState()).resized(grid.n_cols)
    frame = to_frame(grid)
    lowered = frame.apply(lambda s: s.str.lower())
    mask = np.ones(len(frame), dtype=bool)

    # any cell, hidden columns included
    needle = state.free_text.lower()
    if needle:
        hits = lowered.apply(lambda s: s.str.contains(needle, regex=False))
        mask &= hits.any(axis=1).to_numpy(dtype=bool)

    # every filtered column must match
    for col, pattern in enumerate(state.column_filters):
        if pattern:
            hit = lowered[col].str.contains(pattern.lower(), regex=False)
            mask &= hit.to_numpy(dtype=bool)

    kept = frame[mask]
    if state.sort is not None and len(kept) > 1:
        kept = kept.sort_values(
            by=state.sort.column,
            ascending=state.sort.direction == ASC,
            kind="stable",
        )

    row_map = tuple(int(i) for i in kept.index)
    column_map = tuple(
        c for c in range(grid.n_cols) if c not in state.hidden_columns
    )
    rows = tuple(
        tuple(grid.rows[r][c] for c in column_map) for r in row_map
    )
    names = tuple(grid.column_names[c] for c in column_map)
    return DisplayedGrid(rows, row_map, column_map, names)
