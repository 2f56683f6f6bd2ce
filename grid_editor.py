import functools
import logging
from typing import Callable

import csv_codec
import format_engine
import grid_model
import history_manager
import selection_model
from app_state import AppState
from config_paths import load_config
from default_grid_initializer import DefaultGridInitializer
from errors import GridError
from file_type_handler import FileTypeHandler, export_payload
from view_pipeline import ViewState

logger = logging.getLogger(__name__)


def _reports_errors(method):
    """Turn GridError into a status message and a False return."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except GridError as exc:
            logger.debug("%s failed: %s", method.__name__, exc)
            self._set_status(str(exc), 3)
            return False

    return wrapper


class GridEditor:
    """Editing boundary between a UI and the grid engine.

    Cell and row operations take displayed coordinates and write through to
    the canonical grid. Column operations (delete, rename, sort, filter,
    hide) take canonical column indices, as a column menu lists every column.
    Each grid change is committed to history first, then the view is
    re-derived and the selection refitted.
    """

    def __init__(self, state: AppState, set_status_cb: Callable[[str, float], None],
                 config: dict | None = None):
        self.state = state
        self._set_status = set_status_cb
        self.config = config if config is not None else load_config()

    # ---------- helpers ----------
    def _commit(self, new_grid, view_state=None) -> bool:
        if new_grid == self.state.grid:
            return False
        self.state.history = history_manager.commit(
            self.state.history, self.state.grid, self.state.view_state
        )
        if view_state is not None:
            self.state.view_state = view_state
        self.state.grid = new_grid
        return True

    def _restore(self, snapshot):
        # column settings come back with the columns they were set on
        if (snapshot.view_state is not None
                and snapshot.grid.n_cols != self.state.grid.n_cols):
            self.state.view_state = snapshot.view_state
        self.state.grid = snapshot.grid

    def _set_view_state(self, view_state):
        self.state.view_state = view_state
        self.state.selection = selection_model.clear_range(self.state.selection)
        self.state.refresh_view()

    def _active_or(self, row, col):
        if row is not None and col is not None:
            return row, col
        if self.state.selection.active is None:
            raise GridError("No cell selected")
        return self.state.selection.active

    @property
    def grid(self):
        return self.state.grid

    @property
    def view(self):
        return self.state.view

    # ---------- cell content ----------
    @_reports_errors
    def edit_cell(self, row: int, col: int, value: str) -> bool:
        r, c = self.state.view.to_canonical(row, col)
        self._commit(grid_model.set_cell_value(self.state.grid, r, c, value))
        return True

    @_reports_errors
    def toggle_format(self, attr: str, row: int | None = None, col: int | None = None) -> bool:
        row, col = self._active_or(row, col)
        r, c = self.state.view.to_canonical(row, col)
        try:
            new_grid = grid_model.set_cell_format(self.state.grid, r, c, attr)
        except ValueError as exc:
            self._set_status(str(exc), 3)
            return False
        return self._commit(new_grid)

    @_reports_errors
    def set_color(self, key: str, token: str, row: int | None = None, col: int | None = None) -> bool:
        row, col = self._active_or(row, col)
        r, c = self.state.view.to_canonical(row, col)
        try:
            cell = format_engine.set_color_attribute(self.state.grid.cell(r, c), key, token)
        except ValueError as exc:
            self._set_status(str(exc), 3)
            return False
        return self._commit(grid_model.set_cell(self.state.grid, r, c, cell))

    @_reports_errors
    def format_selection(self, attr: str, value=None) -> bool:
        """Apply one attribute across the selected range.

        Booleans go on for every cell unless all of them already have it,
        in which case they all go off.
        """
        view = self.state.view
        coords = [view.to_canonical(r, c) for r, c in selection_model.selected_cells(self.state.selection)]
        if not coords:
            self._set_status("No cell selected", 2)
            return False
        grid = self.state.grid
        try:
            if attr in format_engine.BOOLEAN_ATTRIBUTES:
                target = not all(grid.cell(r, c).format.get(attr, False) for r, c in coords)
                fn = functools.partial(format_engine.set_boolean_attribute, attr=attr, value=target)
            else:
                fn = functools.partial(format_engine.set_color_attribute, key=attr, color_token=value)
            new_grid = format_engine.apply_to_range(grid, coords, fn)
        except ValueError as exc:
            self._set_status(str(exc), 3)
            return False
        changed = self._commit(new_grid)
        if changed:
            self._set_status(f"Formatted {len(coords)} cell{'s' if len(coords) != 1 else ''}", 2)
        return changed

    # ---------- format painter ----------
    @_reports_errors
    def copy_format(self, row: int | None = None, col: int | None = None) -> bool:
        row, col = self._active_or(row, col)
        r, c = self.state.view.to_canonical(row, col)
        self.state.paint = format_engine.copy_format(self.state.grid.cell(r, c))
        self._set_status("Format copied! Click another cell to apply.", 3)
        return True

    @_reports_errors
    def paint_format(self, row: int, col: int) -> bool:
        if self.state.paint is None:
            return False
        r, c = self.state.view.to_canonical(row, col)
        cell, self.state.paint = format_engine.apply_format(
            self.state.grid.cell(r, c), self.state.paint
        )
        self._commit(grid_model.set_cell(self.state.grid, r, c, cell))
        self._set_status("Format applied", 2)
        return True

    def click_cell(self, row: int, col: int) -> bool:
        """A click paints when the painter is armed, otherwise it selects."""
        if self.state.paint is not None:
            return self.paint_format(row, col)
        return self.set_active(row, col)

    # ---------- rows ----------
    @_reports_errors
    def insert_row(self, at: int | None = None) -> bool:
        """Insert a blank row at canonical position ``at`` (default: end)."""
        at = self.state.grid.n_rows if at is None else at
        self._commit(grid_model.insert_row(self.state.grid, at))
        shown = self.state.view.to_displayed_row(at)
        if shown is not None and self.state.view.n_cols:
            self.state.selection = selection_model.set_active(self.state.selection, shown, 0)
        self._set_status("Inserted row", 2)
        return True

    @_reports_errors
    def delete_row(self, row: int) -> bool:
        r = self.state.view.to_canonical_row(row)
        if self.state.grid.n_rows == 1:
            self._set_status("Cannot delete the only row", 3)
            return False
        self._commit(grid_model.delete_row(self.state.grid, r))
        self._set_status("Deleted row", 2)
        return True

    @_reports_errors
    def duplicate_row(self, row: int) -> bool:
        r = self.state.view.to_canonical_row(row)
        self._commit(grid_model.duplicate_row(self.state.grid, r))
        self._set_status("Duplicated row", 2)
        return True

    # ---------- columns ----------
    @_reports_errors
    def insert_column(self, at: int | None = None, name: str | None = None) -> bool:
        grid = self.state.grid
        at = grid.n_cols if at is None else at
        new_grid = grid_model.insert_column(grid, at, name)
        self._commit(new_grid, view_state=self.state.view_state.on_column_inserted(at))
        self._set_status(f"Inserted column '{new_grid.column_names[at]}'", 2)
        return True

    @_reports_errors
    def delete_column(self, col: int) -> bool:
        grid = self.state.grid
        if grid.n_cols == 1 and col == 0:
            self._set_status("Cannot delete the only column", 3)
            return False
        grid_model.check_col(grid, col)
        name = grid.column_names[col]
        self._commit(
            grid_model.delete_column(grid, col),
            view_state=self.state.view_state.on_column_deleted(col),
        )
        self._set_status(f"Deleted column '{name}'", 3)
        return True

    @_reports_errors
    def rename_column(self, col: int, name: str) -> bool:
        return self._commit(grid_model.rename_column(self.state.grid, col, name))

    # ---------- whole grid ----------
    def clear_all(self, confirm: Callable[[], bool] | None) -> bool:
        """Blank the grid, but only after ``confirm()`` says yes."""
        if confirm is None or not confirm():
            self._set_status("Clear cancelled", 2)
            return False
        changed = self._commit(grid_model.clear_all(self.state.grid))
        if changed:
            self._set_status("All data cleared", 3)
        else:
            self._set_status("Nothing to clear", 2)
        return changed

    def undo(self) -> bool:
        if not self.state.history.can_undo:
            self._set_status("Nothing to undo", 2)
            return False
        self.state.history, snapshot = history_manager.undo(
            self.state.history, self.state.grid, self.state.view_state
        )
        self._restore(snapshot)
        remaining = len(self.state.history.undo_stack)
        self._set_status(f"Undone ({remaining} more)" if remaining else "Undone", 2)
        return True

    def redo(self) -> bool:
        if not self.state.history.can_redo:
            self._set_status("Nothing to redo", 2)
            return False
        self.state.history, snapshot = history_manager.redo(
            self.state.history, self.state.grid, self.state.view_state
        )
        self._restore(snapshot)
        remaining = len(self.state.history.redo_stack)
        self._set_status(f"Redone ({remaining} more)" if remaining else "Redone", 2)
        return True

    def stats(self) -> dict:
        return grid_model.grid_stats(self.state.grid)

    # ---------- view ----------
    def set_free_text_filter(self, text: str):
        self._set_view_state(self.state.view_state.with_free_text(text))

    @_reports_errors
    def set_column_filter(self, col: int, pattern: str) -> bool:
        self._set_view_state(self.state.view_state.with_column_filter(col, pattern))
        return True

    def clear_filters(self):
        self._set_view_state(self.state.view_state.clear_filters())

    @_reports_errors
    def toggle_sort(self, col: int) -> bool:
        grid_model.check_col(self.state.grid, col)
        view_state = self.state.view_state.toggle_sort(col)
        self._set_view_state(view_state)
        arrow = "▲" if view_state.sort.direction == "asc" else "▼"
        self._set_status(f"Sorted by {self.state.grid.column_names[col]} {arrow}", 2)
        return True

    def clear_sort(self):
        self._set_view_state(self.state.view_state.clear_sort())

    @_reports_errors
    def toggle_hidden_column(self, col: int) -> bool:
        grid_model.check_col(self.state.grid, col)
        self._set_view_state(self.state.view_state.toggle_hidden(col))
        return True

    # ---------- selection ----------
    def _check_displayed(self, row, col):
        self.state.view.to_canonical(row, col)

    @_reports_errors
    def set_active(self, row: int, col: int) -> bool:
        self._check_displayed(row, col)
        self.state.selection = selection_model.set_active(self.state.selection, row, col)
        return True

    @_reports_errors
    def begin_select(self, row: int, col: int) -> bool:
        self._check_displayed(row, col)
        self.state.selection = selection_model.begin_select(self.state.selection, row, col)
        return True

    @_reports_errors
    def extend_select(self, row: int, col: int) -> bool:
        self._check_displayed(row, col)
        self.state.selection = selection_model.extend_select(self.state.selection, row, col)
        return True

    def release_select(self):
        self.state.selection = selection_model.release(self.state.selection)

    def navigate(self, key: str):
        view = self.state.view
        self.state.selection = selection_model.navigate(
            self.state.selection, key, view.n_rows, view.n_cols
        )

    def active_cell(self):
        active = self.state.selection.active
        if active is None:
            return None
        return self.state.view.cell(*active)

    # ---------- CSV / files ----------
    def _replace_grid(self, grid):
        self.state.history = history_manager.commit(
            self.state.history, self.state.grid, self.state.view_state
        )
        self.state.view_state = ViewState.for_width(grid.n_cols)
        self.state.selection = selection_model.clear()
        self.state.paint = None
        self.state.grid = grid

    @_reports_errors
    def import_csv(self, text: str) -> bool:
        grid = csv_codec.decode(text, ragged=self.config["CSV_RAGGED_ROWS"])
        self._replace_grid(grid)
        self._set_status(f"Imported {grid.n_rows}x{grid.n_cols}", 2)
        return True

    def export_csv(self) -> str:
        return csv_codec.encode(self.state.grid)

    def export_payload(self) -> dict:
        return export_payload(self.state.grid, self.config["EXPORT_FILENAME"])

    def load(self, path: str) -> bool:
        try:
            handler = self._handler(path)
            grid = handler.load_or_create()
        except (OSError, ValueError) as exc:
            self._set_status(f"Load failed: {exc}", 3)
            return False
        self._replace_grid(grid)
        self.state.file_path = path
        self.state.file_handler = handler
        self._set_status(f"Loaded {path}", 2)
        return True

    def save(self, path: str | None = None) -> bool:
        path = path or self.state.file_path or self.config["EXPORT_FILENAME"]
        try:
            handler = (
                self.state.file_handler
                if self.state.file_handler is not None and path == self.state.file_path
                else self._handler(path)
            )
            handler.save(self.state.grid)
        except (OSError, ValueError) as exc:
            self._set_status(f"Save failed: {exc}", 3)
            return False
        self.state.file_path = path
        self.state.file_handler = handler
        self._set_status(f"Saved to {path}", 2)
        return True

    def _handler(self, path):
        return FileTypeHandler(
            path,
            ragged=self.config["CSV_RAGGED_ROWS"],
            default_shape=(self.config["DEFAULT_ROWS"], self.config["DEFAULT_COLS"]),
        )


def open_editor(set_status_cb, path: str | None = None, config: dict | None = None) -> GridEditor:
    """Build an editor on a fresh default grid, or on ``path`` when given."""
    cfg = config if config is not None else load_config()
    grid = DefaultGridInitializer(cfg["DEFAULT_ROWS"], cfg["DEFAULT_COLS"]).create()
    state = AppState(grid, undo_max_depth=cfg["UNDO_MAX_DEPTH"])
    editor = GridEditor(state, set_status_cb, cfg)
    if path:
        handler = editor._handler(path)
        state.grid = handler.load_or_create()
        state.file_path = path
        state.file_handler = handler
    return editor
