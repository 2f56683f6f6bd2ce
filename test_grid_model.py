import unittest
from collections.abc import Hashable

import pandas as pd
import pytest

import grid_model as gm
from cell_model import Cell
from errors import OutOfBounds, ShapeViolation


class GridConstructionTests(unittest.TestCase):
    def test_blank_grid_has_default_labels(self):
        grid = gm.blank_grid(3, 4)
        self.assertEqual(grid.shape, (3, 4))
        self.assertEqual(grid.column_names, ("A", "B", "C", "D"))

    def test_blank_cells_do_not_share_format(self):
        grid = gm.blank_grid(2, 2)
        formats = [id(c.format) for row in grid.rows for c in row]
        self.assertEqual(len(set(formats)), 4)

    def test_ragged_rows_rejected(self):
        with self.assertRaises(ShapeViolation):
            gm.Grid(((Cell(),), (Cell(), Cell())), ("A",))

    def test_names_must_match_width(self):
        with self.assertRaises(ShapeViolation):
            gm.Grid(((Cell(), Cell()),), ("A",))

    def test_empty_grid_rejected(self):
        with self.assertRaises(ShapeViolation):
            gm.Grid((), ())


@pytest.mark.parametrize(
    "index, label",
    [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")],
)
def test_column_label(index, label):
    assert gm.column_label(index) == label


def test_set_cell_value_last_write_wins():
    grid = gm.from_values([["a", "b"], ["c", "d"]])
    once = gm.set_cell_value(gm.set_cell_value(grid, 1, 0, "x"), 1, 0, "y")
    assert once == gm.set_cell_value(grid, 1, 0, "y")
    assert gm.to_values(grid) == [["a", "b"], ["c", "d"]]


def test_set_cell_value_keeps_format():
    grid = gm.set_cell_format(gm.blank_grid(1, 1), 0, 0, "bold")
    grid = gm.set_cell_value(grid, 0, 0, "hi")
    assert grid.cell(0, 0) == Cell("hi", {"bold": True})


@pytest.mark.parametrize("row, col", [(-1, 0), (2, 0), (0, 2), (0, -1)])
def test_set_cell_value_out_of_bounds(row, col):
    with pytest.raises(OutOfBounds):
        gm.set_cell_value(gm.blank_grid(2, 2), row, col, "x")


def test_set_cell_format_toggles_booleans():
    grid = gm.blank_grid(1, 2)
    grid = gm.set_cell_format(grid, 0, 0, "bold")
    assert grid.cell(0, 0).format == {"bold": True}
    grid = gm.set_cell_format(grid, 0, 0, "bold")
    assert grid.cell(0, 0).format == {"bold": False}
    assert grid.cell(0, 1).format == {}


def test_set_cell_format_color_last_write_wins():
    grid = gm.blank_grid(1, 1)
    grid = gm.set_cell_format(grid, 0, 0, "background", "#fee2e2")
    grid = gm.set_cell_format(grid, 0, 0, "background", "#dbeafe")
    assert grid.cell(0, 0).format == {"background": "#dbeafe"}


def test_set_cell_format_unknown_attribute():
    with pytest.raises(ValueError):
        gm.set_cell_format(gm.blank_grid(1, 1), 0, 0, "underline")


def test_unrelated_cells_keep_format_after_update():
    grid = gm.set_cell_format(gm.blank_grid(2, 2), 1, 1, "italic")
    grid = gm.set_cell_value(grid, 0, 0, "x")
    assert grid.cell(1, 1).format == {"italic": True}


class RowOperationTests(unittest.TestCase):
    def test_insert_row_defaults_to_end(self):
        grid = gm.from_values([["a"], ["b"]])
        out = gm.insert_row(grid)
        self.assertEqual(gm.to_values(out), [["a"], ["b"], [""]])

    def test_insert_row_at_index(self):
        grid = gm.from_values([["a"], ["b"]])
        out = gm.insert_row(grid, 1)
        self.assertEqual(gm.to_values(out), [["a"], [""], ["b"]])

    def test_insert_row_out_of_bounds(self):
        with self.assertRaises(OutOfBounds):
            gm.insert_row(gm.blank_grid(1, 1), 5)

    def test_delete_row(self):
        grid = gm.from_values([["a"], ["b"], ["c"]])
        self.assertEqual(gm.to_values(gm.delete_row(grid, 1)), [["a"], ["c"]])

    def test_delete_only_row_is_noop(self):
        grid = gm.from_values([["a", "b"]])
        self.assertIs(gm.delete_row(grid, 0), grid)
        self.assertIs(gm.delete_last_row(grid), grid)

    def test_repeated_deletes_never_empty_grid(self):
        grid = gm.blank_grid(4, 3)
        for _ in range(10):
            grid = gm.delete_row(grid, 0)
            grid = gm.delete_column(grid, 0)
        self.assertEqual(grid.shape, (1, 1))
        self.assertEqual(grid.column_names, ("C",))

    def test_duplicate_row_is_deep_copy(self):
        grid = gm.set_cell_format(gm.from_values([["a", "b"], ["c", "d"]]), 0, 0, "bold")
        out = gm.duplicate_row(grid, 0)
        self.assertEqual(gm.to_values(out), [["a", "b"], ["a", "b"], ["c", "d"]])
        self.assertEqual(out.cell(1, 0).format, {"bold": True})
        self.assertIsNot(out.cell(0, 0).format, out.cell(1, 0).format)
        out = gm.set_cell_format(out, 1, 0, "bold")
        self.assertEqual(out.cell(0, 0).format, {"bold": True})


class ColumnOperationTests(unittest.TestCase):
    def test_insert_column_keeps_names_in_lockstep(self):
        grid = gm.from_values([["a", "b"]])
        out = gm.insert_column(grid, 1)
        self.assertEqual(gm.to_values(out), [["a", "", "b"]])
        self.assertEqual(out.column_names, ("A", "C", "B"))

    def test_insert_column_picks_unused_label(self):
        grid = gm.delete_column(gm.blank_grid(1, 3), 1)
        out = gm.insert_column(grid)
        self.assertEqual(out.column_names, ("A", "C", "B"))

    def test_insert_column_with_name(self):
        out = gm.insert_column(gm.blank_grid(1, 1), name="Status")
        self.assertEqual(out.column_names, ("A", "Status"))

    def test_delete_column(self):
        grid = gm.from_values([["a", "b", "c"]], ["x", "y", "z"])
        out = gm.delete_column(grid, 1)
        self.assertEqual(gm.to_values(out), [["a", "c"]])
        self.assertEqual(out.column_names, ("x", "z"))

    def test_delete_only_column_is_noop(self):
        grid = gm.from_values([["a"], ["b"]])
        self.assertIs(gm.delete_column(grid, 0), grid)
        self.assertIs(gm.delete_last_column(grid), grid)

    def test_rename_column(self):
        out = gm.rename_column(gm.blank_grid(1, 2), 1, "Owner")
        self.assertEqual(out.column_names, ("A", "Owner"))


def test_clear_all_preserves_shape_and_names():
    grid = gm.set_cell_format(gm.from_values([["a", "b"], ["c", "d"]], ["x", "y"]), 0, 1, "bold")
    out = gm.clear_all(grid)
    assert out.shape == (2, 2)
    assert out.column_names == ("x", "y")
    assert all(c == Cell("", {}) for row in out.rows for c in row)


def test_grid_stats():
    grid = gm.from_values([["a", " "], ["", "b"]])
    assert gm.grid_stats(grid) == {"total": 4, "filled": 2, "percentage": 50}
    assert gm.grid_stats(gm.from_values([["a", "", ""]]))["percentage"] == 33


def test_to_frame_uses_positional_columns():
    frame = gm.to_frame(gm.from_values([["a", "b"]], ["same", "same"]))
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == [0, 1]
    assert frame.iloc[0, 1] == "b"


def test_copy_grid_is_equal_but_independent():
    grid = gm.set_cell_format(gm.blank_grid(1, 1), 0, 0, "italic")
    clone = gm.copy_grid(grid)
    assert clone == grid
    assert clone.cell(0, 0).format is not grid.cell(0, 0).format


def test_cells_and_grids_are_not_hashable():
    grid = gm.blank_grid(1, 1)
    assert not isinstance(Cell("x"), Hashable)
    assert not isinstance(grid, Hashable)
    assert Cell("x", {"bold": True}) == Cell("x", {"bold": True})
