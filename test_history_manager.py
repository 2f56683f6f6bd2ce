import unittest

import grid_model as gm
import history_manager as hm
from history_manager import History, Snapshot
from view_pipeline import ViewState


class HistoryTests(unittest.TestCase):
    def test_undo_restores_pre_mutation_grid(self):
        grid = gm.from_values([["a", "b"]])
        history = hm.commit(History(), grid)
        mutated = gm.set_cell_value(grid, 0, 0, "z")

        history, restored = hm.undo(history, mutated)
        self.assertEqual(restored.grid, grid)
        self.assertFalse(history.can_undo)
        self.assertTrue(history.can_redo)

        history, again = hm.redo(history, restored.grid)
        self.assertEqual(again.grid, mutated)
        self.assertTrue(history.can_undo)
        self.assertFalse(history.can_redo)

    def test_empty_stacks_are_noops(self):
        grid = gm.blank_grid(1, 1)
        history = History()
        self.assertEqual(hm.undo(history, grid), (history, Snapshot(grid)))
        self.assertEqual(hm.redo(history, grid), (history, Snapshot(grid)))

    def test_commit_clears_redo(self):
        g0 = gm.blank_grid(1, 1)
        g1 = gm.set_cell_value(g0, 0, 0, "1")
        history = hm.commit(History(), g0)
        history, _ = hm.undo(history, g1)
        self.assertTrue(history.can_redo)
        history = hm.commit(history, g0)
        self.assertEqual(history.redo_stack, ())

    def test_multi_step_order(self):
        g0 = gm.blank_grid(1, 1)
        g1 = gm.set_cell_value(g0, 0, 0, "1")
        g2 = gm.set_cell_value(g1, 0, 0, "2")
        history = hm.commit(hm.commit(History(), g0), g1)

        history, cur = hm.undo(history, g2)
        self.assertEqual(cur.grid, g1)
        history, cur = hm.undo(history, cur.grid)
        self.assertEqual(cur.grid, g0)
        # most recently undone first
        self.assertEqual([s.grid for s in history.redo_stack], [g1, g2])
        history, cur = hm.redo(history, cur.grid)
        self.assertEqual(cur.grid, g1)
        history, cur = hm.redo(history, cur.grid)
        self.assertEqual(cur.grid, g2)

    def test_undo_then_redo_is_identity(self):
        g0 = gm.from_values([["x"]])
        g1 = gm.set_cell_format(g0, 0, 0, "bold")
        history = hm.commit(History(), g0)
        h1, back = hm.undo(history, g1)
        h2, fwd = hm.redo(h1, back.grid)
        self.assertEqual(fwd.grid, g1)

    def test_view_state_travels_with_snapshot(self):
        g0 = gm.from_values([["a", "b", "c"]])
        g1 = gm.delete_column(g0, 0)
        before = ViewState.for_width(3).toggle_hidden(2)
        after = before.on_column_deleted(0)

        history = hm.commit(History(), g0, before)
        history, back = hm.undo(history, g1, after)
        self.assertEqual(back, Snapshot(g0, before))

        history, fwd = hm.redo(history, back.grid, back.view_state)
        self.assertEqual(fwd, Snapshot(g1, after))

    def test_snapshots_are_independent_of_caller(self):
        grid = gm.set_cell_format(gm.blank_grid(1, 1), 0, 0, "bold")
        history = hm.commit(History(), grid)
        grid.cell(0, 0).format["bold"] = False
        self.assertEqual(history.undo_stack[0].grid.cell(0, 0).format, {"bold": True})

    def test_max_depth_drops_oldest(self):
        history = History(max_depth=3)
        grids = [gm.from_values([[str(i)]]) for i in range(5)]
        for g in grids:
            history = hm.commit(history, g)
        self.assertEqual(len(history.undo_stack), 3)
        self.assertEqual(history.undo_stack[0].grid, grids[2])

    def test_unbounded_when_max_depth_none(self):
        history = History(max_depth=None)
        for i in range(120):
            history = hm.commit(history, gm.from_values([[str(i)]]))
        self.assertEqual(len(history.undo_stack), 120)

    def test_clear(self):
        history = hm.commit(History(), gm.blank_grid(1, 1))
        self.assertEqual(hm.clear(history), History())
