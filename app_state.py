import selection_model
from default_grid_initializer import DefaultGridInitializer
from format_engine import PaintState
from grid_model import Grid
from history_manager import History
from selection_model import Selection
from view_pipeline import DisplayedGrid, ViewState, derive_view


class AppState:
    """Current values of everything the editor tracks.

    The grid, history, view settings, selection and paint state are all
    immutable values; the editor replaces them wholesale.
    """

    def __init__(self, grid: Grid | None = None, file_path=None, file_handler=None,
                 undo_max_depth: int | None = 50):
        self.file_path = file_path
        self.file_handler = file_handler

        self._grid = grid if grid is not None else DefaultGridInitializer().create()
        self.history = History(max_depth=undo_max_depth)
        self.view_state = ViewState.for_width(self._grid.n_cols)
        self.selection: Selection = selection_model.clear()
        self.paint: PaintState | None = None
        self.view: DisplayedGrid = derive_view(self._grid, self.view_state)

    @property
    def grid(self) -> Grid:
        return self._grid

    @grid.setter
    def grid(self, value: Grid):
        self._grid = value
        self.view_state = self.view_state.resized(value.n_cols)
        self.refresh_view()

    def refresh_view(self) -> DisplayedGrid:
        self.view = derive_view(self._grid, self.view_state)
        self.selection = selection_model.revalidate(
            self.selection, self.view.n_rows, self.view.n_cols
        )
        return self.view

    @property
    def undo_stack(self):
        return self.history.undo_stack

    @property
    def redo_stack(self):
        return self.history.redo_stack

    @property
    def painting(self) -> bool:
        return self.paint is not None
