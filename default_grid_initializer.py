from grid_model import Grid, blank_grid


class DefaultGridInitializer:
    def __init__(self, rows: int = 10, cols: int = 5):
        self.rows = max(1, rows)
        self.cols = max(1, cols)

    def create(self) -> Grid:
        return blank_grid(self.rows, self.cols)
