import logging
import os

import csv_codec
from default_grid_initializer import DefaultGridInitializer
from grid_model import Grid

logger = logging.getLogger(__name__)


class FileTypeHandler:
    EXPORT_FILENAME = "spreadsheet.csv"
    MIME_TYPE = "text/csv"
    SUPPORTED = {".csv"}

    def __init__(self, path: str, ragged: str = csv_codec.PAD, default_shape=(10, 5)):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()
        self.ragged = ragged
        self.default_shape = default_shape

        if self.ext not in self.SUPPORTED:
            raise ValueError("Unsupported file type (use .csv)")

    def load_or_create(self) -> Grid:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return self._default_grid()

        # utf-8-sig drops a BOM left by spreadsheet exports
        with open(self.path, "r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
        grid = csv_codec.decode(text, ragged=self.ragged)
        logger.debug("loaded %s: %dx%d", self.path, grid.n_rows, grid.n_cols)
        return grid

    def save(self, grid: Grid) -> None:
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(csv_codec.encode(grid))
        logger.debug("saved %s: %dx%d", self.path, grid.n_rows, grid.n_cols)

    def _default_grid(self) -> Grid:
        rows, cols = self.default_shape
        return DefaultGridInitializer(rows, cols).create()


def export_payload(grid: Grid, filename: str = FileTypeHandler.EXPORT_FILENAME) -> dict:
    """What a download collaborator needs: name, MIME type and body."""
    return {
        "filename": filename,
        "mime_type": FileTypeHandler.MIME_TYPE,
        "content": csv_codec.encode(grid),
    }
