"""CSV encode/decode for grids.

Every value is written double-quoted with embedded quotes doubled, so commas,
quotes and line breaks inside values survive a round trip. Formats are not
stored; decoding yields cells with empty formats.

Rows of differing length are padded with blank cells by default
(``ragged="pad"``); ``ragged="reject"`` raises MalformedInput instead.
"""

import csv
import io

import pandas as pd

from cell_model import Cell
from errors import MalformedInput
from grid_model import Grid, blank_grid, default_column_names, to_frame

PAD = "pad"
REJECT = "reject"
RAGGED_POLICIES = (PAD, REJECT)


def encode(grid: Grid) -> str:
    out = to_frame(grid).to_csv(
        header=False, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n"
    )
    return out.rstrip("\n")


def _scan(text: str) -> list[tuple[int, int]]:
    """(field count, starting line) per record; an empty line counts one field."""
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    records = []
    start = 1
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            message = str(exc)
            # strict readers only run out of data inside a quoted field
            if "end of data" in message:
                message = "unterminated quoted field"
            raise MalformedInput(message, line=start) from exc
        records.append((len(fields), start))
        start = reader.line_num + 1
    return records


def decode(text: str, ragged: str = PAD) -> Grid:
    if ragged not in RAGGED_POLICIES:
        raise ValueError(f"ragged must be one of {RAGGED_POLICIES}, got {ragged!r}")
    text = text or ""
    records = _scan(text)
    while records and records[-1][0] == 0:
        records.pop()
    if not records:
        return blank_grid(1, 1)

    width = max(max(count, 1) for count, _ in records)
    if ragged == REJECT:
        for count, line in records:
            if max(count, 1) < width:
                raise MalformedInput(f"expected {width} fields, got {max(count, 1)}", line=line)

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=range(width),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.ParserError as exc:
        raise MalformedInput(str(exc)) from exc
    # blank lines and short rows come back as NaN
    frame = frame.iloc[: len(records)].fillna("")

    rows = tuple(
        tuple(Cell(str(v), {}) for v in row)
        for row in frame.itertuples(index=False, name=None)
    )
    return Grid(rows, default_column_names(width))
