from dataclasses import dataclass, replace


IDLE = "idle"
DRAGGING = "dragging"
FIXED = "fixed"

NAV_KEYS = {"up", "down", "left", "right", "tab", "shift_tab", "enter"}


@dataclass(frozen=True)
class Selection:
    """Active cell plus an optional anchor/focus range, in displayed coordinates."""

    active: tuple | None = None
    anchor: tuple | None = None
    focus: tuple | None = None
    phase: str = IDLE  # idle | dragging | fixed

    @property
    def has_range(self) -> bool:
        return self.anchor is not None and self.focus is not None


# ---------- pointer transitions ----------
def begin_select(sel: Selection, row: int, col: int) -> Selection:
    pos = (row, col)
    return Selection(active=pos, anchor=pos, focus=pos, phase=DRAGGING)


def extend_select(sel: Selection, row: int, col: int) -> Selection:
    if sel.phase != DRAGGING:
        return sel
    return replace(sel, focus=(row, col))


def release(sel: Selection) -> Selection:
    if sel.phase != DRAGGING:
        return sel
    return replace(sel, phase=FIXED)


def set_active(sel: Selection, row: int, col: int) -> Selection:
    return replace(sel, active=(row, col))


def clear_range(sel: Selection) -> Selection:
    return Selection(active=sel.active, phase=IDLE)


def clear(sel: Selection | None = None) -> Selection:
    return Selection()


# ---------- keyboard ----------
def navigate(sel: Selection, key: str, n_rows: int, n_cols: int) -> Selection:
    """Move the active cell only; the range is left alone.

    Moves clamp to the grid. Tab past the last column wraps to column 0 of the
    next row (shift_tab the reverse), with the row itself clamped.
    """
    if key not in NAV_KEYS:
        raise ValueError(f"Unknown navigation key '{key}'")
    if sel.active is None or n_rows <= 0 or n_cols <= 0:
        return sel
    row, col = sel.active
    max_row, max_col = n_rows - 1, n_cols - 1

    if key == "up":
        row = max(0, row - 1)
    elif key in ("down", "enter"):
        row = min(max_row, row + 1)
    elif key == "left":
        col = max(0, col - 1)
    elif key == "right":
        col = min(max_col, col + 1)
    elif key == "tab":
        col += 1
        if col > max_col:
            col = 0
            row = min(max_row, row + 1)
    elif key == "shift_tab":
        col -= 1
        if col < 0:
            col = max_col
            row = max(0, row - 1)

    row = max(0, min(row, max_row))
    col = max(0, min(col, max_col))
    return replace(sel, active=(row, col))


# ---------- range queries ----------
def extent(sel: Selection):
    """(r0, r1, c0, c1) inclusive, or None when nothing is selected."""
    if sel.has_range:
        (ar, ac), (fr, fc) = sel.anchor, sel.focus
        r0, r1 = sorted((ar, fr))
        c0, c1 = sorted((ac, fc))
        return (r0, r1, c0, c1)
    if sel.active is not None:
        r, c = sel.active
        return (r, r, c, c)
    return None


def contains(sel: Selection, row: int, col: int) -> bool:
    rect = extent(sel)
    if rect is None:
        return False
    r0, r1, c0, c1 = rect
    return r0 <= row <= r1 and c0 <= col <= c1


def selected_cells(sel: Selection) -> list[tuple[int, int]]:
    rect = extent(sel)
    if rect is None:
        return []
    r0, r1, c0, c1 = rect
    return [(r, c) for r in range(r0, r1 + 1) for c in range(c0, c1 + 1)]


# ---------- validation ----------
def _in_bounds(pos, n_rows: int, n_cols: int) -> bool:
    r, c = pos
    return 0 <= r < n_rows and 0 <= c < n_cols


def revalidate(sel: Selection, n_rows: int, n_cols: int) -> Selection:
    """Fit the selection to a (possibly shrunken) grid.

    The active cell is clamped; a range with any corner outside the grid is
    dropped and the selection goes back to idle.
    """
    if n_rows <= 0 or n_cols <= 0:
        return Selection()
    active = sel.active
    if active is not None:
        active = (
            max(0, min(active[0], n_rows - 1)),
            max(0, min(active[1], n_cols - 1)),
        )
    if sel.has_range and not (
        _in_bounds(sel.anchor, n_rows, n_cols) and _in_bounds(sel.focus, n_rows, n_cols)
    ):
        return Selection(active=active, phase=IDLE)
    return replace(sel, active=active)
