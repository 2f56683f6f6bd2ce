import logging
from dataclasses import dataclass, replace
from typing import Optional

from grid_model import Grid, copy_grid
from view_pipeline import ViewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """A grid plus the view settings that were laid over it."""

    grid: Grid
    view_state: Optional[ViewState] = None


@dataclass(frozen=True)
class History:
    """Undo/redo stacks of whole-grid snapshots.

    ``undo_stack`` is oldest first; ``redo_stack`` is most-recently-undone
    first. With ``max_depth=None`` the stacks grow without bound for the life
    of the session.
    """

    undo_stack: tuple = ()
    redo_stack: tuple = ()
    max_depth: Optional[int] = 50

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def _bounded(self, stack: tuple) -> tuple:
        if self.max_depth is not None and len(stack) > self.max_depth:
            return stack[len(stack) - self.max_depth:]
        return stack


def _snapshot(grid: Grid, view_state) -> Snapshot:
    return Snapshot(copy_grid(grid), view_state)


def commit(history: History, current: Grid, view_state: Optional[ViewState] = None) -> History:
    """Record ``current`` (the pre-mutation grid) and forget any redo."""
    undo_stack = history._bounded(history.undo_stack + (_snapshot(current, view_state),))
    logger.debug("commit: %d undo entries", len(undo_stack))
    return replace(history, undo_stack=undo_stack, redo_stack=())


def undo(history: History, current: Grid,
         view_state: Optional[ViewState] = None) -> tuple[History, Snapshot]:
    if not history.undo_stack:
        return history, Snapshot(current, view_state)
    restored = history.undo_stack[-1]
    new = replace(
        history,
        undo_stack=history.undo_stack[:-1],
        redo_stack=(_snapshot(current, view_state),) + history.redo_stack,
    )
    logger.debug("undo: %d left", len(new.undo_stack))
    return new, _snapshot(restored.grid, restored.view_state)


def redo(history: History, current: Grid,
         view_state: Optional[ViewState] = None) -> tuple[History, Snapshot]:
    if not history.redo_stack:
        return history, Snapshot(current, view_state)
    restored = history.redo_stack[0]
    new = replace(
        history,
        undo_stack=history._bounded(history.undo_stack + (_snapshot(current, view_state),)),
        redo_stack=history.redo_stack[1:],
    )
    return new, _snapshot(restored.grid, restored.view_state)


def clear(history: History) -> History:
    return replace(history, undo_stack=(), redo_stack=())
