"""Snapshot-based undo/redo for the shape collection."""
from __future__ import annotations

from typing import List, Optional, Sequence

from sketchpad.shapes import Shape, clone_objects


class History:
    """Linear undo/redo over full deep copies of the shape collection.

    Each commit stores the whole collection, so the cost of a commit, undo or
    redo grows with the number and size of shapes on the canvas.
    """

    def __init__(self, max_depth: Optional[int] = None):
        self._undo_stack: List[List[Shape]] = []
        self._redo_stack: List[List[Shape]] = []
        self._max_depth = max_depth

    def commit(self, objects: Sequence[Shape]) -> None:
        self._push_undo(objects)
        self._redo_stack.clear()

    def undo(self, objects: List[Shape]) -> List[Shape]:
        if not self._undo_stack:
            return objects
        self._redo_stack.append(clone_objects(objects))
        return self._undo_stack.pop()

    def redo(self, objects: List[Shape]) -> List[Shape]:
        if not self._redo_stack:
            return objects
        self._push_undo(objects)
        return self._redo_stack.pop()

    def _push_undo(self, objects: Sequence[Shape]) -> None:
        self._undo_stack.append(clone_objects(objects))
        if self._max_depth is not None and len(self._undo_stack) > self._max_depth:
            del self._undo_stack[: len(self._undo_stack) - self._max_depth]

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self._redo_stack)

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
