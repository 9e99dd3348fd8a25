"""Bounded undo/redo history for one editing session."""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional, Sequence

from .models import Snapshot


class UndoRedoManager:
    """Two capped stacks of snapshots plus the live state.

    When a stack is full the oldest snapshot is dropped silently. Every
    change to the live state is forwarded to ``on_change`` (normally the
    autosave coordinator).
    """

    def __init__(self, limit: int = 100, on_change: Optional[Callable[[Snapshot], None]] = None):
        self.limit = limit
        self.on_change = on_change
        self._undo: deque[Snapshot] = deque(maxlen=limit)
        self._redo: deque[Snapshot] = deque(maxlen=limit)
        self._live: Snapshot = [""]

    @property
    def live(self) -> Snapshot:
        return list(self._live)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def seed(self, history: Sequence[Sequence[str]], fallback: Sequence[str]) -> None:
        """Start a session from a day's changelog history.

        Every record but the last becomes undoable; the last one (or the
        fallback when there is no history) is the live state.
        """
        self._undo.clear()
        self._redo.clear()
        if history:
            self._undo.extend(list(snapshot) for snapshot in history[:-1])
            self._live = list(history[-1])
        else:
            self._live = list(fallback)

    def record_change(self, previous: Sequence[str], current: Sequence[str]) -> bool:
        """Register an edit from previous to current.

        Returns:
            False if the edit changed nothing.
        """
        previous, current = list(previous), list(current)
        if previous == current:
            return False
        self._undo.append(previous)
        self._redo.clear()
        self._apply(current)
        return True

    def undo(self) -> Optional[Snapshot]:
        """Step back one snapshot. Returns the new live state, or None."""
        if not self._undo:
            return None
        restored = self._undo.pop()
        self._redo.append(self._live)
        self._apply(restored)
        return self.live

    def redo(self) -> Optional[Snapshot]:
        """Step forward one snapshot. Returns the new live state, or None."""
        if not self._redo:
            return None
        restored = self._redo.pop()
        self._undo.append(self._live)
        self._apply(restored)
        return self.live

    def _apply(self, snapshot: Snapshot) -> None:
        self._live = snapshot
        if self.on_change is not None:
            self.on_change(list(snapshot))
