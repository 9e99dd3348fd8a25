"""Editing session for one open journal day.

The session owns the live entry list, its undo/redo history and the
pending autosave. Every mutation is an explicit method call that records
the previous state and schedules a commit; nothing is driven by observers.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Optional

from .autosave import AutosaveCoordinator, Scheduler
from .engine import Effect, JournalEngine, PersistResult
from .errors import EmptyEntryError, JournalError
from .models import (
    DayLike,
    JournalEntryItem,
    Snapshot,
    normalize_day,
    shifted_day,
    snapshot_of,
)
from .reminders import ReminderTracker
from .reorder import decode_drag_token, reorder
from .shortcuts import ShortcutAction
from .undo import UndoRedoManager

logger = logging.getLogger(__name__)


class SessionClosedError(JournalError):
    """Raised when editing is attempted without an open day."""
    pass


class EditingSession:
    """Live state for the day currently open in the editor."""

    def __init__(
        self,
        engine: JournalEngine,
        scheduler: Optional[Scheduler] = None,
        reminders: Optional[ReminderTracker] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.engine = engine
        self.scheduler = scheduler
        self.reminders = reminders
        self.now = now

        self.day: Optional[date] = None
        self.items: list[JournalEntryItem] = []
        self.last_result: Optional[PersistResult] = None
        self._history: Optional[UndoRedoManager] = None
        self._autosave: Optional[AutosaveCoordinator] = None

    # ========== Lifecycle ==========

    def open(self, day: DayLike) -> None:
        """Open a day for editing, flushing whatever day was open before."""
        if self.day is not None:
            self.close()

        day = normalize_day(day)
        seed = self.engine.seed(day)

        self._autosave = AutosaveCoordinator(
            commit=self._make_commit(day),
            quiet_period=self.engine.config.quiet_period,
            scheduler=self.scheduler,
        )
        self._history = UndoRedoManager(limit=self.engine.config.undo_limit, on_change=self._on_change)
        self._history.seed(seed.history, seed.live)

        self.day = day
        self.items = []
        self._sync_items(self._history.live)
        logger.debug("Opened %s with %d undoable snapshot(s)", day.isoformat(), self._history.undo_depth)

    def close(self) -> None:
        """Persist any pending edit and discard the session state.

        Raises:
            JournalError: If the final flush fails. The session stays open
                so the caller can retry.
        """
        if self.day is None:
            return
        assert self._autosave is not None
        self._autosave.flush_now()

        logger.debug("Closed %s", self.day.isoformat())
        self.day = None
        self.items = []
        self._history = None
        self._autosave = None

    def shift_day(self, days: int) -> date:
        """Open the day `days` away from the current one."""
        target = shifted_day(self._require_day(), days)
        self.open(target)
        return target

    def jump_to_today(self) -> date:
        target = normalize_day(self.now())
        self.open(target)
        return target

    # ========== State ==========

    @property
    def entries(self) -> Snapshot:
        return snapshot_of(self.items)

    @property
    def can_undo(self) -> bool:
        return self._history is not None and self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history is not None and self._history.can_redo

    @property
    def has_pending_save(self) -> bool:
        return self._autosave is not None and self._autosave.is_pending

    @property
    def can_save(self) -> bool:
        return bool(self.items) and all(item.text.strip() for item in self.items)

    def display_date(self) -> str:
        return self.engine.display_date(self._require_day())

    # ========== Mutations ==========

    def edit(self, index: int, text: str) -> bool:
        """Replace the text of one entry."""
        def change():
            self.items[index].text = text
        return self._mutate(change)

    def add_entry(self) -> JournalEntryItem:
        item = JournalEntryItem()
        self._mutate(lambda: self.items.append(item))
        return item

    def delete_entry(self, entry_id: uuid.UUID) -> bool:
        """Remove an entry. The last remaining entry is cleared instead."""
        index = self._index_of(entry_id)
        if index is None:
            return False

        def change():
            if len(self.items) == 1:
                self.items[0].text = ""
            else:
                del self.items[index]
        return self._mutate(change)

    def reorder(self, dragged_id: Optional[uuid.UUID], target_id: uuid.UUID) -> bool:
        """Apply a drag of one entry onto another. False if the request is invalid."""
        if dragged_id is None:
            return False
        order = reorder([item.id for item in self.items], dragged_id, target_id)
        if order is None:
            return False

        by_id = {item.id: item for item in self.items}

        def change():
            self.items = [by_id[entry_id] for entry_id in order]
        self._mutate(change)
        return True

    def reorder_token(self, token: str, target_id: uuid.UUID) -> bool:
        """Reorder using a drag payload string."""
        return self.reorder(decode_drag_token(token), target_id)

    def undo(self) -> bool:
        return self._require_history().undo() is not None

    def redo(self) -> bool:
        return self._require_history().redo() is not None

    def save(self) -> PersistResult:
        """Explicit save: every visible entry must have text.

        Raises:
            EmptyEntryError: If there are no entries or any is blank.
            JournalError: If persisting fails.
        """
        self._require_day()
        if not self.can_save:
            raise EmptyEntryError("Fill in all visible entries or remove empty ones.")

        cleaned = [item.text.strip() for item in self.items]
        if cleaned != self.entries:
            def change():
                for item, text in zip(self.items, cleaned):
                    item.text = text
            self._mutate(change)

        assert self._autosave is not None
        self._autosave.register_edit(cleaned)
        self._autosave.flush_now()
        assert self.last_result is not None
        return self.last_result

    def handle_shortcut(self, action: ShortcutAction) -> bool:
        """Run the editor action for a shortcut. False if nothing happened."""
        if action is ShortcutAction.ADD_ENTRY:
            self.add_entry()
            return True
        if action is ShortcutAction.SAVE_AND_CLOSE:
            self.save()
            self.close()
            return True
        return False

    # ========== Internals ==========

    def _mutate(self, change: Callable[[], None]) -> bool:
        history = self._require_history()
        previous = self.entries
        change()
        return history.record_change(previous, self.entries)

    def _on_change(self, snapshot: Snapshot) -> None:
        if snapshot != self.entries:
            self._sync_items(snapshot)
        assert self._autosave is not None
        self._autosave.register_edit(snapshot)

    def _sync_items(self, snapshot: Snapshot) -> None:
        # Keep ids stable by position so drag targets survive undo/redo.
        items = []
        for index, text in enumerate(snapshot):
            if index < len(self.items):
                items.append(JournalEntryItem(text=text, id=self.items[index].id))
            else:
                items.append(JournalEntryItem(text=text))
        self.items = items

    def _make_commit(self, day: date) -> Callable[[Snapshot], PersistResult]:
        def commit(snapshot: Snapshot) -> PersistResult:
            result = self.engine.persist_snapshot(day, snapshot)
            self.last_result = result
            if self.reminders is not None and Effect.GRATITUDE_CAPTURED in result.effects:
                self.reminders.gratitude_captured()
            return result
        return commit

    def _index_of(self, entry_id: uuid.UUID) -> Optional[int]:
        for index, item in enumerate(self.items):
            if item.id == entry_id:
                return index
        return None

    def _require_day(self) -> date:
        if self.day is None:
            raise SessionClosedError("No journal day is open")
        return self.day

    def _require_history(self) -> UndoRedoManager:
        self._require_day()
        assert self._history is not None
        return self._history
