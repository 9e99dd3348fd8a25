"""Debounced autosave for the open journal day.

Bursts of edits collapse into a single commit once the user has been idle
for the quiet period. The timer runs on the caller's event loop, so the
commit happens on the same thread as the edits.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from .errors import JournalError
from .models import Snapshot

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's call_later signature."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


CommitFn = Callable[[Snapshot], Any]


class AutosaveCoordinator:
    """Idle/Pending state machine around a single deferred commit."""

    def __init__(
        self,
        commit: CommitFn,
        quiet_period: float,
        scheduler: Optional[Scheduler] = None,
    ):
        self._commit = commit
        self.quiet_period = quiet_period
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None
        self._pending: Optional[Snapshot] = None
        self.last_error: Optional[Exception] = None
        self.commits = 0

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        return self._scheduler

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    @property
    def pending_snapshot(self) -> Optional[Snapshot]:
        return list(self._pending) if self._pending is not None else None

    def register_edit(self, snapshot: Sequence[str]) -> None:
        """Replace any scheduled commit with one for this snapshot."""
        self._cancel_timer()
        self._pending = list(snapshot)
        self._handle = self.scheduler.call_later(self.quiet_period, self._fire)

    def flush_now(self) -> bool:
        """Commit a pending snapshot synchronously.

        Returns:
            True if a commit ran, False if nothing was pending.

        Raises:
            JournalError: If the commit fails. The snapshot stays pending.
        """
        if self._pending is None:
            return False
        self._cancel_timer()
        self._run_commit()
        return True

    def cancel(self) -> None:
        """Drop any pending commit without persisting it."""
        self._cancel_timer()
        self._pending = None

    def _fire(self) -> None:
        self._handle = None
        try:
            self._run_commit()
        except JournalError as e:
            # The snapshot stays pending; the next edit or flush retries.
            logger.error("Autosave failed, edits are kept in memory: %s", e)

    def _run_commit(self) -> None:
        snapshot = self._pending
        if snapshot is None:
            return
        try:
            self._commit(list(snapshot))
        except JournalError as e:
            self.last_error = e
            raise
        self._pending = None
        self.last_error = None
        self.commits += 1

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
