"""Core journal engine - changelog-backed persistence with a derived document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Sequence

from .changelog import ChangelogStore
from .config import JournalConfig
from .document import DayDocumentRenderer
from .errors import JournalStorageError
from .models import DayLike, Snapshot, long_date, normalize_day

logger = logging.getLogger(__name__)


class Effect(Enum):
    """Side effects a persist produces for collaborators to act on."""
    GRATITUDE_CAPTURED = "gratitude_captured"


@dataclass
class PersistResult:
    """Outcome of persisting a snapshot."""
    document_path: Path
    appended: bool
    effects: list[Effect] = field(default_factory=list)


@dataclass
class DaySeed:
    """Initial state for editing a day."""
    history: list[Snapshot]
    live: Snapshot


class JournalEngine:
    """Ties the changelog store and the day document together.

    The changelog is the source of truth. The Markdown document is written
    after each append and consulted only for days without a changelog.
    """

    def __init__(self, config: JournalConfig):
        self.config = config
        self.store = ChangelogStore(config)
        self.renderer = DayDocumentRenderer(config)

    def ensure_directories(self) -> None:
        """Create the journal and log directories.

        Raises:
            JournalStorageError: If either directory cannot be created.
        """
        for path in (self.config.get_journal_path(), self.config.get_log_path()):
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise JournalStorageError(f"Cannot create directory {path}: {e}", path) from e

    def display_date(self, day: DayLike) -> str:
        return long_date(day)

    # ========== Queries ==========

    def load_entries(self, day: DayLike) -> Snapshot:
        """Latest entries for a day.

        Uses the changelog whenever its file exists, even if the document
        disagrees or no record in it decodes. Falls back to the document,
        then to an empty list.
        """
        if self.store.exists(day):
            return self.store.current(day) or []

        from_document = self.renderer.read(day)
        if from_document is not None:
            return from_document
        return []

    def load_history(self, day: DayLike) -> list[Snapshot]:
        """Every retained snapshot for a day, oldest first."""
        return self.store.history(day)

    def seed(self, day: DayLike) -> DaySeed:
        """Build the starting state for an editing session.

        Live state is the newest changelog record, else the document's
        entries (only when no changelog file exists), else a single empty
        entry.
        """
        if self.store.exists(day):
            history = self.store.history(day)
            if history:
                return DaySeed(history=history, live=list(history[-1]))
            return DaySeed(history=[], live=[""])

        from_document = self.renderer.read(day)
        if from_document:
            return DaySeed(history=[], live=from_document)
        return DaySeed(history=[], live=[""])

    # ========== Writes ==========

    def persist_snapshot(self, day: DayLike, entries: Sequence[str]) -> PersistResult:
        """Append a snapshot to the changelog and re-render the document.

        Raises:
            JournalStorageError: If either write fails.
        """
        day = normalize_day(day)
        snapshot = list(entries)

        # After append the newest record always equals snapshot.
        appended = self.store.append(day, snapshot)
        path = self.renderer.render(day, snapshot)

        if appended:
            logger.info("Saved %d entries for %s", len(snapshot), day.isoformat())

        return PersistResult(
            document_path=path,
            appended=appended,
            effects=[Effect.GRATITUDE_CAPTURED],
        )

    def save_entries(self, day: DayLike, entries: Sequence[str]) -> PersistResult:
        """Persist an explicit save, trimming whitespace around each entry."""
        return self.persist_snapshot(day, [entry.strip() for entry in entries])
