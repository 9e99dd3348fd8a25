"""Changelog store - the authoritative per-day history of settled snapshots.

Each day has one JSON-lines file under the hidden log directory. Records are
only ever appended; once the file holds more than the configured limit the
oldest records are dropped. A record equal to the one before it is never
written.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import portalocker

from .codec import decode_record, encode_record
from .config import JournalConfig
from .errors import JournalStorageError, MalformedRecordError
from .locking import atomic_write, file_lock
from .models import ChangelogRecord, DayLike, Snapshot, normalize_day

logger = logging.getLogger(__name__)


def changelog_filename(day: date) -> str:
    return f"journal-{day.isoformat()}.changelog.jsonl"


class ChangelogStore:
    """Append-only, capped, deduplicated snapshot log per journal day."""

    def __init__(self, config: JournalConfig):
        self.config = config

    @property
    def directory(self) -> Path:
        return self.config.get_log_path()

    def path_for(self, day: DayLike) -> Path:
        """Get path to the changelog file for a given day."""
        return self.directory / changelog_filename(normalize_day(day))

    def exists(self, day: DayLike) -> bool:
        return self.path_for(day).exists()

    # ========== Reads ==========

    def records(self, day: DayLike) -> list[ChangelogRecord]:
        """Return retained records for a day, oldest first.

        Lines that fail to decode are skipped so one bad line does not hide
        the rest of the history.

        Raises:
            JournalStorageError: If the file exists but cannot be read.
        """
        path = self.path_for(day)
        if not path.exists():
            return []

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise JournalStorageError(f"Cannot read changelog {path}: {e}", path) from e

        return self._decode_lines(content, path)

    def history(self, day: DayLike) -> list[Snapshot]:
        """Return every retained snapshot for a day, oldest first."""
        return [record.snapshot() for record in self.records(day)]

    def current(self, day: DayLike) -> Optional[Snapshot]:
        """Return the latest snapshot for a day, or None if there is no changelog."""
        records = self.records(day)
        if not records:
            return None
        return records[-1].snapshot()

    def _decode_lines(self, content: str, path: Path) -> list[ChangelogRecord]:
        records = []
        # Split on "\n" only: entries may contain other Unicode line separators.
        for line_num, line in enumerate(content.split("\n"), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(decode_record(line))
            except MalformedRecordError as e:
                logger.warning("Skipping malformed record at %s:%d: %s", path, line_num, e)
        return records

    # ========== Writes ==========

    def append(self, day: DayLike, snapshot: Sequence[str]) -> bool:
        """Append a snapshot unless it equals the latest record, then trim.

        The whole file is rewritten atomically under a lock, so readers
        never observe a partial record.

        Returns:
            True if a new record was written, False if it was a duplicate.

        Raises:
            JournalStorageError: If the directory or file cannot be written.
        """
        path = self.path_for(day)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JournalStorageError(f"Cannot create log directory {self.directory}: {e}", self.directory) from e

        try:
            with file_lock(path, timeout=self.config.lock_timeout):
                records = self.records(day)

                if records and records[-1].same_entries(snapshot):
                    logger.debug("Changelog %s unchanged, skipping duplicate snapshot", path.name)
                    return False

                records.append(ChangelogRecord.from_snapshot(snapshot))
                dropped = len(records) - self.config.history_limit
                if dropped > 0:
                    records = records[dropped:]
                    logger.debug("Trimmed %d oldest record(s) from %s", dropped, path.name)

                self._write(path, records)
        except portalocker.LockException as e:
            raise JournalStorageError(f"Cannot lock changelog {path}: {e}", path) from e
        except OSError as e:
            raise JournalStorageError(f"Cannot update changelog {path}: {e}", path) from e

        logger.debug("Appended snapshot with %d entries to %s", len(snapshot), path.name)
        return True

    def _write(self, path: Path, records: list[ChangelogRecord]) -> None:
        body = "".join(encode_record(record) + "\n" for record in records)
        try:
            # Caller already holds the lock for path.
            with atomic_write(path) as f:
                f.write(body)
        except OSError as e:
            raise JournalStorageError(f"Cannot write changelog {path}: {e}", path) from e
