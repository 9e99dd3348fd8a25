"""Day document renderer - the human-readable Markdown file for each day.

The document is derived from the changelog. It is rewritten after every
successful append and only read when a day has no changelog yet.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import portalocker

from .codec import parse_markdown, render_markdown
from .config import JournalConfig
from .errors import JournalStorageError
from .locking import locked_atomic_write
from .models import DayLike, Snapshot, normalize_day

logger = logging.getLogger(__name__)


def document_filename(day: date) -> str:
    return f"journal-{day.isoformat()}.md"


class DayDocumentRenderer:
    """Writes and reads journal-<date>.md in the journal directory."""

    def __init__(self, config: JournalConfig):
        self.config = config

    def path_for(self, day: DayLike) -> Path:
        return self.config.get_journal_path() / document_filename(normalize_day(day))

    def render(self, day: DayLike, entries: Sequence[str]) -> Path:
        """Rewrite the document for a day from a snapshot.

        Raises:
            JournalStorageError: If the file cannot be written.
        """
        day = normalize_day(day)
        path = self.path_for(day)
        body = render_markdown(entries, day, heading=self.config.heading)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with locked_atomic_write(path, timeout=self.config.lock_timeout) as f:
                f.write(body)
        except portalocker.LockException as e:
            raise JournalStorageError(f"Cannot lock journal document {path}: {e}", path) from e
        except OSError as e:
            raise JournalStorageError(f"Cannot write journal document {path}: {e}", path) from e

        logger.debug("Rendered %s with %d entries", path.name, len(entries))
        return path

    def read(self, day: DayLike) -> Optional[Snapshot]:
        """Parse entries from a day's document. Returns None if not found."""
        path = self.path_for(day)
        if not path.exists():
            return None
        try:
            markdown = path.read_text(encoding="utf-8")
        except OSError as e:
            raise JournalStorageError(f"Cannot read journal document {path}: {e}", path) from e
        return parse_markdown(markdown)
