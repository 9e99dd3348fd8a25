"""Exception hierarchy for journal operations."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class JournalError(Exception):
    """Base exception for journal operations."""
    pass


class JournalStorageError(JournalError):
    """Raised when a journal file or directory cannot be created, read or written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MalformedRecordError(JournalError):
    """Raised when a changelog line cannot be decoded."""
    pass


class EmptyEntryError(JournalError):
    """Raised when an explicit save is attempted with blank entries."""
    pass
