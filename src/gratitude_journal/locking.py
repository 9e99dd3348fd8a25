"""File locking and atomic write helpers for journal files."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import portalocker


@contextmanager
def file_lock(path: Path, timeout: float = 10.0) -> Generator[None, None, None]:
    """Acquire an exclusive lock on a file.

    Creates a .lock file alongside the target file.

    Args:
        path: File to lock
        timeout: Seconds to wait for lock

    Raises:
        portalocker.LockException: If lock cannot be acquired
    """
    lock_path = path.with_suffix(path.suffix + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    if not lock_path.exists():
        lock_path.touch()

    with portalocker.Lock(lock_path, timeout=timeout):
        yield


@contextmanager
def atomic_write(path: Path, encoding: str = "utf-8") -> Generator:
    """Write a text file atomically.

    Content goes to a sibling .tmp file which replaces the target only after
    the handle is closed, so readers see either the old or the new file.

    Yields:
        File handle for writing
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(tmp_path, "w", encoding=encoding, newline="\n") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)

    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


@contextmanager
def locked_atomic_write(path: Path, encoding: str = "utf-8", timeout: float = 10.0) -> Generator:
    """Combine file lock with atomic write.

    Args:
        path: Target file path
        encoding: Text encoding
        timeout: Lock timeout in seconds

    Yields:
        File handle for writing
    """
    with file_lock(path, timeout=timeout):
        with atomic_write(path, encoding=encoding) as f:
            yield f
