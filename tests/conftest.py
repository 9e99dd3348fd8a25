"""Shared pytest fixtures for gratitude-journal tests."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from gratitude_journal.config import JournalConfig
from gratitude_journal.engine import JournalEngine


class FakeHandle:
    """Timer handle recorded by FakeScheduler."""

    def __init__(self, scheduler, when, callback, args):
        self.scheduler = scheduler
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Manual clock with asyncio's call_later interface."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self, self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def active(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = sorted(
                (h for h in self.active if h.when <= target),
                key=lambda h: h.when,
            )
            if not due:
                break
            handle = due[0]
            handle.cancelled = True
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target


@pytest.fixture
def temp_journal():
    """Create a temporary journal directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_journal):
    """Create a test configuration."""
    return JournalConfig(journal_dir=temp_journal)


@pytest.fixture
def engine(config):
    """Create a test engine."""
    return JournalEngine(config)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def day():
    return date(2026, 2, 16)
