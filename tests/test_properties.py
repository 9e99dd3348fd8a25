"""Property-based tests for the journal's core invariants.

Uses hypothesis to check the invariants over many generated inputs.
"""

import tempfile
from datetime import date
from pathlib import Path

from hypothesis import given, settings, strategies as st

from gratitude_journal.codec import parse_markdown, render_markdown
from gratitude_journal.config import JournalConfig
from gratitude_journal.engine import JournalEngine
from gratitude_journal.reorder import reorder
from gratitude_journal.undo import UndoRedoManager

# Single-line entries without surrounding whitespace survive the Markdown form.
entry_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs", "Zl", "Zp")),
    min_size=1,
    max_size=40,
).map(str.strip).filter(bool)

days = st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31))


def make_temp_engine(**kwargs):
    """Create a fresh engine with temp directory for each hypothesis example."""
    tmpdir = tempfile.mkdtemp()
    return JournalEngine(JournalConfig(journal_dir=Path(tmpdir), **kwargs))


class TestPersistenceProperties:
    """Round trip and retention."""

    @given(entries=st.lists(st.text(max_size=50), min_size=1, max_size=10), day=days)
    @settings(max_examples=30, deadline=None)
    def test_round_trip_any_strings(self, entries, day):
        """Any non-empty list of strings comes back exactly from the changelog."""
        engine = make_temp_engine()
        engine.persist_snapshot(day, entries)

        assert engine.store.current(day) == entries

    @given(count=st.integers(min_value=1, max_value=30), limit=st.integers(min_value=1, max_value=10))
    @settings(max_examples=20, deadline=None)
    def test_retention_keeps_newest(self, count, limit):
        engine = make_temp_engine(history_limit=limit)
        day = date(2026, 2, 16)
        for i in range(count):
            engine.persist_snapshot(day, [f"entry-{i}"])

        history = engine.load_history(day)
        assert history == [[f"entry-{i}"] for i in range(max(0, count - limit), count)]

    @given(snapshots=st.lists(st.lists(st.sampled_from(["a", "b"]), max_size=2), min_size=1, max_size=15))
    @settings(max_examples=30, deadline=None)
    def test_no_consecutive_duplicates(self, snapshots):
        engine = make_temp_engine()
        day = date(2026, 2, 16)
        for snapshot in snapshots:
            engine.persist_snapshot(day, snapshot)

        history = engine.load_history(day)
        assert all(prev != cur for prev, cur in zip(history, history[1:]))
        assert history[-1] == snapshots[-1]


class TestCodecProperties:
    @given(entries=st.lists(entry_text, max_size=10), day=days)
    def test_markdown_round_trip(self, entries, day):
        assert parse_markdown(render_markdown(entries, day)) == entries


class TestReorderProperties:
    @given(data=st.data(), size=st.integers(min_value=2, max_value=10))
    def test_reorder_is_permutation(self, data, size):
        ids = list(range(size))
        dragged = data.draw(st.sampled_from(ids))
        target = data.draw(st.sampled_from([i for i in ids if i != dragged]))

        order = reorder(ids, dragged, target)

        assert sorted(order) == ids
        assert order.index(dragged) == ids.index(target)


class TestUndoProperties:
    @given(values=st.lists(st.integers(), min_size=1, max_size=20))
    def test_undo_everything_returns_to_start(self, values):
        manager = UndoRedoManager()
        manager.seed([], ["start"])
        live = ["start"]
        for value in values:
            new = [str(value)]
            manager.record_change(live, new)
            live = manager.live

        while manager.undo() is not None:
            pass
        assert manager.live == ["start"]
