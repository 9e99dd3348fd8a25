"""Tests for the changelog store."""

from datetime import date, datetime

import pytest

from gratitude_journal.changelog import ChangelogStore
from gratitude_journal.config import JournalConfig


@pytest.fixture
def store(config):
    return ChangelogStore(config)


class TestChangelogLocation:
    """Changelog files live under the hidden log directory."""

    def test_written_to_dot_log_folder(self, store, temp_journal, day):
        store.append(day, ["entry"])

        changelog = temp_journal / ".log" / "journal-2026-02-16.changelog.jsonl"
        assert changelog.exists()

    def test_datetime_is_normalized_to_day(self, store, day):
        """Any time on the same day addresses the same changelog."""
        store.append(datetime(2026, 2, 16, 23, 59), ["late"])

        assert store.current(day) == ["late"]
        assert store.path_for(datetime(2026, 2, 16, 0, 1)) == store.path_for(day)

    def test_no_temp_or_partial_files_left(self, store, temp_journal, day):
        store.append(day, ["entry"])

        leftovers = list((temp_journal / ".log").glob("*.tmp"))
        assert leftovers == []


class TestAppend:
    """Tests for ChangelogStore.append."""

    def test_round_trip(self, store, day):
        store.append(day, ["Family", "Health"])
        assert store.current(day) == ["Family", "Health"]

    def test_latest_snapshot_wins(self, store, day):
        store.append(day, ["first"])
        store.append(day, ["second"])
        store.append(day, ["final", "state"])

        assert store.current(day) == ["final", "state"]

    def test_identical_snapshots_not_duplicated(self, store, day):
        assert store.append(day, ["same"]) is True
        assert store.append(day, ["same"]) is False
        assert store.append(day, ["same"]) is False

        assert store.history(day) == [["same"]]

    def test_only_consecutive_duplicates_collapse(self, store, day):
        store.append(day, ["a"])
        store.append(day, ["b"])
        store.append(day, ["a"])

        assert store.history(day) == [["a"], ["b"], ["a"]]

    def test_order_is_significant(self, store, day):
        store.append(day, ["a", "b"])
        store.append(day, ["b", "a"])

        assert store.history(day) == [["a", "b"], ["b", "a"]]

    def test_keeps_only_last_hundred(self, store, day):
        for i in range(1, 106):
            store.append(day, [f"entry-{i}"])

        history = store.history(day)
        assert len(history) == 100
        assert history[0] == ["entry-6"]
        assert history[-1] == ["entry-105"]

    def test_custom_history_limit(self, temp_journal, day):
        store = ChangelogStore(JournalConfig(journal_dir=temp_journal, history_limit=3))
        for i in range(5):
            store.append(day, [str(i)])

        assert store.history(day) == [["2"], ["3"], ["4"]]

    def test_days_are_independent(self, store):
        store.append(date(2026, 2, 16), ["monday"])
        store.append(date(2026, 2, 17), ["tuesday"])

        assert store.current(date(2026, 2, 16)) == ["monday"]
        assert store.current(date(2026, 2, 17)) == ["tuesday"]

    def test_empty_snapshot_is_recorded(self, store, day):
        store.append(day, ["something"])
        store.append(day, [])

        assert store.current(day) == []


class TestReads:
    """Tests for history/current/records."""

    def test_missing_day(self, store, day):
        assert store.history(day) == []
        assert store.current(day) is None
        assert store.exists(day) is False

    def test_records_carry_timestamps(self, store, day):
        store.append(day, ["x"])

        records = store.records(day)
        assert len(records) == 1
        assert records[0].timestamp is not None
        assert records[0].entries == ("x",)

    def test_malformed_line_is_skipped(self, store, day, caplog):
        store.append(day, ["good-1"])
        path = store.path_for(day)
        with open(path, "a", encoding="utf-8") as f:
            f.write("{broken json\n")
        store.append(day, ["good-2"])

        with caplog.at_level("WARNING"):
            history = store.history(day)

        assert history == [["good-1"], ["good-2"]]
        assert "Skipping malformed record" in caplog.text

    def test_blank_lines_are_ignored(self, store, day):
        path = store.path_for(day)
        path.parent.mkdir(parents=True)
        path.write_text('\n["a"]\n\n["b"]\n', encoding="utf-8")

        assert store.history(day) == [["a"], ["b"]]

    def test_append_after_legacy_lines_dedupes(self, store, day):
        """Bare-list records from older files take part in deduplication."""
        path = store.path_for(day)
        path.parent.mkdir(parents=True)
        path.write_text('["kept"]\n', encoding="utf-8")

        assert store.append(day, ["kept"]) is False
        assert store.history(day) == [["kept"]]
