"""End-to-end tests: a few days of journaling through the session API."""

import shutil
from datetime import date, datetime
from pathlib import Path

from gratitude_journal.config import load_config
from gratitude_journal.engine import JournalEngine
from gratitude_journal.reminders import ReminderState, ReminderTracker
from gratitude_journal.session import EditingSession

EXAMPLE_CONFIG = Path(__file__).parent.parent / "examples" / "gratitude_journal.toml"


class TestJournalingWorkflow:
    """Sleep reminder, edits, autosave, day switch, reopen."""

    def test_evening_session(self, config, engine, scheduler):
        delivered = []
        reminders = ReminderTracker(config, notifier=delivered.extend)
        reminders.set_notifications_enabled(True)
        monday = date(2026, 2, 16)

        reminders.handle_login(datetime(2026, 2, 16, 8))
        reminders.mark_savor_acknowledged()
        reminders.handle_sleep()
        assert [n.reminder for n in delivered] == [ReminderState.SAVOR, ReminderState.GRATITUDE]

        session = EditingSession(engine, scheduler=scheduler, reminders=reminders)
        session.open(monday)
        for partial in ("F", "Fa", "Family"):
            session.edit(0, partial)
            scheduler.advance(0.1)
        scheduler.advance(0.5)
        assert reminders.current is ReminderState.NONE

        session.add_entry()
        session.edit(1, "Health")
        session.shift_day(1)
        session.edit(0, "Tuesday thing")
        session.close()

        assert engine.load_history(monday) == [["Family"], ["Family", "Health"]]
        assert engine.load_entries(date(2026, 2, 17)) == ["Tuesday thing"]

        document = engine.renderer.path_for(monday).read_text(encoding="utf-8")
        assert "1. Family\n2. Health\n" in document

    def test_reopen_and_undo_through_saved_states(self, engine, scheduler):
        day = date(2026, 2, 16)
        session = EditingSession(engine, scheduler=scheduler)
        session.open(day)
        session.edit(0, "one")
        session.close()
        session.open(day)
        session.edit(0, "two")
        session.close()

        session.open(day)
        session.undo()
        session.close()

        assert engine.load_history(day) == [["one"], ["two"], ["one"]]


class TestExampleConfig:
    def test_example_config_loads(self, temp_journal):
        shutil.copy(EXAMPLE_CONFIG, temp_journal / "gratitude_journal.toml")

        config = load_config(temp_journal)
        assert config.quiet_period == 0.45
        assert config.history_limit == 100
        assert JournalEngine(config).load_entries(date(2026, 2, 16)) == []
