"""Reminder state machine and notification preferences.

The tracker never talks to the operating system. Each transition returns
the notifications it produced; an injected notifier (if any) is handed the
same list for delivery.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import portalocker

from .config import JournalConfig
from .errors import JournalStorageError
from .locking import locked_atomic_write
from .models import normalize_day

logger = logging.getLogger(__name__)


class ReminderState(Enum):
    """Which reminder, if any, is currently showing."""
    NONE = "none"
    GRATITUDE = "gratitude"
    SAVOR = "savor"


class NotificationStateFilter(Enum):
    """Which reminder states are allowed to raise a notification."""
    GRATITUDE = "gratitude"
    SAVOR = "savor"
    BOTH = "both"

    @property
    def title(self) -> str:
        return {
            NotificationStateFilter.GRATITUDE: "Gratitude Only",
            NotificationStateFilter.SAVOR: "Savor Only",
            NotificationStateFilter.BOTH: "Both States",
        }[self]

    def includes(self, reminder: ReminderState) -> bool:
        if self is NotificationStateFilter.BOTH:
            return reminder in (ReminderState.GRATITUDE, ReminderState.SAVOR)
        return reminder.value == self.value


GRATITUDE_PROMPT = (
    "Write one or more things you are grateful for today.\n"
    "Keep each one specific and personal, and include a short reason."
)

SAVOR_PROMPT = "Pause for one meaningful moment today and really savor it."


@dataclass(frozen=True)
class Notification:
    """A user-facing notification to be delivered by the host application."""
    reminder: ReminderState
    title: str
    body: str


NOTIFICATIONS = {
    ReminderState.GRATITUDE: Notification(
        reminder=ReminderState.GRATITUDE,
        title="Gratitude Reminder",
        body="Sleep state detected. Capture today's gratitude before you wrap up.",
    ),
    ReminderState.SAVOR: Notification(
        reminder=ReminderState.SAVOR,
        title="Savor Reminder",
        body="New day reminder: savor one meaningful moment today.",
    ),
}


@dataclass
class Preferences:
    """Persisted reminder preferences."""
    notifications_enabled: bool = False
    notification_filter: NotificationStateFilter = NotificationStateFilter.BOTH
    last_login: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "notifications_enabled": self.notifications_enabled,
            "notification_filter": self.notification_filter.value,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }

    @classmethod
    def from_dict(cls, data: dict, defaults: "Preferences") -> "Preferences":
        prefs = cls(
            notifications_enabled=defaults.notifications_enabled,
            notification_filter=defaults.notification_filter,
            last_login=defaults.last_login,
        )
        if isinstance(data.get("notifications_enabled"), bool):
            prefs.notifications_enabled = data["notifications_enabled"]
        try:
            prefs.notification_filter = NotificationStateFilter(data.get("notification_filter"))
        except ValueError:
            pass  # unknown value keeps the default
        if data.get("last_login"):
            try:
                prefs.last_login = date.fromisoformat(data["last_login"])
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid last_login in preferences: %r", data["last_login"])
        return prefs


class PreferencesStore:
    """JSON file holding reminder preferences."""

    def __init__(self, config: JournalConfig):
        self.config = config

    @property
    def path(self) -> Path:
        return self.config.get_preferences_path()

    def defaults(self) -> Preferences:
        return Preferences(
            notifications_enabled=self.config.notifications_enabled,
            notification_filter=NotificationStateFilter(self.config.notification_filter),
        )

    def load(self) -> Preferences:
        """Load preferences, falling back to config defaults.

        An unreadable or corrupt file is logged and treated as absent.
        """
        defaults = self.defaults()
        if not self.path.exists():
            return defaults
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cannot read preferences %s, using defaults: %s", self.path, e)
            return defaults
        if not isinstance(data, dict):
            logger.warning("Preferences %s is not a JSON object, using defaults", self.path)
            return defaults
        return Preferences.from_dict(data, defaults)

    def save(self, prefs: Preferences) -> None:
        """Persist preferences.

        Raises:
            JournalStorageError: If the file cannot be written.
        """
        try:
            with locked_atomic_write(self.path, timeout=self.config.lock_timeout) as f:
                json.dump(prefs.to_dict(), f, indent=2)
                f.write("\n")
        except (OSError, portalocker.LockException) as e:
            raise JournalStorageError(f"Cannot write preferences {self.path}: {e}", self.path) from e


Notifier = Callable[[list[Notification]], None]


class ReminderTracker:
    """Tracks the current reminder and decides when to notify."""

    def __init__(
        self,
        config: JournalConfig,
        notifier: Optional[Notifier] = None,
        store: Optional[PreferencesStore] = None,
    ):
        self.store = store or PreferencesStore(config)
        self.preferences = self.store.load()
        self.notifier = notifier
        self._current = ReminderState.NONE

    @property
    def current(self) -> ReminderState:
        return self._current

    def _transition(self, new_state: ReminderState) -> list[Notification]:
        old_state = self._current
        self._current = new_state

        if new_state == old_state or new_state is ReminderState.NONE:
            return []
        if not self.preferences.notifications_enabled:
            return []
        if not self.preferences.notification_filter.includes(new_state):
            return []

        notifications = [NOTIFICATIONS[new_state]]
        logger.info("Reminder changed %s -> %s", old_state.value, new_state.value)
        if self.notifier is not None:
            self.notifier(notifications)
        return notifications

    # ========== Events ==========

    def handle_sleep(self) -> list[Notification]:
        """System is going to sleep: ask for today's gratitude."""
        return self._transition(ReminderState.GRATITUDE)

    def handle_login(self, now: Optional[datetime] = None) -> list[Notification]:
        """First login of a new day raises the savor reminder."""
        day = normalize_day(now or datetime.now())
        if self.preferences.last_login == day:
            return []
        self.preferences.last_login = day
        self.store.save(self.preferences)
        return self._transition(ReminderState.SAVOR)

    def gratitude_captured(self) -> list[Notification]:
        """Entries were saved; a pending gratitude reminder is satisfied."""
        if self._current is ReminderState.GRATITUDE:
            return self._transition(ReminderState.NONE)
        return []

    def mark_savor_acknowledged(self) -> list[Notification]:
        if self._current is ReminderState.SAVOR:
            return self._transition(ReminderState.NONE)
        return []

    def clear(self) -> list[Notification]:
        return self._transition(ReminderState.NONE)

    # ========== Preferences ==========

    def set_notifications_enabled(self, enabled: bool) -> None:
        self.preferences.notifications_enabled = enabled
        self.store.save(self.preferences)

    def set_notification_filter(self, value: NotificationStateFilter) -> None:
        self.preferences.notification_filter = value
        self.store.save(self.preferences)
