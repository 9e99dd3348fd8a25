"""Data models for journal days, snapshots and changelog records."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional, Sequence, Union

# An ordered list of entry strings for one day. Order is meaningful.
Snapshot = list[str]

DayLike = Union[date, datetime]


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Format datetime as ISO 8601 with timezone."""
    return dt.isoformat(timespec="milliseconds")


def parse_timestamp(s: str) -> datetime:
    """Parse ISO 8601 timestamp string."""
    return datetime.fromisoformat(s)


def normalize_day(value: DayLike) -> date:
    """Reduce a date or datetime to its local calendar day.

    Aware datetimes are converted to local time first so the day matches
    what the user sees on their clock.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def parse_day(text: str) -> date:
    """Parse a YYYY-MM-DD string into a day."""
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {text!r}")


def today(now: Callable[[], datetime] = datetime.now) -> date:
    """Today's calendar day according to the given clock."""
    return normalize_day(now())


def shifted_day(day: DayLike, days: int) -> date:
    """Move a day forward or backward by a number of days."""
    return normalize_day(day) + timedelta(days=days)


def long_date(day: DayLike) -> str:
    """Long display form of a day, e.g. 'Monday, February 16, 2026'."""
    d = normalize_day(day)
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"


@dataclass(frozen=True)
class ChangelogRecord:
    """One persisted snapshot in a day's changelog.

    Position in the file is the chronological order; the timestamp is kept
    for diagnostics only.
    """
    entries: tuple[str, ...]
    timestamp: Optional[datetime] = None

    @classmethod
    def from_snapshot(cls, snapshot: Sequence[str], timestamp: Optional[datetime] = None) -> "ChangelogRecord":
        return cls(entries=tuple(snapshot), timestamp=timestamp or utc_now())

    def snapshot(self) -> Snapshot:
        return list(self.entries)

    def same_entries(self, snapshot: Sequence[str]) -> bool:
        return self.entries == tuple(snapshot)

    def to_dict(self) -> dict:
        return {
            "ts": format_timestamp(self.timestamp) if self.timestamp else None,
            "entries": list(self.entries),
        }


@dataclass
class JournalEntryItem:
    """An entry being edited, with a stable id for drag and drop."""
    text: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def items_from_snapshot(snapshot: Sequence[str]) -> list[JournalEntryItem]:
    return [JournalEntryItem(text=text) for text in snapshot]


def snapshot_of(items: Sequence[JournalEntryItem]) -> Snapshot:
    return [item.text for item in items]
