"""Snapshot codec: Markdown day documents and JSON-lines changelog records."""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Sequence

from .errors import MalformedRecordError
from .models import ChangelogRecord, Snapshot, long_date, parse_timestamp

DEFAULT_HEADING = "Gratitude Journal"

NUMBERED_LINE = re.compile(r"^\d+\.\s+")
BULLET_PREFIX = "- "


def render_markdown(entries: Sequence[str], day: date, heading: str = DEFAULT_HEADING) -> str:
    """Render a snapshot as the human-readable day document.

    Entries are numbered from 1 in snapshot order.
    """
    lines = [
        f"# {heading}",
        f"## {long_date(day)}",
        "",
    ]
    for index, entry in enumerate(entries, start=1):
        lines.append(f"{index}. {entry.strip()}")
    return "\n".join(lines) + "\n"


def parse_markdown(markdown: str) -> Snapshot:
    """Extract entries from a day document.

    Numbered lines ("1. text") and legacy bullets ("- text") are entries;
    every other line is ignored. File order is preserved.
    """
    entries: Snapshot = []
    for raw in markdown.splitlines():
        text = raw.strip()
        if not text:
            continue

        match = NUMBERED_LINE.match(text)
        if match:
            entries.append(text[match.end():])
            continue

        if text.startswith(BULLET_PREFIX):
            entries.append(text[len(BULLET_PREFIX):])
    return entries


def encode_record(record: ChangelogRecord) -> str:
    """Encode a record as a single JSON line (no trailing newline)."""
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))


def decode_record(line: str) -> ChangelogRecord:
    """Decode one changelog line.

    Accepts the object form {"ts": ..., "entries": [...]} and a bare
    list of strings.

    Raises:
        MalformedRecordError: If the line is not a valid record.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(f"Invalid JSON in changelog record: {e}")

    timestamp = None
    if isinstance(data, dict):
        entries = data.get("entries")
        ts = data.get("ts")
        if ts is not None:
            if not isinstance(ts, str):
                raise MalformedRecordError("Changelog timestamp must be a string")
            try:
                timestamp = parse_timestamp(ts)
            except ValueError:
                raise MalformedRecordError(f"Invalid changelog timestamp: {ts!r}")
    else:
        entries = data

    if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
        raise MalformedRecordError("Changelog record must hold a list of strings")

    return ChangelogRecord(entries=tuple(entries), timestamp=timestamp)
