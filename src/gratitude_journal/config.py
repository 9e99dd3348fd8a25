"""Configuration loading for the gratitude journal.

Supports two file formats, searched in the journal directory:
1. TOML (gratitude_journal.toml, .gratitude.toml)
2. JSON (gratitude_journal.json, .gratitude.json)
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .codec import DEFAULT_HEADING

ENV_JOURNAL_DIR = "GRATITUDE_JOURNAL_DIR"

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_UNDO_LIMIT = 100
DEFAULT_QUIET_PERIOD = 0.45  # seconds of inactivity before an autosave

NOTIFICATION_FILTERS = ("gratitude", "savor", "both")


def default_journal_dir() -> Path:
    """Get the default journal directory.

    Uses ~/OneDrive/GratitudeJournal unless GRATITUDE_JOURNAL_DIR is set.
    """
    custom_dir = os.environ.get(ENV_JOURNAL_DIR)
    if custom_dir:
        return Path(custom_dir).expanduser()
    return Path.home() / "OneDrive" / "GratitudeJournal"


@dataclass
class JournalConfig:
    """Configuration for a journal directory."""

    journal_dir: Path = field(default_factory=default_journal_dir)

    # Hidden directory (relative to journal_dir) holding changelogs and preferences
    log_dir: str = ".log"
    heading: str = DEFAULT_HEADING

    history_limit: int = DEFAULT_HISTORY_LIMIT
    undo_limit: int = DEFAULT_UNDO_LIMIT
    quiet_period: float = DEFAULT_QUIET_PERIOD

    # Reminder defaults, used until preferences have been saved
    notifications_enabled: bool = False
    notification_filter: str = "both"

    lock_timeout: float = 10.0

    def __post_init__(self) -> None:
        self.journal_dir = Path(self.journal_dir).expanduser()
        self.validate()

    def validate(self) -> None:
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {self.history_limit}")
        if self.undo_limit < 1:
            raise ValueError(f"undo_limit must be at least 1, got {self.undo_limit}")
        if self.quiet_period < 0:
            raise ValueError(f"quiet_period must not be negative, got {self.quiet_period}")
        if self.notification_filter not in NOTIFICATION_FILTERS:
            raise ValueError(
                f"notification_filter must be one of {NOTIFICATION_FILTERS}, "
                f"got {self.notification_filter!r}"
            )

    def get_journal_path(self) -> Path:
        return self.journal_dir

    def get_log_path(self) -> Path:
        return self.journal_dir / self.log_dir

    def get_preferences_path(self) -> Path:
        return self.get_log_path() / "preferences.json"


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dict_to_config(data: dict[str, Any], journal_dir: Path) -> JournalConfig:
    """Convert dictionary to JournalConfig.

    Recognized tables: [journal], [autosave], [history], [notifications].
    """
    kwargs: dict[str, Any] = {"journal_dir": journal_dir}

    if "journal" in data:
        journal = data["journal"]
        if "directory" in journal:
            kwargs["journal_dir"] = Path(journal["directory"])
        if "log_dir" in journal:
            kwargs["log_dir"] = journal["log_dir"]
        if "heading" in journal:
            kwargs["heading"] = journal["heading"]

    if "autosave" in data:
        autosave = data["autosave"]
        if "quiet_period_ms" in autosave:
            kwargs["quiet_period"] = float(autosave["quiet_period_ms"]) / 1000.0
        if "lock_timeout" in autosave:
            kwargs["lock_timeout"] = float(autosave["lock_timeout"])

    if "history" in data:
        history = data["history"]
        if "changelog_limit" in history:
            kwargs["history_limit"] = int(history["changelog_limit"])
        if "undo_limit" in history:
            kwargs["undo_limit"] = int(history["undo_limit"])

    if "notifications" in data:
        notifications = data["notifications"]
        if "enabled" in notifications:
            kwargs["notifications_enabled"] = bool(notifications["enabled"])
        if "filter" in notifications:
            kwargs["notification_filter"] = notifications["filter"]

    return JournalConfig(**kwargs)


def find_config_file(journal_dir: Path) -> Optional[Path]:
    """Find configuration file in the journal directory.

    Search order:
    1. gratitude_journal.toml
    2. gratitude_journal.json
    3. .gratitude.toml
    4. .gratitude.json
    """
    candidates = [
        "gratitude_journal.toml",
        "gratitude_journal.json",
        ".gratitude.toml",
        ".gratitude.json",
    ]

    for name in candidates:
        path = journal_dir / name
        if path.exists():
            return path

    return None


def load_config(journal_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> JournalConfig:
    """Load journal configuration.

    Args:
        journal_dir: Journal directory (default: see default_journal_dir)
        config_path: Optional explicit path to config file

    Returns:
        JournalConfig instance

    Raises:
        ValueError: If the file type is unsupported or a value is invalid
    """
    if journal_dir is None:
        journal_dir = default_journal_dir()
    journal_dir = Path(journal_dir).expanduser()

    if config_path is None:
        config_path = find_config_file(journal_dir)

    if config_path is None:
        return JournalConfig(journal_dir=journal_dir)

    suffix = config_path.suffix.lower()

    if suffix == ".toml":
        config_dict = load_toml_config(config_path)
        return dict_to_config(config_dict, journal_dir)

    elif suffix == ".json":
        config_dict = load_json_config(config_path)
        return dict_to_config(config_dict, journal_dir)

    else:
        raise ValueError(f"Unsupported config file type: {suffix}")
