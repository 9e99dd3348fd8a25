"""MCP tool definitions wrapping the journal engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .engine import Effect, JournalEngine, PersistResult
from .errors import EmptyEntryError, JournalError, JournalStorageError
from .models import parse_day, today
from .reminders import NotificationStateFilter, ReminderTracker
from .reorder import reorder

DATE_PROPERTY = {
    "type": "string",
    "description": "Journal day as YYYY-MM-DD (default: today)",
}


def make_tools(engine: JournalEngine) -> dict[str, dict]:
    """Create MCP tool definitions for the journal engine.

    Returns:
        Dict mapping tool names to their definitions.
    """

    tools = {}

    # ========== journal_entries ==========
    tools["journal_entries"] = {
        "name": "journal_entries",
        "description": "Get the latest gratitude entries for a day. The changelog is authoritative; the Markdown file is only used for days that were never saved here.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "date": DATE_PROPERTY,
            },
        },
    }

    # ========== journal_history ==========
    tools["journal_history"] = {
        "name": "journal_history",
        "description": f"Get every retained snapshot for a day, oldest first (at most {engine.config.history_limit}).",
        "inputSchema": {
            "type": "object",
            "properties": {
                "date": DATE_PROPERTY,
                "include_timestamps": {
                    "type": "boolean",
                    "description": "Include the diagnostic timestamp of each record",
                    "default": False,
                },
            },
        },
    }

    # ========== journal_save ==========
    tools["journal_save"] = {
        "name": "journal_save",
        "description": "Save the full ordered list of entries for a day. Identical consecutive saves are stored once.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "date": DATE_PROPERTY,
                "entries": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Entries in display order; none may be blank",
                },
            },
            "required": ["entries"],
        },
    }

    # ========== journal_reorder ==========
    tools["journal_reorder"] = {
        "name": "journal_reorder",
        "description": "Move one entry onto another's position (drag and drop) and save the result.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "date": DATE_PROPERTY,
                "dragged": {
                    "type": "integer",
                    "description": "1-based number of the entry being moved",
                },
                "target": {
                    "type": "integer",
                    "description": "1-based number of the entry it is dropped on",
                },
            },
            "required": ["dragged", "target"],
        },
    }

    # ========== reminder_status ==========
    tools["reminder_status"] = {
        "name": "reminder_status",
        "description": "Show the current reminder and notification preferences.",
        "inputSchema": {
            "type": "object",
            "properties": {},
        },
    }

    # ========== reminder_event ==========
    tools["reminder_event"] = {
        "name": "reminder_event",
        "description": "Feed a system or user event into the reminder tracker.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "event": {
                    "type": "string",
                    "enum": ["sleep", "login", "savor_acknowledged", "clear"],
                    "description": "Event that happened",
                },
                "notifications_enabled": {
                    "type": "boolean",
                    "description": "Optionally change whether notifications are sent",
                },
                "notification_filter": {
                    "type": "string",
                    "enum": [f.value for f in NotificationStateFilter],
                    "description": "Optionally change which reminders notify",
                },
            },
        },
    }

    return tools


def _day(arguments: dict[str, Any]):
    value = arguments.get("date")
    if not value:
        return today()
    return parse_day(value)


def _apply_effects(result: PersistResult, reminders: Optional[ReminderTracker]) -> None:
    if reminders is not None and Effect.GRATITUDE_CAPTURED in result.effects:
        reminders.gratitude_captured()


def _reminder_dict(reminders: ReminderTracker) -> dict[str, Any]:
    prefs = reminders.preferences
    return {
        "current": reminders.current.value,
        "notifications_enabled": prefs.notifications_enabled,
        "notification_filter": prefs.notification_filter.value,
        "last_login": prefs.last_login.isoformat() if prefs.last_login else None,
    }


async def execute_tool(
    engine: JournalEngine,
    name: str,
    arguments: dict[str, Any],
    reminders: Optional[ReminderTracker] = None,
) -> dict[str, Any]:
    """Execute a journal tool and return the result.

    Args:
        engine: JournalEngine instance
        name: Tool name
        arguments: Tool arguments
        reminders: Reminder tracker notified of saves and reminder events

    Returns:
        Result dict with success status and data or error
    """
    try:
        if name == "journal_entries":
            day = _day(arguments)
            entries = engine.load_entries(day)
            if engine.store.exists(day):
                source = "changelog"
            elif engine.renderer.path_for(day).exists():
                source = "document"
            else:
                source = "none"
            return {
                "success": True,
                "date": day.isoformat(),
                "display_date": engine.display_date(day),
                "entries": entries,
                "source": source,
            }

        elif name == "journal_history":
            day = _day(arguments)
            if arguments.get("include_timestamps", False):
                history = [record.to_dict() for record in engine.store.records(day)]
            else:
                history = engine.load_history(day)
            return {
                "success": True,
                "date": day.isoformat(),
                "count": len(history),
                "history": history,
            }

        elif name == "journal_save":
            day = _day(arguments)
            entries = arguments["entries"]
            if not entries or any(not str(e).strip() for e in entries):
                raise EmptyEntryError("Fill in all visible entries or remove empty ones.")
            result = engine.save_entries(day, [str(e) for e in entries])
            _apply_effects(result, reminders)
            return {
                "success": True,
                "date": day.isoformat(),
                "appended": result.appended,
                "path": str(result.document_path),
                "effects": [effect.value for effect in result.effects],
                "message": f"Saved {len(entries)} entries for {engine.display_date(day)}",
            }

        elif name == "journal_reorder":
            day = _day(arguments)
            entries = engine.load_entries(day)
            positions = list(range(1, len(entries) + 1))
            order = reorder(positions, arguments["dragged"], arguments["target"])
            if order is None:
                return {
                    "success": False,
                    "error": f"Cannot move entry {arguments['dragged']} onto {arguments['target']}",
                    "error_type": "invalid_reorder",
                }
            reordered = [entries[position - 1] for position in order]
            result = engine.persist_snapshot(day, reordered)
            _apply_effects(result, reminders)
            return {
                "success": True,
                "date": day.isoformat(),
                "entries": reordered,
                "appended": result.appended,
            }

        elif name in ("reminder_status", "reminder_event"):
            if reminders is None:
                return {
                    "success": False,
                    "error": "Reminders are not enabled for this server",
                    "error_type": "reminders_unavailable",
                }

            notifications = []
            if name == "reminder_event":
                if "notifications_enabled" in arguments:
                    reminders.set_notifications_enabled(bool(arguments["notifications_enabled"]))
                if "notification_filter" in arguments:
                    reminders.set_notification_filter(NotificationStateFilter(arguments["notification_filter"]))

                event = arguments.get("event")
                if event == "sleep":
                    notifications = reminders.handle_sleep()
                elif event == "login":
                    notifications = reminders.handle_login(datetime.now())
                elif event == "savor_acknowledged":
                    notifications = reminders.mark_savor_acknowledged()
                elif event == "clear":
                    notifications = reminders.clear()
                elif event is not None:
                    return {
                        "success": False,
                        "error": f"Unknown reminder event: {event}",
                    }

            return {
                "success": True,
                **_reminder_dict(reminders),
                "notifications": [
                    {"title": n.title, "body": n.body, "reminder": n.reminder.value}
                    for n in notifications
                ],
            }

        else:
            return {
                "success": False,
                "error": f"Unknown tool: {name}",
            }

    except EmptyEntryError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "empty_entry",
        }

    except JournalStorageError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "storage_error",
            "path": str(e.path) if e.path else None,
            "suggestion": "Check that the journal directory exists and is writable",
        }

    except JournalError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "journal_error",
        }

    except (KeyError, ValueError) as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "invalid_arguments",
        }

    except Exception as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "unexpected_error",
        }
