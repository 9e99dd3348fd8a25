"""Keyboard shortcut interpretation for the entry editor."""

from __future__ import annotations

from enum import Enum, IntFlag


class ShortcutAction(Enum):
    NONE = "none"
    ADD_ENTRY = "add_entry"
    SAVE_AND_CLOSE = "save_and_close"


class Modifier(IntFlag):
    """Modifier bits as reported by macOS key events."""
    CAPS_LOCK = 1 << 16
    SHIFT = 1 << 17
    CONTROL = 1 << 18
    OPTION = 1 << 19
    COMMAND = 1 << 20
    NUMERIC_PAD = 1 << 21
    HELP = 1 << 22
    FUNCTION = 1 << 23


# Everything outside this mask is device-specific noise.
DEVICE_INDEPENDENT_MASK = 0xFFFF0000

KEY_RETURN = 36
KEY_TAB = 48


def interpret(key_code: int, modifiers: int) -> ShortcutAction:
    """Map a key event to an editor action.

    Option+Tab (without Command) adds an entry; Command+Return saves and
    closes. Anything else is ShortcutAction.NONE.
    """
    clean = int(modifiers) & DEVICE_INDEPENDENT_MASK
    option = bool(clean & Modifier.OPTION)
    command = bool(clean & Modifier.COMMAND)

    if key_code == KEY_TAB and option and not command:
        return ShortcutAction.ADD_ENTRY

    if key_code == KEY_RETURN and command:
        return ShortcutAction.SAVE_AND_CLOSE

    return ShortcutAction.NONE
