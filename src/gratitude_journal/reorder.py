"""Drag-and-drop reordering of journal entries."""

from __future__ import annotations

import uuid
from typing import Hashable, Optional, Sequence, TypeVar

T = TypeVar("T", bound=Hashable)

DRAG_TOKEN_PREFIX = "wellness-entry-id::"


def reorder(ids: Sequence[T], dragged_id: T, target_id: T) -> Optional[list[T]]:
    """Move dragged_id into the slot target_id occupies.

    Dragging down lands after the target, dragging up lands before it.
    Returns None when the ids are equal or either one is missing.
    """
    if dragged_id == target_id:
        return None
    if dragged_id not in ids or target_id not in ids:
        return None

    order = list(ids)
    target_index = order.index(target_id)
    order.remove(dragged_id)
    order.insert(target_index, dragged_id)
    return order


def encode_drag_token(entry_id: uuid.UUID) -> str:
    return f"{DRAG_TOKEN_PREFIX}{entry_id}"


def decode_drag_token(value: str) -> Optional[uuid.UUID]:
    """Recover an entry id from a drag payload, or None if it is not one of ours."""
    if not value.startswith(DRAG_TOKEN_PREFIX):
        return None
    try:
        return uuid.UUID(value[len(DRAG_TOKEN_PREFIX):])
    except ValueError:
        return None
