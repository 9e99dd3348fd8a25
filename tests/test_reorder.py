"""Tests for drag-and-drop reordering."""

import uuid

from gratitude_journal.reorder import (
    DRAG_TOKEN_PREFIX,
    decode_drag_token,
    encode_drag_token,
    reorder,
)


class TestReorder:
    """Tests for reorder."""

    def test_dragging_up_lands_before_target(self):
        assert reorder(["a", "b", "c"], "c", "a") == ["c", "a", "b"]

    def test_dragging_down_lands_after_target(self):
        assert reorder(["a", "b", "c"], "a", "c") == ["b", "c", "a"]

    def test_adjacent_swap(self):
        assert reorder(["a", "b", "c"], "a", "b") == ["b", "a", "c"]
        assert reorder(["a", "b", "c"], "c", "b") == ["a", "c", "b"]

    def test_same_id_is_invalid(self):
        assert reorder(["a", "b"], "a", "a") is None

    def test_missing_ids_are_invalid(self):
        assert reorder(["a", "b"], "z", "b") is None
        assert reorder(["a", "b"], "a", "z") is None

    def test_input_is_not_modified(self):
        ids = ["a", "b", "c"]
        reorder(ids, "a", "c")
        assert ids == ["a", "b", "c"]

    def test_works_with_uuids(self):
        a, b, c = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        assert reorder([a, b, c], c, a) == [c, a, b]


class TestDragToken:
    """Tests for drag payload encoding."""

    def test_round_trip(self):
        entry_id = uuid.uuid4()
        token = encode_drag_token(entry_id)

        assert token.startswith(DRAG_TOKEN_PREFIX)
        assert decode_drag_token(token) == entry_id

    def test_foreign_payload(self):
        assert decode_drag_token("https://example.com") is None

    def test_bad_uuid(self):
        assert decode_drag_token(DRAG_TOKEN_PREFIX + "not-a-uuid") is None
