"""
Tests for MessageStore

Tests cover:
- Id assignment (strictly increasing, never reused)
- Cursor listing (ascending, strictly greater than cursor)
- Idempotent delete
- Clear keeping the id counter
"""

import pytest

from weathernow_server.services.message_store import Announcement, MessageStore


class TestAppend:

    @pytest.mark.unit
    def test_first_id_is_one(self, store, make_draft):
        record = store.append(make_draft())
        assert record.id == 1
        assert store.next_id == 2

    @pytest.mark.unit
    def test_ids_strictly_increase(self, store, make_draft):
        ids = [store.append(make_draft(f"msg {i}")).id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    @pytest.mark.unit
    def test_record_copies_draft_fields(self, store, make_draft):
        record = store.append(
            make_draft("Tornado warning", title="NWS", type="emergency", display="popup", duration=30, tts=True)
        )
        assert isinstance(record, Announcement)
        assert record.text == "Tornado warning"
        assert record.title == "NWS"
        assert record.type == "emergency"
        assert record.display == "popup"
        assert record.duration == 30
        assert record.tts is True
        assert record.created > 0

    @pytest.mark.unit
    def test_to_dict_has_wire_fields(self, store, make_draft):
        data = store.append(make_draft()).to_dict()
        assert set(data) == {"id", "text", "title", "type", "display", "duration", "tts", "created"}


class TestListSince:

    @pytest.mark.unit
    def test_empty_store(self, store):
        assert store.list_since(0) == []

    @pytest.mark.unit
    def test_returns_only_newer_records(self, store, make_draft):
        for i in range(4):
            store.append(make_draft(f"msg {i}"))
        assert [m.id for m in store.list_since(2)] == [3, 4]

    @pytest.mark.unit
    def test_cursor_at_latest_returns_nothing(self, store, make_draft):
        store.append(make_draft())
        assert store.list_since(1) == []

    @pytest.mark.unit
    def test_ascending_after_deletes(self, store, make_draft):
        for i in range(5):
            store.append(make_draft(f"msg {i}"))
        store.delete(2)
        store.delete(4)
        assert [m.id for m in store.list_since(0)] == [1, 3, 5]


class TestDelete:

    @pytest.mark.unit
    def test_delete_removes_record(self, store, make_draft):
        record = store.append(make_draft())
        kept = store.append(make_draft(text="Clear skies tonight"))
        store.delete(record.id)
        assert [m.id for m in store.list_since(0)] == [kept.id]
        assert len(store) == 1
        store.delete(kept.id)
        assert len(store) == 0

    @pytest.mark.unit
    def test_delete_twice_is_harmless(self, store, make_draft):
        record = store.append(make_draft())
        store.delete(record.id)
        store.delete(record.id)
        assert len(store) == 0

    @pytest.mark.unit
    def test_delete_unknown_id(self, store, make_draft):
        store.append(make_draft())
        store.delete(999)
        assert len(store) == 1

    @pytest.mark.unit
    def test_deleted_id_is_not_reused(self, store, make_draft):
        first = store.append(make_draft("one"))
        store.delete(first.id)
        second = store.append(make_draft("two"))
        assert second.id == 2


class TestClear:

    @pytest.mark.unit
    def test_clear_empties_store(self, store, make_draft):
        for i in range(3):
            store.append(make_draft(f"msg {i}"))
        store.clear()
        assert store.list_since(0) == []

    @pytest.mark.unit
    def test_clear_keeps_counter(self, store, make_draft):
        for i in range(3):
            store.append(make_draft(f"msg {i}"))
        store.clear()
        assert store.append(make_draft("after clear")).id == 4


@pytest.mark.unit
def test_stores_are_independent(make_draft):
    a, b = MessageStore(), MessageStore()
    a.append(make_draft())
    assert len(b) == 0
    assert b.append(make_draft()).id == 1
