"""Tests for the notification bus: persistence, unread tracking and fan-out."""

import json

import pytest
from pydantic import ValidationError as ModelValidationError

from unihub.errors import ValidationError
from unihub.models.notification import NotificationType
from unihub.services.notifications import NotificationBus


def stored_ids(store):
    return [record["id"] for record in store.get("notifications")]


class TestAdd:

    def test_add_prepends_and_persists(self, bus, store):
        first = bus.add("First", "one")
        second = bus.add("Second", "two", NotificationType.EXAM)

        assert [n.id for n in bus.notifications] == [second.id, first.id]
        assert stored_ids(store) == [second.id, first.id]
        assert second.type is NotificationType.EXAM
        assert not second.read
        assert second.created_at.tzinfo is not None

    def test_ids_are_unique(self, bus):
        ids = {bus.add("T", "M").id for _ in range(50)}
        assert len(ids) == 50

    def test_action_url_is_stored_in_camel_case(self, bus, store):
        bus.add("New Notice Posted", "Library hours", "notice", action_url="/notices?id=7")
        record = store.get("notifications")[0]
        assert record["actionUrl"] == "/notices?id=7"
        assert record["type"] == "notice"
        assert "createdAt" in record

    @pytest.mark.parametrize("title,message", [("", "M"), ("T", ""), ("   ", "M"), ("T", "\n")])
    def test_empty_title_or_message_rejected(self, bus, store, title, message):
        with pytest.raises(ValidationError):
            bus.add(title, message)
        assert bus.notifications == []
        assert store.get("notifications") == []

    def test_unknown_type_rejected(self, bus):
        with pytest.raises(ValidationError):
            bus.add("T", "M", "sms")


class TestReadState:

    def test_mark_as_read_decrements_unread_by_one(self, bus):
        bus.add("Other", "x")
        notification = bus.add("T", "M")
        before = bus.unread_count

        bus.mark_as_read(notification.id)

        assert bus.unread_count == before - 1
        assert len(bus.notifications) == 2
        assert bus.get(notification.id).read

    def test_mark_as_read_replaces_entry(self, bus):
        notification = bus.add("T", "M")
        bus.mark_as_read(notification.id)
        assert not notification.read
        assert bus.get(notification.id).read

    def test_returned_notifications_are_frozen(self, bus, store):
        notification = bus.add("T", "M")
        with pytest.raises(ModelValidationError):
            bus.get(notification.id).read = True
        assert bus.unread_count == 1
        assert NotificationBus(store).unread_count == 1

    def test_mark_as_read_unknown_id_is_noop(self, bus):
        bus.add("T", "M")
        bus.mark_as_read("missing")
        assert bus.unread_count == 1

    def test_mark_all_as_read(self, bus):
        for i in range(3):
            bus.add(f"T{i}", "M")
        bus.mark_all_as_read()
        assert bus.unread_count == 0
        assert all(record["read"] for record in bus.store.get("notifications"))

    def test_unread_count_tracks_every_operation(self, bus):
        def check():
            assert bus.unread_count == sum(1 for n in bus.notifications if not n.read)

        a = bus.add("A", "a")
        check()
        b = bus.add("B", "b")
        check()
        bus.mark_as_read(a.id)
        check()
        c = bus.add("C", "c")
        check()
        bus.remove(b.id)
        check()
        bus.mark_as_read(c.id)
        check()
        bus.remove("missing")
        check()
        assert bus.unread_count == 0


class TestRemoval:

    def test_remove(self, bus, store):
        keep = bus.add("Keep", "k")
        drop = bus.add("Drop", "d")
        bus.remove(drop.id)
        assert [n.id for n in bus.notifications] == [keep.id]
        assert stored_ids(store) == [keep.id]

    def test_clear_all(self, bus, store):
        bus.add("A", "a")
        bus.add("B", "b")
        bus.clear_all()
        assert bus.notifications == []
        assert bus.unread_count == 0
        assert store.get("notifications") == []

    def test_clear_all_on_empty_bus(self, bus):
        bus.clear_all()
        assert bus.notifications == []
        assert bus.unread_count == 0


class TestPersistence:

    def test_reconstructed_bus_has_identical_list(self, bus, store):
        a = bus.add("A", "a", "exam")
        bus.add("B", "b", "notice", action_url="/notices?id=1")
        bus.mark_as_read(a.id)

        fresh = NotificationBus(store)

        assert [n.to_record() for n in fresh.notifications] == [n.to_record() for n in bus.notifications]
        assert [n.created_at for n in fresh.notifications] == [n.created_at for n in bus.notifications]
        assert fresh.unread_count == 1

    def test_corrupt_collection_loads_empty(self, backend, store):
        backend.set_raw("notifications", "[{broken")
        assert NotificationBus(store).notifications == []

    def test_malformed_and_duplicate_entries_skipped(self, backend, store):
        good = {"id": "1", "title": "T", "message": "M", "type": "system",
                "createdAt": "2024-03-01T00:00:00Z", "read": False}
        backend.set_raw("notifications", json.dumps([
            good,
            {"id": "2", "title": "no message"},
            {**good, "title": "duplicate"},
            {**good, "id": "3", "type": "carrier-pigeon"},
        ]))

        bus = NotificationBus(store)

        assert [n.id for n in bus.notifications] == ["1"]
        assert bus.notifications[0].title == "T"

    def test_reload_picks_up_other_writer(self, bus, store):
        other = NotificationBus(store)
        other.add("From elsewhere", "m")
        assert bus.notifications == []
        bus.reload()
        assert [n.title for n in bus.notifications] == ["From elsewhere"]

    def test_recent(self, bus):
        for i in range(7):
            bus.add(f"T{i}", "M")
        assert [n.title for n in bus.recent()] == ["T6", "T5", "T4", "T3", "T2"]


class TestSubscribers:

    def test_subscribers_receive_post_mutation_state(self, bus):
        calls = []
        bus.subscribe(lambda notifications, unread: calls.append((len(notifications), unread)))

        notification = bus.add("T", "M")
        bus.mark_as_read(notification.id)
        bus.mark_all_as_read()
        bus.remove(notification.id)
        bus.clear_all()

        assert calls == [(1, 1), (1, 0), (1, 0), (0, 0), (0, 0)]

    def test_subscribers_called_in_registration_order(self, bus):
        order = []
        bus.subscribe(lambda *_: order.append("first"))
        bus.subscribe(lambda *_: order.append("second"))
        bus.add("T", "M")
        assert order == ["first", "second"]

    def test_unsubscribe(self, bus):
        calls = []
        unsubscribe = bus.subscribe(lambda *_: calls.append(1))
        bus.add("T", "M")
        unsubscribe()
        unsubscribe()
        bus.add("T", "M")
        assert calls == [1]

    def test_failing_subscriber_does_not_block_others(self, bus):
        received = []

        def broken(notifications, unread):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(lambda notifications, unread: received.append(unread))

        bus.add("T", "M")

        assert received == [1]
        assert bus.unread_count == 1

    def test_failed_validation_does_not_notify(self, bus):
        calls = []
        bus.subscribe(lambda *_: calls.append(1))
        with pytest.raises(ValidationError):
            bus.add("", "M")
        assert calls == []

    def test_subscriber_list_copy_is_independent(self, bus):
        captured = []
        bus.subscribe(lambda notifications, unread: captured.append(notifications))
        bus.add("A", "a")
        captured[0].clear()
        assert len(bus.notifications) == 1

    def test_subscriber_cannot_change_bus_state(self, bus, store):
        def mark_locally(notifications, unread):
            for notification in notifications:
                notification.read = True

        bus.subscribe(mark_locally)
        bus.add("T", "M")

        assert bus.unread_count == 1
        assert not bus.notifications[0].read
        assert NotificationBus(store).unread_count == 1
