"""Tests for RSVP tracking."""

from __future__ import annotations

import datetime as dt

import pytest

from campus_events.errors import InvalidStatus, NotFound
from campus_events.models import EventId, RecurrenceRule, RSVPStatus
from campus_events.rsvp import RSVPManager, parse_status


@pytest.fixture
def rsvp(store) -> RSVPManager:
    return RSVPManager(store)


class TestSetStatus:
    """Tests for RSVPManager.set_status."""

    def test_interested_then_going(self, store, rsvp, draft) -> None:
        """Moving from interested to going leaves the user only in attendees."""
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "interested")
        event = rsvp.set_status(event_id, "u1", "going")

        assert "u1" in event.attendees
        assert "u1" not in event.interested
        assert store.get(event_id) == event
        assert store.get(event_id).attendees == frozenset({"u1"})

    def test_going_then_interested(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", RSVPStatus.GOING)
        rsvp.set_status(event_id, "u1", RSVPStatus.INTERESTED)

        event = store.get(event_id)
        assert event.attendees == frozenset()
        assert event.interested == frozenset({"u1"})

    def test_idempotent(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "going")
        rsvp.set_status(event_id, "u1", "going")
        assert store.get(event_id).attendees == frozenset({"u1"})

    def test_clear_with_none(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "going")
        rsvp.set_status(event_id, "u1", None)

        event = store.get(event_id)
        assert not event.attendees and not event.interested
        assert rsvp.get_status(event_id, "u1") == RSVPStatus.NONE

    def test_clear_status(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "interested")
        rsvp.clear_status(event_id, "u1")
        assert rsvp.get_status(event_id, "u1") == RSVPStatus.NONE

    def test_other_users_untouched(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "going")
        rsvp.set_status(event_id, "u2", "interested")
        rsvp.set_status(event_id, "u1", "none")

        event = store.get(event_id)
        assert event.attendees == frozenset()
        assert event.interested == frozenset({"u2"})

    def test_missing_event(self, rsvp) -> None:
        with pytest.raises(NotFound):
            rsvp.set_status("event-404", "u1", "going")

    def test_invalid_status(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        with pytest.raises(InvalidStatus):
            rsvp.set_status(event_id, "u1", "maybe")
        assert rsvp.get_status(event_id, "u1") == RSVPStatus.NONE

    def test_instances_have_independent_rsvps(self, store, rsvp, draft) -> None:
        event_id = store.create(draft(recurrence=RecurrenceRule("daily", dt.date(2024, 3, 8))))
        rsvp.set_status(event_id, "u1", "going")

        assert rsvp.get_status(EventId("event-1", 0), "u1") == RSVPStatus.GOING
        assert rsvp.get_status(EventId("event-1", 1), "u1") == RSVPStatus.NONE

    def test_parse_status(self) -> None:
        assert parse_status(None) == RSVPStatus.NONE
        assert parse_status("GOING") == RSVPStatus.GOING


class TestUserQueries:
    """Tests for per-user lookups."""

    def test_list_events_for_user_only_going(self, store, rsvp, draft) -> None:
        going = store.create(draft(title="Going"))
        interested = store.create(draft(title="Maybe"))
        rsvp.set_status(going, "u1", "going")
        rsvp.set_status(interested, "u1", "interested")

        assert {e.id for e in rsvp.list_events_for_user("u1")} == {going}
        assert rsvp.list_events_for_user("u2") == set()

    def test_get_user_rsvps(self, store, rsvp, draft) -> None:
        first = store.create(draft(title="A"))
        second = store.create(draft(title="B"))
        rsvp.set_status(first, "u1", "going")
        rsvp.set_status(second, "u1", "interested")

        assert rsvp.get_user_rsvps("u1") == {first: RSVPStatus.GOING, second: RSVPStatus.INTERESTED}

    def test_get_user_rsvps_skips_deleted(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "going")
        store.delete(event_id)
        assert rsvp.get_user_rsvps("u1") == {}


class TestCapacity:
    """Tests for advisory capacity."""

    def test_no_capacity(self, store, rsvp, draft) -> None:
        assert rsvp.spots_remaining(store.create(draft())) is None

    def test_capacity_counts_going_only(self, store, rsvp, draft) -> None:
        event_id = store.create(draft(max_attendees=2))
        rsvp.set_status(event_id, "u1", "going")
        rsvp.set_status(event_id, "u2", "interested")
        assert rsvp.spots_remaining(event_id) == 1

    def test_capacity_is_not_enforced(self, store, rsvp, draft) -> None:
        event_id = store.create(draft(max_attendees=1))
        for user_id in ("u1", "u2", "u3"):
            rsvp.set_status(event_id, user_id, "going")

        assert len(store.get(event_id).attendees) == 3
        assert rsvp.spots_remaining(event_id) == 0


class TestStatusLookupCleanup:
    """Tests for keeping the per-user status lookup free of stale entries."""

    def test_delete_forgets_statuses(self, store, rsvp, draft) -> None:
        for _ in range(3):
            event_id = store.create(draft())
            rsvp.set_status(event_id, "u1", "going")
            store.delete(event_id)
        assert rsvp._user_rsvps == {}

    def test_delete_keeps_other_events(self, store, rsvp, draft) -> None:
        kept = store.create(draft(title="Kept"))
        deleted = store.create(draft(title="Deleted"))
        rsvp.set_status(kept, "u1", "interested")
        rsvp.set_status(deleted, "u1", "going")
        rsvp.set_status(deleted, "u2", "going")

        store.delete(deleted)

        assert rsvp._user_rsvps == {"u1": {kept: RSVPStatus.INTERESTED}}

    def test_clear_drops_empty_user(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", "going")
        rsvp.clear_status(event_id, "u1")
        assert "u1" not in rsvp._user_rsvps

    def test_clear_without_prior_status(self, store, rsvp, draft) -> None:
        event_id = store.create(draft())
        rsvp.set_status(event_id, "u1", None)
        assert rsvp._user_rsvps == {}
