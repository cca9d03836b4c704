"""Tests for recurrence expansion."""

from __future__ import annotations

import datetime as dt

import pytest

from campus_events.errors import InvalidRecurrence
from campus_events.models import Event, EventId, RecurrenceRule, RecurrenceType
from campus_events.recurrence import RecurrenceExpander, parse_recurrence_type


def _base(start: dt.datetime, minutes: int = 90, **kwargs) -> Event:
    return Event(
        id=EventId("event-base"),
        title="CS 101",
        start_time=start,
        end_time=start + dt.timedelta(minutes=minutes),
        created_at=dt.datetime(2024, 2, 1),
        **kwargs,
    )


class TestExpand:
    """Tests for RecurrenceExpander.expand."""

    def test_weekly_until_date_includes_last_day(self) -> None:
        """Weekly from Mar 1 until Mar 22 gives Mar 1, 8, 15, 22, each 90 minutes."""
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("weekly", dt.date(2024, 3, 22)))

        assert [e.start_time.date() for e in instances] == [
            dt.date(2024, 3, 1), dt.date(2024, 3, 8), dt.date(2024, 3, 15), dt.date(2024, 3, 22),
        ]
        assert all(e.duration == dt.timedelta(minutes=90) for e in instances)
        assert all(e.start_time.time() == dt.time(9, 0) for e in instances)

    def test_until_datetime_is_inclusive(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.datetime(2024, 3, 3, 9, 0)))
        assert len(instances) == 3

    def test_until_datetime_before_occurrence_excludes_it(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.datetime(2024, 3, 3, 8, 59)))
        assert len(instances) == 2

    def test_until_before_start_yields_base_only(self) -> None:
        base = _base(dt.datetime(2024, 3, 10, 9, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("weekly", dt.datetime(2024, 3, 1)))

        assert len(instances) == 1
        assert instances[0].start_time == base.start_time
        assert instances[0].id == EventId("event-base", 0)

    def test_monthly_clamps_without_drift(self) -> None:
        """Jan 31 monthly gives Feb 29 then Mar 31, not Mar 29."""
        base = _base(dt.datetime(2024, 1, 31, 18, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule(RecurrenceType.MONTHLY, dt.date(2024, 5, 31)))

        assert [e.start_time.date() for e in instances] == [
            dt.date(2024, 1, 31), dt.date(2024, 2, 29), dt.date(2024, 3, 31),
            dt.date(2024, 4, 30), dt.date(2024, 5, 31),
        ]

    def test_instances_point_to_series(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.date(2024, 3, 3)))

        assert [e.id for e in instances] == [EventId("event-base", k) for k in range(3)]
        assert {e.parent_event_id for e in instances} == {EventId("event-base")}
        assert all(e.recurrence.type == RecurrenceType.DAILY for e in instances)

    def test_instances_start_without_rsvps(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0), attendees=frozenset({"u1"}), interested=frozenset({"u2"}))
        instances = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.date(2024, 3, 2)))
        assert all(not e.attendees and not e.interested for e in instances)

    def test_unknown_period_raises(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        with pytest.raises(InvalidRecurrence):
            RecurrenceExpander().expand(base, RecurrenceRule("yearly", dt.date(2025, 3, 1)))


class TestRecurrenceRule:
    """Tests for rule parsing."""

    def test_parse_type_case_insensitive(self) -> None:
        assert parse_recurrence_type("Weekly") == RecurrenceType.WEEKLY

    def test_from_dict_date_string_covers_day(self) -> None:
        rule = RecurrenceRule.from_dict({"type": "weekly", "until": "2024-03-22"})
        assert rule.until == dt.datetime(2024, 3, 22, 23, 59, 59, 999999)

    def test_from_dict_datetime_string(self) -> None:
        rule = RecurrenceRule.from_dict({"type": "daily", "until": "2024-03-22T10:00"})
        assert rule.until == dt.datetime(2024, 3, 22, 10, 0)

    def test_from_dict_missing_until(self) -> None:
        with pytest.raises(InvalidRecurrence):
            RecurrenceRule.from_dict({"type": "weekly"})

    def test_from_dict_bad_until(self) -> None:
        with pytest.raises(InvalidRecurrence):
            RecurrenceRule.from_dict({"type": "weekly", "until": "next friday"})

    def test_to_dict(self) -> None:
        rule = RecurrenceRule(RecurrenceType.WEEKLY, dt.datetime(2024, 3, 22, 10, 0))
        assert rule.to_dict() == {"type": "weekly", "until": "2024-03-22T10:00:00"}

    def test_instance_properties(self) -> None:
        base = _base(dt.datetime(2024, 3, 1, 9, 0))
        second = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.date(2024, 3, 2)))[1]

        assert second.is_recurring
        assert second.occurrence_index == 1
        assert str(second.id) == "event-base#1"
        assert EventId.parse(str(second.id)) == second.id
        assert not base.is_recurring


class TestCalendarEnd:
    """Tests for series that run into the last representable date."""

    def test_monthly_stops_at_year_9999(self, store, draft) -> None:
        event_id = store.create(draft(
            start=dt.datetime(9999, 10, 31, 9, 0),
            recurrence=RecurrenceRule("monthly", dt.date(9999, 12, 31)),
        ))
        assert [e.start_time.date() for e in store.siblings(event_id)] == [
            dt.date(9999, 10, 31), dt.date(9999, 11, 30), dt.date(9999, 12, 31),
        ]

    def test_daily_stops_at_year_9999(self, store, draft) -> None:
        event_id = store.create(draft(
            start=dt.datetime(9999, 12, 30, 9, 0), hours=1.5,
            recurrence=RecurrenceRule("daily", dt.date(9999, 12, 31)),
        ))
        assert [e.start_time for e in store.siblings(event_id)] == [
            dt.datetime(9999, 12, 30, 9, 0), dt.datetime(9999, 12, 31, 9, 0),
        ]

    def test_instance_ending_past_year_9999_is_dropped(self) -> None:
        base = _base(dt.datetime(9999, 12, 30, 23, 0), minutes=120)
        instances = RecurrenceExpander().expand(base, RecurrenceRule("daily", dt.date(9999, 12, 31)))
        assert [e.id.occurrence for e in instances] == [0]
