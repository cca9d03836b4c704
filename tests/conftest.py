"""Shared test fixtures and configuration."""

from __future__ import annotations

import datetime as dt
import itertools

import pytest

from campus_events.debug import set_debug
from campus_events.engine import EventEngine
from campus_events.event_store import EventStore
from campus_events.membership import StaticMembershipOracle
from campus_events.models import EventDraft, EventId
from campus_events.timezone_utils import get_timezone_name, set_timezone

# Wednesday
NOW = dt.datetime(2024, 3, 6, 12, 0)


@pytest.fixture(autouse=True)
def campus_timezone():
    """Run every test in a known timezone with debug output off."""
    previous = get_timezone_name()
    set_timezone("America/New_York")
    set_debug(False)
    yield
    set_timezone(previous)
    set_debug(False)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def id_factory():
    """Deterministic ids: event-1, event-2, ..."""
    counter = itertools.count(1)
    return lambda: EventId(f"event-{next(counter)}")


@pytest.fixture
def oracle() -> StaticMembershipOracle:
    return StaticMembershipOracle({
        "club-chess": ["u1"],
        "club-drama": ["u2", "u3"],
    })


@pytest.fixture
def store(clock, id_factory) -> EventStore:
    return EventStore(clock=clock, id_factory=id_factory)


@pytest.fixture
def engine(clock, id_factory, oracle) -> EventEngine:
    return EventEngine(membership_oracle=oracle, clock=clock, id_factory=id_factory)


def make_draft(title: str = "Study Session", start: dt.datetime = dt.datetime(2024, 3, 6, 9, 0),
               hours: float = 1, **kwargs) -> EventDraft:
    """An EventDraft starting at `start` and lasting `hours`."""
    return EventDraft(title=title, start_time=start, end_time=start + dt.timedelta(hours=hours), **kwargs)


@pytest.fixture
def draft():
    return make_draft
