"""
Mock campus events for demos and manual testing.

Builds a realistic campus week around a given day: overlapping lectures,
a private team practice, club events, weekly classes and forum posts. All
data goes through the public engine operations, so the seeded engine obeys
the same invariants as one filled by real users.
"""

from datetime import date, datetime, time as dt_time, timedelta
from typing import Optional

from .debug import debug_print
from .engine import EventEngine
from .models import EventDraft, EventId, RecurrenceRule, RecurrenceType, RSVPStatus


# Club memberships matching the club events below
MOCK_MEMBERSHIPS: dict[str, list[str]] = {
    "club-basketball": ["user-123", "user-202", "user-303"],
    "club-cs": ["user-123", "user-111", "user-222"],
    "club-dance": ["user-123"],
    "club-soccer": ["user-hhh"],
    "club-art": ["user-mmm"],
}

# (title, category, location, day offset, start hour, start minute, hours,
#  public, club, forums, going, interested)
_ONE_OFF_EVENTS = [
    ("CS 101 Lecture", "academic", "Engineering Building, Room 201", 0, 9, 0, 1.5,
     True, None, ["forum-academic"], ["user-123", "user-456", "user-789"], ["user-101"]),
    ("Basketball Team Practice", "sports", "Gymnasium, Court 2", 0, 10, 0, 2,
     False, "club-basketball", [], ["user-123", "user-202", "user-303"], []),
    ("Study Group: Calculus", "academic", "Library, Study Room 3", 0, 14, 0, 2,
     True, None, ["forum-academic", "forum-quad"], ["user-123", "user-404", "user-505"], ["user-606", "user-707"]),
    ("Coffee Chat with Friends", "social", "Student Center Cafe", 0, 15, 30, 1.5,
     False, None, [], ["user-123", "user-808"], ["user-909"]),
    ("CS Club Hackathon", "club", "Engineering Building, Lab 301", 1, 9, 0, 24,
     True, "club-cs", ["forum-quad", "forum-events", "forum-academic"],
     ["user-123", "user-111", "user-222"], ["user-555", "user-666"]),
    ("Math 205 Midterm", "academic", "Science Hall, Room 105", 1, 13, 0, 2,
     True, None, ["forum-academic"], ["user-123", "user-888", "user-999"], []),
    ("Friday Night Party", "party", "Off-campus: 123 Main St", 1, 20, 0, 4,
     True, None, ["forum-quad", "forum-events"], ["user-123", "user-aaa"], ["user-ddd", "user-eee"]),
    ("Soccer Game vs Rival University", "sports", "Stadium", 2, 14, 0, 2,
     True, "club-soccer", ["forum-quad", "forum-events"], ["user-123", "user-hhh"], ["user-kkk"]),
    ("Art Exhibition Opening", "social", "Arts Building, Gallery 1", 2, 14, 30, 3,
     True, "club-art", ["forum-quad", "forum-events"], ["user-123", "user-mmm"], ["user-nnn"]),
    ("Chemistry Lab Session", "academic", "Science Hall, Lab 203", 2, 15, 0, 2,
     True, None, ["forum-academic"], ["user-123", "user-ppp"], []),
    ("Dance Club Practice", "club", "Arts Building, Dance Studio", 3, 18, 0, 2,
     False, "club-dance", [], ["user-123"], []),
    ("Career Fair", "academic", "Convention Center", 4, 10, 0, 6,
     True, None, ["forum-quad", "forum-events", "forum-academic"], ["user-123", "user-qqq"], ["user-sss"]),
    ("Spring Break Planning Meeting", "social", "Student Center, Room 204", 7, 19, 0, 1.5,
     False, None, [], ["user-123", "user-vvv"], ["user-www"]),
]

# (title, location, weekday offset from Monday, start hour, hours)
_WEEKLY_CLASSES = [
    ("CS 101 - Introduction to Computer Science", "Engineering Building, Room 201", 0, 9, 1.5),
    ("MATH 205 - Calculus II", "Science Hall, Room 105", 0, 11, 1.5),
    ("PHYS 201 - Physics for Engineers", "Science Hall, Room 110", 2, 14, 1.5),
]

CLASS_WEEKS = 8


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, dt_time(hour, minute))


def _next_monday(today: date) -> date:
    days_ahead = (7 - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def seed_mock_events(engine: EventEngine, today: Optional[date] = None) -> list[EventId]:
    """
    Fill an engine with the mock campus week around `today`.

    Returns:
        The ids returned by create_event(), one per authored event (the
        first instance for weekly classes).
    """
    today = today or date.today()
    created = []

    for (title, category, location, offset, hour, minute, hours,
         public, club, forums, going, interested) in _ONE_OFF_EVENTS:
        start = _at(today + timedelta(days=offset), hour, minute)
        event_id = engine.create_event(EventDraft(
            title=title,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            location=location,
            category=category,
            visibility="public" if public else "private",
            owner_club_id=club,
            posted_to_forums=forums,
        ))
        for user_id in going:
            engine.set_status(event_id, user_id, RSVPStatus.GOING)
        for user_id in interested:
            engine.set_status(event_id, user_id, RSVPStatus.INTERESTED)
        created.append(event_id)

    monday = _next_monday(today)
    for title, location, weekday, hour, hours in _WEEKLY_CLASSES:
        start = _at(monday + timedelta(days=weekday), hour)
        event_id = engine.create_event(EventDraft(
            title=title,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            location=location,
            category="academic",
            posted_to_forums=["forum-academic"],
            recurrence=RecurrenceRule(
                type=RecurrenceType.WEEKLY,
                until=start + timedelta(weeks=CLASS_WEEKS - 1),
            ),
        ))
        for instance in engine.store.siblings(event_id):
            engine.set_status(instance.id, "user-123", RSVPStatus.GOING)
        created.append(event_id)

    debug_print("MOCK", f"Seeded {len(created)} authored events, {len(engine.store)} instances")
    return created
