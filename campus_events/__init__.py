"""
Campus Events Module

This module provides the event engine of the campus app:
- Configuration parsing (config.py)
- Date arithmetic for calendar windows (date_math.py)
- Recurrence expansion (recurrence.py)
- Event store with forum post index (event_store.py, forum_posts.py)
- RSVP tracking (rsvp.py)
- Calendar queries and views (calendar_query.py)
- iCalendar export (ics_export.py)
- The EventEngine service wiring it all together (engine.py)
"""

from .config import Config
from .errors import (
    EventEngineError, InvalidEvent, InvalidTimeRange,
    InvalidRecurrence, InvalidStatus, NotFound,
)
from .models import (
    Category, Visibility, RecurrenceType, RSVPStatus,
    EventId, Event, EventDraft, RecurrenceRule, ForumPost, ForumPostView,
)
from .recurrence import RecurrenceExpander
from .event_store import EventStore
from .forum_posts import ForumPostIndex
from .rsvp import RSVPManager
from .membership import MembershipOracle, StaticMembershipOracle
from .calendar_query import CalendarQueryEngine, VisibilityFilter, Window
from .engine import EventEngine

__all__ = [
    'Config',
    'EventEngineError',
    'InvalidEvent',
    'InvalidTimeRange',
    'InvalidRecurrence',
    'InvalidStatus',
    'NotFound',
    'Category',
    'Visibility',
    'RecurrenceType',
    'RSVPStatus',
    'EventId',
    'Event',
    'EventDraft',
    'RecurrenceRule',
    'ForumPost',
    'ForumPostView',
    'RecurrenceExpander',
    'EventStore',
    'ForumPostIndex',
    'RSVPManager',
    'MembershipOracle',
    'StaticMembershipOracle',
    'CalendarQueryEngine',
    'VisibilityFilter',
    'Window',
    'EventEngine',
]
