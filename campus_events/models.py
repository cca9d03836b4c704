"""
Data model for campus events.

Event records are frozen: the only way to change attendance is through
RSVPManager, which swaps in a new record via the event store. Records
compare and hash by id, like calendar events do across the app.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, time as dt_time
from enum import Enum
from typing import Any, Optional, Union
import uuid

from .errors import InvalidEvent, InvalidRecurrence


class Category(Enum):
    """Display/filter tag of an event. Opaque to the engine."""
    ACADEMIC = "academic"
    SPORTS = "sports"
    SOCIAL = "social"
    PARTY = "party"
    CLUB = "club"
    OTHER = "other"


class Visibility(Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class RecurrenceType(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RSVPStatus(Enum):
    """Per-user attendance state of an event. NONE means no RSVP at all."""
    GOING = "going"
    INTERESTED = "interested"
    NONE = "none"


def parse_category(value: Union[Category, str]) -> Category:
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value).lower())
    except ValueError:
        raise InvalidEvent(f"Unknown category: {value!r}")


def parse_visibility(value: Union[Visibility, str]) -> Visibility:
    if isinstance(value, Visibility):
        return value
    try:
        return Visibility(str(value).lower())
    except ValueError:
        raise InvalidEvent(f"Unknown visibility: {value!r}")


def _parse_datetime(value: Union[datetime, str]) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidEvent(f"Invalid timestamp: {value!r}")


def _parse_until(value: Union[datetime, date, str]) -> datetime:
    """Recurrence end bound. A bare date ('YYYY-MM-DD') covers that whole day."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, dt_time.max)
    try:
        if len(value) == 10:
            return datetime.combine(date.fromisoformat(value), dt_time.max)
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidRecurrence(f"Invalid recurrence end date: {value!r}")


@dataclass(frozen=True)
class EventId:
    """
    Composite event identifier.

    `base` identifies the authoring call; `occurrence` is the index of a
    recurrence instance, or None for a one-off event (and for the parent
    reference of a recurring series).
    """
    base: str
    occurrence: Optional[int] = None

    @classmethod
    def new(cls) -> 'EventId':
        return cls(f"event-{uuid.uuid4().hex[:12]}")

    def instance(self, occurrence: int) -> 'EventId':
        """Id of the given occurrence of this event's series."""
        return EventId(self.base, occurrence)

    @property
    def series(self) -> 'EventId':
        """Id of the authoring event this id belongs to."""
        return EventId(self.base)

    @classmethod
    def parse(cls, text: str) -> 'EventId':
        """Inverse of str(): 'event-ab12' or 'event-ab12#3'."""
        base, sep, occurrence = text.partition("#")
        if not base:
            raise ValueError(f"Invalid event id: {text!r}")
        if not sep:
            return cls(base)
        try:
            return cls(base, int(occurrence))
        except ValueError:
            raise ValueError(f"Invalid event id: {text!r}")

    def __str__(self) -> str:
        if self.occurrence is None:
            return self.base
        return f"{self.base}#{self.occurrence}"


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Repeat an event every day, week or month until (and including) `until`.

    `until` may be given as a date, in which case occurrences on that day
    are still included.
    """
    type: Union[RecurrenceType, str]
    until: datetime

    def __post_init__(self):
        if self.until is not None:
            object.__setattr__(self, 'until', _parse_until(self.until))

    @classmethod
    def from_dict(cls, data: dict) -> 'RecurrenceRule':
        if "type" not in data or not data.get("until"):
            raise InvalidRecurrence(f"Recurrence needs a type and an end date: {data!r}")
        return cls(type=data["type"], until=data["until"])

    def to_dict(self) -> dict:
        period = self.type.value if isinstance(self.type, RecurrenceType) else self.type
        return {"type": period, "until": self.until.isoformat()}


@dataclass(frozen=True, eq=False)
class Event:
    """
    One concrete event instance.

    Times are naive local wall-clock datetimes. `attendees` and `interested`
    never share a user.
    """
    id: EventId
    title: str
    start_time: datetime
    end_time: datetime
    created_at: datetime
    description: str = ""
    location: str = ""
    link: Optional[str] = None
    category: Category = Category.OTHER
    visibility: Visibility = Visibility.PUBLIC
    owner_club_id: Optional[str] = None
    max_attendees: Optional[int] = None  # Advisory only
    attendees: frozenset[str] = frozenset()
    interested: frozenset[str] = frozenset()
    posted_to_forums: frozenset[str] = frozenset()
    recurrence: Optional[RecurrenceRule] = None
    parent_event_id: Optional[EventId] = None
    require_approval: bool = False
    allow_plus_ones: bool = False
    cover_image: Optional[str] = None

    # ==================== Convenience Properties ====================

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def occurrence_index(self) -> Optional[int]:
        return self.id.occurrence

    def overlaps(self, other: 'Event') -> bool:
        """True if the two events share any span of time (touching ends do not count)."""
        return self.start_time < other.end_time and other.start_time < self.end_time

    def has_relationship(self, user_id: str) -> bool:
        """True if the user is going to or interested in this event."""
        return user_id in self.attendees or user_id in self.interested

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Event):
            return self.id == other.id
        return False

    def __repr__(self):
        return f"Event(id={str(self.id)!r}, title={self.title!r}, start_time={self.start_time})"


@dataclass
class EventDraft:
    """Authoring data for EventStore.create()."""
    title: str
    start_time: datetime
    end_time: datetime
    description: str = ""
    location: str = ""
    link: Optional[str] = None
    category: Union[Category, str] = Category.OTHER
    visibility: Union[Visibility, str] = Visibility.PUBLIC
    owner_club_id: Optional[str] = None
    max_attendees: Optional[int] = None
    posted_to_forums: list[str] = field(default_factory=list)
    recurrence: Union[RecurrenceRule, dict, None] = None
    require_approval: bool = False
    allow_plus_ones: bool = False
    cover_image: Optional[str] = None

    def __post_init__(self):
        self.check_text_fields()
        if isinstance(self.recurrence, dict):
            self.recurrence = RecurrenceRule.from_dict(self.recurrence)

    def check_text_fields(self) -> None:
        """Raise InvalidEvent unless title, description, location and link are text (or None)."""
        for name in ("title", "description", "location", "link"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise InvalidEvent(f"{name} must be text, got {type(value).__name__}: {value!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EventDraft':
        """Build a draft from plain data (ISO timestamps, string enums)."""
        for key in ("title", "start_time", "end_time"):
            if data.get(key) in (None, ""):
                raise InvalidEvent(f"Missing required field: {key}")

        max_attendees = data.get("max_attendees")
        if max_attendees is not None:
            try:
                max_attendees = int(max_attendees)
            except (TypeError, ValueError):
                raise InvalidEvent(f"Invalid max_attendees: {max_attendees!r}")

        return cls(
            title=data["title"],
            start_time=_parse_datetime(data["start_time"]),
            end_time=_parse_datetime(data["end_time"]),
            description=data.get("description", ""),
            location=data.get("location", ""),
            link=data.get("link") or None,
            category=data.get("category", Category.OTHER),
            visibility=data.get("visibility", Visibility.PUBLIC),
            owner_club_id=data.get("owner_club_id"),
            max_attendees=max_attendees,
            posted_to_forums=list(data.get("posted_to_forums", [])),
            recurrence=data.get("recurrence"),
            require_approval=bool(data.get("require_approval", False)),
            allow_plus_ones=bool(data.get("allow_plus_ones", False)),
            cover_image=data.get("cover_image"),
        )


@dataclass(frozen=True)
class ForumPost:
    """Announcement of an event inside a forum feed."""
    forum_id: str
    event_id: EventId
    created_at: datetime

    @property
    def id(self) -> str:
        return f"event-post-{self.event_id}-{self.forum_id}"


@dataclass(frozen=True)
class ForumPostView:
    """A forum post joined with its (still existing) event."""
    post: ForumPost
    event: Event

    @property
    def created_at(self) -> datetime:
        return self.post.created_at
