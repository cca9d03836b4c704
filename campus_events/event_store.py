"""
Event store for Campus Events.

Owns the canonical event table and the forum post index. Creation validates
and expands recurrence before anything is written, so a failed create leaves
the store untouched; deletion cascades to the forum posts.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Union

from .debug import debug_print
from .errors import InvalidEvent, InvalidTimeRange, NotFound
from .event_repository import EventRepository
from .forum_posts import ForumPostIndex
from .models import (
    Event, EventDraft, EventId, ForumPostView, RecurrenceRule,
    parse_category, parse_visibility,
)
from .recurrence import RecurrenceExpander
from .timezone_utils import now_local, to_local_naive


def _debug_print(msg: str) -> None:
    debug_print("STORE", msg)


def coerce_event_id(event_id: Union[EventId, str]) -> EventId:
    """Accept an EventId or its text form. Malformed text is NotFound."""
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.parse(event_id)
    except (AttributeError, ValueError):
        raise NotFound(event_id)


class EventStore:
    """
    Create, look up, list and delete events.

    All mutation goes through this class (and RSVPManager, which calls
    back into it), so callers only ever see frozen Event records.
    """

    def __init__(
        self,
        expander: Optional[RecurrenceExpander] = None,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], EventId] = EventId.new,
    ):
        self._repository = EventRepository()
        self._forum_posts = ForumPostIndex(self._repository)
        self._expander = expander or RecurrenceExpander()
        self._clock = clock
        self._id_factory = id_factory
        self._on_delete_callbacks: list[Callable[[EventId], None]] = []

    @property
    def forum_posts(self) -> ForumPostIndex:
        return self._forum_posts

    def add_on_delete_callback(self, callback: Callable[[EventId], None]) -> None:
        """Register a callback invoked with the id of every deleted event."""
        self._on_delete_callbacks.append(callback)

    def _notify_deleted(self, event_id: EventId) -> None:
        for callback in self._on_delete_callbacks:
            callback(event_id)

    # ==================== CRUD Operations ====================

    def create(self, draft: Union[EventDraft, dict]) -> EventId:
        """
        Create an event, expanding its recurrence rule if it has one.

        Returns:
            The id of the event, or of the first instance of a recurring
            series. Use siblings() to reach the other instances.

        Raises:
            InvalidEvent: empty or non-text title, non-text description,
                location or link, unknown category/visibility.
            InvalidTimeRange: end time not after start time.
            InvalidRecurrence: unknown recurrence period.
        """
        if isinstance(draft, dict):
            draft = EventDraft.from_dict(draft)
        draft.check_text_fields()
        if isinstance(draft.recurrence, dict):
            draft = replace(draft, recurrence=RecurrenceRule.from_dict(draft.recurrence))

        title = (draft.title or "").strip()
        if not title:
            raise InvalidEvent("Event title must not be empty")

        start = to_local_naive(draft.start_time)
        end = to_local_naive(draft.end_time)
        if end <= start:
            raise InvalidTimeRange(f"End time {end} must be after start time {start}")

        recurrence = draft.recurrence
        if recurrence is not None and recurrence.until is not None:
            recurrence = RecurrenceRule(type=recurrence.type, until=to_local_naive(recurrence.until))

        base_event = Event(
            id=self._id_factory(),
            title=title,
            start_time=start,
            end_time=end,
            created_at=self._clock(),
            description=(draft.description or "").strip(),
            location=(draft.location or "").strip(),
            link=(draft.link or "").strip() or None,
            category=parse_category(draft.category),
            visibility=parse_visibility(draft.visibility),
            owner_club_id=draft.owner_club_id or None,
            max_attendees=draft.max_attendees,
            posted_to_forums=frozenset(draft.posted_to_forums),
            recurrence=recurrence,
            require_approval=draft.require_approval,
            allow_plus_ones=draft.allow_plus_ones,
            cover_image=draft.cover_image,
        )

        if recurrence is not None:
            events = self._expander.expand(base_event, recurrence)
        else:
            events = [base_event]

        self._repository.insert_all(events)
        self._forum_posts.add_event_posts(events)

        _debug_print(f"create({title!r}): {len(events)} event(s), first={events[0].id}")
        return events[0].id

    def get(self, event_id: Union[EventId, str]) -> Event:
        """Get an event by id, raising NotFound if it does not exist."""
        event = self.find(event_id)
        if event is None:
            raise NotFound(event_id)
        return event

    def find(self, event_id: Union[EventId, str]) -> Optional[Event]:
        """Get an event by id, or None."""
        return self._repository.get(coerce_event_id(event_id))

    def list(self) -> set[Event]:
        """All stored events, unordered."""
        return set(self._repository.get_all_events())

    def delete(self, event_id: Union[EventId, str]) -> None:
        """
        Delete one event and its forum posts.

        Deleting a recurrence instance leaves its siblings in place.
        """
        event_id = coerce_event_id(event_id)
        if self._repository.remove(event_id) is None:
            raise NotFound(event_id)
        self._forum_posts.remove_event(event_id)
        self._notify_deleted(event_id)
        _debug_print(f"delete({event_id}): {self._repository.get_event_count()} events left")

    def siblings(self, event_id: Union[EventId, str]) -> list[Event]:
        """
        Every stored instance of the series the event belongs to, in
        occurrence order (the event itself included). A one-off event is
        its own only sibling.
        """
        event = self.get(event_id)
        if event.parent_event_id is None:
            return [event]
        return self._repository.get_series(event.parent_event_id)

    def get_posts_for_forum(self, forum_id: str) -> list[ForumPostView]:
        return self._forum_posts.get_posts_for_forum(forum_id)

    # ==================== Attendance ====================

    def _replace_attendance(
        self,
        event_id: EventId,
        attendees: frozenset[str],
        interested: frozenset[str],
    ) -> Event:
        """Swap in a copy of the event with new RSVP sets. Used by RSVPManager."""
        event = self.get(event_id)
        updated = replace(event, attendees=attendees, interested=interested)
        self._repository.replace(updated)
        return updated

    # ==================== Statistics ====================

    def __len__(self) -> int:
        return self._repository.get_event_count()

    def __contains__(self, event_id: Union[EventId, str]) -> bool:
        return coerce_event_id(event_id) in self._repository
