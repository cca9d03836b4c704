"""
Event repository: the table of event records keyed by id.

Plain get/insert_all/replace/remove over a dict. No validation happens here;
EventStore and RSVPManager guard the invariants before writing.
"""

from typing import Optional

from .debug import debug_print
from .models import Event, EventId


def _debug_print(msg: str) -> None:
    debug_print("REPO", msg)


class EventRepository:
    """In-memory table of Event records."""

    def __init__(self):
        # EventId -> Event
        self._events: dict[EventId, Event] = {}

    # ==================== Event Storage ====================

    def insert_all(self, events: list[Event]) -> None:
        """Add several new events; nothing is added if any id is taken."""
        duplicates = [e.id for e in events if e.id in self._events]
        if duplicates:
            raise ValueError(f"Duplicate event ids: {', '.join(map(str, duplicates))}")
        for event in events:
            self._events[event.id] = event
        _debug_print(f"insert_all: {len(events)} events, {len(self._events)} total")

    def replace(self, event: Event) -> None:
        """Swap in a new version of an existing event record."""
        if event.id not in self._events:
            raise KeyError(event.id)
        self._events[event.id] = event

    def remove(self, event_id: EventId) -> Optional[Event]:
        """Remove an event. Returns the removed record, or None if absent."""
        return self._events.pop(event_id, None)

    def get(self, event_id: EventId) -> Optional[Event]:
        return self._events.get(event_id)

    def get_all_events(self) -> list[Event]:
        return list(self._events.values())

    def get_series(self, series_id: EventId) -> list[Event]:
        """All stored instances of a recurring series, in occurrence order."""
        instances = [
            e for e in self._events.values()
            if e.parent_event_id == series_id
        ]
        instances.sort(key=lambda e: e.id.occurrence or 0)
        return instances

    # ==================== Statistics ====================

    def get_event_count(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: EventId) -> bool:
        return event_id in self._events
