"""
RSVP manager: going / interested state per (event, user).

Status changes always clear the user from both sets before adding them to
the target one, so a user is never both going and interested. Capacity
(max_attendees) is advisory and never blocks an RSVP.
"""

from typing import Optional, Union

from .debug import debug_print
from .errors import InvalidStatus
from .event_store import EventStore, coerce_event_id
from .models import Event, EventId, RSVPStatus


def _debug_print(msg: str) -> None:
    debug_print("RSVP", msg)


def parse_status(status: Union[RSVPStatus, str, None]) -> RSVPStatus:
    """Coerce going/interested/none (or None) to RSVPStatus."""
    if status is None:
        return RSVPStatus.NONE
    if isinstance(status, RSVPStatus):
        return status
    try:
        return RSVPStatus(str(status).lower())
    except ValueError:
        raise InvalidStatus(f"Unknown RSVP status: {status!r}")


class RSVPManager:
    """Attendance and interest tracking on top of an EventStore."""

    def __init__(self, store: EventStore):
        self._store = store
        # user_id -> {event_id -> status}, only for going/interested
        self._user_rsvps: dict[str, dict[EventId, RSVPStatus]] = {}
        store.add_on_delete_callback(self._forget_event)

    def _forget_event(self, event_id: EventId) -> None:
        """Drop every user's status for a deleted event."""
        for user_id in list(self._user_rsvps):
            user_rsvps = self._user_rsvps[user_id]
            user_rsvps.pop(event_id, None)
            if not user_rsvps:
                del self._user_rsvps[user_id]

    def set_status(
        self,
        event_id: Union[EventId, str],
        user_id: str,
        status: Union[RSVPStatus, str, None],
    ) -> Event:
        """
        Set a user's RSVP for an event.

        Args:
            event_id: The event to RSVP to.
            user_id: The (already authenticated) user.
            status: going, interested, or None/none to clear the RSVP.

        Returns:
            The updated event record.

        Raises:
            NotFound: the event does not exist.
            InvalidStatus: status is not going/interested/none.
        """
        event_id = coerce_event_id(event_id)
        event = self._store.get(event_id)
        new_status = parse_status(status)

        attendees = event.attendees - {user_id}
        interested = event.interested - {user_id}
        if new_status == RSVPStatus.GOING:
            attendees = attendees | {user_id}
        elif new_status == RSVPStatus.INTERESTED:
            interested = interested | {user_id}

        updated = self._store._replace_attendance(event_id, attendees, interested)

        if new_status == RSVPStatus.NONE:
            user_rsvps = self._user_rsvps.get(user_id, {})
            user_rsvps.pop(event_id, None)
            if not user_rsvps:
                self._user_rsvps.pop(user_id, None)
        else:
            self._user_rsvps.setdefault(user_id, {})[event_id] = new_status

        _debug_print(f"{user_id} -> {new_status.value} for {event_id}")
        return updated

    def clear_status(self, event_id: Union[EventId, str], user_id: str) -> Event:
        return self.set_status(event_id, user_id, None)

    def get_status(self, event_id: Union[EventId, str], user_id: str) -> RSVPStatus:
        """A user's status for an event, derived from its attendee sets."""
        event = self._store.get(event_id)
        if user_id in event.attendees:
            return RSVPStatus.GOING
        if user_id in event.interested:
            return RSVPStatus.INTERESTED
        return RSVPStatus.NONE

    def list_events_for_user(self, user_id: str) -> set[Event]:
        """Events the user is going to. Interested-only events are not included."""
        return {e for e in self._store.list() if user_id in e.attendees}

    def get_user_rsvps(self, user_id: str) -> dict[EventId, RSVPStatus]:
        """The user's going/interested statuses for events that still exist."""
        result = {}
        for event_id, status in self._user_rsvps.get(user_id, {}).items():
            if event_id in self._store:
                result[event_id] = status
        return result

    def spots_remaining(self, event_id: Union[EventId, str]) -> Optional[int]:
        """
        Free places left before max_attendees is reached, or None when the
        event has no capacity. Informational only; 0 once full or over.
        """
        event = self._store.get(event_id)
        if event.max_attendees is None:
            return None
        return max(0, event.max_attendees - len(event.attendees))
