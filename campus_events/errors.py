"""Exceptions raised by the event engine."""


class EventEngineError(Exception):
    """Base class for all event engine errors."""


class InvalidEvent(EventEngineError, ValueError):
    """A required field is missing or empty, or a field has an unknown value."""


class InvalidTimeRange(InvalidEvent):
    """The event does not end after it starts."""


class InvalidRecurrence(EventEngineError, ValueError):
    """The recurrence rule has an unrecognized period or no end date."""


class InvalidStatus(EventEngineError, ValueError):
    """An RSVP status other than going, interested or none."""


class NotFound(EventEngineError, LookupError):
    """The operation addressed an event that does not exist."""

    def __init__(self, event_id):
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id
