"""
iCalendar export for "add to calendar" and event sharing.

Events are written as VEVENTs with UTC times so any calendar application
can import them regardless of the campus timezone.
"""

from typing import Iterable

from icalendar import Calendar as ICalCalendar, Event as ICalEvent

from .models import Event
from .timezone_utils import local_naive_to_utc


PRODID = '-//Campus Events//campus-events//'
UID_DOMAIN = 'campus-events'


def event_uid(event: Event) -> str:
    return f"{event.id}@{UID_DOMAIN}"


def to_ical_event(event: Event) -> ICalEvent:
    """Build an icalendar VEVENT for one event instance."""
    vevent = ICalEvent()
    vevent.add('uid', event_uid(event))
    vevent.add('summary', event.title)
    vevent.add('dtstamp', local_naive_to_utc(event.created_at))
    vevent.add('dtstart', local_naive_to_utc(event.start_time))
    vevent.add('dtend', local_naive_to_utc(event.end_time))

    if event.description:
        vevent.add('description', event.description)
    if event.location:
        vevent.add('location', event.location)
    if event.link:
        vevent.add('url', event.link)

    vevent.add('categories', [event.category.value])
    vevent.add('class', 'PUBLIC' if event.is_public else 'PRIVATE')

    # Instances of a series are exported as independent events tied to their parent
    if event.parent_event_id is not None:
        vevent.add('related-to', f"{event.parent_event_id}@{UID_DOMAIN}")

    return vevent


def export_events(events: Iterable[Event]) -> bytes:
    """Serialize events (in start order) into one VCALENDAR document."""
    vcal = ICalCalendar()
    vcal.add('prodid', PRODID)
    vcal.add('version', '2.0')
    for event in sorted(events, key=lambda e: (e.start_time, str(e.id))):
        vcal.add_component(to_ical_event(event))
    return vcal.to_ical()


def export_event(event: Event) -> bytes:
    return export_events([event])
