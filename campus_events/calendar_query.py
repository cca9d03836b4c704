"""
Calendar query engine.

The read side used by the calendar and feed screens: day/week/month windows
combined with the five visibility filters, plus the derived day, week and
month views.

Window membership is decided by an event's start time only. An event that
starts before a window and ends inside it does not belong to that window.
"""

from dataclasses import dataclass, field
from datetime import datetime, date, timedelta
from enum import Enum
from typing import Callable, Optional, Union

from . import date_math
from .debug import debug_print
from .event_store import EventStore, coerce_event_id
from .membership import MembershipOracle, NoMembershipOracle
from .models import Event, EventId, Visibility
from .rsvp import RSVPManager
from .timezone_utils import now_local, to_local_naive


def _debug_print(msg: str) -> None:
    debug_print("QUERY", msg)


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime(value.year, value.month, value.day)


def _sort_key(event: Event):
    return (event.start_time, event.end_time, str(event.id))


class WindowKind(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Window:
    """A day, week (Sunday to Saturday) or month around an anchor date."""
    kind: WindowKind
    anchor: datetime

    @classmethod
    def day(cls, d: Union[date, datetime]) -> 'Window':
        return cls(WindowKind.DAY, _as_datetime(d))

    @classmethod
    def week(cls, d: Union[date, datetime]) -> 'Window':
        return cls(WindowKind.WEEK, _as_datetime(d))

    @classmethod
    def month(cls, d: Union[date, datetime]) -> 'Window':
        return cls(WindowKind.MONTH, _as_datetime(d))

    def bounds(self) -> tuple[datetime, datetime]:
        """Inclusive [start, end] of the window."""
        if self.kind == WindowKind.DAY:
            return date_math.start_of_day(self.anchor), date_math.end_of_day(self.anchor)
        if self.kind == WindowKind.WEEK:
            return date_math.start_of_week(self.anchor), date_math.end_of_week(self.anchor)
        return date_math.start_of_month(self.anchor), date_math.end_of_month(self.anchor)

    def contains(self, moment: datetime) -> bool:
        start, end = self.bounds()
        return start <= moment <= end


class VisibilityFilter(Enum):
    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"
    SCHOOL_WIDE = "school-wide"
    ORGS = "orgs"


def parse_filter(value: Union[VisibilityFilter, str]) -> VisibilityFilter:
    if isinstance(value, VisibilityFilter):
        return value
    try:
        return VisibilityFilter(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown visibility filter: {value!r}")


def is_visible(
    event: Event,
    visibility_filter: VisibilityFilter,
    user_id: Optional[str],
    oracle: MembershipOracle,
) -> bool:
    """
    Whether an event passes a visibility filter for a user.

    `all` is defined on its own (public, or related private, or member
    club event) and is not the union of the other four filters.
    """
    def is_related() -> bool:
        return user_id is not None and event.has_relationship(user_id)

    def is_club_member() -> bool:
        return (
            event.owner_club_id is not None
            and user_id is not None
            and oracle.is_member(event.owner_club_id, user_id)
        )

    if visibility_filter == VisibilityFilter.PUBLIC:
        return event.visibility == Visibility.PUBLIC
    if visibility_filter == VisibilityFilter.PRIVATE:
        return event.visibility == Visibility.PRIVATE and is_related()
    if visibility_filter == VisibilityFilter.SCHOOL_WIDE:
        return event.visibility == Visibility.PUBLIC and event.owner_club_id is None
    if visibility_filter == VisibilityFilter.ORGS:
        return is_club_member()
    # ALL
    if event.visibility == Visibility.PUBLIC:
        return True
    if is_related():
        return True
    return is_club_member()


# ==================== View Records ====================

@dataclass
class HourSlot:
    """Events starting within one hour of a day view."""
    hour: int
    events: list[Event] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutSlot:
    """
    Placement of an event among the events it overlaps with.

    Overlapping events share the day column width: this event goes into
    `column` (0-based) of `total_columns` side-by-side columns.
    """
    event: Event
    column: int
    total_columns: int

    @property
    def has_conflict(self) -> bool:
        return self.total_columns > 1


@dataclass
class WeekDay:
    day: date
    events: list[Event] = field(default_factory=list)
    is_today: bool = False


@dataclass
class MonthCell:
    day: date
    events: list[Event] = field(default_factory=list)
    is_today: bool = False

    @property
    def count(self) -> int:
        return len(self.events)


@dataclass
class MonthGrid:
    """
    A month laid out on a Sunday-first grid.

    `cells` holds None for the blank cells before day 1 and after the last
    day, so its length is a multiple of 7.
    """
    year: int
    month: int
    cells: list[Optional[MonthCell]]

    def days(self) -> list[MonthCell]:
        return [c for c in self.cells if c is not None]

    def weeks(self) -> list[list[Optional[MonthCell]]]:
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    def counts(self) -> dict[int, int]:
        """Day of month -> number of events starting that day."""
        return {c.day.day: c.count for c in self.days()}

    def events_by_day(self) -> dict[int, list[Event]]:
        return {c.day.day: c.events for c in self.days()}

    @property
    def leading_blanks(self) -> int:
        count = 0
        for cell in self.cells:
            if cell is not None:
                break
            count += 1
        return count


# ==================== Conflict Layout ====================

def layout_overlapping(events: list[Event], min_duration: timedelta) -> list[LayoutSlot]:
    """
    Assign side-by-side columns to overlapping events.

    Events are grouped into clusters of transitively overlapping events;
    inside a cluster each event takes the first column that is free at its
    start. Events shorter than min_duration are laid out as if they lasted
    min_duration.
    """
    def effective_end(e: Event) -> datetime:
        return max(e.end_time, e.start_time + min_duration)

    def overlap(e1: Event, e2: Event) -> bool:
        return e1.start_time < effective_end(e2) and e2.start_time < effective_end(e1)

    # Sort by start time, then by duration (longer first)
    sorted_events = sorted(events, key=lambda e: (e.start_time, -(effective_end(e) - e.start_time), str(e.id)))

    groups: list[list[Event]] = []
    for event in sorted_events:
        overlapping_groups = [
            i for i, group in enumerate(groups)
            if any(overlap(event, other) for other in group)
        ]
        if not overlapping_groups:
            groups.append([event])
        elif len(overlapping_groups) == 1:
            groups[overlapping_groups[0]].append(event)
        else:
            merged = []
            for i in sorted(overlapping_groups, reverse=True):
                merged.extend(groups.pop(i))
            merged.append(event)
            groups.append(merged)

    layout = []
    for group in groups:
        group.sort(key=_sort_key)
        columns: list[datetime] = []  # end time of the last event in each column
        event_columns: dict[EventId, int] = {}

        for event in group:
            for col_idx, col_end in enumerate(columns):
                if event.start_time >= col_end:
                    columns[col_idx] = effective_end(event)
                    event_columns[event.id] = col_idx
                    break
            else:
                event_columns[event.id] = len(columns)
                columns.append(effective_end(event))

        for event in group:
            layout.append(LayoutSlot(event, event_columns[event.id], len(columns)))

    layout.sort(key=lambda slot: (slot.event.start_time, slot.column))
    return layout


# ==================== Query Engine ====================

class CalendarQueryEngine:
    """Windowed, visibility-filtered reads over an EventStore."""

    def __init__(
        self,
        store: EventStore,
        rsvp: Optional[RSVPManager] = None,
        membership_oracle: Optional[MembershipOracle] = None,
        clock: Callable[[], datetime] = now_local,
        min_event_minutes: int = 30,
    ):
        self._store = store
        self._rsvp = rsvp or RSVPManager(store)
        self._oracle = membership_oracle or NoMembershipOracle()
        self._clock = clock
        self._min_duration = timedelta(minutes=min_event_minutes)

    def _resolve_oracle(self, membership_oracle: Optional[MembershipOracle]) -> MembershipOracle:
        return membership_oracle if membership_oracle is not None else self._oracle

    def _today(self) -> date:
        return self._clock().date()

    def filter_events(
        self,
        events,
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> list[Event]:
        """Apply a visibility filter to any collection of events."""
        visibility_filter = parse_filter(visibility_filter)
        oracle = self._resolve_oracle(membership_oracle)
        return [e for e in events if is_visible(e, visibility_filter, user_id, oracle)]

    def events_in_window(
        self,
        window: Window,
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> set[Event]:
        """
        Events whose start time lies in the window and that pass the filter.

        Args:
            window: Window.day(), Window.week() or Window.month().
            visibility_filter: all, public, private, school-wide or orgs.
            user_id: The viewing user; None sees no private or club events.
            membership_oracle: Overrides the engine's oracle for this call.
        """
        start, end = window.bounds()
        in_window = [e for e in self._store.list() if start <= e.start_time <= end]
        result = set(self.filter_events(in_window, visibility_filter, user_id, membership_oracle))
        _debug_print(
            f"{window.kind.value} {start.date()}..{end.date()} "
            f"filter={parse_filter(visibility_filter).value} user={user_id}: {len(result)} events"
        )
        return result

    # ==================== Views ====================

    def day_view(
        self,
        day: Union[date, datetime],
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> list[Event]:
        """Events of one day, ascending by start time."""
        events = self.events_in_window(Window.day(day), visibility_filter, user_id, membership_oracle)
        return sorted(events, key=_sort_key)

    def day_schedule(
        self,
        day: Union[date, datetime],
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> list[HourSlot]:
        """The day view split into 24 hour slots by start hour."""
        slots = [HourSlot(hour) for hour in range(24)]
        for event in self.day_view(day, visibility_filter, user_id, membership_oracle):
            slots[event.start_time.hour].events.append(event)
        return slots

    def day_layout(
        self,
        day: Union[date, datetime],
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> list[LayoutSlot]:
        """The day view with overlapping events placed in side-by-side columns."""
        events = self.day_view(day, visibility_filter, user_id, membership_oracle)
        return layout_overlapping(events, self._min_duration)

    def week_view(
        self,
        day: Union[date, datetime],
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> list[WeekDay]:
        """
        The seven days (Sunday first) of the week containing `day`. Each
        event lands in the bucket of its start date, ordered by start time.
        """
        window = Window.week(day)
        events = self.events_in_window(window, visibility_filter, user_id, membership_oracle)
        today = self._today()
        buckets = [WeekDay(d, is_today=(d == today)) for d in date_math.week_days(window.anchor)]
        first_day = buckets[0].day

        for event in sorted(events, key=_sort_key):
            offset = (event.start_time.date() - first_day).days
            buckets[offset].events.append(event)
        return buckets

    def month_view(
        self,
        day: Union[date, datetime],
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> MonthGrid:
        """The month containing `day` on a Sunday-first grid with blank padding."""
        window = Window.month(day)
        events = self.events_in_window(window, visibility_filter, user_id, membership_oracle)
        year, month = window.anchor.year, window.anchor.month
        today = self._today()

        cells: list[Optional[MonthCell]] = []
        first_day = date(year, month, 1)
        cells.extend([None] * date_math.day_of_week_index(first_day))
        for day_number in range(1, date_math.days_in_month(year, month) + 1):
            cell_date = date(year, month, day_number)
            cells.append(MonthCell(cell_date, is_today=(cell_date == today)))
        while len(cells) % 7:
            cells.append(None)

        by_day = {c.day: c for c in cells if c is not None}
        for event in sorted(events, key=_sort_key):
            by_day[event.start_time.date()].events.append(event)

        return MonthGrid(year=year, month=month, cells=cells)

    # ==================== Conflicts ====================

    def conflicts_for(self, event_id: Union[EventId, str], user_id: str) -> list[Event]:
        """Events the user is going to that overlap the given event."""
        event = self._store.get(coerce_event_id(event_id))
        conflicts = [
            other for other in self._rsvp.list_events_for_user(user_id)
            if other.id != event.id and other.overlaps(event)
        ]
        return sorted(conflicts, key=_sort_key)
