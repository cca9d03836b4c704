"""
Recurrence expansion.

Turns one authored event plus a recurrence rule into the ordered list of
concrete, independent event instances the store keeps.
"""

from dataclasses import replace
from datetime import datetime
from typing import Callable

from . import date_math
from .debug import debug_print
from .errors import InvalidRecurrence
from .models import Event, RecurrenceRule, RecurrenceType


# Occurrence k of each period, always computed from the base start so that
# monthly clamping never accumulates (Jan 31 -> Feb 29 -> Mar 31).
_STEPS: dict[RecurrenceType, Callable[[datetime, int], datetime]] = {
    RecurrenceType.DAILY: date_math.add_days,
    RecurrenceType.WEEKLY: date_math.add_weeks,
    RecurrenceType.MONTHLY: date_math.add_months,
}


def parse_recurrence_type(value) -> RecurrenceType:
    """Coerce a period name to RecurrenceType, raising InvalidRecurrence."""
    if isinstance(value, RecurrenceType):
        return value
    try:
        return RecurrenceType(str(value).lower())
    except ValueError:
        raise InvalidRecurrence(f"Unknown recurrence type: {value!r}")


class RecurrenceExpander:
    """Expands a base event into its recurrence instances."""

    def expand(self, base_event: Event, rule: RecurrenceRule) -> list[Event]:
        """
        Generate every occurrence of base_event under rule.

        The first occurrence is the base event's own start and is always
        produced, even when rule.until lies before it. Every later
        occurrence is included while its start is at or before rule.until
        and the occurrence still fits before datetime.max. Each instance keeps the base duration, gets id (base, k) and
        points back to the series through parent_event_id.

        Raises:
            InvalidRecurrence: if the rule's period is not daily, weekly
                or monthly, or it has no end date.
        """
        period = parse_recurrence_type(rule.type)
        if rule.until is None:
            raise InvalidRecurrence("Recurrence needs an end date")
        step = _STEPS[period]
        normalized_rule = RecurrenceRule(type=period, until=rule.until)
        series_id = base_event.id.series

        instances = []
        index = 0
        while True:
            try:
                occurrence_start = step(base_event.start_time, index)
                start, end = date_math.shift_range(
                    base_event.start_time, base_event.end_time, occurrence_start
                )
            except (OverflowError, ValueError):
                # Past datetime.max: no later occurrence can exist
                break
            if index > 0 and occurrence_start > rule.until:
                break
            instances.append(replace(
                base_event,
                id=series_id.instance(index),
                start_time=start,
                end_time=end,
                recurrence=normalized_rule,
                parent_event_id=series_id,
                attendees=frozenset(),
                interested=frozenset(),
            ))
            index += 1

        debug_print(
            "RECURRENCE",
            f"expand({series_id}, {period.value} until {rule.until}): {len(instances)} instances"
        )
        return instances
