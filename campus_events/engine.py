"""
The event engine service.

Wires store, RSVP manager, forum post index and calendar queries together.
Construct one EventEngine and hand it to every screen that needs events;
there is no module-level instance.
"""

from datetime import datetime
from typing import Callable, Optional, Union

from .calendar_query import CalendarQueryEngine, VisibilityFilter, Window
from .config import Config
from .debug import debug_print, set_debug
from .event_store import EventStore
from .membership import MembershipOracle
from .models import Event, EventDraft, EventId, ForumPostView, RSVPStatus
from .rsvp import RSVPManager
from .timezone_utils import now_local, set_timezone


class EventEngine:
    """Facade over the event subsystem used by the presentation layer."""

    def __init__(
        self,
        membership_oracle: Optional[MembershipOracle] = None,
        clock: Callable[[], datetime] = now_local,
        min_event_minutes: int = 30,
        id_factory: Callable[[], EventId] = EventId.new,
    ):
        self.store = EventStore(clock=clock, id_factory=id_factory)
        self.rsvp = RSVPManager(self.store)
        self.calendar = CalendarQueryEngine(
            self.store,
            rsvp=self.rsvp,
            membership_oracle=membership_oracle,
            clock=clock,
            min_event_minutes=min_event_minutes,
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        clock: Callable[[], datetime] = now_local,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> 'EventEngine':
        """
        Apply timezone/debug settings and build an engine from configuration.

        Club membership comes from the [Memberships] table unless an oracle
        is passed in.
        """
        set_timezone(config.timezone)
        if config.debug:
            set_debug(True)
        debug_print("ENGINE", f"timezone={config.timezone}, {len(config.memberships)} clubs")
        return cls(
            membership_oracle=membership_oracle or config.membership_oracle(),
            clock=clock,
            min_event_minutes=config.layout.min_event_minutes,
        )

    # ==================== Events ====================

    def create_event(self, draft: Union[EventDraft, dict]) -> EventId:
        return self.store.create(draft)

    def get_event(self, event_id: Union[EventId, str]) -> Event:
        return self.store.get(event_id)

    def get_all_events(self) -> set[Event]:
        return self.store.list()

    def delete_event(self, event_id: Union[EventId, str]) -> None:
        self.store.delete(event_id)

    def get_posts_for_forum(self, forum_id: str) -> list[ForumPostView]:
        return self.store.get_posts_for_forum(forum_id)

    # ==================== RSVP ====================

    def set_status(self, event_id: Union[EventId, str], user_id: str,
                   status: Union[RSVPStatus, str, None]) -> Event:
        return self.rsvp.set_status(event_id, user_id, status)

    def get_status(self, event_id: Union[EventId, str], user_id: str) -> RSVPStatus:
        return self.rsvp.get_status(event_id, user_id)

    def list_events_for_user(self, user_id: str) -> set[Event]:
        return self.rsvp.list_events_for_user(user_id)

    # ==================== Calendar ====================

    def events_in_window(
        self,
        window: Window,
        visibility_filter: Union[VisibilityFilter, str] = VisibilityFilter.ALL,
        user_id: Optional[str] = None,
        membership_oracle: Optional[MembershipOracle] = None,
    ) -> set[Event]:
        return self.calendar.events_in_window(window, visibility_filter, user_id, membership_oracle)
