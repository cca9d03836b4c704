"""
Club/organization membership capability.

The club subsystem owns membership rules; the calendar only asks whether a
user belongs to an event's owning club. StaticMembershipOracle answers from
a fixed table (configuration, demo data, tests).
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class MembershipOracle(ABC):
    """Answers "is this user a member of this club"."""

    @abstractmethod
    def is_member(self, club_id: str, user_id: str) -> bool:
        pass


class NoMembershipOracle(MembershipOracle):
    """Nobody is a member of anything."""

    def is_member(self, club_id: str, user_id: str) -> bool:
        return False


class StaticMembershipOracle(MembershipOracle):
    """Membership from an in-memory club_id -> user ids table."""

    def __init__(self, memberships: Optional[dict[str, Iterable[str]]] = None):
        self._members: dict[str, set[str]] = {
            club_id: set(users) for club_id, users in (memberships or {}).items()
        }

    def add_member(self, club_id: str, user_id: str) -> None:
        self._members.setdefault(club_id, set()).add(user_id)

    def remove_member(self, club_id: str, user_id: str) -> None:
        self._members.get(club_id, set()).discard(user_id)

    def clubs_for_user(self, user_id: str) -> set[str]:
        return {club_id for club_id, users in self._members.items() if user_id in users}

    def is_member(self, club_id: str, user_id: str) -> bool:
        return user_id in self._members.get(club_id, ())
