"""
Forum post index.

Keeps, per forum, the most-recent-first list of event announcements. The
event store registers posts when events are created and drops them when
events are deleted.
"""

from .debug import debug_print
from .event_repository import EventRepository
from .models import Event, EventId, ForumPost, ForumPostView


def _debug_print(msg: str) -> None:
    debug_print("FORUM", msg)


class ForumPostIndex:
    """forum id -> ordered list of ForumPost, newest first."""

    def __init__(self, repository: EventRepository):
        self._repository = repository
        self._posts: dict[str, list[ForumPost]] = {}

    def add_event_posts(self, events: list[Event]) -> None:
        """
        Announce newly created events in every forum they were posted to.

        All posts of one creation call go ahead of the forum's existing
        posts, keeping their own order (occurrence order for a series).
        """
        new_posts: dict[str, list[ForumPost]] = {}
        for event in events:
            for forum_id in sorted(event.posted_to_forums):
                new_posts.setdefault(forum_id, []).append(
                    ForumPost(forum_id=forum_id, event_id=event.id, created_at=event.created_at)
                )

        for forum_id, posts in new_posts.items():
            self._posts[forum_id] = posts + self._posts.get(forum_id, [])
            _debug_print(f"{forum_id}: +{len(posts)} posts, {len(self._posts[forum_id])} total")

    def remove_event(self, event_id: EventId) -> int:
        """Drop every post referencing event_id. Returns the number removed."""
        removed = 0
        for forum_id, posts in self._posts.items():
            kept = [p for p in posts if p.event_id != event_id]
            removed += len(posts) - len(kept)
            self._posts[forum_id] = kept
        if removed:
            _debug_print(f"remove_event({event_id}): {removed} posts removed")
        return removed

    def get_posts_for_forum(self, forum_id: str) -> list[ForumPostView]:
        """
        Posts of a forum joined with their events, newest first.

        Posts whose event no longer exists are skipped. A forum nobody
        posted to simply has no posts.
        """
        views = []
        for post in self._posts.get(forum_id, []):
            event = self._repository.get(post.event_id)
            if event is not None:
                views.append(ForumPostView(post=post, event=event))
        return views

    def forums_for_event(self, event_id: EventId) -> set[str]:
        """Forums currently holding a post for the event."""
        return {
            forum_id for forum_id, posts in self._posts.items()
            if any(p.event_id == event_id for p in posts)
        }
