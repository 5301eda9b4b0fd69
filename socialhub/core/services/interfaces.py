"""Repository interfaces for social features."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from socialhub.core.auth.entities import Account
from socialhub.core.domain.entities import Comment, Message, Notification, Post, Story


class PostRepositoryInterface(ABC):
    """Interface for post, like and comment persistence."""

    @abstractmethod
    async def create_post(self, post: Post) -> Post:
        """
        Persist new post.

        For reposts the original post's repost counter is incremented.

        Args:
            post: Post entity to create

        Returns:
            Created post with ID and author summary
        """
        pass

    @abstractmethod
    async def get_post(self, post_id: int) -> Optional[Post]:
        """Get post by ID."""
        pass

    @abstractmethod
    async def delete_post(self, post_id: int) -> bool:
        """
        Delete post with its likes and comments.

        Returns:
            True if post was deleted, False if not found
        """
        pass

    @abstractmethod
    async def add_like(self, post_id: int, user_id: int) -> bool:
        """Record a like. Returns False if it already existed."""
        pass

    @abstractmethod
    async def remove_like(self, post_id: int, user_id: int) -> bool:
        """Remove a like. Returns False if there was none."""
        pass

    @abstractmethod
    async def has_reposted(self, post_id: int, user_id: int) -> bool:
        """Check whether ``user_id`` already reposted ``post_id``."""
        pass

    @abstractmethod
    async def add_comment(self, comment: Comment) -> Comment:
        """Persist comment and increment the post's comment counter."""
        pass

    @abstractmethod
    async def list_comments(self, post_id: int, offset: int, limit: int) -> List[Comment]:
        """List comments of a post, newest first."""
        pass

    @abstractmethod
    async def count_comments(self, post_id: int) -> int:
        pass

    @abstractmethod
    async def list_posts(
        self, offset: int, limit: int, author_id: Optional[int] = None
    ) -> List[Post]:
        """List posts newest first, optionally restricted to one author."""
        pass

    @abstractmethod
    async def count_posts(self, author_id: Optional[int] = None) -> int:
        pass

    @abstractmethod
    async def list_following_feed(self, user_id: int, offset: int, limit: int) -> List[Post]:
        """List posts by accounts ``user_id`` follows, newest first."""
        pass

    @abstractmethod
    async def count_following_feed(self, user_id: int) -> int:
        pass

    @abstractmethod
    async def add_bookmark(self, post_id: int, user_id: int) -> bool:
        """Save a post for a user. Returns False if it was already saved."""
        pass

    @abstractmethod
    async def remove_bookmark(self, post_id: int, user_id: int) -> bool:
        """Remove a saved post. Returns False if there was none."""
        pass

    @abstractmethod
    async def list_bookmarked(self, user_id: int, offset: int, limit: int) -> List[Post]:
        """List posts saved by ``user_id``, most recently saved first."""
        pass

    @abstractmethod
    async def count_bookmarks(self, user_id: int) -> int:
        pass


class FollowRepositoryInterface(ABC):
    """Interface for the follow graph."""

    @abstractmethod
    async def add_follow(self, follower_id: int, following_id: int) -> bool:
        """Create follow edge. Returns False if it already existed."""
        pass

    @abstractmethod
    async def remove_follow(self, follower_id: int, following_id: int) -> bool:
        """Delete follow edge. Returns False if there was none."""
        pass

    @abstractmethod
    async def is_following(self, follower_id: int, following_id: int) -> bool:
        pass

    @abstractmethod
    async def list_followers(self, user_id: int, offset: int, limit: int) -> List[Account]:
        """List accounts following ``user_id``, newest edge first."""
        pass

    @abstractmethod
    async def list_following(self, user_id: int, offset: int, limit: int) -> List[Account]:
        """List accounts ``user_id`` follows, newest edge first."""
        pass

    @abstractmethod
    async def count_followers(self, user_id: int) -> int:
        pass

    @abstractmethod
    async def count_following(self, user_id: int) -> int:
        pass


class MessageRepositoryInterface(ABC):
    """Interface for direct message persistence."""

    @abstractmethod
    async def create_message(self, message: Message) -> Message:
        """
        Persist new message.

        Returns:
            Stored message with server-assigned ID, timestamp and sender summary
        """
        pass

    @abstractmethod
    async def list_between(
        self, user_id: int, other_id: int, offset: int, limit: int
    ) -> List[Message]:
        """List messages exchanged by two accounts, newest first."""
        pass

    @abstractmethod
    async def count_between(self, user_id: int, other_id: int) -> int:
        pass

    @abstractmethod
    async def latest_per_counterpart(self, user_id: int) -> List[Message]:
        """Latest message of each conversation of ``user_id``, newest first."""
        pass

    @abstractmethod
    async def unread_counts(self, user_id: int) -> Dict[int, int]:
        """Unseen message counts addressed to ``user_id``, keyed by sender."""
        pass

    @abstractmethod
    async def mark_seen(self, recipient_id: int, sender_id: int) -> List[Message]:
        """
        Mark every unseen message from ``sender_id`` to ``recipient_id`` as seen.

        Returns:
            The messages whose state changed
        """
        pass


class NotificationRepositoryInterface(ABC):
    """Interface for notification persistence."""

    @abstractmethod
    async def create_notification(self, notification: Notification) -> Notification:
        """Persist notification and return it with ID and actor summary."""
        pass

    @abstractmethod
    async def list_for_recipient(
        self, recipient_id: int, offset: int, limit: int
    ) -> List[Notification]:
        """List notifications for a recipient, newest first."""
        pass

    @abstractmethod
    async def count_for_recipient(self, recipient_id: int, unread_only: bool = False) -> int:
        pass

    @abstractmethod
    async def mark_all_read(self, recipient_id: int) -> int:
        """Mark all notifications read. Returns number changed."""
        pass


class StoryRepositoryInterface(ABC):
    """Interface for story persistence."""

    @abstractmethod
    async def create_story(self, story: Story) -> Story:
        """Persist new story and return it with ID and author summary."""
        pass

    @abstractmethod
    async def get_active_story(self, story_id: int, now: datetime) -> Optional[Story]:
        """Get story by ID unless it has expired."""
        pass

    @abstractmethod
    async def delete_story(self, story_id: int) -> bool:
        pass

    @abstractmethod
    async def add_view(self, story_id: int, viewer_id: int) -> bool:
        """Record a view. Returns False if the viewer had already seen it."""
        pass

    @abstractmethod
    async def list_active_for_viewer(self, viewer_id: int, now: datetime) -> List[Story]:
        """
        List unexpired stories by ``viewer_id`` and the accounts it follows.

        Returns:
            Stories oldest first, each flagged with whether ``viewer_id`` saw it
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete stories whose expiry has passed. Returns number deleted."""
        pass
