"""Domain entities for posts, stories, messages and notifications."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import NotificationType


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AccountSummary:
    """
    Compact public view of an account embedded in other entities.

    Attributes:
        id: Account identifier
        username: Account handle
        name: Display name
        profile_image: Profile image URL
    """

    id: int
    username: str
    name: str
    profile_image: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "profileImage": self.profile_image,
        }


@dataclass(frozen=True)
class Post:
    """
    Post entity.

    Attributes:
        id: Unique post identifier (None before persistence)
        author_id: Account that wrote the post
        content: Post text
        original_post_id: Reposted post, set only for reposts
        like_count: Number of likes
        comment_count: Number of comments
        repost_count: Number of reposts
        author: Author summary, when loaded
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: Optional[int]
    author_id: int
    content: str
    original_post_id: Optional[int] = None
    like_count: int = 0
    comment_count: int = 0
    repost_count: int = 0
    author: Optional[AccountSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate post data after initialization."""
        if not self.content and self.original_post_id is None:
            raise ValueError("Post content cannot be empty")
        if self.original_post_id is not None and self.original_post_id == self.id:
            raise ValueError("Post cannot repost itself")

    @property
    def is_repost(self) -> bool:
        return self.original_post_id is not None


@dataclass(frozen=True)
class Comment:
    """Comment left on a post."""

    id: Optional[int]
    post_id: int
    author_id: int
    content: str
    author: Optional[AccountSummary] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate comment data after initialization."""
        if not self.content:
            raise ValueError("Comment content cannot be empty")


@dataclass(frozen=True)
class Story:
    """
    Ephemeral image story.

    Attributes:
        id: Unique story identifier (None before persistence)
        author_id: Account that posted the story
        image: Hosted image URL
        expires_at: Moment the story stops being visible
        viewed: Whether the requesting account has seen it
        author: Author summary, when loaded
        created_at: Creation timestamp
    """

    id: Optional[int]
    author_id: int
    image: str
    expires_at: datetime
    viewed: bool = False
    author: Optional[AccountSummary] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate story data after initialization."""
        if not self.image:
            raise ValueError("Story image cannot be empty")


@dataclass(frozen=True)
class StoryGroup:
    """Active stories of one author, oldest first."""

    author: AccountSummary
    stories: List[Story]

    @property
    def all_viewed(self) -> bool:
        return all(story.viewed for story in self.stories)


@dataclass(frozen=True)
class Message:
    """
    Direct message between two accounts.

    Attributes:
        id: Unique message identifier (None before persistence)
        sender_id: Sending account
        recipient_id: Receiving account
        content: Message text
        seen: Whether the recipient has seen the message
        sender: Sender summary, when loaded
        created_at: Server-assigned send timestamp
    """

    id: Optional[int]
    sender_id: int
    recipient_id: int
    content: str
    seen: bool = False
    sender: Optional[AccountSummary] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate message data after initialization."""
        if not self.content:
            raise ValueError("Message content cannot be empty")

    def counterpart_of(self, account_id: int) -> int:
        """Return the other participant from ``account_id``'s point of view."""
        return self.recipient_id if self.sender_id == account_id else self.sender_id

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "recipientId": self.recipient_id,
            "content": self.content,
            "seen": self.seen,
            "sender": self.sender.to_payload() if self.sender else None,
            "createdAt": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Notification:
    """
    Notification raised for a recipient by another account's action.

    Attributes:
        id: Unique notification identifier (None before persistence)
        recipient_id: Account being notified
        actor_id: Account that performed the action
        type: Kind of action
        post_id: Related post, if any
        comment_id: Related comment, if any
        read: Whether the recipient has read the notification
        actor: Actor summary, when loaded
        created_at: Creation timestamp
    """

    id: Optional[int]
    recipient_id: int
    actor_id: int
    type: NotificationType
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    read: bool = False
    actor: Optional[AccountSummary] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate notification data after initialization."""
        if self.recipient_id == self.actor_id:
            raise ValueError("Accounts are not notified of their own actions")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "recipientId": self.recipient_id,
            "actorId": self.actor_id,
            "type": self.type.value,
            "postId": self.post_id,
            "commentId": self.comment_id,
            "read": self.read,
            "actor": self.actor.to_payload() if self.actor else None,
            "createdAt": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Conversation:
    """Latest message and unread count for one conversation partner."""

    user: AccountSummary
    last_message: Message
    unread_count: int = 0
