"""Domain enums for the social platform."""

from enum import Enum


class NotificationType(str, Enum):
    """Kinds of activity that notify another account."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    REPOST = "repost"


class RealtimeEvent(str, Enum):
    """Event names exchanged over realtime connections."""

    SEND_MESSAGE = "send_message"
    TYPING = "typing"
    STOP_TYPING = "stop_typing"
    PING = "ping"

    RECEIVE_MESSAGE = "receive_message"
    MESSAGE_SENT = "message_sent"
    USER_TYPING = "user_typing"
    USER_STOPPED_TYPING = "user_stopped_typing"
    NEW_NOTIFICATION = "new_notification"
    MESSAGE_SEEN = "message_seen"
    PONG = "pong"
    ERROR = "error"
