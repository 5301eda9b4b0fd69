"""Notification service implementation."""

import logging
from typing import List, Optional, Tuple

from socialhub.core.domain.entities import Notification
from socialhub.core.domain.enums import NotificationType
from socialhub.core.realtime.dispatcher import RealtimeDispatcher
from .interfaces import NotificationRepositoryInterface

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Creates, lists and acknowledges notifications.

    Every created notification is persisted first and then pushed to the
    recipient's live connection, if there is one. With a deferred dispatcher
    the push waits for the request transaction to commit.
    """

    def __init__(
        self,
        notification_repository: NotificationRepositoryInterface,
        dispatcher: Optional[RealtimeDispatcher] = None,
    ):
        """
        Initialize notification service.

        Args:
            notification_repository: Repository for notification persistence
            dispatcher: Realtime dispatcher for live fan-out
        """
        self._notification_repository = notification_repository
        self._dispatcher = dispatcher

    async def create_notification(
        self,
        recipient_id: int,
        actor_id: int,
        type: NotificationType,
        post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> Optional[Notification]:
        """
        Record that ``actor_id`` did something that concerns ``recipient_id``.

        Returns:
            Persisted notification, or None when the actor is the recipient
        """
        if recipient_id == actor_id:
            return None

        notification = await self._notification_repository.create_notification(
            Notification(
                id=None,
                recipient_id=recipient_id,
                actor_id=actor_id,
                type=NotificationType(type),
                post_id=post_id,
                comment_id=comment_id,
            )
        )

        logger.debug(
            "Notification %s (%s) created for account %s",
            notification.id,
            notification.type.value,
            recipient_id,
        )
        if self._dispatcher is not None:
            await self._dispatcher.deliver_notification(notification)

        return notification

    async def list_notifications(
        self, recipient_id: int, page: int, limit: int
    ) -> Tuple[List[Notification], int, int]:
        """
        List notifications page for recipient.

        Returns:
            Tuple of (notifications, total count, unread count)
        """
        offset = (page - 1) * limit
        notifications = await self._notification_repository.list_for_recipient(
            recipient_id, offset, limit
        )
        total = await self._notification_repository.count_for_recipient(recipient_id)
        unread = await self._notification_repository.count_for_recipient(
            recipient_id, unread_only=True
        )
        return notifications, total, unread

    async def mark_all_read(self, recipient_id: int) -> int:
        return await self._notification_repository.mark_all_read(recipient_id)
