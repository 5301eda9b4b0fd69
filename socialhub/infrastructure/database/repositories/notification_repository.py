"""Notification repository implementation."""

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.domain.entities import Notification
from socialhub.core.domain.enums import NotificationType
from socialhub.core.services.accounts.models import UserModel
from socialhub.core.services.interfaces import NotificationRepositoryInterface
from socialhub.core.services.notifications.models import NotificationModel
from .account_repository import summary_from_model


class SqlNotificationRepository(NotificationRepositoryInterface):
    """SQLAlchemy implementation of notification repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create_notification(self, notification: Notification) -> Notification:
        notification_model = NotificationModel(
            recipient_id=notification.recipient_id,
            actor_id=notification.actor_id,
            type=NotificationType(notification.type).value,
            post_id=notification.post_id,
            comment_id=notification.comment_id,
            read=False,
        )
        self._session.add(notification_model)
        await self._session.flush()
        await self._session.refresh(notification_model)

        actor = await self._session.get(UserModel, notification.actor_id)
        return self._model_to_entity(notification_model, actor)

    async def list_for_recipient(
        self, recipient_id: int, offset: int, limit: int
    ) -> List[Notification]:
        result = await self._session.execute(
            select(NotificationModel, UserModel)
            .join(UserModel, UserModel.id == NotificationModel.actor_id)
            .where(NotificationModel.recipient_id == recipient_id)
            .order_by(NotificationModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._model_to_entity(*row) for row in result.all()]

    async def count_for_recipient(self, recipient_id: int, unread_only: bool = False) -> int:
        query = select(func.count(NotificationModel.id)).where(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.where(NotificationModel.read.is_(False))
        result = await self._session.execute(query)
        return result.scalar_one()

    async def mark_all_read(self, recipient_id: int) -> int:
        result = await self._session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.read.is_(False),
            )
            .values(read=True)
        )
        return result.rowcount or 0

    def _model_to_entity(
        self, model: NotificationModel, actor: Optional[UserModel] = None
    ) -> Notification:
        """
        Convert database model to domain entity.

        Args:
            model: Notification database model
            actor: Actor database model, if loaded

        Returns:
            Notification domain entity
        """
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            actor_id=model.actor_id,
            type=NotificationType(model.type),
            post_id=model.post_id,
            comment_id=model.comment_id,
            read=model.read,
            actor=summary_from_model(actor) if actor else None,
            created_at=model.created_at,
        )
