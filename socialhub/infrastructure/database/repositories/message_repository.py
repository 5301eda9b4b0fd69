"""Message repository implementation."""

from dataclasses import replace
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.domain.entities import Message
from socialhub.core.services.accounts.models import UserModel
from socialhub.core.services.interfaces import MessageRepositoryInterface
from socialhub.core.services.messages.models import MessageModel
from .account_repository import summary_from_model


class SqlMessageRepository(MessageRepositoryInterface):
    """SQLAlchemy implementation of message repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize message repository.

        Args:
            session: Database session
        """
        self._session = session

    async def create_message(self, message: Message) -> Message:
        message_model = MessageModel(
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            seen=False,
        )
        self._session.add(message_model)
        await self._session.flush()
        await self._session.refresh(message_model)

        sender = await self._session.get(UserModel, message.sender_id)
        return self._model_to_entity(message_model, sender)

    async def list_between(
        self, user_id: int, other_id: int, offset: int, limit: int
    ) -> List[Message]:
        result = await self._session.execute(
            select(MessageModel, UserModel)
            .join(UserModel, UserModel.id == MessageModel.sender_id)
            .where(self._between(user_id, other_id))
            .order_by(MessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._model_to_entity(*row) for row in result.all()]

    async def count_between(self, user_id: int, other_id: int) -> int:
        result = await self._session.execute(
            select(func.count(MessageModel.id)).where(self._between(user_id, other_id))
        )
        return result.scalar_one()

    async def latest_per_counterpart(self, user_id: int) -> List[Message]:
        """
        Latest message of each conversation.

        Args:
            user_id: Account whose conversations are listed

        Returns:
            One message per counterpart, most recent conversation first
        """
        counterpart = case(
            (MessageModel.sender_id == user_id, MessageModel.recipient_id),
            else_=MessageModel.sender_id,
        )
        latest_ids = (
            select(func.max(MessageModel.id))
            .where(or_(MessageModel.sender_id == user_id, MessageModel.recipient_id == user_id))
            .group_by(counterpart)
        )

        result = await self._session.execute(
            select(MessageModel, UserModel)
            .join(UserModel, UserModel.id == MessageModel.sender_id)
            .where(MessageModel.id.in_(latest_ids))
            .order_by(MessageModel.id.desc())
        )
        return [self._model_to_entity(*row) for row in result.all()]

    async def unread_counts(self, user_id: int) -> Dict[int, int]:
        result = await self._session.execute(
            select(MessageModel.sender_id, func.count(MessageModel.id))
            .where(MessageModel.recipient_id == user_id, MessageModel.seen.is_(False))
            .group_by(MessageModel.sender_id)
        )
        return {sender_id: count for sender_id, count in result.all()}

    async def mark_seen(self, recipient_id: int, sender_id: int) -> List[Message]:
        result = await self._session.execute(
            select(MessageModel, UserModel)
            .join(UserModel, UserModel.id == MessageModel.sender_id)
            .where(
                MessageModel.recipient_id == recipient_id,
                MessageModel.sender_id == sender_id,
                MessageModel.seen.is_(False),
            )
            .order_by(MessageModel.id)
        )
        unseen = [self._model_to_entity(*row) for row in result.all()]
        if not unseen:
            return []

        await self._session.execute(
            update(MessageModel)
            .where(MessageModel.id.in_([message.id for message in unseen]))
            .values(seen=True)
        )
        return [replace(message, seen=True) for message in unseen]

    @staticmethod
    def _between(user_id: int, other_id: int):
        return or_(
            and_(MessageModel.sender_id == user_id, MessageModel.recipient_id == other_id),
            and_(MessageModel.sender_id == other_id, MessageModel.recipient_id == user_id),
        )

    def _model_to_entity(
        self, model: MessageModel, sender: Optional[UserModel] = None
    ) -> Message:
        return Message(
            id=model.id,
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            content=model.content,
            seen=model.seen,
            sender=summary_from_model(sender) if sender else None,
            created_at=model.created_at,
        )
