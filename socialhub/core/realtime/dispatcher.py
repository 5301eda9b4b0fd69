"""Realtime event dispatcher."""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from socialhub.core.auth.interfaces import AccountRepositoryInterface
from socialhub.core.domain.entities import Message, Notification
from socialhub.core.domain.enums import RealtimeEvent
from socialhub.core.exceptions import ResourceNotFoundException, ValidationException
from socialhub.core.services.interfaces import MessageRepositoryInterface
from .connection import Connection
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000

PendingPush = Tuple[Union[int, Connection], str, Dict[str, Any]]


class RealtimeDispatcher:
    """
    Routes chat messages, typing indicators and notifications to live connections.

    Delivery is at-most-once and best-effort: an offline account or a dead
    socket simply misses the push, while the persisted entity stays available
    through the HTTP API.

    A deferred dispatcher holds every push that announces a persisted entity
    (``receive_message``, ``message_sent``, ``message_seen`` and
    ``new_notification``) until :meth:`flush` is called after the owning
    transaction commits; :meth:`discard` drops them when it rolls back.
    Typing indicators are never held.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        message_repository: Optional[MessageRepositoryInterface] = None,
        account_repository: Optional[AccountRepositoryInterface] = None,
        deferred: bool = False,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            registry: Connection registry owned by the application
            message_repository: Message persistence, required for chat sends
            account_repository: Account lookup, used to validate recipients
            deferred: Hold entity pushes until flush()
        """
        self._registry = registry
        self._message_repository = message_repository
        self._account_repository = account_repository
        self._deferred = deferred
        self._pending: List[PendingPush] = []

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def deliver_to_account(
        self, account_id: int, event: str, payload: Dict[str, Any]
    ) -> bool:
        """
        Push event to the account's live connection.

        Returns:
            True if the event was handed to a connection, False otherwise
        """
        connection = await self._registry.get(account_id)
        if connection is None:
            return False
        return await self._send(connection, event, payload)

    async def flush(self) -> int:
        """
        Deliver held pushes in the order they were produced.

        Returns:
            Number of pushes handed to a live connection
        """
        pending, self._pending = self._pending, []
        delivered = 0
        for target, event, payload in pending:
            if isinstance(target, Connection):
                delivered += await self._send(target, event, payload)
            else:
                delivered += await self.deliver_to_account(target, event, payload)
        return delivered

    def discard(self) -> int:
        """Drop held pushes. Returns how many were dropped."""
        dropped = len(self._pending)
        self._pending = []
        if dropped:
            logger.debug("Discarded %d realtime pushes after rollback", dropped)
        return dropped

    async def send_message(
        self, connection: Connection, recipient_id: int, content: str
    ) -> Message:
        """
        Persist a chat message, push it to the recipient and ack the sender.

        Raises:
            ValidationException: If content is empty or too long
            ResourceNotFoundException: If the recipient does not exist
        """
        if self._message_repository is None:
            raise RuntimeError("Message repository is required to send messages")

        content = (content or "").strip()
        if not content or len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                "Validation failed",
                errors=[
                    {
                        "field": "content",
                        "message": f"Message must be between 1 and {MAX_MESSAGE_LENGTH} characters",
                    }
                ],
            )

        if self._account_repository is not None:
            recipient = await self._account_repository.get_user_by_id(recipient_id)
            if recipient is None:
                raise ResourceNotFoundException("Recipient not found", code="USER_NOT_FOUND")

        message = await self._message_repository.create_message(
            Message(
                id=None,
                sender_id=connection.account_id,
                recipient_id=recipient_id,
                content=content,
            )
        )

        payload = {"message": message.to_payload()}
        await self._emit(recipient_id, RealtimeEvent.RECEIVE_MESSAGE.value, payload)
        await self._emit(connection, RealtimeEvent.MESSAGE_SENT.value, payload)

        return message

    async def typing(self, connection: Connection, recipient_id: int) -> bool:
        return await self.deliver_to_account(
            recipient_id,
            RealtimeEvent.USER_TYPING.value,
            {"userId": connection.account_id},
        )

    async def stop_typing(self, connection: Connection, recipient_id: int) -> bool:
        return await self.deliver_to_account(
            recipient_id,
            RealtimeEvent.USER_STOPPED_TYPING.value,
            {"userId": connection.account_id},
        )

    async def notify_message_seen(self, sender_id: int, message_id: int) -> bool:
        """Tell the original sender that one of their messages was seen."""
        return await self._emit(
            sender_id, RealtimeEvent.MESSAGE_SEEN.value, {"messageId": message_id}
        )

    async def deliver_notification(self, notification: Notification) -> bool:
        """Push a persisted notification to its recipient."""
        return await self._emit(
            notification.recipient_id,
            RealtimeEvent.NEW_NOTIFICATION.value,
            {"notification": notification.to_payload()},
        )

    async def _emit(
        self, target: Union[int, Connection], event: str, payload: Dict[str, Any]
    ) -> bool:
        """Send now, or hold until flush() when deferred. Held pushes report False."""
        if self._deferred:
            self._pending.append((target, event, payload))
            return False
        if isinstance(target, Connection):
            return await self._send(target, event, payload)
        return await self.deliver_to_account(target, event, payload)

    async def _send(self, connection: Connection, event: str, payload: Dict[str, Any]) -> bool:
        try:
            await connection.send(str(event), payload)
            return True
        except Exception:
            logger.warning(
                "Delivery of %s to account %s failed",
                event,
                connection.account_id,
                exc_info=True,
            )
            return False
