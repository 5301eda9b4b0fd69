"""Direct message history service."""

import logging
from typing import List, Tuple

from socialhub.core.auth.entities import Account
from socialhub.core.auth.interfaces import AccountRepositoryInterface
from socialhub.core.domain.entities import AccountSummary, Conversation, Message
from socialhub.core.exceptions import ResourceNotFoundException
from socialhub.core.realtime.dispatcher import RealtimeDispatcher
from .interfaces import MessageRepositoryInterface

logger = logging.getLogger(__name__)


class MessageService:
    """
    Conversation listing, message history and read receipts.

    Messages are sent over the realtime channel; this service covers the
    HTTP side of chat.
    """

    def __init__(
        self,
        message_repository: MessageRepositoryInterface,
        account_repository: AccountRepositoryInterface,
        dispatcher: RealtimeDispatcher,
    ):
        self._message_repository = message_repository
        self._account_repository = account_repository
        self._dispatcher = dispatcher

    async def list_conversations(self, account: Account) -> List[Conversation]:
        """
        List conversations of account, most recently active first.

        Returns:
            One entry per counterpart with the latest message and the number
            of unseen messages from that counterpart
        """
        latest = await self._message_repository.latest_per_counterpart(account.id)
        if not latest:
            return []

        unread = await self._message_repository.unread_counts(account.id)
        counterpart_ids = [message.counterpart_of(account.id) for message in latest]
        counterparts = {
            other.id: other
            for other in await self._account_repository.get_users_by_ids(counterpart_ids)
        }

        conversations = []
        for message in latest:
            other_id = message.counterpart_of(account.id)
            other = counterparts.get(other_id)
            if other is None:
                continue
            conversations.append(
                Conversation(
                    user=AccountSummary(
                        id=other.id,
                        username=other.username,
                        name=other.name,
                        profile_image=other.profile_image,
                    ),
                    last_message=message,
                    unread_count=unread.get(other_id, 0),
                )
            )
        return conversations

    async def get_messages(
        self, account: Account, other_id: int, page: int, limit: int
    ) -> Tuple[List[Message], int]:
        """
        Get one page of the conversation with another account.

        Pages are counted from the newest message; messages within a page are
        returned oldest first.

        Raises:
            ResourceNotFoundException: If the other account does not exist
        """
        await self._ensure_account(other_id)

        offset = (page - 1) * limit
        messages = await self._message_repository.list_between(
            account.id, other_id, offset, limit
        )
        total = await self._message_repository.count_between(account.id, other_id)
        return list(reversed(messages)), total

    async def mark_seen(self, account: Account, other_id: int) -> int:
        """
        Mark every unseen message from ``other_id`` as seen.

        Each changed message produces a ``message_seen`` event to its sender.

        Returns:
            Number of messages marked
        """
        await self._ensure_account(other_id)

        messages = await self._message_repository.mark_seen(account.id, other_id)
        for message in messages:
            await self._dispatcher.notify_message_seen(message.sender_id, message.id)

        if messages:
            logger.debug("Account %s saw %d messages from %s", account.id, len(messages), other_id)
        return len(messages)

    async def _ensure_account(self, account_id: int) -> None:
        if await self._account_repository.get_user_by_id(account_id) is None:
            raise ResourceNotFoundException("User not found", code="USER_NOT_FOUND")
