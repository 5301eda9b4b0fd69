"""Direct message API schemas."""

from datetime import datetime
from typing import List, Optional

from socialhub.api.schemas import AccountSummaryResponse, CamelModel, PaginationResponse


class MessageItemResponse(CamelModel):
    id: int
    sender_id: int
    recipient_id: int
    content: str
    seen: bool = False
    sender: Optional[AccountSummaryResponse] = None
    created_at: Optional[datetime] = None


class ConversationResponse(CamelModel):
    """One conversation partner with the latest exchanged message."""

    user: AccountSummaryResponse
    last_message: MessageItemResponse
    unread_count: int = 0


class ConversationListData(CamelModel):
    conversations: List[ConversationResponse]


class MessageListData(CamelModel):
    messages: List[MessageItemResponse]
    pagination: PaginationResponse


class SeenData(CamelModel):
    updated: int
