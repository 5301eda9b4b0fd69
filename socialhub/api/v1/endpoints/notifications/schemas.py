"""Notification API schemas."""

from datetime import datetime
from typing import List, Optional

from socialhub.api.schemas import AccountSummaryResponse, CamelModel, PaginationResponse
from socialhub.core.domain.enums import NotificationType


class NotificationResponse(CamelModel):
    id: int
    recipient_id: int
    actor_id: int
    type: NotificationType
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    read: bool = False
    actor: Optional[AccountSummaryResponse] = None
    created_at: Optional[datetime] = None


class NotificationListData(CamelModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: PaginationResponse
