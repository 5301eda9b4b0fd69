"""Notification API routes."""

from fastapi import APIRouter, Depends

from socialhub.api.dependencies import (
    get_current_user,
    get_notification_service,
    get_pagination,
)
from socialhub.api.schemas import MessageResponse, PageParams, PaginationResponse, SuccessResponse
from socialhub.core.auth.entities import Account
from socialhub.core.services.notification_service import NotificationService
from .schemas import NotificationListData, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=SuccessResponse[NotificationListData],
    summary="List notifications",
)
async def list_notifications(
    paging: PageParams = Depends(get_pagination),
    current_user: Account = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> SuccessResponse[NotificationListData]:
    notifications, total, unread = await notification_service.list_notifications(
        current_user.id, paging.page, paging.limit
    )
    return SuccessResponse(
        data=NotificationListData(
            notifications=[
                NotificationResponse.model_validate(notification)
                for notification in notifications
            ],
            unread_count=unread,
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )


@router.put(
    "/read",
    response_model=MessageResponse,
    summary="Mark all notifications as read",
)
async def mark_all_read(
    current_user: Account = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MessageResponse:
    await notification_service.mark_all_read(current_user.id)
    return MessageResponse(message="Notifications marked as read")
