"""Direct message API routes."""

from fastapi import APIRouter, Depends, Path

from socialhub.api.dependencies import get_current_user, get_message_service, get_pagination
from socialhub.api.schemas import (
    MAX_RESOURCE_ID,
    ErrorResponse,
    PageParams,
    PaginationResponse,
    SuccessResponse,
)
from socialhub.core.auth.entities import Account
from socialhub.core.services.message_service import MessageService
from .schemas import (
    ConversationListData,
    ConversationResponse,
    MessageItemResponse,
    MessageListData,
    SeenData,
)

router = APIRouter(prefix="/messages", tags=["Messages"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.get(
    "/conversations",
    response_model=SuccessResponse[ConversationListData],
    summary="List conversations",
)
async def list_conversations(
    current_user: Account = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> SuccessResponse[ConversationListData]:
    """List conversation partners with the latest message and unread count."""
    conversations = await message_service.list_conversations(current_user)
    return SuccessResponse(
        data=ConversationListData(
            conversations=[
                ConversationResponse.model_validate(conversation)
                for conversation in conversations
            ]
        )
    )


@router.get(
    "/{user_id}",
    response_model=SuccessResponse[MessageListData],
    summary="Get conversation history",
    responses=NOT_FOUND,
)
async def get_messages(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    paging: PageParams = Depends(get_pagination),
    current_user: Account = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> SuccessResponse[MessageListData]:
    """
    Get messages exchanged with another user.

    Page 1 holds the newest messages; each page is ordered oldest first.
    """
    messages, total = await message_service.get_messages(
        current_user, user_id, paging.page, paging.limit
    )
    return SuccessResponse(
        data=MessageListData(
            messages=[MessageItemResponse.model_validate(message) for message in messages],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )


@router.put(
    "/{user_id}/seen",
    response_model=SuccessResponse[SeenData],
    summary="Mark messages as seen",
    responses=NOT_FOUND,
)
async def mark_seen(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service),
) -> SuccessResponse[SeenData]:
    updated = await message_service.mark_seen(current_user, user_id)
    return SuccessResponse(data=SeenData(updated=updated))
