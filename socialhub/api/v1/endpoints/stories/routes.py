"""Story API routes."""

from fastapi import APIRouter, Depends, Path, status

from socialhub.api.dependencies import get_current_user, get_story_service
from socialhub.api.schemas import (
    ERROR_RESPONSES,
    MAX_RESOURCE_ID,
    ErrorResponse,
    MessageResponse,
    SuccessResponse,
)
from socialhub.core.auth.entities import Account
from socialhub.core.services.story_service import StoryService
from .schemas import (
    StoryCreateRequest,
    StoryData,
    StoryGroupResponse,
    StoryListData,
    StoryResponse,
)

router = APIRouter(prefix="/stories", tags=["Stories"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Story not found or expired"}}


@router.post(
    "",
    response_model=SuccessResponse[StoryData],
    status_code=status.HTTP_201_CREATED,
    summary="Create story",
    responses=ERROR_RESPONSES,
)
async def create_story(
    story_data: StoryCreateRequest,
    current_user: Account = Depends(get_current_user),
    story_service: StoryService = Depends(get_story_service),
) -> SuccessResponse[StoryData]:
    story = await story_service.create_story(current_user, story_data.image)
    return SuccessResponse(data=StoryData(story=StoryResponse.from_entity(story)))


@router.get(
    "",
    response_model=SuccessResponse[StoryListData],
    summary="Active stories of followed accounts and own",
    responses=ERROR_RESPONSES,
)
async def list_stories(
    current_user: Account = Depends(get_current_user),
    story_service: StoryService = Depends(get_story_service),
) -> SuccessResponse[StoryListData]:
    groups = await story_service.list_stories(current_user)
    return SuccessResponse(
        data=StoryListData(stories=[StoryGroupResponse.from_entity(group) for group in groups])
    )


@router.post(
    "/{story_id}/view",
    response_model=MessageResponse,
    summary="Mark story as viewed",
    responses=NOT_FOUND,
)
async def view_story(
    story_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    story_service: StoryService = Depends(get_story_service),
) -> MessageResponse:
    await story_service.view_story(current_user, story_id)
    return MessageResponse(message="Story marked as viewed")


@router.delete(
    "/{story_id}",
    response_model=MessageResponse,
    summary="Delete own story",
    responses={
        403: {"model": ErrorResponse, "description": "Not the author"},
        **NOT_FOUND,
    },
)
async def delete_story(
    story_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    story_service: StoryService = Depends(get_story_service),
) -> MessageResponse:
    await story_service.delete_story(current_user, story_id)
    return MessageResponse(message="Story deleted successfully")
