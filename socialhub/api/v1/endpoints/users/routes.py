"""User profile and follow API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Path

from socialhub.api.dependencies import (
    get_current_user,
    get_optional_user,
    get_pagination,
    get_user_service,
)
from socialhub.api.schemas import (
    MAX_RESOURCE_ID,
    AccountResponse,
    ErrorResponse,
    MessageResponse,
    PageParams,
    PaginationResponse,
    SuccessResponse,
)
from socialhub.api.v1.endpoints.auth.schemas import UserData
from socialhub.core.auth.entities import Account
from socialhub.core.services.user_service import UserService
from .schemas import FollowListData, ProfileData, ProfileResponse, UpdateProfileRequest

router = APIRouter(prefix="/users", tags=["Users"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.put(
    "/profile",
    response_model=SuccessResponse[UserData],
    summary="Update own profile",
)
async def update_profile(
    changes: UpdateProfileRequest,
    current_user: Account = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> SuccessResponse[UserData]:
    account = await user_service.update_profile(
        current_user, changes.model_dump(exclude_unset=True, exclude_none=True)
    )
    return SuccessResponse(data=UserData(user=AccountResponse.model_validate(account)))


@router.get(
    "/{user_id}",
    response_model=SuccessResponse[ProfileData],
    response_model_exclude_none=True,
    summary="Get user profile",
    responses=NOT_FOUND,
)
async def get_profile(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    viewer: Optional[Account] = Depends(get_optional_user),
    user_service: UserService = Depends(get_user_service),
) -> SuccessResponse[ProfileData]:
    """
    Get a public profile.

    Authentication is optional; when present the response says whether the
    caller follows this user.
    """
    account, is_following = await user_service.get_profile(user_id, viewer)
    profile = ProfileResponse.model_validate(account).model_copy(
        update={"is_following": is_following}
    )
    return SuccessResponse(data=ProfileData(user=profile))


@router.post(
    "/{user_id}/follow",
    response_model=MessageResponse,
    summary="Follow user",
    responses=NOT_FOUND,
)
async def follow_user(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await user_service.follow(current_user, user_id)
    return MessageResponse(message="User followed successfully")


@router.delete(
    "/{user_id}/follow",
    response_model=MessageResponse,
    summary="Unfollow user",
    responses=NOT_FOUND,
)
async def unfollow_user(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await user_service.unfollow(current_user, user_id)
    return MessageResponse(message="User unfollowed successfully")


@router.get(
    "/{user_id}/followers",
    response_model=SuccessResponse[FollowListData],
    summary="List followers",
    responses=NOT_FOUND,
)
async def list_followers(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    paging: PageParams = Depends(get_pagination),
    user_service: UserService = Depends(get_user_service),
) -> SuccessResponse[FollowListData]:
    accounts, total = await user_service.list_followers(user_id, paging.page, paging.limit)
    return SuccessResponse(
        data=FollowListData(
            users=[AccountResponse.model_validate(account) for account in accounts],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )


@router.get(
    "/{user_id}/following",
    response_model=SuccessResponse[FollowListData],
    summary="List followed users",
    responses=NOT_FOUND,
)
async def list_following(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    paging: PageParams = Depends(get_pagination),
    user_service: UserService = Depends(get_user_service),
) -> SuccessResponse[FollowListData]:
    accounts, total = await user_service.list_following(user_id, paging.page, paging.limit)
    return SuccessResponse(
        data=FollowListData(
            users=[AccountResponse.model_validate(account) for account in accounts],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )
