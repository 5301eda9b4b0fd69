"""User API schemas."""

from typing import List, Optional

from pydantic import Field

from socialhub.api.schemas import AccountResponse, CamelModel, PaginationResponse


class ProfileResponse(AccountResponse):
    """Public profile, with ``isFollowing`` for authenticated viewers."""

    is_following: Optional[bool] = None


class ProfileData(CamelModel):
    user: ProfileResponse


class UpdateProfileRequest(CamelModel):
    """Profile update schema. Omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=160)
    website: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=50)


class FollowListData(CamelModel):
    users: List[AccountResponse]
    pagination: PaginationResponse
