"""Story API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from socialhub.api.schemas import AccountSummaryResponse, CamelModel
from socialhub.core.domain.entities import Story, StoryGroup


class StoryCreateRequest(CamelModel):
    image: str = Field(..., min_length=1, max_length=500, description="Hosted image URL")

    @field_validator("image")
    @classmethod
    def image_is_http_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("Image must be an http(s) URL")
        return value


class StoryResponse(CamelModel):
    id: int
    author_id: int
    image: str
    expires_at: datetime
    is_viewed: bool = False
    author: Optional[AccountSummaryResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, story: Story) -> "StoryResponse":
        return cls(
            id=story.id,
            author_id=story.author_id,
            image=story.image,
            expires_at=story.expires_at,
            is_viewed=story.viewed,
            author=AccountSummaryResponse.model_validate(story.author) if story.author else None,
            created_at=story.created_at,
        )


class StoryGroupResponse(CamelModel):
    """Active stories of one author."""

    author: AccountSummaryResponse
    stories: List[StoryResponse]
    all_viewed: bool

    @classmethod
    def from_entity(cls, group: StoryGroup) -> "StoryGroupResponse":
        return cls(
            author=AccountSummaryResponse.model_validate(group.author),
            stories=[StoryResponse.from_entity(story) for story in group.stories],
            all_viewed=group.all_viewed,
        )


class StoryData(CamelModel):
    story: StoryResponse


class StoryListData(CamelModel):
    stories: List[StoryGroupResponse]
