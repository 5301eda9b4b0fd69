"""Post API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from socialhub.api.schemas import AccountSummaryResponse, CamelModel, PaginationResponse


class PostCreateRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=500, description="Post text")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content cannot be blank")
        return value


class CommentCreateRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=280, description="Comment text")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content cannot be blank")
        return value


class PostResponse(CamelModel):
    """Post with engagement counters and author summary."""

    id: int
    author_id: int
    content: str
    original_post_id: Optional[int] = None
    like_count: int = 0
    comment_count: int = 0
    repost_count: int = 0
    author: Optional[AccountSummaryResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentResponse(CamelModel):
    id: int
    post_id: int
    author_id: int
    content: str
    author: Optional[AccountSummaryResponse] = None
    created_at: Optional[datetime] = None


class PostData(CamelModel):
    post: PostResponse


class CommentData(CamelModel):
    comment: CommentResponse


class CommentListData(CamelModel):
    comments: List[CommentResponse]
    pagination: PaginationResponse


class PostListData(CamelModel):
    posts: List[PostResponse]
    pagination: PaginationResponse


class BookmarkListData(CamelModel):
    bookmarks: List[PostResponse]
    pagination: PaginationResponse
