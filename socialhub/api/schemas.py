"""Shared API schemas and response envelopes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# Largest id a 64-bit integer primary key can hold
MAX_RESOURCE_ID = 2**63 - 1


class CamelModel(BaseModel):
    """Base schema with camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel, Generic[DataT]):
    """Success envelope carrying data."""

    success: bool = True
    data: DataT


class MessageResponse(CamelModel):
    """Success envelope carrying a human-readable message."""

    success: bool = True
    message: str = Field(..., examples=["Logged out successfully"])


class ErrorBody(BaseModel):
    """Error details inside the failure envelope."""

    message: str = Field(..., examples=["Invalid or expired access token"])
    code: str = Field(..., examples=["INVALID_TOKEN"])
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Failure envelope shared by every endpoint."""

    success: bool = False
    error: ErrorBody


class PaginationResponse(CamelModel):
    """Pagination metadata for list responses."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationResponse":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)


@dataclass(frozen=True)
class PageParams:
    """Validated page/limit query parameters."""

    page: int
    limit: int


class AccountSummaryResponse(CamelModel):
    """Compact account view embedded in posts, messages and notifications."""

    id: int
    username: str
    name: str
    profile_image: str = ""


class AccountResponse(CamelModel):
    """
    Public account view.

    Never carries the password verifier, refresh token or reset ticket fields.
    """

    id: int
    username: str
    email: str
    name: str
    bio: str = ""
    profile_image: str = ""
    website: str = ""
    location: str = ""
    follower_count: int = 0
    following_count: int = 0
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AccountListData(CamelModel):
    users: List[AccountResponse]
    pagination: PaginationResponse


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input data"},
    401: {"model": ErrorResponse, "description": "Authentication required"},
}
