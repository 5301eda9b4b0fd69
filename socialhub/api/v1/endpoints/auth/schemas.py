"""Authentication API schemas."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from socialhub.api.schemas import AccountResponse, CamelModel


class UserRegistrationRequest(CamelModel):
    """User registration request schema."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        pattern=r"^[A-Za-z0-9_]+$",
        description="Letters, numbers and underscores (3-30 characters)",
        examples=["john_doe"],
    )
    email: EmailStr = Field(
        ...,
        description="User email address",
        examples=["john.doe@example.com"],
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (8-128 characters)",
        examples=["secure_password_123"],
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Display name",
        examples=["John Doe"],
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value.strip()


class UserLoginRequest(CamelModel):
    """User login request schema."""

    email: EmailStr = Field(..., examples=["john.doe@example.com"])
    password: str = Field(..., min_length=1, examples=["secure_password_123"])


class RefreshTokenRequest(CamelModel):
    """Refresh token request schema."""

    refresh_token: Optional[str] = Field(
        None,
        description="Refresh token issued at login or registration",
    )


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., examples=["john.doe@example.com"])


class ResetPasswordRequest(CamelModel):
    """Password reset completion schema."""

    token: str = Field(..., min_length=1, description="Reset ticket from the email link")
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (8-128 characters)",
    )


class AuthData(CamelModel):
    """Account and token pair returned by register and login."""

    user: AccountResponse
    access_token: str
    refresh_token: str


class AccessTokenData(CamelModel):
    access_token: str


class UserData(CamelModel):
    user: AccountResponse


class ResetTokenData(CamelModel):
    reset_token: str


class ForgotPasswordResponse(CamelModel):
    """
    Forgot-password response.

    ``data`` is only present when reset tickets are exposed for local
    development.
    """

    success: bool = True
    message: str
    data: Optional[ResetTokenData] = None
