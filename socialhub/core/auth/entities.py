"""Authentication domain entities."""

import hmac
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Account:
    """
    Account entity for authentication and profile data.

    Attributes:
        id: Unique account identifier (None before persistence)
        username: Unique, lower-cased handle
        email: Unique, lower-cased email address
        name: Display name
        hashed_password: Password verifier (None in sanitized views)
        bio: Short profile description
        profile_image: Profile image URL
        website: Personal website
        location: Free-form location
        is_admin: Whether account has admin privileges
        follower_count: Number of accounts following this one
        following_count: Number of accounts this one follows
        refresh_token: Currently valid refresh token, if any
        reset_password_token: SHA-256 hex of the pending reset ticket
        reset_password_expires: Expiry of the pending reset ticket
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: Optional[int]
    username: str
    email: str
    name: str
    hashed_password: Optional[str] = None
    bio: str = ""
    profile_image: str = ""
    website: str = ""
    location: str = ""
    is_admin: bool = False
    follower_count: int = 0
    following_count: int = 0
    refresh_token: Optional[str] = None
    reset_password_token: Optional[str] = None
    reset_password_expires: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate account data after initialization."""
        if not self.username:
            raise ValueError("Username cannot be empty")
        if not self.email:
            raise ValueError("Email cannot be empty")
        if "@" not in self.email:
            raise ValueError("Invalid email format")

    def sanitized(self) -> "Account":
        """Return a copy without the password verifier and session secrets."""
        return replace(
            self,
            hashed_password=None,
            refresh_token=None,
            reset_password_token=None,
            reset_password_expires=None,
        )

    def has_refresh_token(self, token: str) -> bool:
        """Check whether ``token`` is the currently stored refresh token."""
        if not self.refresh_token or not token:
            return False
        return hmac.compare_digest(self.refresh_token.encode(), token.encode())


@dataclass(frozen=True)
class TokenPair:
    """
    Access and refresh token pair.

    Attributes:
        access_token: JWT access token
        refresh_token: JWT refresh token
        token_type: Token type (typically "bearer")
        expires_in: Access token expiration time in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 900

    def __post_init__(self) -> None:
        """Validate token pair data."""
        if not self.access_token:
            raise ValueError("Access token cannot be empty")
        if not self.refresh_token:
            raise ValueError("Refresh token cannot be empty")


@dataclass(frozen=True)
class TokenPayload:
    """
    Verified JWT claim set.

    Attributes:
        user_id: Account identifier the token was issued to
        exp: Expiration timestamp
        iat: Issued at timestamp
        token_type: Token class ("access" or "refresh")
        email: Account email (access tokens only)
        jti: Unique token identifier
    """

    user_id: int
    exp: int
    iat: int
    token_type: str = "access"
    email: Optional[str] = None
    jti: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate token payload data."""
        if self.exp <= self.iat:
            raise ValueError("Expiration must be after issued time")


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful registration or login."""

    account: Account
    tokens: TokenPair
