"""Authentication service interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import Account, TokenPair, TokenPayload


class PasswordServiceInterface(ABC):
    """Interface for password hashing and verification."""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Hash a password securely.

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        Raises:
            ValueError: If password is empty or not a string
        """
        pass

    @abstractmethod
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Args:
            password: Plain text password
            hashed_password: Stored password hash

        Returns:
            True if password matches, False otherwise (never raises)
        """
        pass


class TokenServiceInterface(ABC):
    """Interface for JWT token operations."""

    @abstractmethod
    def create_access_token(self, account: Account) -> str:
        """Create a short-lived access token for account."""
        pass

    @abstractmethod
    def create_refresh_token(self, account: Account) -> str:
        """Create a long-lived refresh token for account."""
        pass

    @abstractmethod
    def create_token_pair(self, account: Account) -> TokenPair:
        """Create access and refresh token pair for account."""
        pass

    @abstractmethod
    def verify_access(self, token: str) -> TokenPayload:
        """
        Verify an access token.

        Raises:
            InvalidTokenException: If token is malformed, tampered or expired
        """
        pass

    @abstractmethod
    def verify_refresh(self, token: str) -> TokenPayload:
        """
        Verify a refresh token.

        Raises:
            InvalidTokenException: If token is malformed, tampered or expired
        """
        pass


class AccountRepositoryInterface(ABC):
    """Interface for account data access operations."""

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> Optional[Account]:
        """
        Get account by ID.

        Args:
            user_id: Account identifier

        Returns:
            Account entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[Account]:
        """Get account by lower-cased username."""
        pass

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[Account]:
        """Get account by lower-cased email."""
        pass

    @abstractmethod
    async def get_users_by_ids(self, user_ids: List[int]) -> List[Account]:
        """Get accounts by IDs, preserving the order of ``user_ids``."""
        pass

    @abstractmethod
    async def create_user(self, account: Account) -> Account:
        """
        Create new account.

        Args:
            account: Account entity to create

        Returns:
            Created account entity with ID

        Raises:
            UserAlreadyExistsException: If username or email already exists
        """
        pass

    @abstractmethod
    async def update_profile(self, user_id: int, fields: Dict[str, Any]) -> Optional[Account]:
        """Update profile fields and return the refreshed account."""
        pass

    @abstractmethod
    async def set_refresh_token(self, user_id: int, token: Optional[str]) -> None:
        """Store (or clear, with None) the account's current refresh token."""
        pass

    @abstractmethod
    async def set_password(self, user_id: int, hashed_password: str) -> None:
        """Replace the account's password verifier."""
        pass

    @abstractmethod
    async def set_admin(self, user_id: int, is_admin: bool) -> None:
        """Grant or revoke admin privileges."""
        pass

    @abstractmethod
    async def set_reset_token(
        self, user_id: int, token_hash: str, expires_at: datetime
    ) -> None:
        """Store a pending password reset ticket hash and its expiry."""
        pass

    @abstractmethod
    async def get_user_by_reset_token(
        self, token_hash: str, now: datetime
    ) -> Optional[Account]:
        """Get the account holding ``token_hash`` with an expiry after ``now``."""
        pass

    @abstractmethod
    async def clear_reset_token(self, user_id: int) -> None:
        """Clear both password reset fields."""
        pass

    @abstractmethod
    async def cleanup_expired_reset_tokens(self, now: datetime) -> int:
        """
        Clear reset fields whose expiry has passed.

        Returns:
            Number of accounts cleaned
        """
        pass

    @abstractmethod
    async def list_users(self, offset: int, limit: int) -> List[Account]:
        """List accounts newest first."""
        pass

    @abstractmethod
    async def count_users(self, created_since: Optional[datetime] = None) -> int:
        """Count accounts, optionally only those created since a moment."""
        pass
