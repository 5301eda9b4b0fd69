"""Authentication service implementations."""

import hashlib
import logging
import re
import secrets
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from socialhub.settings import Settings, get_settings
from .entities import Account, AuthResult, TokenPair, TokenPayload
from .exceptions import (
    InvalidCredentialsException,
    InvalidRefreshTokenException,
    InvalidResetTokenException,
    InvalidTokenException,
    UserAlreadyExistsException,
    UserNotFoundException,
)
from .interfaces import (
    AccountRepositoryInterface,
    PasswordServiceInterface,
    TokenServiceInterface,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_TOKEN_SHAPE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hash_reset_token(token: str) -> str:
    """One-way hash of a password reset ticket, as stored on the account."""
    return hashlib.sha256(token.encode()).hexdigest()


def redact_email(email: str) -> str:
    """Redact an email address for logging."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class PasswordService(PasswordServiceInterface):
    """
    BCrypt-based password hashing service.

    Every hash embeds a fresh random salt, so hashing the same password twice
    yields two different verifiers that both verify.
    """

    def __init__(self, rounds: int = 12) -> None:
        """
        Initialize password context with bcrypt.

        Args:
            rounds: bcrypt cost factor
        """
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )
        self._dummy_hash: Optional[str] = None

    def hash_password(self, password: str) -> str:
        """
        Hash a password securely using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        Raises:
            ValueError: If password is empty or not a string
        """
        if not isinstance(password, str) or not password:
            raise ValueError("Password must be a non-empty string")
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify password against bcrypt hash.

        Malformed or unrecognised hashes verify as False.
        """
        if not isinstance(password, str) or not password:
            return False
        if not isinstance(hashed_password, str) or not hashed_password:
            return False
        try:
            return self._pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False

    def burn_verification(self, password: str) -> None:
        """Spend one verification's worth of work against a throwaway hash."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_password("timing-equalization-password")
        self.verify_password(password or "x", self._dummy_hash)


class TokenService(TokenServiceInterface):
    """
    JWT-based token service with distinct access and refresh token classes.

    Each class is signed with its own secret and carries a ``type`` claim;
    a token of one class never verifies as the other.
    """

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> None:
        """
        Initialize token service.

        Args:
            settings: Application settings (defaults to cached settings)
            clock: Callable returning the current UTC time
        """
        self._settings = settings or get_settings()
        self._clock = clock or utc_now
        self._algorithm = self._settings.jwt_algorithm
        self._access_secret = self._settings.jwt_access_secret
        self._refresh_secret = self._settings.jwt_refresh_secret
        self._access_ttl = self._settings.access_token_ttl
        self._refresh_ttl = self._settings.refresh_token_ttl

    def issue_access(self, claims: Dict[str, Any]) -> str:
        """Sign ``claims`` as an access token."""
        return self._issue(claims, ACCESS_TOKEN_TYPE, self._access_secret, self._access_ttl)

    def issue_refresh(self, claims: Dict[str, Any]) -> str:
        """Sign ``claims`` as a refresh token."""
        return self._issue(claims, REFRESH_TOKEN_TYPE, self._refresh_secret, self._refresh_ttl)

    def create_access_token(self, account: Account) -> str:
        return self.issue_access({"userId": account.id, "email": account.email})

    def create_refresh_token(self, account: Account) -> str:
        return self.issue_refresh({"userId": account.id})

    def create_token_pair(self, account: Account) -> TokenPair:
        """
        Create access and refresh token pair for account.

        Args:
            account: Persisted account entity

        Returns:
            Token pair with access and refresh tokens
        """
        return TokenPair(
            access_token=self.create_access_token(account),
            refresh_token=self.create_refresh_token(account),
            expires_in=int(self._access_ttl.total_seconds()),
        )

    def verify_access(self, token: str) -> TokenPayload:
        return self._verify(token, ACCESS_TOKEN_TYPE, self._access_secret)

    def verify_refresh(self, token: str) -> TokenPayload:
        return self._verify(token, REFRESH_TOKEN_TYPE, self._refresh_secret)

    def _issue(self, claims: Dict[str, Any], token_type: str, secret: str, ttl) -> str:
        now = self._clock()
        payload = dict(claims)
        payload.update(
            {
                "iat": now,
                "exp": now + ttl,
                "type": token_type,
                "jti": secrets.token_hex(16),
            }
        )
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _verify(self, token: str, token_type: str, secret: str) -> TokenPayload:
        """
        Decode and validate a token of the given class.

        Tampering, expiry, wrong class and malformed claims all raise the same
        InvalidTokenException.
        """
        if not isinstance(token, str) or not _TOKEN_SHAPE.match(token):
            raise InvalidTokenException()

        try:
            payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        except JWTError:
            raise InvalidTokenException()

        if payload.get("type") != token_type:
            raise InvalidTokenException()

        try:
            return TokenPayload(
                user_id=int(payload["userId"]),
                exp=int(payload["exp"]),
                iat=int(payload["iat"]),
                token_type=token_type,
                email=payload.get("email"),
                jti=payload.get("jti"),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenException()


class AuthenticationService:
    """
    High-level authentication service orchestrating the session lifecycle.

    Combines password verification, token management, and account persistence
    to provide register, login, logout, refresh and password reset flows.
    Exactly one refresh token is valid per account: the one stored on it.
    """

    def __init__(
        self,
        account_repository: AccountRepositoryInterface,
        password_service: PasswordServiceInterface,
        token_service: TokenServiceInterface,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize authentication service.

        Args:
            account_repository: Account data access interface
            password_service: Password hashing service
            token_service: Token management service
            settings: Application settings
            clock: Callable returning the current UTC time
        """
        self._account_repository = account_repository
        self._password_service = password_service
        self._token_service = token_service
        self._settings = settings or get_settings()
        self._clock = clock or utc_now

    async def register_user(
        self, username: str, email: str, password: str, name: str
    ) -> AuthResult:
        """
        Register new account and open its first session.

        Email uniqueness is checked before username uniqueness.

        Raises:
            UserAlreadyExistsException: If email or username already exists
        """
        username = username.strip().lower()
        email = email.strip().lower()

        if await self._account_repository.get_user_by_email(email):
            raise UserAlreadyExistsException("Email already registered")
        if await self._account_repository.get_user_by_username(username):
            raise UserAlreadyExistsException("Username already taken")

        hashed_password = self._password_service.hash_password(password)
        account = await self._account_repository.create_user(
            Account(
                id=None,
                username=username,
                email=email,
                name=name.strip(),
                hashed_password=hashed_password,
            )
        )

        tokens = self._token_service.create_token_pair(account)
        await self._account_repository.set_refresh_token(account.id, tokens.refresh_token)

        logger.info("Account registered: id=%s username=%s", account.id, account.username)
        return AuthResult(account=account.sanitized(), tokens=tokens)

    async def authenticate_user(self, email: str, password: str) -> AuthResult:
        """
        Authenticate account by email and password and open a new session.

        The new refresh token overwrites the stored one, which invalidates the
        refresh token of any previous session.

        Raises:
            InvalidCredentialsException: If email is unknown or password is wrong
        """
        email = email.strip().lower()
        account = await self._account_repository.get_user_by_email(email)

        if account is None:
            self._password_service.burn_verification(password)
            logger.warning("Login failed for %s", redact_email(email))
            raise InvalidCredentialsException()

        if not self._password_service.verify_password(password, account.hashed_password):
            logger.warning("Login failed for %s", redact_email(email))
            raise InvalidCredentialsException()

        tokens = self._token_service.create_token_pair(account)
        await self._account_repository.set_refresh_token(account.id, tokens.refresh_token)

        logger.info("Account logged in: id=%s", account.id)
        return AuthResult(account=account.sanitized(), tokens=tokens)

    async def logout(self, account: Account) -> None:
        """Clear the stored refresh token. Safe to repeat."""
        await self._account_repository.set_refresh_token(account.id, None)

    async def refresh_access_token(self, account: Account) -> str:
        """
        Issue a new access token.

        The caller must have passed the refresh check
        (``authenticate_refresh_token``); the refresh token is not rotated.
        """
        return self._token_service.create_access_token(account)

    async def forgot_password(self, email: str) -> Optional[str]:
        """
        Start a password reset.

        Only the SHA-256 of the ticket is stored, together with its expiry.

        Returns:
            Plaintext reset ticket for out-of-band delivery, or None when no
            account has this email
        """
        email = email.strip().lower()
        account = await self._account_repository.get_user_by_email(email)
        if account is None:
            logger.info("Password reset requested for unknown email %s", redact_email(email))
            return None

        ticket = secrets.token_hex(32)
        expires_at = self._clock() + self._settings.password_reset_ttl
        await self._account_repository.set_reset_token(
            account.id, hash_reset_token(ticket), expires_at
        )

        logger.info("Password reset ticket issued for account id=%s", account.id)
        return ticket

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Complete a password reset with a plaintext ticket.

        Raises:
            InvalidResetTokenException: If no account holds the ticket or it expired
        """
        if not token:
            raise InvalidResetTokenException()

        account = await self._account_repository.get_user_by_reset_token(
            hash_reset_token(token), self._clock()
        )
        if account is None:
            raise InvalidResetTokenException()

        hashed_password = self._password_service.hash_password(new_password)
        await self._account_repository.set_password(account.id, hashed_password)
        await self._account_repository.clear_reset_token(account.id)

        logger.info("Password reset completed for account id=%s", account.id)

    async def authenticate_access_token(self, token: str) -> Account:
        """
        Resolve the account behind an access token.

        Returns:
            Sanitized account view

        Raises:
            InvalidTokenException: If token is invalid
            UserNotFoundException: If the account no longer exists
        """
        payload = self._token_service.verify_access(token)

        account = await self._account_repository.get_user_by_id(payload.user_id)
        if account is None:
            raise UserNotFoundException(str(payload.user_id))

        return account.sanitized()

    async def authenticate_refresh_token(self, token: str) -> Account:
        """
        Resolve the account behind a refresh token.

        The token must verify and must equal the refresh token currently
        stored on the account; a superseded token is rejected even before it
        expires.

        Returns:
            Full account entity

        Raises:
            InvalidRefreshTokenException: On any failure
        """
        try:
            payload = self._token_service.verify_refresh(token)
        except InvalidTokenException:
            raise InvalidRefreshTokenException()

        account = await self._account_repository.get_user_by_id(payload.user_id)
        if account is None or not account.has_refresh_token(token):
            raise InvalidRefreshTokenException()

        return account
