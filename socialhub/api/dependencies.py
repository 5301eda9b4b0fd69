"""FastAPI dependency injection setup."""

import logging
from functools import lru_cache
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.requests import HTTPConnection

from socialhub.api.schemas import PageParams
from socialhub.api.v1.endpoints.auth.schemas import RefreshTokenRequest
from socialhub.core.auth.entities import Account
from socialhub.core.auth.exceptions import (
    AuthenticationException,
    ForbiddenException,
    NoRefreshTokenException,
    NoTokenException,
    NotAuthenticatedException,
)
from socialhub.core.auth.services import AuthenticationService, PasswordService, TokenService
from socialhub.core.realtime.dispatcher import RealtimeDispatcher
from socialhub.core.realtime.registry import ConnectionRegistry
from socialhub.core.services.admin_service import AdminService
from socialhub.core.services.message_service import MessageService
from socialhub.core.services.notification_service import NotificationService
from socialhub.core.services.post_service import PostService
from socialhub.core.services.story_service import StoryService
from socialhub.core.services.user_service import UserService
from socialhub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from socialhub.infrastructure.database.repositories.follow_repository import SqlFollowRepository
from socialhub.infrastructure.database.repositories.message_repository import SqlMessageRepository
from socialhub.infrastructure.database.repositories.notification_repository import (
    SqlNotificationRepository,
)
from socialhub.infrastructure.database.repositories.post_repository import SqlPostRepository
from socialhub.infrastructure.database.repositories.story_repository import SqlStoryRepository
from socialhub.infrastructure.database.session import get_session, get_session_maker
from socialhub.infrastructure.tasks.email_tasks import enqueue_password_reset_email
from socialhub.settings import get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for dependency injection.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_session():
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Provide the session factory for handlers that manage their own sessions."""
    return get_session_maker()


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """Provide the application's connection registry."""
    return connection.app.state.connection_registry


@lru_cache()
def get_password_service() -> PasswordService:
    return PasswordService(rounds=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_service() -> TokenService:
    return TokenService(get_settings())


def get_password_reset_sender() -> Callable[[str, str], None]:
    """Provide the out-of-band delivery channel for reset tickets."""
    return enqueue_password_reset_email


def get_pagination(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PageParams:
    return PageParams(page=page, limit=limit)


async def get_auth_service(
    session: AsyncSession = Depends(get_database_session),
) -> AuthenticationService:
    """
    Provide authentication service for dependency injection.

    Args:
        session: Database session

    Returns:
        AuthenticationService: Authentication service bound to the request session
    """
    return AuthenticationService(
        SqlAccountRepository(session),
        get_password_service(),
        get_token_service(),
        get_settings(),
    )


async def get_realtime_dispatcher(
    session: AsyncSession = Depends(get_database_session),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> AsyncGenerator[RealtimeDispatcher, None]:
    """
    Provide a deferred realtime dispatcher bound to the request session.

    Pushes raised while handling the request are delivered only after the
    session commits; a failed request or commit drops them.

    Yields:
        RealtimeDispatcher: Dispatcher holding pushes until commit
    """
    dispatcher = RealtimeDispatcher(
        registry,
        message_repository=SqlMessageRepository(session),
        account_repository=SqlAccountRepository(session),
        deferred=True,
    )
    try:
        yield dispatcher
        await session.commit()
    except Exception:
        dispatcher.discard()
        raise
    await dispatcher.flush()


async def get_notification_service(
    session: AsyncSession = Depends(get_database_session),
    dispatcher: RealtimeDispatcher = Depends(get_realtime_dispatcher),
) -> NotificationService:
    return NotificationService(SqlNotificationRepository(session), dispatcher)


async def get_user_service(
    session: AsyncSession = Depends(get_database_session),
    notification_service: NotificationService = Depends(get_notification_service),
) -> UserService:
    return UserService(
        SqlAccountRepository(session),
        SqlFollowRepository(session),
        notification_service,
    )


async def get_post_service(
    session: AsyncSession = Depends(get_database_session),
    notification_service: NotificationService = Depends(get_notification_service),
) -> PostService:
    return PostService(SqlPostRepository(session), notification_service)


async def get_story_service(
    session: AsyncSession = Depends(get_database_session),
) -> StoryService:
    return StoryService(SqlStoryRepository(session), get_settings())


async def get_message_service(
    session: AsyncSession = Depends(get_database_session),
    dispatcher: RealtimeDispatcher = Depends(get_realtime_dispatcher),
) -> MessageService:
    return MessageService(SqlMessageRepository(session), SqlAccountRepository(session), dispatcher)


async def get_admin_service(
    session: AsyncSession = Depends(get_database_session),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> AdminService:
    return AdminService(SqlAccountRepository(session), SqlPostRepository(session), registry)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> Account:
    """
    Get current authenticated user from the bearer access token.

    The account is also attached to ``request.state.user`` for later gates.

    Args:
        request: Incoming request
        credentials: HTTP bearer token credentials
        auth_service: Authentication service

    Returns:
        Account: Sanitized view of the current account

    Raises:
        NoTokenException: If the Authorization header is missing or not Bearer
        InvalidTokenException: If token is invalid or expired
        UserNotFoundException: If the token's account no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise NoTokenException()

    try:
        account = await auth_service.authenticate_access_token(credentials.credentials)
    except AuthenticationException as e:
        logger.warning("Access token rejected on %s: %s", request.url.path, e.code)
        raise

    request.state.user = account
    return account


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> Optional[Account]:
    """
    Get current user if a valid token is provided, None otherwise.

    Returns:
        Account or None: Current account if authenticated
    """
    if credentials is None or not credentials.credentials:
        return None

    try:
        return await get_current_user(request, credentials, auth_service)
    except AuthenticationException:
        return None


async def get_refresh_user(
    request: Request,
    body: Optional[RefreshTokenRequest] = None,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> Account:
    """
    Get the account owning the refresh token from the request body.

    Raises:
        NoRefreshTokenException: If the body carries no refresh token
        InvalidRefreshTokenException: If the token is invalid, expired or superseded
    """
    if body is None or not body.refresh_token:
        raise NoRefreshTokenException()

    try:
        account = await auth_service.authenticate_refresh_token(body.refresh_token)
    except AuthenticationException as e:
        logger.warning("Refresh token rejected: %s", e.code)
        raise

    request.state.user = account.sanitized()
    return account


async def verify_admin(request: Request) -> Account:
    """
    Require the account attached by ``get_current_user`` to be an admin.

    Must be composed after ``get_current_user``.

    Raises:
        NotAuthenticatedException: If no account is attached to the request
        ForbiddenException: If the attached account is not an admin
    """
    account = getattr(request.state, "user", None)
    if account is None:
        raise NotAuthenticatedException()

    if not account.is_admin:
        logger.warning("Account %s denied admin access to %s", account.id, request.url.path)
        raise ForbiddenException()

    return account
