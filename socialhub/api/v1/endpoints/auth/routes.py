"""Authentication API routes."""

import logging
from typing import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, status

from socialhub.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_password_reset_sender,
    get_refresh_user,
)
from socialhub.api.schemas import (
    AccountResponse,
    ErrorResponse,
    MessageResponse,
    SuccessResponse,
)
from socialhub.core.auth.entities import Account, AuthResult
from socialhub.core.auth.services import AuthenticationService
from socialhub.settings import get_settings
from .schemas import (
    AccessTokenData,
    AuthData,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    ResetTokenData,
    UserData,
    UserLoginRequest,
    UserRegistrationRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

FORGOT_PASSWORD_MESSAGE = "If the email exists, a reset link has been sent"


def _auth_data(result: AuthResult) -> AuthData:
    return AuthData(
        user=AccountResponse.model_validate(result.account),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@router.post(
    "/register",
    response_model=SuccessResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input data"},
        409: {"model": ErrorResponse, "description": "Email or username already taken"},
    },
)
async def register_user(
    user_data: UserRegistrationRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> SuccessResponse[AuthData]:
    """
    Register a new user account.

    Username and email must be unique. The response opens the first session
    with an access and refresh token.
    """
    result = await auth_service.register_user(
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
    )
    return SuccessResponse(data=_auth_data(result))


@router.post(
    "/login",
    response_model=SuccessResponse[AuthData],
    summary="User login",
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    credentials: UserLoginRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> SuccessResponse[AuthData]:
    """
    Authenticate by email and password.

    Any refresh token from an earlier session stops working.
    """
    result = await auth_service.authenticate_user(
        email=credentials.email,
        password=credentials.password,
    )
    return SuccessResponse(data=_auth_data(result))


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
)
async def logout(
    current_user: Account = Depends(get_current_user),
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.logout(current_user)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/refresh",
    response_model=SuccessResponse[AccessTokenData],
    summary="Refresh access token",
    responses={
        401: {"model": ErrorResponse, "description": "Missing, invalid or superseded refresh token"},
    },
)
async def refresh_token(
    account: Account = Depends(get_refresh_user),
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> SuccessResponse[AccessTokenData]:
    """
    Issue a new access token.

    The refresh token in the request body must be the one stored for the
    account; it stays valid until the next login or logout.
    """
    access_token = await auth_service.refresh_access_token(account)
    return SuccessResponse(data=AccessTokenData(access_token=access_token))


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    response_model_exclude_none=True,
    summary="Request password reset",
)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    auth_service: AuthenticationService = Depends(get_auth_service),
    send_reset_ticket: Callable[[str, str], None] = Depends(get_password_reset_sender),
) -> ForgotPasswordResponse:
    """
    Start a password reset.

    The response is the same whether or not the email is registered. The
    reset ticket is delivered by email.
    """
    ticket = await auth_service.forgot_password(request.email)

    response = ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)
    if ticket is None:
        return response

    background_tasks.add_task(send_reset_ticket, request.email, ticket)

    settings = get_settings()
    if settings.expose_reset_token and settings.is_development:
        response.data = ResetTokenData(reset_token=ticket)
    return response


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Complete password reset",
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired reset token"}},
)
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.reset_password(request.token, request.new_password)
    return MessageResponse(message="Password reset successfully")


@router.get(
    "/me",
    response_model=SuccessResponse[UserData],
    summary="Get current user",
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
)
async def get_current_user_info(
    current_user: Account = Depends(get_current_user),
) -> SuccessResponse[UserData]:
    """Return the public view of the authenticated account."""
    return SuccessResponse(data=UserData(user=AccountResponse.model_validate(current_user)))
