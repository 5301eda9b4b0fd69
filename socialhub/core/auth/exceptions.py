"""Authentication exceptions."""

from socialhub.core.exceptions import DomainException


class AuthenticationException(DomainException):
    """Base exception for authentication errors."""

    code = "AUTHENTICATION_ERROR"
    status_code = 401


class InvalidCredentialsException(AuthenticationException):
    """Raised when login credentials are invalid."""

    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class UserAlreadyExistsException(DomainException):
    """Raised when trying to create user that already exists."""

    code = "USER_EXISTS"
    status_code = 409

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NoTokenException(AuthenticationException):
    """Raised when a protected endpoint is called without a bearer token."""

    code = "NO_TOKEN"

    def __init__(self) -> None:
        super().__init__("Access token is required")


class InvalidTokenException(AuthenticationException):
    """Raised when token is invalid, malformed or expired."""

    code = "INVALID_TOKEN"

    def __init__(self, reason: str = "Invalid or expired access token") -> None:
        super().__init__(reason)


class UserNotFoundException(AuthenticationException):
    """Raised when a valid token refers to an account that no longer exists."""

    code = "USER_NOT_FOUND"

    def __init__(self, identifier: str) -> None:
        super().__init__("User not found", details=f"User id: {identifier}")
        self.identifier = identifier


class NoRefreshTokenException(AuthenticationException):
    """Raised when the refresh endpoint is called without a refresh token."""

    code = "NO_REFRESH_TOKEN"

    def __init__(self) -> None:
        super().__init__("Refresh token is required")


class InvalidRefreshTokenException(AuthenticationException):
    """Raised when a refresh token is invalid, expired or superseded."""

    code = "INVALID_REFRESH_TOKEN"

    def __init__(self) -> None:
        super().__init__("Invalid or expired refresh token")


class NotAuthenticatedException(AuthenticationException):
    """Raised when an authorization check runs without an authenticated user."""

    code = "NOT_AUTHENTICATED"

    def __init__(self) -> None:
        super().__init__("Authentication required")


class ForbiddenException(AuthenticationException):
    """Raised when the authenticated user lacks admin privileges."""

    code = "FORBIDDEN"
    status_code = 403

    def __init__(self) -> None:
        super().__init__("Admin privileges required")


class InvalidResetTokenException(DomainException):
    """Raised when a password reset ticket is unknown or expired."""

    code = "INVALID_RESET_TOKEN"
    status_code = 400

    def __init__(self) -> None:
        super().__init__("Invalid or expired reset token")
