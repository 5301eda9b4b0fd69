"""Domain exceptions for the social platform."""

from typing import Dict, List, Optional


class DomainException(Exception):
    """
    Base exception for domain-related errors.

    Subclasses set ``code`` (the wire error code) and ``status_code``
    (the HTTP status the API boundary maps the error to).
    """

    code: str = "DOMAIN_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            details: Additional error details (never sent to clients)
            code: Override for the class-level error code
        """
        super().__init__(message)
        self.message = message
        self.details = details
        if code is not None:
            self.code = code


class ValidationException(DomainException):
    """Raised when input fails validation."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class BadRequestException(DomainException):
    """Raised when a request is well-formed but cannot be applied."""

    code = "BAD_REQUEST"
    status_code = 400


class ResourceNotFoundException(DomainException):
    """Raised when a referenced resource does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class PermissionDeniedException(DomainException):
    """Raised when the caller may not act on a resource."""

    code = "FORBIDDEN"
    status_code = 403


class ConflictException(DomainException):
    """Raised when an action conflicts with existing state."""

    code = "CONFLICT"
    status_code = 409


class RateLimitExceededException(DomainException):
    """Raised when a client exceeds the request rate limit."""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429

    def __init__(self, retry_after: int) -> None:
        super().__init__("Too many requests, please try again later")
        self.retry_after = retry_after
