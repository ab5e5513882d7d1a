"""Exception hierarchy shared by every layer of the client."""

from __future__ import annotations

from typing import Any, Optional


class OpenAIError(Exception):
    """Base exception for everything raised by this package."""


class ConfigurationError(OpenAIError):
    """Raised when a client configuration is invalid."""


class BuildError(OpenAIError):
    """Raised when a builder cannot produce a request."""


class MissingFieldError(BuildError):
    """Raised by ``build()`` when a required field was never set."""

    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


# =============================================================================
# Remote errors
# =============================================================================

class APIError(OpenAIError):
    """The service answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int = None,
        type: str = None,
        param: str = None,
        code: str = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.type = type
        self.param = param
        self.code = code
        self.body = body

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class BadRequestError(APIError):
    """Raised for 400 errors."""
    pass


class AuthenticationError(APIError):
    """Raised for 401 errors."""
    pass


class PermissionDeniedError(APIError):
    """Raised for 403 errors."""
    pass


class NotFoundError(APIError):
    """Raised for 404 errors."""
    pass


class RateLimitError(APIError):
    """Raised for 429 errors."""
    pass


class InternalServerError(APIError):
    """Raised for 500+ errors."""
    pass


# =============================================================================
# Transport errors
# =============================================================================

class TransportError(OpenAIError):
    """No usable response was received from the service."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class APIConnectionError(TransportError):
    """Raised when the connection cannot be established."""
    pass


class APITimeoutError(APIConnectionError):
    """Raised on timeout."""
    pass


STATUS_ERRORS = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    429: RateLimitError,
}


def error_for_status(status_code: int) -> type:
    """Pick the ``APIError`` subclass matching an HTTP status."""
    if status_code in STATUS_ERRORS:
        return STATUS_ERRORS[status_code]
    if status_code >= 500:
        return InternalServerError
    return APIError
