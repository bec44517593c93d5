"""Application error taxonomy.

Use cases raise these; ``app.main`` turns them into JSON responses carrying
``status_code`` and ``{"detail": message}``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    """Missing or unusable credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authorization token required"


class InvalidTokenError(AuthError):
    """Signed token failed verification or has expired."""

    default_message = "Invalid or expired token"


class EmailNotVerifiedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Please verify your email before logging in"


class InsufficientTierError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Subscription tier too low"


class InvalidSignatureError(AppError):
    """Webhook signature missing or not matching the configured secret."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid signature"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class StateError(AppError):
    """Operation not allowed for the entity's current state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operation not allowed in current state"


class UpstreamError(AppError):
    """Payment gateway call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service failed"
