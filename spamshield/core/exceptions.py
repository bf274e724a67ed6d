"""Application exceptions.

Services raise these; the API layer renders them as the error envelope
(see spamshield.api.errors).
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class InvalidInputError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidIdError(AppError):
    """Identifier is not well-formed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid ID format"


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class TokenExpiredError(UnauthorizedError):
    """Token signature is valid but the token has expired."""

    default_message = "Token has expired"


class TokenInvalidError(UnauthorizedError):
    """Token is malformed, forged or signed with another secret."""

    default_message = "Token is invalid"


class NotFoundError(AppError):
    """No matching record."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Uniqueness violation."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"
