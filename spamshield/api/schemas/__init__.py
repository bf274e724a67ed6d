"""API schemas package."""

from spamshield.api.schemas.base import ApiErrorResponse, ApiResponse, CamelModel
from spamshield.api.schemas.contact import (
    ContactDetailsResponse,
    ContactResponse,
    MarkSpamRequest,
    SearchResult,
)
from spamshield.api.schemas.user import (
    ContactEntry,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

__all__ = [
    "ApiErrorResponse",
    "ApiResponse",
    "CamelModel",
    "ContactDetailsResponse",
    "ContactEntry",
    "ContactResponse",
    "LoginRequest",
    "LoginResponse",
    "MarkSpamRequest",
    "RefreshTokenRequest",
    "RegisterRequest",
    "SearchResult",
    "TokenResponse",
    "UserResponse",
]
