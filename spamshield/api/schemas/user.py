"""User and session schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from spamshield.api.schemas.base import CamelModel


class ContactEntry(CamelModel):
    """Contact submitted at registration."""

    name: str | None = None
    phone: str | None = None
    spam: bool = False

    @field_validator("name", "phone", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        # Phone numbers may arrive as JSON numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RegisterRequest(CamelModel):
    """Registration request.

    Required fields are checked by the service so that a missing field
    produces the same error envelope as a blank one.
    """

    name: str | None = None
    phone: str | None = None
    password: str | None = None
    email: str | None = None
    contacts: list[ContactEntry] = Field(default_factory=list)


class LoginRequest(CamelModel):
    """Login request; phone or email identifies the user."""

    phone: str | None = None
    email: str | None = None
    password: str | None = None


class RefreshTokenRequest(CamelModel):
    """Refresh request body, used when the cookie is absent."""

    refresh_token: str | None = None


class UserResponse(CamelModel):
    """User projection without password hash or refresh token."""

    id: int
    name: str
    phone: str
    email: str | None
    created_at: datetime
    updated_at: datetime


class TokenResponse(CamelModel):
    """Access/refresh token pair."""

    access_token: str
    refresh_token: str


class LoginResponse(TokenResponse):
    """Login payload: user plus tokens."""

    user: UserResponse
