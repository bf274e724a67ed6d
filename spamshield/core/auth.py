"""JWT access/refresh token utilities."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from jose import ExpiredSignatureError, JWTError, jwt

from spamshield.core.exceptions import TokenExpiredError, TokenInvalidError
from spamshield.settings import settings

if TYPE_CHECKING:
    from spamshield.persistence.models.user import User

# Validate JWT secrets at startup
_DEFAULT_ACCESS_SECRET = "dev-access-secret-change-in-production"
_DEFAULT_REFRESH_SECRET = "dev-refresh-secret-change-in-production"

if settings.environment == "production" and (
    settings.access_token_secret == _DEFAULT_ACCESS_SECRET
    or settings.refresh_token_secret == _DEFAULT_REFRESH_SECRET
):
    raise RuntimeError(
        "SECURITY ERROR: ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET environment "
        "variables must be set in production. Cannot use default secret keys."
    )


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued together."""

    access_token: str
    refresh_token: str


def _encode(claims: dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        **claims,
        # jti keeps two tokens minted in the same second distinct
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user: "User", expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        user: User the token identifies
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT carrying the user's id, email and name
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    # sub must be string for JWT compatibility
    claims = {"sub": str(user.id), "email": user.email, "name": user.name}
    return _encode(claims, settings.access_token_secret, expires_delta)


def create_refresh_token(user: "User", expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token carrying only the user's id."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.refresh_token_expire_minutes)
    return _encode({"sub": str(user.id)}, settings.refresh_token_secret, expires_delta)


def issue_token_pair(user: "User") -> TokenPair:
    """Create a fresh access/refresh token pair for a user."""
    return TokenPair(
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user),
    )


def verify_token(token: str, secret: str) -> dict[str, Any]:
    """Decode and verify a JWT.

    Args:
        token: Encoded JWT
        secret: Secret the token was expected to be signed with

    Returns:
        Decoded claims

    Raises:
        TokenExpiredError: Signature is valid but the token has expired
        TokenInvalidError: Token is malformed or the signature does not match
    """
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except JWTError as e:
        raise TokenInvalidError() from e


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify a token against the access-token secret."""
    return verify_token(token, settings.access_token_secret)


def verify_refresh_token(token: str) -> dict[str, Any]:
    """Verify a token against the refresh-token secret."""
    return verify_token(token, settings.refresh_token_secret)


def get_subject_id(claims: dict[str, Any]) -> int:
    """Extract the integer user ID from decoded claims.

    Raises:
        TokenInvalidError: If the subject is missing or not an integer
    """
    try:
        return int(claims["sub"])
    except (KeyError, ValueError, TypeError) as e:
        raise TokenInvalidError("Invalid token payload") from e
