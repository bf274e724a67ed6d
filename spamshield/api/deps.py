"""FastAPI dependencies for authentication."""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.core.auth import get_subject_id, verify_access_token
from spamshield.core.exceptions import TokenExpiredError, TokenInvalidError, UnauthorizedError
from spamshield.core.request_context import set_user_context
from spamshield.persistence.database import get_db
from spamshield.persistence.models.user import User
from spamshield.persistence.repositories.user_repository import UserRepository

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# auto_error=False: the token may arrive in a cookie instead
security = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    access_token_cookie: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
) -> str:
    """Read the access token from the cookie or the bearer header.

    Raises:
        UnauthorizedError: If neither carries a token
    """
    if access_token_cookie:
        return access_token_cookie
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    raise UnauthorizedError("Unauthorized request: No token provided")


async def get_current_user(
    token: Annotated[str, Depends(get_access_token)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from the access token.

    Args:
        token: Access token from cookie or header
        db: Database session

    Returns:
        Current user

    Raises:
        UnauthorizedError: If the token is expired or invalid, or its user
            no longer exists
    """
    try:
        claims = verify_access_token(token)
        user_id = get_subject_id(claims)
    except TokenExpiredError as e:
        raise TokenExpiredError("Session expired. Please log in again.") from e
    except TokenInvalidError as e:
        raise TokenInvalidError("Invalid token. Authentication failed.") from e

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(user_id)

    if user is None:
        raise UnauthorizedError("Unauthorized: User not found or token invalid")

    set_user_context(user.id)
    return user
