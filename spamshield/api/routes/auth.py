"""Authentication routes: register, login, logout, refresh."""

from typing import Annotated

from fastapi import APIRouter, Body, Cookie, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.api.deps import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, get_current_user
from spamshield.api.schemas import (
    ApiResponse,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from spamshield.core.auth import TokenPair
from spamshield.domain.services.session_service import SessionService
from spamshield.persistence.database import get_db
from spamshield.persistence.models.user import User
from spamshield.settings import settings

router = APIRouter()


def _set_token_cookies(response: Response, tokens: TokenPair) -> None:
    for key, value, minutes in (
        (ACCESS_TOKEN_COOKIE, tokens.access_token, settings.access_token_expire_minutes),
        (REFRESH_TOKEN_COOKIE, tokens.refresh_token, settings.refresh_token_expire_minutes),
    ):
        response.set_cookie(
            key=key,
            value=value,
            max_age=minutes * 60,
            httponly=True,
            secure=settings.cookie_secure,
        )


def _clear_token_cookies(response: Response) -> None:
    for key in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(key=key, httponly=True, secure=settings.cookie_secure)


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[UserResponse]:
    """Register a user along with their initial contact list."""
    result = await SessionService(db).register(
        name=payload.name,
        phone=payload.phone,
        password=payload.password,
        email=payload.email,
        contacts=[entry.model_dump() for entry in payload.contacts],
    )
    return ApiResponse[UserResponse].ok(
        UserResponse.model_validate(result.user),
        "User registered successfully",
        status.HTTP_201_CREATED,
    )


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    payload: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LoginResponse]:
    """Log in with phone or email and password.

    Tokens are returned in the body and set as httpOnly cookies.
    """
    result = await SessionService(db).login(
        password=payload.password,
        phone=payload.phone,
        email=payload.email,
    )
    _set_token_cookies(response, result.tokens)

    return ApiResponse[LoginResponse].ok(
        LoginResponse(
            user=UserResponse.model_validate(result.user),
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
        ),
        "Login successful",
    )


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[dict]:
    """Log out: forget the refresh token and clear the cookies."""
    await SessionService(db).logout(current_user)
    _clear_token_cookies(response)
    return ApiResponse[dict].ok({}, "Logout successful")


@router.post("/refresh-token", response_model=ApiResponse[TokenResponse])
async def refresh_token(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    payload: Annotated[RefreshTokenRequest | None, Body()] = None,
    refresh_token_cookie: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> ApiResponse[TokenResponse]:
    """Exchange a refresh token (cookie or body) for a new token pair."""
    incoming = refresh_token_cookie or (payload.refresh_token if payload else None)

    result = await SessionService(db).refresh_access_token(incoming)
    _set_token_cookies(response, result.tokens)

    return ApiResponse[TokenResponse].ok(
        TokenResponse(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
        ),
        "Token refreshed",
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[UserResponse]:
    """Return the authenticated user."""
    return ApiResponse[UserResponse].ok(
        UserResponse.model_validate(current_user),
        "Current user retrieved",
    )
