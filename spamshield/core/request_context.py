"""Per-request context used to enrich log records."""

from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the current request ID."""
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    """Get the current request ID."""
    return request_id_var.get()


def set_user_context(user_id: int | None) -> None:
    """Set the authenticated user for the current request.

    Args:
        user_id: ID of the user resolved from the access token
    """
    user_id_var.set(user_id)


def get_user_context() -> int | None:
    """Get the authenticated user for the current request."""
    return user_id_var.get()


def clear_request_context() -> None:
    """Clear request and user context."""
    request_id_var.set(None)
    user_id_var.set(None)
