"""Spam reporting, search and contact lookup routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.api.deps import get_current_user
from spamshield.api.schemas import (
    ApiResponse,
    ContactDetailsResponse,
    ContactResponse,
    MarkSpamRequest,
    SearchResult,
)
from spamshield.domain.services.contact_service import ContactService
from spamshield.persistence.database import get_db
from spamshield.persistence.models.user import User

router = APIRouter()


@router.post("/mark-spam", response_model=ApiResponse[ContactResponse])
async def mark_spam(
    payload: MarkSpamRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ContactResponse]:
    """Report a phone number as spam."""
    contact = await ContactService(db).mark_spam(current_user, payload.phone)
    return ApiResponse[ContactResponse].ok(
        ContactResponse.model_validate(contact),
        "Number marked as spam",
    )


@router.get("/search", response_model=ApiResponse[list[SearchResult]])
async def search(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    query: Annotated[str | None, Query(description="Substring of a name or phone number")] = None,
) -> ApiResponse[list[SearchResult]]:
    """Search registered users by name or phone number."""
    users = await ContactService(db).search(query)
    return ApiResponse[list[SearchResult]].ok(
        [SearchResult.model_validate(u) for u in users],
        "Search results retrieved successfully",
    )


@router.get("/contact/{contact_id}", response_model=ApiResponse[ContactDetailsResponse])
async def get_contact_details(
    contact_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[ContactDetailsResponse]:
    """Get a contact; the owner's email is shown only to people they saved."""
    details = await ContactService(db).get_contact_details(current_user, contact_id)
    return ApiResponse[ContactDetailsResponse].ok(
        ContactDetailsResponse.model_validate(details),
        "Contact details retrieved",
    )
