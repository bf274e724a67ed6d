"""Contact, spam and search schemas."""

from datetime import datetime

from pydantic import Field

from spamshield.api.schemas.base import CamelModel


class MarkSpamRequest(CamelModel):
    """Request to report a number as spam."""

    phone: str | None = None


class ContactResponse(CamelModel):
    """Contact record."""

    id: int
    name: str
    phone: str
    spam: bool
    owner: int = Field(validation_alias="owner_id")
    created_at: datetime
    updated_at: datetime


class SearchResult(CamelModel):
    """Search hit; exactly name, phone and spam."""

    name: str
    phone: str
    spam: bool


class ContactDetailsResponse(CamelModel):
    """Contact lookup with the owner's email when it may be disclosed."""

    name: str
    phone: str
    spam: bool
    email: str | None
