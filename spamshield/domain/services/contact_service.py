"""Spam reporting, user search and contact lookup with email visibility."""

import logging
import re
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.core.exceptions import ConflictError, InvalidIdError, InvalidInputError, NotFoundError
from spamshield.core.phone import normalize_phone
from spamshield.persistence.models.contact import Contact
from spamshield.persistence.models.user import User
from spamshield.persistence.repositories.contact_repository import ContactRepository
from spamshield.persistence.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

UNKNOWN_CONTACT_NAME = "Unknown"

_ID_PATTERN = re.compile(r"[1-9][0-9]*")
_MAX_ID = 2**63 - 1


def parse_contact_id(raw_id: str | int) -> int:
    """Parse a contact ID from a path parameter.

    Raises:
        InvalidIdError: Unless the value is a positive integer that fits a
            64-bit primary key
    """
    text = str(raw_id).strip()
    if not _ID_PATTERN.fullmatch(text) or int(text) > _MAX_ID:
        raise InvalidIdError("Invalid contact ID format")
    return int(text)


@dataclass
class ContactDetails:
    """Contact fields plus the owner's email when it may be disclosed."""

    name: str
    phone: str
    spam: bool
    email: str | None


class ContactService:
    """Service for spam reports, search and contact lookup.

    Spam is a global registry keyed by phone: reporting a number flags
    every address-book row holding it, and the registered user owning
    that number, whoever the owners are.
    """

    def __init__(self, session: AsyncSession):
        """Initialize contact service.

        Args:
            session: Database session
        """
        self.session = session
        self.contacts = ContactRepository(session)
        self.users = UserRepository(session)

    async def mark_spam(self, reporter: User, phone: str | None) -> Contact:
        """Report a phone number as spam.

        Args:
            reporter: Authenticated user making the report
            phone: Phone number to flag

        Returns:
            The reporter's own contact row for the number if there is one,
            otherwise the oldest row holding it (created for the reporter
            with name "Unknown" when no row existed)

        Raises:
            InvalidInputError: If phone is missing
            ConflictError: If a concurrent report created the same row
        """
        phone = normalize_phone(phone)
        if not phone:
            raise InvalidInputError("Phone number is required")

        matches = await self.contacts.list_by_phone(phone)

        try:
            if not matches:
                contact = Contact(
                    name=UNKNOWN_CONTACT_NAME,
                    phone=phone,
                    spam=True,
                    owner_id=reporter.id,
                )
                self.session.add(contact)
            else:
                for match in matches:
                    match.spam = True
                contact = next((c for c in matches if c.owner_id == reporter.id), matches[0])

            registered_user = await self.users.get_by_phone(phone)
            if registered_user is not None:
                registered_user.spam = True
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Number was reported concurrently, please retry") from e

        await self.session.refresh(contact)
        logger.info(
            f"Number marked as spam - reporter_id={reporter.id}, contact_id={contact.id}, "
            f"rows_flagged={max(len(matches), 1)}, registered_user_flagged={registered_user is not None}"
        )
        return contact

    async def search(self, query: str | None) -> list[User]:
        """Find users whose name or phone contains the query.

        Matching is case-insensitive and literal; each user appears once.

        Raises:
            InvalidInputError: If the query is missing or blank
        """
        query = (query or "").strip()
        if not query:
            raise InvalidInputError("Search query is required")
        return await self.users.search_by_name_or_phone(query)

    async def can_view_owner_email(self, viewer: User, owner: User | None) -> bool:
        """Decide whether the viewer may see a contact owner's email.

        True iff the owner has an email and the owner has the viewer's
        phone saved in their own address book.
        """
        if owner is None or not owner.email or not viewer.phone:
            return False
        return await self.contacts.owner_has_phone(owner.id, viewer.phone)

    async def get_contact_details(self, viewer: User, raw_contact_id: str | int) -> ContactDetails:
        """Look up a contact, disclosing the owner's email when allowed.

        Raises:
            InvalidIdError: If the ID is malformed (checked before any query)
            NotFoundError: If the contact does not exist
        """
        contact_id = parse_contact_id(raw_contact_id)

        contact = await self.contacts.get_by_id(contact_id)
        if contact is None:
            raise NotFoundError("Contact not found")

        owner = await self.users.get_by_id(contact.owner_id)
        email = None
        if await self.can_view_owner_email(viewer, owner):
            email = owner.email

        return ContactDetails(
            name=contact.name,
            phone=contact.phone,
            spam=contact.spam,
            email=email,
        )
