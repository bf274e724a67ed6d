"""Contact repository."""

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.persistence.models.contact import Contact
from spamshield.persistence.repositories.base import BaseRepository


class ContactRepository(BaseRepository[Contact]):
    """Repository for Contact entities."""

    def __init__(self, session: AsyncSession):
        """Initialize contact repository."""
        super().__init__(Contact, session)

    async def list_by_phone(self, phone: str) -> list[Contact]:
        """List every contact row with this phone, across all owners.

        Args:
            phone: Normalized phone number

        Returns:
            Contacts ordered oldest first
        """
        stmt = select(Contact).where(Contact.phone == phone).order_by(Contact.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def owner_has_phone(self, owner_id: int, phone: str) -> bool:
        """Check whether a user has this phone saved in their address book.

        Args:
            owner_id: Owner of the address book
            phone: Normalized phone number

        Returns:
            True if a contact row (phone, owner_id) exists
        """
        stmt = select(
            exists().where(Contact.owner_id == owner_id, Contact.phone == phone)
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())
