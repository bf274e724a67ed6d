"""User repository."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.persistence.models.user import User
from spamshield.persistence.repositories.base import BaseRepository


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    def __init__(self, session: AsyncSession):
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_phone(self, phone: str) -> User | None:
        """Get user by phone."""
        stmt = select(User).where(User.phone == phone)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_phone_or_email(
        self, phone: str | None = None, email: str | None = None
    ) -> User | None:
        """Get the first user matching either identifier.

        Identifiers that are None are ignored; returns None when both are.
        """
        conditions = []
        if phone:
            conditions.append(User.phone == phone)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions)).order_by(User.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def set_refresh_token(self, user_id: int, refresh_token: str | None) -> User | None:
        """Overwrite (or clear, with None) the stored refresh token."""
        return await self.update(user_id, refresh_token=refresh_token)

    async def search_by_name_or_phone(self, query: str) -> list[User]:
        """Case-insensitive substring search over name and phone.

        A single OR query returns each user at most once, so matches on
        both columns are de-duplicated.
        """
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(User)
            .where(
                or_(
                    User.name.ilike(pattern, escape="\\"),
                    User.phone.ilike(pattern, escape="\\"),
                )
            )
            .order_by(User.name, User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
