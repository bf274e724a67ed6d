"""Registration, login, logout and refresh-token rotation."""

import hmac
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spamshield.core.auth import TokenPair, get_subject_id, issue_token_pair, verify_refresh_token
from spamshield.core.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
)
from spamshield.core.password import hash_password, verify_password
from spamshield.core.phone import normalize_phone
from spamshield.persistence.models.user import User
from spamshield.persistence.repositories.contact_repository import ContactRepository
from spamshield.persistence.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str | None:
    """Trim and lower-case an email; blank becomes None."""
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


@dataclass
class RegistrationResult:
    """Created user plus the submitted contacts that were not stored."""

    user: User
    contacts_created: int = 0
    contacts_skipped: list[str] = field(default_factory=list)


@dataclass
class LoginResult:
    """Authenticated user and the token pair issued for the session."""

    user: User
    tokens: TokenPair


class SessionService:
    """Service owning the per-user session lifecycle.

    A user holds at most one valid refresh token: it is stored on the
    User row, overwritten on login and on every refresh (rotation), and
    cleared on logout. A refresh token is only accepted while it is
    exactly the stored value.
    """

    def __init__(self, session: AsyncSession):
        """Initialize session service.

        Args:
            session: Database session
        """
        self.session = session
        self.users = UserRepository(session)
        self.contacts = ContactRepository(session)

    async def register(
        self,
        name: str | None,
        phone: str | None,
        password: str | None,
        email: str | None = None,
        contacts: Iterable[Mapping[str, Any]] | None = None,
    ) -> RegistrationResult:
        """Create a user and their initial address book.

        Contact creation is best-effort and not transactional: entries
        the store rejects are skipped and the user plus any contacts
        already created stay persisted.

        Args:
            name: Display name
            phone: Phone number (unique)
            password: Plaintext password, hashed before storage
            email: Optional email (unique when given)
            contacts: Optional iterable of {"name", "phone", "spam"?} entries

        Returns:
            RegistrationResult with the created user

        Raises:
            InvalidInputError: If name, phone or password is missing
            ConflictError: If the phone or email is already registered
        """
        name = (name or "").strip().lower()
        phone = normalize_phone(phone)
        email = normalize_email(email)

        if not name or not phone or not password:
            raise InvalidInputError("Name, phone, and password are required")

        existing = await self.users.get_by_phone_or_email(phone=phone, email=email)
        if existing:
            raise ConflictError("User with this phone or email already exists")

        try:
            user = await self.users.create(
                name=name,
                phone=phone,
                email=email,
                hashed_password=hash_password(password),
            )
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            await self.session.rollback()
            raise ConflictError("User with this phone or email already exists") from e

        user_id = user.id
        logger.info(f"User registered - user_id={user_id}")

        created, skipped = await self._create_initial_contacts(user_id, contacts or [])

        # A skipped insert rolls the session back, which expires the user
        user = await self.users.get_by_id(user_id)
        return RegistrationResult(user=user, contacts_created=created, contacts_skipped=skipped)

    async def _create_initial_contacts(
        self, owner_id: int, entries: Iterable[Mapping[str, Any]]
    ) -> tuple[int, list[str]]:
        created = 0
        skipped: list[str] = []
        seen: set[str] = set()

        for entry in entries:
            contact_name = (entry.get("name") or "").strip()
            contact_phone = normalize_phone(entry.get("phone"))

            if not contact_name or not contact_phone:
                skipped.append(contact_phone or "")
                continue
            if contact_phone in seen:
                skipped.append(contact_phone)
                continue
            seen.add(contact_phone)

            try:
                await self.contacts.create(
                    name=contact_name,
                    phone=contact_phone,
                    spam=bool(entry.get("spam", False)),
                    owner_id=owner_id,
                )
                created += 1
            except IntegrityError:
                await self.session.rollback()
                skipped.append(contact_phone)
                logger.warning(
                    f"Skipped contact during registration - owner_id={owner_id}",
                    extra={"contact_phone": contact_phone},
                )

        if skipped:
            logger.info(
                f"Registration contacts stored with skips - owner_id={owner_id}, "
                f"created={created}, skipped={len(skipped)}"
            )
        return created, skipped

    async def login(
        self,
        password: str | None,
        phone: str | None = None,
        email: str | None = None,
    ) -> LoginResult:
        """Authenticate by phone or email and start a new session.

        Any previously issued refresh token stops working.

        Raises:
            InvalidInputError: If no identifier or no password is given
            NotFoundError: If no user matches
            UnauthorizedError: If the password is wrong
        """
        phone = normalize_phone(phone)
        email = normalize_email(email)

        if not phone and not email:
            raise InvalidInputError("Phone or email is required")
        if not password:
            raise InvalidInputError("Password is required")

        user = await self.users.get_by_phone_or_email(phone=phone, email=email)
        if user is None:
            raise NotFoundError("User does not exist")

        if not verify_password(password, user.hashed_password):
            logger.info(f"Login rejected: bad credentials - user_id={user.id}")
            raise UnauthorizedError("Invalid credentials")

        tokens = issue_token_pair(user)
        await self.users.set_refresh_token(user.id, tokens.refresh_token)

        logger.info(f"Login successful - user_id={user.id}")
        return LoginResult(user=user, tokens=tokens)

    async def logout(self, user: User) -> None:
        """Clear the stored refresh token. Safe to call repeatedly."""
        await self.users.set_refresh_token(user.id, None)
        logger.info(f"Logout - user_id={user.id}")

    async def refresh_access_token(self, incoming_refresh_token: str | None) -> LoginResult:
        """Exchange the current refresh token for a new pair.

        The stored refresh token is rotated, so the incoming token cannot
        be used again.

        Raises:
            UnauthorizedError: If the token is missing, expired, invalid,
                or no longer the user's current refresh token
        """
        if not incoming_refresh_token:
            raise UnauthorizedError("Unauthorized request")

        try:
            claims = verify_refresh_token(incoming_refresh_token)
            user_id = get_subject_id(claims)
        except TokenExpiredError as e:
            raise UnauthorizedError("Refresh token has expired") from e
        except TokenInvalidError as e:
            raise UnauthorizedError("Invalid refresh token") from e

        user = await self.users.get_by_id(user_id)
        if user is None or not user.refresh_token or not hmac.compare_digest(
            user.refresh_token.encode(), incoming_refresh_token.encode()
        ):
            logger.info(f"Refresh rejected: token is not current - user_id={user_id}")
            raise UnauthorizedError("Invalid refresh token")

        tokens = issue_token_pair(user)
        await self.users.set_refresh_token(user.id, tokens.refresh_token)

        logger.info(f"Refresh token rotated - user_id={user.id}")
        return LoginResult(user=user, tokens=tokens)
