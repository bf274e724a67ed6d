"""Repository implementations."""

from spamshield.persistence.repositories.base import BaseRepository
from spamshield.persistence.repositories.contact_repository import ContactRepository
from spamshield.persistence.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ContactRepository",
    "UserRepository",
]
