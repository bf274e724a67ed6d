"""Database models."""

from spamshield.persistence.models.contact import Contact
from spamshield.persistence.models.user import User

__all__ = [
    "Contact",
    "User",
]
